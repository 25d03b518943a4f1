"""JSON scene interchange: pydantic models, bundled scenes and the network builder."""

from __future__ import annotations

from .assets import list_scenes, load_scene_data
from .builder import (
    DEFAULT_INITIAL_POTENTIAL,
    build_network,
    build_neuron,
    build_synapse_membranes,
    channel_library_models,
    parse_scene,
    scene_to_json,
)
from .models import ChannelModel, Scene, SceneNeuron, SceneSynapse


def load_scene(name: str) -> Scene:
    """Return bundled scene ``name`` as a validated :class:`Scene`."""

    return parse_scene(load_scene_data(name))


__all__ = [
    "ChannelModel",
    "DEFAULT_INITIAL_POTENTIAL",
    "Scene",
    "SceneNeuron",
    "SceneSynapse",
    "build_network",
    "build_neuron",
    "build_synapse_membranes",
    "channel_library_models",
    "list_scenes",
    "load_scene",
    "load_scene_data",
    "parse_scene",
    "scene_to_json",
]
