"""Turn validated scene models into engine networks and back into channel models."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from ..engine.channels import CHANNEL_LIBRARY
from ..engine.constants import CM_PER_MICRON
from ..engine.errors import ConfigurationError
from ..engine.junction import Junction
from ..engine.membrane import Membrane, MembraneChannel
from ..engine.network import Network, NetworkSynapse
from ..engine.neuron import Neuron, StimulatorSegment
from ..engine.segment import Geometry, Segment
from ..engine.solution import EXAMPLE_CYTOPLASM
from ..engine.synapse import (
    Receptor,
    Sensitivity,
    SynapseMembranes,
    SynapseMode,
    Transmitter,
    TransmitterConcentrations,
    TransmitterPump,
    TransmitterPumpParams,
)
from .models import (
    ChannelModel,
    MembraneChannelModel,
    MembraneModel,
    Scene,
    SceneNeuron,
    SceneSegment,
    SigmoidModel,
    SynapseMembranesModel,
    time_constant_to_domain,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_INITIAL_POTENTIAL = -70.0
SOMA_TYPE = 1


def parse_scene(data: Mapping[str, Any] | str | bytes) -> Scene:
    """Validate raw JSON (text or already decoded) into a :class:`Scene`."""

    try:
        if isinstance(data, (str, bytes)):
            return Scene.model_validate_json(data)
        return Scene.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid scene: {exc.error_count()} validation error(s)\n{exc}") from exc


def _membrane_channel(model: MembraneChannelModel, initial_potential: float) -> MembraneChannel:
    return MembraneChannel(
        channel=model.channel.to_domain().build(initial_potential),
        siemens_per_square_cm=model.siemens_per_square_cm,
    )


def _membrane(model: MembraneModel, initial_potential: float) -> Membrane:
    return Membrane(
        membrane_channels=[_membrane_channel(entry, initial_potential) for entry in model.membrane_channels],
        capacitance=model.capacitance_farads_per_square_cm,
    )


def _distance(first: SceneSegment, second: SceneSegment) -> float:
    dx = first.x - second.x
    dy = first.y - second.y
    dz = first.z - second.z
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def build_neuron(scene_neuron: SceneNeuron, initial_potential: float = DEFAULT_INITIAL_POTENTIAL) -> Neuron:
    """Build a neuron, junctioning every segment to its parent.

    Segment ``type`` selects ``membranes[type - 1]``. The soma and any segment
    whose parent is not in the list are cylinders as long as they are wide;
    other segments span the distance to their parent.
    """

    samples = scene_neuron.neuron.segments
    membranes = scene_neuron.neuron.membranes
    index_by_id: Dict[int, int] = {}
    for index, sample in enumerate(samples):
        if sample.id in index_by_id:
            raise ConfigurationError(f"duplicate segment id {sample.id}")
        index_by_id[sample.id] = index

    segments: List[Segment] = []
    junctions: List[Junction] = []
    for index, sample in enumerate(samples):
        if not 1 <= sample.type <= len(membranes):
            raise ConfigurationError(
                f"segment {sample.id} has membrane type {sample.type} but only {len(membranes)} membranes exist"
            )
        diameter_um = 2.0 * sample.r
        parent_index = index_by_id.get(sample.parent)
        is_soma = sample.type == SOMA_TYPE and sample.parent == -1
        if is_soma or parent_index is None:
            length_um = diameter_um
        else:
            length_um = _distance(sample, samples[parent_index])
        segments.append(
            Segment(
                intracellular_solution=EXAMPLE_CYTOPLASM,
                geometry=Geometry(diameter=diameter_um * CM_PER_MICRON, length=length_um * CM_PER_MICRON),
                membrane=_membrane(membranes[sample.type - 1], initial_potential),
                membrane_potential=initial_potential,
            )
        )
        if parent_index is not None:
            pore = min(diameter_um, 2.0 * samples[parent_index].r) * CM_PER_MICRON
            junctions.append(Junction(first=parent_index, second=index, pore_diameter=pore))

    stimulators = [
        StimulatorSegment(segment=entry.segment, stimulator=entry.stimulator.to_domain())
        for entry in scene_neuron.stimulator_segments
    ]
    return Neuron(segments=segments, junctions=junctions, stimulators=stimulators)


def build_synapse_membranes(
    model: SynapseMembranesModel, initial_potential: float = DEFAULT_INITIAL_POTENTIAL
) -> SynapseMembranes:
    pumps: List[TransmitterPump] = []
    for pump in model.presynaptic_pumps:
        params = pump.transmitter_pump_params
        if not isinstance(params.time_constant, SigmoidModel):
            raise ConfigurationError(
                f"pump time constant must be Sigmoid, got {params.time_constant.type}"
            )
        target = params.target_concentration
        pumps.append(
            TransmitterPump(
                transmitter=Transmitter.parse(pump.transmitter),
                params=TransmitterPumpParams(
                    target_concentration_max=target.max_molar,
                    target_concentration_min=target.min_molar,
                    target_concentration_v_at_half_max=target.v_at_half_max_mv,
                    target_concentration_v_slope=target.slope,
                    time_constant=time_constant_to_domain(params.time_constant),
                ),
            )
        )
    receptors = [
        Receptor(
            membrane_channel=_membrane_channel(receptor.membrane_channel, initial_potential),
            neurotransmitter_sensitivity=Sensitivity(
                transmitter=Transmitter.parse(receptor.neurotransmitter_sensitivity.transmitter),
                concentration_at_half_max=receptor.neurotransmitter_sensitivity.concentration_at_half_max_molar,
                slope=receptor.neurotransmitter_sensitivity.slope,
            ),
        )
        for receptor in model.postsynaptic_receptors
    ]
    return SynapseMembranes(
        cleft_solution=model.cleft_solution.to_domain(),
        transmitter_concentrations=TransmitterConcentrations(
            glutamate=model.transmitter_concentrations.glutamate_molar,
            gaba=model.transmitter_concentrations.gaba_molar,
        ),
        presynaptic_pumps=pumps,
        postsynaptic_receptors=receptors,
        surface_area=model.surface_area_square_mm,
    )


def build_network(
    scene: Scene | Mapping[str, Any] | str,
    *,
    initial_potential: float = DEFAULT_INITIAL_POTENTIAL,
    synapse_mode: SynapseMode = SynapseMode.RESISTIVE,
) -> Network:
    """Instantiate every neuron and synapse of ``scene`` at ``initial_potential`` mV."""

    if not isinstance(scene, Scene):
        scene = parse_scene(scene)
    if not scene.neurons:
        raise ConfigurationError("a scene needs at least one neuron")
    neurons = [build_neuron(entry, initial_potential) for entry in scene.neurons]
    synapses = [
        NetworkSynapse(
            pre_neuron=entry.pre_neuron,
            pre_segment=entry.pre_segment,
            post_neuron=entry.post_neuron,
            post_segment=entry.post_segment,
            membranes=build_synapse_membranes(entry.synapse_membranes, initial_potential),
        )
        for entry in scene.synapses
    ]
    network = Network(neurons=neurons, synapses=synapses, synapse_mode=synapse_mode)
    LOGGER.info(
        "Built scene network: %d neurons, %d segments, %d synapses",
        len(neurons),
        sum(len(neuron.segments) for neuron in neurons),
        len(synapses),
    )
    return network


def channel_library_models() -> Dict[str, ChannelModel]:
    """Serialise every bundled channel template, keyed by its library name."""

    return {name: ChannelModel.from_domain(builder) for name, builder in CHANNEL_LIBRARY.items()}


def scene_to_json(scene: Scene, *, indent: int | None = 2) -> str:
    return json.dumps(scene.model_dump(mode="json"), indent=indent)


__all__ = [
    "DEFAULT_INITIAL_POTENTIAL",
    "build_network",
    "build_neuron",
    "build_synapse_membranes",
    "channel_library_models",
    "parse_scene",
    "scene_to_json",
]
