"""Scene files bundled with the package."""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Dict, List

from ...engine.errors import ConfigurationError

SCENE_SUFFIX = ".json"


def _read_json_asset(name: str) -> Dict[str, Any]:
    package = resources.files(__name__)
    with resources.as_file(package.joinpath(name)) as asset_path:
        with asset_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)


def list_scenes() -> List[str]:
    """Return the names of bundled scenes, without the ``.json`` suffix."""

    package = resources.files(__name__)
    return sorted(
        entry.name[: -len(SCENE_SUFFIX)]
        for entry in package.iterdir()
        if entry.is_file() and entry.name.endswith(SCENE_SUFFIX)
    )


def load_scene_data(name: str) -> Dict[str, Any]:
    """Return the decoded JSON for bundled scene ``name``.

    Raises :class:`KeyError` for unknown names and
    :class:`~compartment_lab.engine.errors.ConfigurationError` for malformed files.
    """

    if name not in list_scenes():
        raise KeyError(f"Unknown scene '{name}'")
    try:
        return _read_json_asset(f"{name}{SCENE_SUFFIX}")
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"scene '{name}' is not valid JSON: {exc}") from exc


__all__ = ["list_scenes", "load_scene_data"]
