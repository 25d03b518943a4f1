"""FastAPI router exposing the channel library, bundled scenes and the simulator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from ..engine.errors import DomainError, SimulationDivergenceError
from ..engine.solution import INTERSTITIAL_FLUID
from ..scene import build_network, channel_library_models, list_scenes, load_scene
from ..scene.models import Scene
from ..simulation import run_simulation as run_network
from . import schemas

LOGGER = logging.getLogger(__name__)


@dataclass
class ServiceRegistry:
    """Container bundling service layer dependencies for the API."""

    simulation_config: SimulationConfig = field(default_factory=lambda: DEFAULT_SIMULATION_CONFIG)

    def configure(self, *, simulation_config: SimulationConfig | None = None) -> None:
        if simulation_config is not None:
            self.simulation_config = simulation_config


services = ServiceRegistry()


def configure_services(*, simulation_config: SimulationConfig | None = None) -> None:
    """Configure the shared service registry used by API routes."""

    services.configure(simulation_config=simulation_config)


def get_services() -> ServiceRegistry:
    return services


def _http_error(status_code: int, code: str, message: str, *, context: Dict[str, object] | None = None) -> HTTPException:
    payload = schemas.ErrorPayload(code=code, message=message, context=context or {})
    return HTTPException(status_code=status_code, detail=payload.model_dump())


def _bundled_scene(name: str) -> Scene:
    try:
        return load_scene(name)
    except KeyError as exc:
        raise _http_error(
            status.HTTP_404_NOT_FOUND,
            "scene_not_found",
            f"Scene '{name}' is not bundled with the service.",
            context={"available": list_scenes()},
        ) from exc


router = APIRouter()


@router.get("/channels", response_model=schemas.ChannelLibraryResponse)
def list_channels() -> schemas.ChannelLibraryResponse:
    return schemas.ChannelLibraryResponse(channels=channel_library_models())


@router.get("/scenes", response_model=schemas.SceneListResponse)
def get_scenes() -> schemas.SceneListResponse:
    return schemas.SceneListResponse(scenes=list_scenes())


@router.get("/scenes/{name}", response_model=Scene)
def get_scene(name: str) -> Scene:
    return _bundled_scene(name)


@router.post("/simulate", response_model=schemas.SimulationResponse)
def run_simulation(
    request: schemas.SimulationRequest,
    svc: ServiceRegistry = Depends(get_services),
) -> schemas.SimulationResponse:
    scene = request.scene if request.scene is not None else _bundled_scene(str(request.scene_name))
    defaults = svc.simulation_config
    try:
        network = build_network(
            scene,
            initial_potential=request.initial_voltage_mv,
            synapse_mode=request.synapse_mode,
        )
        config = SimulationConfig(
            dt=request.dt,
            steps=request.steps,
            batch_size=defaults.batch_size,
            record_every=request.record_every,
            temperature_k=request.temperature_k if request.temperature_k is not None else defaults.temperature_k,
            spike_threshold_mv=request.spike_threshold_mv,
            synapse_mode=request.synapse_mode,
        )
        extracellular = request.extracellular.to_domain() if request.extracellular is not None else INTERSTITIAL_FLUID
    except ValueError as exc:
        raise _http_error(status.HTTP_400_BAD_REQUEST, "invalid_scene", str(exc)) from exc

    try:
        result = run_network(network, config, extracellular_solution=extracellular)
    except SimulationDivergenceError as exc:
        raise _http_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "simulation_diverged",
            str(exc),
            context=exc.context(),
        ) from exc
    except DomainError as exc:
        LOGGER.warning("Simulation rejected physical parameters: %s", exc)
        raise _http_error(status.HTTP_400_BAD_REQUEST, "invalid_scene", str(exc)) from exc
    return schemas.SimulationResponse.from_result(result)


__all__ = ["configure_services", "get_services", "router"]
