"""Pydantic schemas used by the public API surface."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field, model_validator

from ..engine.synapse import SynapseMode
from ..scene.models import ChannelModel, Scene, SolutionModel
from ..simulation import SimulationResult


class ErrorPayload(BaseModel):
    """Standard error envelope returned by API endpoints."""

    code: str = Field(..., description="Machine readable error identifier")
    message: str = Field(..., description="Human readable explanation")
    context: Dict[str, Any] = Field(default_factory=dict, description="Additional context")


class HealthResponse(BaseModel):
    status: str
    version: str


class ChannelLibraryResponse(BaseModel):
    channels: Dict[str, ChannelModel] = Field(default_factory=dict, description="Channel templates keyed by name")


class SceneListResponse(BaseModel):
    scenes: List[str] = Field(default_factory=list)


class SimulationRequest(BaseModel):
    """Run a scene, supplied inline or by bundled name, for ``steps`` ticks."""

    scene: Scene | None = Field(default=None, description="Inline scene document")
    scene_name: str | None = Field(default=None, description="Name of a bundled scene")
    steps: int = Field(default=5_000, ge=1, le=200_000)
    dt: float = Field(default=1e-5, gt=0.0, le=1e-3, description="Tick length in seconds")
    record_every: int = Field(default=10, ge=1)
    temperature_k: float | None = Field(default=None, gt=0.0, description="Defaults to the service configuration")
    extracellular: SolutionModel | None = Field(default=None, description="Defaults to interstitial fluid")
    initial_voltage_mv: float = Field(default=-70.0, ge=-200.0, le=200.0)
    spike_threshold_mv: float = 0.0
    synapse_mode: SynapseMode = SynapseMode.RESISTIVE

    @model_validator(mode="after")
    def _exactly_one_scene(self) -> "SimulationRequest":
        if (self.scene is None) == (self.scene_name is None):
            raise ValueError("Provide exactly one of 'scene' or 'scene_name'")
        return self


class SegmentSummary(BaseModel):
    min_mv: float
    max_mv: float
    final_mv: float
    spikes: int


class NeuronSummary(BaseModel):
    segments: List[SegmentSummary]


class SimulationSummary(BaseModel):
    steps: int
    dt: float
    duration_s: float
    samples: int
    wall_seconds: float
    neurons: List[NeuronSummary]


class SimulationResponse(BaseModel):
    time: List[float] = Field(..., description="Sample timestamps in seconds")
    voltages: List[List[List[float]]] = Field(
        ..., description="Membrane potential traces (mV) indexed by neuron, segment, sample"
    )
    spike_counts: List[List[int]]
    summary: SimulationSummary

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResponse":
        return cls.model_validate(result.to_payload())


__all__ = [
    "ChannelLibraryResponse",
    "ErrorPayload",
    "HealthResponse",
    "NeuronSummary",
    "SceneListResponse",
    "SegmentSummary",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationSummary",
]
