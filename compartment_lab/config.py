"""Configuration helpers for the simulation services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import os

from .engine.constants import BODY_TEMPERATURE
from .engine.synapse import SynapseMode

_FALSY = {"0", "false", "no"}


def _parse_float(raw: str | None, default: float, *, name: str) -> float:
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _parse_int(raw: str | None, default: int, *, name: str) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class SimulationConfig:
    """Settings for a batch of integration steps.

    ``dt`` is the tick length in seconds and ``steps`` the number of ticks.
    The runner advances ``batch_size`` ticks between progress log lines and
    samples voltages every ``record_every`` ticks.
    """

    dt: float = 1e-5
    steps: int = 10_000
    batch_size: int = 1_000
    record_every: int = 10
    temperature_k: float = BODY_TEMPERATURE
    spike_threshold_mv: float = 0.0
    synapse_mode: SynapseMode = SynapseMode.RESISTIVE

    def __post_init__(self) -> None:
        if self.dt <= 0.0:
            raise ValueError(f"dt must be positive, got {self.dt!r}")
        if self.steps < 0:
            raise ValueError(f"steps must be non-negative, got {self.steps!r}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size!r}")
        if self.record_every < 1:
            raise ValueError(f"record_every must be at least 1, got {self.record_every!r}")
        if self.temperature_k <= 0.0:
            raise ValueError(f"temperature_k must be positive, got {self.temperature_k!r}")
        if not isinstance(self.synapse_mode, SynapseMode):
            self.synapse_mode = SynapseMode(self.synapse_mode)

    @property
    def duration(self) -> float:
        return self.dt * self.steps

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "COMPARTMENT_SIM_",
    ) -> "SimulationConfig":
        """Read ``<prefix>DT``, ``<prefix>STEPS`` and friends from the environment."""

        env = env if env is not None else os.environ
        mode_raw = env.get(f"{prefix}SYNAPSE_MODE", SynapseMode.RESISTIVE.value).strip().lower()
        try:
            mode = SynapseMode(mode_raw)
        except ValueError as exc:
            raise ValueError(f"{prefix}SYNAPSE_MODE must be one of {[m.value for m in SynapseMode]}") from exc
        return cls(
            dt=_parse_float(env.get(f"{prefix}DT"), 1e-5, name=f"{prefix}DT"),
            steps=_parse_int(env.get(f"{prefix}STEPS"), 10_000, name=f"{prefix}STEPS"),
            batch_size=_parse_int(env.get(f"{prefix}BATCH_SIZE"), 1_000, name=f"{prefix}BATCH_SIZE"),
            record_every=_parse_int(env.get(f"{prefix}RECORD_EVERY"), 10, name=f"{prefix}RECORD_EVERY"),
            temperature_k=_parse_float(env.get(f"{prefix}TEMPERATURE_K"), BODY_TEMPERATURE, name=f"{prefix}TEMPERATURE_K"),
            spike_threshold_mv=_parse_float(
                env.get(f"{prefix}SPIKE_THRESHOLD_MV"), 0.0, name=f"{prefix}SPIKE_THRESHOLD_MV"
            ),
            synapse_mode=mode,
        )


def _flag(raw: str | None, default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in _FALSY


def _ratio(raw: str | None, default: float) -> float:
    try:
        value = float(raw) if raw is not None else default
    except ValueError:
        return default
    return min(max(value, 0.0), 1.0)


@dataclass(slots=True)
class TelemetryConfig:
    """Switches and OTLP exporter settings for OpenTelemetry."""

    enabled: bool = False
    service_name: str = "compartment-sim-api"
    environment: str = "development"
    exporter_endpoint: Optional[str] = None
    sampling_ratio: float = 0.1
    capture_metrics: bool = True
    capture_traces: bool = True

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "COMPARTMENT_TELEMETRY_",
    ) -> "TelemetryConfig":
        """Read ``<prefix>*`` variables, falling back to the standard ``OTEL_*`` ones.

        Setting an exporter endpoint switches telemetry on.
        """

        env = env if env is not None else os.environ

        def lookup(key: str, otel_key: str | None = None) -> str | None:
            value = env.get(f"{prefix}{key}")
            if not value and otel_key is not None:
                value = env.get(otel_key)
            return value or None

        endpoint = lookup("EXPORTER_OTLP_ENDPOINT", "OTEL_EXPORTER_OTLP_ENDPOINT")
        return cls(
            enabled=_flag(env.get(f"{prefix}ENABLED"), False) or endpoint is not None,
            service_name=lookup("SERVICE_NAME", "OTEL_SERVICE_NAME") or "compartment-sim-api",
            environment=lookup("ENVIRONMENT", "DEPLOYMENT_ENV") or "development",
            exporter_endpoint=endpoint,
            sampling_ratio=_ratio(lookup("SAMPLING_RATIO", "OTEL_TRACES_SAMPLER_ARG"), 0.1),
            capture_metrics=_flag(env.get(f"{prefix}CAPTURE_METRICS"), True),
            capture_traces=_flag(env.get(f"{prefix}CAPTURE_TRACES"), True),
        )


DEFAULT_SIMULATION_CONFIG = SimulationConfig.from_env()
DEFAULT_TELEMETRY_CONFIG = TelemetryConfig.from_env()


__all__ = ["DEFAULT_SIMULATION_CONFIG", "DEFAULT_TELEMETRY_CONFIG", "SimulationConfig", "TelemetryConfig"]
