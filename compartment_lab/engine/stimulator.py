"""Periodic current injection waveforms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Envelope:
    """Repeating window ``[onset, offset]`` within each ``period`` (seconds)."""

    period: float
    onset: float
    offset: float

    def __post_init__(self) -> None:
        if self.period <= 0.0:
            raise ConfigurationError(f"stimulator period must be positive, got {self.period!r}")
        if self.offset <= self.onset:
            raise ConfigurationError("stimulator offset must come after its onset")


@dataclass(frozen=True, slots=True)
class SquareWave:
    on_current: float
    off_current: float


@dataclass(frozen=True, slots=True)
class LinearRamp:
    start_current: float
    end_current: float
    off_current: float


@dataclass(frozen=True, slots=True)
class FrequencyRamp:
    on_amplitude: float
    offset_current: float
    start_frequency: float
    end_frequency: float


CurrentShape = Union[SquareWave, LinearRamp, FrequencyRamp]


@dataclass(frozen=True, slots=True)
class Stimulator:
    """Current density source (µA/cm²) evaluated at a simulation timestamp."""

    envelope: Envelope
    current_shape: CurrentShape

    def current(self, t: float) -> float:
        envelope = self.envelope
        cycle_time = t % envelope.period
        envelope_time = cycle_time - envelope.onset
        completion = envelope_time / (envelope.offset - envelope.onset)
        in_envelope = 0.0 <= completion <= 1.0

        match self.current_shape:
            case SquareWave(on_current=on, off_current=off):
                return on if in_envelope else off
            case LinearRamp(start_current=start, end_current=end, off_current=off):
                if not in_envelope:
                    return off
                return completion * (end - start) + start
            case FrequencyRamp(
                on_amplitude=amplitude,
                offset_current=offset,
                start_frequency=f_start,
                end_frequency=f_end,
            ):
                if not in_envelope:
                    return offset
                frequency = completion * (f_end - f_start) + f_start
                return amplitude * math.sin(frequency * 2.0 * math.pi * envelope_time) + offset
            case _:
                raise ConfigurationError(f"unknown current shape {self.current_shape!r}")


DEFAULT_STIMULATOR = Stimulator(
    envelope=Envelope(period=0.1, onset=0.0, offset=0.05),
    current_shape=SquareWave(on_current=50.0, off_current=-10.0),
)


__all__ = [
    "CurrentShape",
    "DEFAULT_STIMULATOR",
    "Envelope",
    "FrequencyRamp",
    "LinearRamp",
    "SquareWave",
    "Stimulator",
]
