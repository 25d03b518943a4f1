"""Resistive electrical coupling between pairs of segments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from .constants import CONDUCTANCE_PER_SQUARE_CM, VOLTS_PER_MILLIVOLT
from .errors import ConfigurationError
from .segment import Segment


@dataclass(slots=True)
class Junction:
    """Coupling between the segments at ``first`` and ``second`` (arena indices)."""

    first: int
    second: int
    pore_diameter: float

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ConfigurationError(f"junction endpoints must differ, got {self.first} twice")
        if self.pore_diameter < 0.0:
            raise ConfigurationError(f"junction pore diameter must be non-negative, got {self.pore_diameter!r}")

    def conductance(self) -> float:
        return self.pore_diameter * math.pi * CONDUCTANCE_PER_SQUARE_CM

    def current(self, v_first: float, v_second: float) -> float:
        """Current flowing from ``first`` to ``second`` in amps."""

        return self.conductance() * (v_first - v_second) * VOLTS_PER_MILLIVOLT

    def validate(self, segment_count: int) -> None:
        for index in (self.first, self.second):
            if not 0 <= index < segment_count:
                raise ConfigurationError(
                    f"junction refers to segment {index} but only {segment_count} segments exist"
                )


def apply_junctions(segments: Sequence[Segment], junctions: Sequence[Junction], dt: float) -> None:
    """Run one coupling phase.

    Voltages and capacitances are read for every segment before any is
    written, and the per-junction deltas are summed before being committed,
    so the outcome does not depend on junction order.
    """

    if not junctions:
        return
    voltages = [segment.membrane_potential for segment in segments]
    capacitances = [segment.capacitance() for segment in segments]
    deltas: List[float] = [0.0] * len(segments)
    for junction in junctions:
        m, n = junction.first, junction.second
        current = junction.current(voltages[m], voltages[n])
        deltas[m] -= current / capacitances[m] * dt
        deltas[n] += current / capacitances[n] * dt
    for segment, delta in zip(segments, deltas):
        segment.membrane_potential += delta


__all__ = ["Junction", "apply_junctions"]
