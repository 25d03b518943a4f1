"""Nernst reversal potentials."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

from .constants import GAS_CONSTANT, INVERSE_FARADAY, MILLIVOLTS_PER_VOLT
from .errors import ReversalPotentialError
from .solution import Ion, Solution


def reversal_potential(ion: Ion, inside: Solution, outside: Solution, temperature: float) -> float:
    """Return the Nernst potential of ``ion`` in millivolts.

    ``temperature`` is in kelvin. Both concentrations must be strictly positive.
    """

    c_in = inside.concentration(ion)
    c_out = outside.concentration(ion)
    if c_in <= 0.0 or c_out <= 0.0:
        raise ReversalPotentialError(
            f"{ion.name} reversal potential is undefined for concentrations "
            f"inside={c_in!r} outside={c_out!r}"
        )
    if temperature <= 0.0:
        raise ReversalPotentialError(f"temperature must be positive kelvin, got {temperature!r}")
    volts = GAS_CONSTANT * INVERSE_FARADAY * temperature / ion.valence * math.log(c_out / c_in)
    return volts * MILLIVOLTS_PER_VOLT


@dataclass(frozen=True, slots=True)
class ReversalPotentials:
    """Per-ion reversal potentials (mV) across one membrane."""

    k: float
    na: float
    cl: float
    ca: float

    @classmethod
    def between(cls, inside: Solution, outside: Solution, temperature: float) -> "ReversalPotentials":
        return cls(
            k=reversal_potential(Ion.K, inside, outside, temperature),
            na=reversal_potential(Ion.NA, inside, outside, temperature),
            cl=reversal_potential(Ion.CL, inside, outside, temperature),
            ca=reversal_potential(Ion.CA, inside, outside, temperature),
        )

    def for_ion(self, ion: Ion) -> float:
        return getattr(self, ion.value)


@lru_cache(maxsize=256)
def reversal_potentials(inside: Solution, outside: Solution, temperature: float) -> ReversalPotentials:
    """Memoised :meth:`ReversalPotentials.between`; solutions are immutable and hashable."""

    return ReversalPotentials.between(inside, outside, temperature)


__all__ = [
    "ReversalPotentials",
    "reversal_potential",
    "reversal_potentials",
]
