"""Ionic solutions bathing and filling the simulated compartments."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict

from .errors import DomainError


class Ion(str, Enum):
    """Ion species tracked by the engine."""

    NA = "na"
    K = "k"
    CA = "ca"
    CL = "cl"

    @property
    def valence(self) -> int:
        return _VALENCE[self]


_VALENCE: Dict[Ion, int] = {Ion.NA: 1, Ion.K: 1, Ion.CA: 2, Ion.CL: -1}


@dataclass(frozen=True, slots=True)
class Solution:
    """Molar concentrations of the four tracked ions."""

    na: float
    k: float
    ca: float
    cl: float

    def __post_init__(self) -> None:
        for ion in Ion:
            value = getattr(self, ion.value)
            if value < 0.0:
                raise DomainError(f"{ion.name} concentration must be non-negative, got {value!r}")

    def concentration(self, ion: Ion) -> float:
        return getattr(self, ion.value)

    def with_concentration(self, ion: Ion, value: float) -> "Solution":
        return replace(self, **{ion.value: value})

    def as_dict(self) -> Dict[str, float]:
        return {ion.value: self.concentration(ion) for ion in Ion}


INTERSTITIAL_FLUID = Solution(na=145e-3, k=5e-3, ca=2.5e-3, cl=110e-3)
EXAMPLE_CYTOPLASM = Solution(na=5e-3, k=140e-3, ca=0.1e-6, cl=4e-3)


__all__ = ["EXAMPLE_CYTOPLASM", "INTERSTITIAL_FLUID", "Ion", "Solution"]
