"""Cylindrical compartments and their single-compartment voltage integration."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import AMPS_PER_MICROAMP, MILLIVOLTS_PER_VOLT
from .errors import ConfigurationError
from .membrane import IonConductances, Membrane
from .reversal import ReversalPotentials, reversal_potentials
from .solution import Solution


@dataclass(frozen=True, slots=True)
class Geometry:
    """Cylinder dimensions in centimetres."""

    diameter: float
    length: float

    def __post_init__(self) -> None:
        if self.diameter <= 0.0 or self.length <= 0.0:
            raise ConfigurationError(
                f"segment geometry must be positive, got diameter={self.diameter!r} length={self.length!r}"
            )

    @property
    def surface_area(self) -> float:
        return self.diameter * math.pi * self.length


@dataclass(slots=True)
class Segment:
    """One isopotential compartment.

    ``membrane_potential`` is in millivolts, ``input_current`` in microamps per
    cm² of membrane and ``synaptic_current`` in microamps (already integrated
    over the contact area).
    """

    intracellular_solution: Solution
    geometry: Geometry
    membrane: Membrane
    membrane_potential: float
    input_current: float = 0.0
    synaptic_current: float = 0.0

    def surface_area(self) -> float:
        return self.geometry.surface_area

    def capacitance(self) -> float:
        """Total capacitance in farads."""

        return self.membrane.capacitance * self.geometry.surface_area

    def reversal_potentials(self, temperature: float, extracellular_solution: Solution) -> ReversalPotentials:
        return reversal_potentials(self.intracellular_solution, extracellular_solution, temperature)

    def dv_dt(self, temperature: float, extracellular_solution: Solution) -> float:
        """Rate of change of membrane potential in volts per second."""

        area = self.geometry.surface_area
        reversals = self.reversal_potentials(temperature, extracellular_solution)
        current = (
            -self.membrane.current_per_square_cm(reversals, self.membrane_potential) * area
            - self.synaptic_current * AMPS_PER_MICROAMP
            + self.input_current * AMPS_PER_MICROAMP * area
        )
        return current / (self.membrane.capacitance * area)

    def step(self, temperature: float, extracellular_solution: Solution, dt: float) -> None:
        """Advance by ``dt`` seconds: charge the membrane, then update gates at the new voltage."""

        self.membrane_potential += self.dv_dt(temperature, extracellular_solution) * MILLIVOLTS_PER_VOLT * dt
        self.membrane.step(self.membrane_potential, dt)

    def conductances(self) -> IonConductances:
        return self.membrane.conductances()

    def resting_potential(self, temperature: float, extracellular_solution: Solution) -> float:
        return self.membrane.resting_potential(self.reversal_potentials(temperature, extracellular_solution))


__all__ = ["Geometry", "Segment"]
