"""Membranes: ordered channels with peak conductances, plus a capacitance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from .channel import Channel
from .constants import VOLTS_PER_MILLIVOLT
from .errors import ConfigurationError, ZeroConductanceError
from .kinetics import GateState
from .reversal import ReversalPotentials
from .solution import Ion


@dataclass(slots=True)
class MembraneChannel:
    """A channel and its peak conductance in siemens per cm²."""

    channel: Channel
    siemens_per_square_cm: float

    def __post_init__(self) -> None:
        if self.siemens_per_square_cm < 0.0:
            raise ConfigurationError("peak conductance must be non-negative")

    def current_per_square_cm(self, reversals: ReversalPotentials, membrane_potential: float) -> float:
        """Outward current density in amps per cm²."""

        selectivity = self.channel.ion_selectivity
        coefficient = self.channel.conductance_coefficient()
        driving = (
            selectivity.k * (membrane_potential - reversals.k)
            + selectivity.na * (membrane_potential - reversals.na)
            + selectivity.cl * (membrane_potential - reversals.cl)
            + selectivity.ca * (membrane_potential - reversals.ca)
        )
        return self.siemens_per_square_cm * coefficient * driving * VOLTS_PER_MILLIVOLT

    def conductance(self, ion: Ion) -> float:
        return (
            self.siemens_per_square_cm
            * self.channel.conductance_coefficient()
            * self.channel.ion_selectivity.fraction(ion)
        )


@dataclass(frozen=True, slots=True)
class IonConductances:
    """Per-ion conductance snapshot in siemens per cm²."""

    k: float
    na: float
    cl: float
    ca: float

    @property
    def total(self) -> float:
        return self.k + self.na + self.cl + self.ca

    def as_dict(self) -> dict[str, float]:
        return {"k": self.k, "na": self.na, "cl": self.cl, "ca": self.ca}


@dataclass(slots=True)
class Membrane:
    membrane_channels: List[MembraneChannel] = field(default_factory=list)
    capacitance: float = 1e-6
    """Farads per cm²."""

    def __post_init__(self) -> None:
        if self.capacitance <= 0.0:
            raise ConfigurationError(f"membrane capacitance must be positive, got {self.capacitance!r}")

    def current_per_square_cm(self, reversals: ReversalPotentials, membrane_potential: float) -> float:
        return sum(
            membrane_channel.current_per_square_cm(reversals, membrane_potential)
            for membrane_channel in self.membrane_channels
        )

    def step(self, membrane_potential: float, dt: float) -> None:
        for membrane_channel in self.membrane_channels:
            membrane_channel.channel.step(membrane_potential, dt)

    def gates(self) -> Iterator[GateState]:
        for membrane_channel in self.membrane_channels:
            yield from membrane_channel.channel.gates()

    def conductances(self) -> IonConductances:
        """Diagnostic per-ion conductances; not used by the integrator."""

        totals = {ion: 0.0 for ion in Ion}
        for membrane_channel in self.membrane_channels:
            for ion in Ion:
                totals[ion] += membrane_channel.conductance(ion)
        return IonConductances(k=totals[Ion.K], na=totals[Ion.NA], cl=totals[Ion.CL], ca=totals[Ion.CA])

    def resting_potential(self, reversals: ReversalPotentials) -> float:
        """Conductance-weighted (GHK style) average of the reversal potentials."""

        conductances = self.conductances()
        total = conductances.total
        if total == 0.0:
            raise ZeroConductanceError("membrane has zero total conductance; resting potential is undefined")
        weighted = (
            conductances.k * reversals.k
            + conductances.na * reversals.na
            + conductances.cl * reversals.cl
            + conductances.ca * reversals.ca
        )
        return weighted / total


__all__ = ["IonConductances", "Membrane", "MembraneChannel"]
