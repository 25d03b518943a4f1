"""Ion channels built from up to two gates and an ion selectivity vector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .errors import DomainError
from .kinetics import GateState, Gating
from .solution import Ion


@dataclass(frozen=True, slots=True)
class IonSelectivity:
    """Relative permeability of a channel to each ion.

    Use :meth:`normalize` to turn arbitrary non-negative weights into fractions
    that sum to one; :meth:`ChannelBuilder.build` does this automatically.
    """

    na: float
    k: float
    ca: float
    cl: float

    def __post_init__(self) -> None:
        for ion in Ion:
            if getattr(self, ion.value) < 0.0:
                raise DomainError(f"{ion.name} selectivity must be non-negative")

    def total(self) -> float:
        return self.na + self.k + self.ca + self.cl

    def normalize(self) -> "IonSelectivity":
        total = self.total()
        if total <= 0.0:
            raise DomainError("ion selectivity weights sum to zero and cannot be normalised")
        return IonSelectivity(na=self.na / total, k=self.k / total, ca=self.ca / total, cl=self.cl / total)

    def fraction(self, ion: Ion) -> float:
        return getattr(self, ion.value)


K = IonSelectivity(na=0.0, k=1.0, ca=0.0, cl=0.0)
NA = IonSelectivity(na=1.0, k=0.0, ca=0.0, cl=0.0)
CA = IonSelectivity(na=0.0, k=0.0, ca=1.0, cl=0.0)
CL = IonSelectivity(na=0.0, k=0.0, ca=0.0, cl=1.0)


@dataclass(slots=True)
class Channel:
    """A live channel: gate states plus a normalised selectivity."""

    activation: GateState | None
    inactivation: GateState | None
    ion_selectivity: IonSelectivity

    def gates(self) -> Iterator[GateState]:
        if self.activation is not None:
            yield self.activation
        if self.inactivation is not None:
            yield self.inactivation

    def step(self, v: float, dt: float) -> None:
        for gate in self.gates():
            gate.step(v, dt)

    def conductance_coefficient(self) -> float:
        """Fraction of peak conductance currently open (1.0 for ungated channels)."""

        activation = 1.0 if self.activation is None else self.activation.contribution()
        inactivation = 1.0 if self.inactivation is None else self.inactivation.contribution()
        return activation * inactivation

    def builder(self) -> "ChannelBuilder":
        return ChannelBuilder(
            activation=None if self.activation is None else self.activation.parameters,
            inactivation=None if self.inactivation is None else self.inactivation.parameters,
            ion_selectivity=self.ion_selectivity,
        )


@dataclass(frozen=True, slots=True)
class ChannelBuilder:
    """Immutable channel template; :meth:`build` instantiates it at a voltage."""

    activation: Gating | None
    inactivation: Gating | None
    ion_selectivity: IonSelectivity

    def build(self, initial_potential: float) -> Channel:
        """Return a channel whose gates sit at their steady state for ``initial_potential``."""

        activation = inactivation = None
        if self.activation is not None:
            activation = GateState.at_steady_state(self.activation, initial_potential)
        if self.inactivation is not None:
            inactivation = GateState.at_steady_state(self.inactivation, initial_potential)
        return Channel(
            activation=activation,
            inactivation=inactivation,
            ion_selectivity=self.ion_selectivity.normalize(),
        )


__all__ = ["CA", "CL", "Channel", "ChannelBuilder", "IonSelectivity", "K", "NA"]
