"""Exception hierarchy shared by the engine, the scene builder and the API."""

from __future__ import annotations


class CompartmentLabError(Exception):
    """Base class for every error raised by :mod:`compartment_lab`."""


class ConfigurationError(CompartmentLabError, ValueError):
    """Raised when construction input is malformed or refers to missing entities."""


class DomainError(CompartmentLabError, ValueError):
    """Raised when physical parameters make a computation undefined."""


class ReversalPotentialError(DomainError):
    """Raised when a Nernst potential would take the logarithm of a non-positive ratio."""


class ZeroConductanceError(DomainError):
    """Raised when a diagnostic divides by a total conductance of zero."""


class SimulationDivergenceError(CompartmentLabError):
    """Raised when a tick produces a NaN or infinite membrane potential.

    The state of the stepped neuron (or network) is rolled back to the values it
    held before the failing tick, so callers can inspect the last finite state.
    """

    def __init__(
        self,
        message: str,
        *,
        segment: int,
        timestamp: float,
        value: float,
        neuron: int | None = None,
    ) -> None:
        super().__init__(message)
        self.neuron = neuron
        self.segment = segment
        self.timestamp = timestamp
        self.value = value
        self.tick: int | None = None

    def context(self) -> dict[str, object]:
        return {
            "neuron": self.neuron,
            "segment": self.segment,
            "timestamp": self.timestamp,
            "value": repr(self.value),
            "tick": self.tick,
        }


__all__ = [
    "CompartmentLabError",
    "ConfigurationError",
    "DomainError",
    "ReversalPotentialError",
    "SimulationDivergenceError",
    "ZeroConductanceError",
]
