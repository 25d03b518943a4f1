"""Gate kinetics: steady-state curves, time-constant laws and gate stepping.

A gate is a single activation or inactivation variable. Its steady-state
opening probability is a logistic function of membrane voltage and it relaxes
toward that value with a voltage dependent time constant. The time-constant
law is a tagged union (:class:`Instantaneous`, :class:`Sigmoid`,
:class:`LinearExp`) dispatched with ``match`` in :func:`time_constant`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .errors import ConfigurationError

_MAX_EXPONENT = 709.0


def logistic(x: float) -> float:
    """Overflow-safe ``1 / (1 + exp(-x))``."""

    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def bell(v: float, v_at_max: float, c_base: float, c_amp: float, sigma: float) -> float:
    """``c_base + c_amp * exp(-(v_at_max - v)**2 / sigma**2)``."""

    diff = v_at_max - v
    return c_base + c_amp * math.exp(-(diff * diff) / (sigma * sigma))


@dataclass(frozen=True, slots=True)
class Magnitude:
    """Steady-state curve ``1 / (1 + exp((v_at_half_max - v) / slope))``.

    A negative slope gives a curve that falls with voltage (inactivation).
    """

    v_at_half_max: float
    slope: float

    def __post_init__(self) -> None:
        if self.slope == 0.0:
            raise ConfigurationError("steady-state slope must be non-zero")

    def steady_state(self, v: float) -> float:
        return logistic((v - self.v_at_half_max) / self.slope)


@dataclass(frozen=True, slots=True)
class Instantaneous:
    """The gate tracks its steady state with no lag."""


@dataclass(frozen=True, slots=True)
class Sigmoid:
    """Bell-shaped time constant peaking at ``v_at_max_tau`` (seconds)."""

    v_at_max_tau: float
    c_base: float
    c_amp: float
    sigma: float

    def __post_init__(self) -> None:
        if self.c_base <= 0.0:
            raise ConfigurationError(f"time constant base must be positive, got {self.c_base!r}")
        if self.c_amp < 0.0:
            raise ConfigurationError(f"time constant amplitude must be non-negative, got {self.c_amp!r}")
        if self.sigma == 0.0:
            raise ConfigurationError("time constant sigma must be non-zero")


@dataclass(frozen=True, slots=True)
class LinearExp:
    """Time constant ``coef * exp((v_offset - v) * inner_coef)`` in milliseconds."""

    coef: float
    v_offset: float
    inner_coef: float

    def __post_init__(self) -> None:
        if self.coef <= 0.0:
            raise ConfigurationError(f"time constant coefficient must be positive, got {self.coef!r}")


TimeConstant = Union[Instantaneous, Sigmoid, LinearExp]


def time_constant(law: TimeConstant, v: float) -> float | None:
    """Return tau in seconds at voltage ``v``, or ``None`` for instantaneous gates."""

    match law:
        case Instantaneous():
            return None
        case Sigmoid(v_at_max_tau=v_max, c_base=c_base, c_amp=c_amp, sigma=sigma):
            return bell(v, v_max, c_base, c_amp, sigma)
        case LinearExp(coef=coef, v_offset=v_offset, inner_coef=inner_coef):
            exponent = (v_offset - v) * inner_coef
            if exponent > _MAX_EXPONENT:
                return math.inf
            return coef * math.exp(exponent) * 1e-3
        case _:
            raise ConfigurationError(f"unknown time constant law {law!r}")


@dataclass(frozen=True, slots=True)
class Gating:
    """Immutable configuration of one gate type within a channel."""

    gates: int
    magnitude: Magnitude
    time_constant: TimeConstant

    def __post_init__(self) -> None:
        if self.gates < 1:
            raise ConfigurationError(f"gate count must be at least 1, got {self.gates!r}")
        if not isinstance(self.time_constant, (Instantaneous, Sigmoid, LinearExp)):
            raise ConfigurationError(f"unknown time constant law {self.time_constant!r}")

    def steady_state(self, v: float) -> float:
        return self.magnitude.steady_state(v)

    def tau(self, v: float) -> float | None:
        return time_constant(self.time_constant, v)


@dataclass(slots=True)
class GateState:
    """A gate's parameters together with its current opening probability."""

    parameters: Gating
    magnitude: float

    @classmethod
    def at_steady_state(cls, parameters: Gating, v: float) -> "GateState":
        return cls(parameters=parameters, magnitude=parameters.steady_state(v))

    def step(self, v: float, dt: float) -> None:
        """Relax toward the steady state at ``v`` over ``dt`` seconds (explicit Euler)."""

        v_inf = self.parameters.steady_state(v)
        tau = self.parameters.tau(v)
        if tau is None:
            self.magnitude = v_inf
            return
        self.magnitude += (v_inf - self.magnitude) / tau * dt

    def contribution(self) -> float:
        """``magnitude ** gates``; multiplied out so runaway values overflow to inf."""

        result = 1.0
        for _ in range(self.parameters.gates):
            result *= self.magnitude
        return result


__all__ = [
    "GateState",
    "Gating",
    "Instantaneous",
    "LinearExp",
    "Magnitude",
    "Sigmoid",
    "TimeConstant",
    "bell",
    "logistic",
    "time_constant",
]
