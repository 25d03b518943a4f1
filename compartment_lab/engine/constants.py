"""Physical constants and unit conversions used by the integration engine."""

from __future__ import annotations

GAS_CONSTANT = 8.314
"""Joules per mole-kelvin."""

FARADAY = 96485.3
"""Coulombs per mole."""

INVERSE_FARADAY = 1.0 / FARADAY

BODY_TEMPERATURE = 310.0
"""Kelvin."""

CONDUCTANCE_PER_SQUARE_CM = 0.1
"""Siemens per cm of junction pore circumference (``g = d * pi * k``)."""

SYNAPSE_RESISTANCE_OHMS = 1e9

MILLIVOLTS_PER_VOLT = 1000.0
VOLTS_PER_MILLIVOLT = 1e-3
AMPS_PER_MICROAMP = 1e-6
CM_PER_MICRON = 1e-4


__all__ = [
    "AMPS_PER_MICROAMP",
    "BODY_TEMPERATURE",
    "CM_PER_MICRON",
    "CONDUCTANCE_PER_SQUARE_CM",
    "FARADAY",
    "GAS_CONSTANT",
    "INVERSE_FARADAY",
    "MILLIVOLTS_PER_VOLT",
    "SYNAPSE_RESISTANCE_OHMS",
    "VOLTS_PER_MILLIVOLT",
]
