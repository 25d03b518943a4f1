"""
compartment_lab.engine
======================

Conductance-based integration engine for multi-compartment neurons.

The package is layered leaf to root:

* :mod:`kinetics` holds gate steady-state curves, the tagged union of time
  constant laws (``Instantaneous``, ``Sigmoid``, ``LinearExp``) and the
  explicit Euler gate update.
* :mod:`channel` combines up to two gates with a normalised ion selectivity,
  and :mod:`channels` collects published channel templates.
* :mod:`membrane` sums channel currents against per-ion Nernst potentials
  from :mod:`reversal`.
* :mod:`segment` integrates one cylindrical compartment: voltage first, then
  gates at the new voltage.
* :mod:`junction` and :mod:`synapse` couple pairs of segments, always from a
  snapshot so the result does not depend on iteration order.
* :mod:`neuron` and :mod:`network` own the segment arenas and expose ``step``.

All voltages are millivolts, times are seconds, concentrations are molar and
geometry is in centimetres.
"""

from .channel import CA, CL, K, NA, Channel, ChannelBuilder, IonSelectivity
from .constants import BODY_TEMPERATURE, CONDUCTANCE_PER_SQUARE_CM, SYNAPSE_RESISTANCE_OHMS
from .errors import (
    CompartmentLabError,
    ConfigurationError,
    DomainError,
    ReversalPotentialError,
    SimulationDivergenceError,
    ZeroConductanceError,
)
from .junction import Junction
from .kinetics import GateState, Gating, Instantaneous, LinearExp, Magnitude, Sigmoid, TimeConstant
from .membrane import IonConductances, Membrane, MembraneChannel
from .network import Network, NetworkSynapse
from .neuron import DEFAULT_ENVIRONMENT, Environment, Neuron, StimulatorSegment
from .reversal import ReversalPotentials, reversal_potential
from .segment import Geometry, Segment
from .solution import EXAMPLE_CYTOPLASM, INTERSTITIAL_FLUID, Ion, Solution
from .stimulator import Envelope, FrequencyRamp, LinearRamp, SquareWave, Stimulator
from .synapse import (
    Receptor,
    Sensitivity,
    Synapse,
    SynapseMembranes,
    SynapseMode,
    Transmitter,
    TransmitterConcentrations,
    TransmitterPump,
    TransmitterPumpParams,
)

__all__ = [
    "BODY_TEMPERATURE",
    "CA",
    "CL",
    "CONDUCTANCE_PER_SQUARE_CM",
    "Channel",
    "ChannelBuilder",
    "CompartmentLabError",
    "ConfigurationError",
    "DEFAULT_ENVIRONMENT",
    "DomainError",
    "EXAMPLE_CYTOPLASM",
    "Envelope",
    "Environment",
    "FrequencyRamp",
    "GateState",
    "Gating",
    "Geometry",
    "INTERSTITIAL_FLUID",
    "Instantaneous",
    "Ion",
    "IonConductances",
    "IonSelectivity",
    "Junction",
    "K",
    "LinearExp",
    "LinearRamp",
    "Magnitude",
    "Membrane",
    "MembraneChannel",
    "NA",
    "Network",
    "NetworkSynapse",
    "Neuron",
    "Receptor",
    "ReversalPotentialError",
    "ReversalPotentials",
    "SYNAPSE_RESISTANCE_OHMS",
    "Segment",
    "Sensitivity",
    "Sigmoid",
    "SimulationDivergenceError",
    "Solution",
    "SquareWave",
    "Stimulator",
    "StimulatorSegment",
    "Synapse",
    "SynapseMembranes",
    "SynapseMode",
    "TimeConstant",
    "Transmitter",
    "TransmitterConcentrations",
    "TransmitterPump",
    "TransmitterPumpParams",
    "ZeroConductanceError",
    "reversal_potential",
]
