"""Neurons: an arena of segments with junctions, synapses and stimulators.

:meth:`Neuron.step` is the engine's integration loop. Each tick runs, in order:

1. every segment integrates its own membrane (voltage first, then gates);
2. the junction coupling phase, from a snapshot of all voltages;
3. the synapse phase, again from a snapshot;
4. the timestamp advances by ``dt``.

A tick is atomic. If any membrane potential ends up NaN or infinite, the
neuron is restored to its pre-tick state and
:class:`~compartment_lab.engine.errors.SimulationDivergenceError` is raised.
Domain errors raised by a phase (an undefined reversal potential, say) also
restore the pre-tick state before they propagate.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .constants import BODY_TEMPERATURE
from .errors import CompartmentLabError, ConfigurationError, SimulationDivergenceError
from .junction import Junction, apply_junctions
from .kinetics import GateState
from .membrane import IonConductances
from .segment import Segment
from .solution import INTERSTITIAL_FLUID, Solution
from .stimulator import Stimulator
from .synapse import (
    Synapse,
    SynapseMembranes,
    SynapseMode,
    SynapticContact,
    TransmitterConcentrations,
    apply_synapses,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Environment:
    """Ambient conditions passed into every step."""

    temperature: float = BODY_TEMPERATURE
    extracellular_solution: Solution = INTERSTITIAL_FLUID

    def __post_init__(self) -> None:
        if self.temperature <= 0.0:
            raise ConfigurationError(f"temperature must be positive kelvin, got {self.temperature!r}")


DEFAULT_ENVIRONMENT = Environment()


@dataclass(frozen=True, slots=True)
class StimulatorSegment:
    """A stimulator driving the input current of one segment."""

    segment: int
    stimulator: Stimulator


class Checkpoint:
    """Copy of every mutable scalar needed to undo a tick."""

    __slots__ = ("_segments", "_gates", "_concentrations", "_timestamps")

    def __init__(self, neurons: Iterable["Neuron"], extra_synapses: Iterable[SynapseMembranes] = ()) -> None:
        self._segments: List[Tuple[Segment, float, float, float]] = []
        self._gates: List[Tuple[GateState, float]] = []
        self._concentrations: List[Tuple[TransmitterConcentrations, float, float]] = []
        self._timestamps: List[Tuple[Neuron, float]] = []
        membranes: List[SynapseMembranes] = list(extra_synapses)
        for neuron in neurons:
            self._timestamps.append((neuron, neuron.timestamp))
            for segment in neuron.segments:
                self._segments.append(
                    (segment, segment.membrane_potential, segment.input_current, segment.synaptic_current)
                )
                self._gates.extend((gate, gate.magnitude) for gate in segment.membrane.gates())
            membranes.extend(synapse.membranes for synapse in neuron.synapses)
        for synapse_membranes in membranes:
            self._gates.extend((gate, gate.magnitude) for gate in synapse_membranes.gates())
            concentrations = synapse_membranes.transmitter_concentrations
            self._concentrations.append((concentrations, concentrations.glutamate, concentrations.gaba))

    def restore(self) -> None:
        for segment, voltage, input_current, synaptic_current in self._segments:
            segment.membrane_potential = voltage
            segment.input_current = input_current
            segment.synaptic_current = synaptic_current
        for gate, magnitude in self._gates:
            gate.magnitude = magnitude
        for concentrations, glutamate, gaba in self._concentrations:
            concentrations.glutamate = glutamate
            concentrations.gaba = gaba
        for neuron, timestamp in self._timestamps:
            neuron.timestamp = timestamp


def first_non_finite(segments: Sequence[Segment]) -> int | None:
    for index, segment in enumerate(segments):
        if not math.isfinite(segment.membrane_potential):
            return index
    return None


@dataclass(slots=True)
class Neuron:
    """Owns its segments; junctions, synapses and stimulators refer to them by index."""

    segments: List[Segment]
    junctions: List[Junction] = field(default_factory=list)
    synapses: List[Synapse] = field(default_factory=list)
    stimulators: List[StimulatorSegment] = field(default_factory=list)
    synapse_mode: SynapseMode = SynapseMode.RESISTIVE
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        self.segments = list(self.segments)
        self.junctions = list(self.junctions)
        self.synapses = list(self.synapses)
        self.stimulators = list(self.stimulators)
        if not self.segments:
            raise ConfigurationError("a neuron needs at least one segment")
        count = len(self.segments)
        for junction in self.junctions:
            junction.validate(count)
        for synapse in self.synapses:
            synapse.validate(count)
        for attachment in self.stimulators:
            if not 0 <= attachment.segment < count:
                raise ConfigurationError(
                    f"stimulator refers to segment {attachment.segment} but only {count} segments exist"
                )
        LOGGER.debug(
            "Built neuron with %d segments, %d junctions, %d synapses, %d stimulators",
            count,
            len(self.junctions),
            len(self.synapses),
            len(self.stimulators),
        )

    def step(self, temperature: float, extracellular_solution: Solution, dt: float) -> None:
        """Advance every segment, junction and synapse by ``dt`` seconds."""

        checkpoint = Checkpoint([self])
        try:
            self.integrate_segments(temperature, extracellular_solution, dt)
            self.couple_junctions(dt)
            self.couple_synapses(temperature, dt)
        except CompartmentLabError:
            checkpoint.restore()
            raise
        self.timestamp += dt
        self.check_finite(checkpoint)

    def step_in(self, environment: Environment, dt: float) -> None:
        self.step(environment.temperature, environment.extracellular_solution, dt)

    def integrate_segments(self, temperature: float, extracellular_solution: Solution, dt: float) -> None:
        for attachment in self.stimulators:
            self.segments[attachment.segment].input_current = attachment.stimulator.current(self.timestamp)
        for segment in self.segments:
            segment.step(temperature, extracellular_solution, dt)

    def couple_junctions(self, dt: float) -> None:
        apply_junctions(self.segments, self.junctions, dt)

    def couple_synapses(self, temperature: float, dt: float, mode: SynapseMode | None = None) -> None:
        """Start this tick's synapse phase: clear the accumulators, then apply intra-neuron synapses.

        ``mode`` overrides :attr:`synapse_mode`; a network passes its own mode here.
        """

        for segment in self.segments:
            segment.synaptic_current = 0.0
        apply_synapses(self.synaptic_contacts(), temperature, dt, mode or self.synapse_mode)

    def synaptic_contacts(self) -> List[SynapticContact]:
        return [
            (self.segments[synapse.pre_segment], self.segments[synapse.post_segment], synapse.membranes)
            for synapse in self.synapses
        ]

    def check_finite(self, checkpoint: Checkpoint, neuron_index: int | None = None) -> None:
        index = first_non_finite(self.segments)
        if index is None:
            return
        value = self.segments[index].membrane_potential
        timestamp = self.timestamp
        checkpoint.restore()
        LOGGER.warning("Membrane potential diverged at segment %d (t=%.6f s): %r", index, timestamp, value)
        raise SimulationDivergenceError(
            f"segment {index} membrane potential became {value!r} at t={timestamp:.6f} s; reduce dt",
            neuron=neuron_index,
            segment=index,
            timestamp=timestamp,
            value=value,
        )

    def voltages(self) -> List[float]:
        return [segment.membrane_potential for segment in self.segments]

    def conductances(self) -> List[IonConductances]:
        return [segment.conductances() for segment in self.segments]


__all__ = [
    "Checkpoint",
    "DEFAULT_ENVIRONMENT",
    "Environment",
    "Neuron",
    "StimulatorSegment",
    "first_non_finite",
]
