"""Chemical synapses: transmitter pumps, ligand-gated receptors and coupling."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Sequence, Tuple

from .constants import AMPS_PER_MICROAMP, MILLIVOLTS_PER_VOLT, SYNAPSE_RESISTANCE_OHMS
from .errors import ConfigurationError
from .kinetics import GateState, Sigmoid, bell, logistic
from .membrane import MembraneChannel
from .reversal import reversal_potentials
from .segment import Segment
from .solution import Solution


class Transmitter(str, Enum):
    GLUTAMATE = "glutamate"
    GABA = "gaba"

    @classmethod
    def parse(cls, value: str) -> "Transmitter":
        try:
            return cls(value)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown transmitter {value!r}") from exc


class SynapseMode(str, Enum):
    """How receptor current reaches the postsynaptic segment.

    ``resistive`` perturbs the postsynaptic voltage directly through
    :data:`SYNAPSE_RESISTANCE_OHMS`. ``accumulate`` writes the current into the
    segment's synaptic current, which the next tick's integration consumes.
    """

    RESISTIVE = "resistive"
    ACCUMULATE = "accumulate"


@dataclass(slots=True)
class TransmitterConcentrations:
    """Live cleft concentrations in moles per litre."""

    glutamate: float = 0.0
    gaba: float = 0.0

    def get(self, transmitter: Transmitter) -> float:
        return self.glutamate if transmitter is Transmitter.GLUTAMATE else self.gaba

    def set(self, transmitter: Transmitter, value: float) -> None:
        if transmitter is Transmitter.GLUTAMATE:
            self.glutamate = value
        else:
            self.gaba = value


@dataclass(frozen=True, slots=True)
class Sensitivity:
    """Receptor open-probability scaling as a function of transmitter concentration."""

    transmitter: Transmitter
    concentration_at_half_max: float
    slope: float

    def gating_coefficient(self, concentrations: TransmitterConcentrations) -> float:
        concentration = concentrations.get(self.transmitter)
        return logistic((concentration - self.concentration_at_half_max) * self.slope)


@dataclass(frozen=True, slots=True)
class TransmitterPumpParams:
    target_concentration_max: float
    target_concentration_min: float
    target_concentration_v_at_half_max: float
    target_concentration_v_slope: float
    time_constant: Sigmoid

    def __post_init__(self) -> None:
        if not isinstance(self.time_constant, Sigmoid):
            raise ConfigurationError("only sigmoid time constants are supported in synapses")
        if self.target_concentration_v_slope == 0.0:
            raise ConfigurationError("pump target slope must be non-zero")
        if self.target_concentration_min < 0.0 or self.target_concentration_max < self.target_concentration_min:
            raise ConfigurationError("pump target concentrations must satisfy 0 <= min <= max")


@dataclass(frozen=True, slots=True)
class TransmitterPump:
    """Release and clearance of one transmitter, driven by presynaptic voltage."""

    transmitter: Transmitter
    params: TransmitterPumpParams

    def target_concentration(self, v: float) -> float:
        p = self.params
        fraction = logistic((v - p.target_concentration_v_at_half_max) / p.target_concentration_v_slope)
        return p.target_concentration_min + (p.target_concentration_max - p.target_concentration_min) * fraction

    def time_constant(self, v: float) -> float:
        tau = self.params.time_constant
        return bell(v, tau.v_at_max_tau, tau.c_base, tau.c_amp, tau.sigma)

    def step(self, concentrations: TransmitterConcentrations, v: float, dt: float) -> None:
        current = concentrations.get(self.transmitter)
        slope = (self.target_concentration(v) - current) / self.time_constant(v)
        concentrations.set(self.transmitter, current + slope * dt)


@dataclass(slots=True)
class Receptor:
    membrane_channel: MembraneChannel
    neurotransmitter_sensitivity: Sensitivity


@dataclass(slots=True)
class SynapseMembranes:
    """State of one synaptic contact.

    ``surface_area`` scales the receptor current density to a total current.
    Receptor channels are stepped with the postsynaptic voltage like any other
    channel; the transmitter sensitivity multiplies their effective opening.
    """

    cleft_solution: Solution
    transmitter_concentrations: TransmitterConcentrations = field(default_factory=TransmitterConcentrations)
    presynaptic_pumps: List[TransmitterPump] = field(default_factory=list)
    postsynaptic_receptors: List[Receptor] = field(default_factory=list)
    surface_area: float = 1e-6

    def gates(self) -> Iterator[GateState]:
        for receptor in self.postsynaptic_receptors:
            yield from receptor.membrane_channel.channel.gates()

    def step(self, presynaptic_potential: float, postsynaptic_potential: float, dt: float) -> None:
        """Update transmitter concentrations, then receptor gates."""

        for pump in self.presynaptic_pumps:
            pump.step(self.transmitter_concentrations, presynaptic_potential, dt)
        for receptor in self.postsynaptic_receptors:
            receptor.membrane_channel.channel.step(postsynaptic_potential, dt)

    def current(self, temperature: float, postsynaptic_potential: float, postsynaptic_solution: Solution) -> float:
        """Outward receptor current into the postsynaptic segment, in microamps."""

        reversals = reversal_potentials(postsynaptic_solution, self.cleft_solution, temperature)
        density = 0.0
        for receptor in self.postsynaptic_receptors:
            channel_current = receptor.membrane_channel.current_per_square_cm(reversals, postsynaptic_potential)
            gating = receptor.neurotransmitter_sensitivity.gating_coefficient(self.transmitter_concentrations)
            density += channel_current * gating
        return density * self.surface_area

    def voltage_delta(self, current: float, dt: float) -> float:
        """Millivolt perturbation for ``current`` through the fixed synapse resistance."""

        dv_dt = current * AMPS_PER_MICROAMP * SYNAPSE_RESISTANCE_OHMS * -1.0
        return dv_dt * dt * MILLIVOLTS_PER_VOLT


@dataclass(slots=True)
class Synapse:
    """A synapse between two segments of the same neuron."""

    pre_segment: int
    post_segment: int
    membranes: SynapseMembranes

    def validate(self, segment_count: int) -> None:
        for index in (self.pre_segment, self.post_segment):
            if not 0 <= index < segment_count:
                raise ConfigurationError(
                    f"synapse refers to segment {index} but only {segment_count} segments exist"
                )


SynapticContact = Tuple[Segment, Segment, SynapseMembranes]


def apply_synapses(
    contacts: Sequence[SynapticContact],
    temperature: float,
    dt: float,
    mode: SynapseMode = SynapseMode.RESISTIVE,
) -> None:
    """Run one synapse phase over ``(presynaptic, postsynaptic, membranes)`` contacts.

    All voltages are read before any postsynaptic segment is modified. In
    accumulate mode the receptor current is added to ``synaptic_current``;
    clearing it once per tick is the caller's job.
    """

    if not contacts:
        return
    voltages: Dict[int, float] = {}
    for pre, post, _ in contacts:
        voltages[id(pre)] = pre.membrane_potential
        voltages[id(post)] = post.membrane_potential
    targets: Dict[int, Segment] = {}
    totals: Dict[int, float] = {}
    for pre, post, membranes in contacts:
        post_v = voltages[id(post)]
        membranes.step(voltages[id(pre)], post_v, dt)
        contribution = membranes.current(temperature, post_v, post.intracellular_solution)
        if mode is SynapseMode.RESISTIVE:
            contribution = membranes.voltage_delta(contribution, dt)
        targets[id(post)] = post
        totals[id(post)] = totals.get(id(post), 0.0) + contribution
    for key, post in targets.items():
        if mode is SynapseMode.RESISTIVE:
            post.membrane_potential += totals[key]
        else:
            post.synaptic_current += totals[key]


__all__ = [
    "Receptor",
    "Sensitivity",
    "Synapse",
    "SynapseMembranes",
    "SynapseMode",
    "SynapticContact",
    "Transmitter",
    "TransmitterConcentrations",
    "TransmitterPump",
    "TransmitterPumpParams",
    "apply_synapses",
]
