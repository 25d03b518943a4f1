"""Several neurons joined by synapses that cross neuron boundaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .errors import CompartmentLabError, ConfigurationError, SimulationDivergenceError
from .neuron import DEFAULT_ENVIRONMENT, Checkpoint, Environment, Neuron
from .synapse import SynapseMembranes, SynapseMode, SynapticContact, apply_synapses

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class NetworkSynapse:
    pre_neuron: int
    pre_segment: int
    post_neuron: int
    post_segment: int
    membranes: SynapseMembranes


@dataclass(slots=True)
class Network:
    """Neurons plus inter-neuron synapses addressed by ``(neuron, segment)`` indices."""

    neurons: List[Neuron]
    synapses: List[NetworkSynapse] = field(default_factory=list)
    synapse_mode: SynapseMode = SynapseMode.RESISTIVE
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        self.neurons = list(self.neurons)
        self.synapses = list(self.synapses)
        for synapse in self.synapses:
            for neuron_index, segment_index in (
                (synapse.pre_neuron, synapse.pre_segment),
                (synapse.post_neuron, synapse.post_segment),
            ):
                if not 0 <= neuron_index < len(self.neurons):
                    raise ConfigurationError(
                        f"synapse refers to neuron {neuron_index} but only {len(self.neurons)} neurons exist"
                    )
                segment_count = len(self.neurons[neuron_index].segments)
                if not 0 <= segment_index < segment_count:
                    raise ConfigurationError(
                        f"synapse refers to segment {segment_index} of neuron {neuron_index}, "
                        f"which has {segment_count} segments"
                    )
        LOGGER.debug("Built network with %d neurons and %d synapses", len(self.neurons), len(self.synapses))

    def step(self, environment: Environment = DEFAULT_ENVIRONMENT, dt: float = 5e-7) -> None:
        """Advance every neuron, then the cross-neuron synapses, then the clock."""

        checkpoint = Checkpoint(self.neurons, (synapse.membranes for synapse in self.synapses))
        clock = self.timestamp
        try:
            for neuron in self.neurons:
                neuron.integrate_segments(environment.temperature, environment.extracellular_solution, dt)
                neuron.couple_junctions(dt)
                neuron.couple_synapses(environment.temperature, dt, self.synapse_mode)
            apply_synapses(self.synaptic_contacts(), environment.temperature, dt, self.synapse_mode)
        except CompartmentLabError:
            checkpoint.restore()
            raise
        for neuron in self.neurons:
            neuron.timestamp += dt
        self.timestamp += dt
        for index, neuron in enumerate(self.neurons):
            try:
                neuron.check_finite(checkpoint, neuron_index=index)
            except SimulationDivergenceError:
                self.timestamp = clock
                raise

    def synaptic_contacts(self) -> List[SynapticContact]:
        return [
            (
                self.neurons[synapse.pre_neuron].segments[synapse.pre_segment],
                self.neurons[synapse.post_neuron].segments[synapse.post_segment],
                synapse.membranes,
            )
            for synapse in self.synapses
        ]

    def voltages(self) -> List[List[float]]:
        return [neuron.voltages() for neuron in self.neurons]

    @classmethod
    def of(cls, neuron: Neuron) -> "Network":
        return cls(neurons=[neuron], timestamp=neuron.timestamp)


__all__ = ["Network", "NetworkSynapse"]
