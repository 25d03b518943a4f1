"""Ready-made segments, synapses and neurons used by tests, the CLI and the API."""

from __future__ import annotations

from typing import Sequence

from . import channels
from .channel import CL, K, NA, ChannelBuilder
from .junction import Junction
from .kinetics import Sigmoid
from .membrane import Membrane, MembraneChannel
from .network import Network, NetworkSynapse
from .neuron import Neuron, StimulatorSegment
from .segment import Geometry, Segment
from .solution import EXAMPLE_CYTOPLASM, INTERSTITIAL_FLUID
from .stimulator import DEFAULT_STIMULATOR, Stimulator
from .synapse import (
    Receptor,
    Sensitivity,
    SynapseMembranes,
    Transmitter,
    TransmitterConcentrations,
    TransmitterPump,
    TransmitterPumpParams,
)

def _membrane(initial_potential: float, entries: Sequence[tuple[ChannelBuilder, float]]) -> Membrane:
    return Membrane(
        membrane_channels=[
            MembraneChannel(channel=builder.build(initial_potential), siemens_per_square_cm=conductance)
            for builder, conductance in entries
        ],
        capacitance=1e-6,
    )


def giant_squid_axon(initial_potential: float = -70.0) -> Segment:
    """Hodgkin-Huxley squid axon patch with the classic 36/120/0.3 mS/cm² conductances."""

    return Segment(
        intracellular_solution=EXAMPLE_CYTOPLASM,
        geometry=Geometry(diameter=1.0, length=3.0),
        membrane=_membrane(
            initial_potential,
            [
                (channels.GIANT_SQUID_K, 36e-3),
                (channels.GIANT_SQUID_NA, 120e-3),
                (channels.GIANT_SQUID_LEAK, 0.3e-3),
            ],
        ),
        membrane_potential=initial_potential,
    )


def simple_leak(initial_potential: float = -80.0) -> Segment:
    return Segment(
        intracellular_solution=EXAMPLE_CYTOPLASM,
        geometry=Geometry(diameter=0.01, length=1000.0),
        membrane=_membrane(initial_potential, [(channels.GIANT_SQUID_LEAK, 0.3e-3)]),
        membrane_potential=initial_potential,
    )


def k_channels_only(initial_potential: float = -80.0) -> Segment:
    return Segment(
        intracellular_solution=EXAMPLE_CYTOPLASM,
        geometry=Geometry(diameter=1.0, length=3.0),
        membrane=_membrane(initial_potential, [(channels.GIANT_SQUID_K, 36e-3)]),
        membrane_potential=initial_potential,
    )


def passive_channels(na_conductance: float, k_conductance: float, cl_conductance: float) -> Segment:
    """Segment with ungated Cl, K and Na channels of the given peak conductances."""

    initial_potential = -58.0
    return Segment(
        intracellular_solution=EXAMPLE_CYTOPLASM,
        geometry=Geometry(diameter=2.0, length=2.0),
        membrane=_membrane(
            initial_potential,
            [
                (ChannelBuilder(activation=None, inactivation=None, ion_selectivity=CL), cl_conductance),
                (ChannelBuilder(activation=None, inactivation=None, ion_selectivity=K), k_conductance),
                (ChannelBuilder(activation=None, inactivation=None, ion_selectivity=NA), na_conductance),
            ],
        ),
        membrane_potential=initial_potential,
    )


def squid_with_passive_attachment() -> Neuron:
    """A giant axon patch electrically coupled to a passive leak compartment."""

    return Neuron(
        segments=[giant_squid_axon(), simple_leak()],
        junctions=[Junction(first=0, second=1, pore_diameter=0.01)],
    )


def stimulated_giant_axon(stimulator: Stimulator = DEFAULT_STIMULATOR) -> Neuron:
    return Neuron(
        segments=[giant_squid_axon()],
        stimulators=[StimulatorSegment(segment=0, stimulator=stimulator)],
    )


# Pump and receptor parameters are illustrative, not fitted to recordings.
def _release(transmitter: Transmitter) -> TransmitterPump:
    return TransmitterPump(
        transmitter=transmitter,
        params=TransmitterPumpParams(
            target_concentration_max=1.1e-2,
            target_concentration_min=1e-4,
            target_concentration_v_at_half_max=0.0,
            target_concentration_v_slope=1.0,
            time_constant=Sigmoid(v_at_max_tau=0.0, c_base=1e-3, c_amp=1e-6, sigma=1.0),
        ),
    )


def glutamate_release() -> TransmitterPump:
    return _release(Transmitter.GLUTAMATE)


def gaba_release() -> TransmitterPump:
    return _release(Transmitter.GABA)


def ampa_receptor(initial_potential: float) -> Receptor:
    return Receptor(
        membrane_channel=MembraneChannel(channel=channels.AMPA.build(initial_potential), siemens_per_square_cm=1e7),
        neurotransmitter_sensitivity=Sensitivity(
            transmitter=Transmitter.GLUTAMATE,
            concentration_at_half_max=3e-3,
            slope=10000.0,
        ),
    )


def gaba_a_receptor(initial_potential: float) -> Receptor:
    return Receptor(
        membrane_channel=MembraneChannel(channel=channels.GABA_A.build(initial_potential), siemens_per_square_cm=1e7),
        neurotransmitter_sensitivity=Sensitivity(
            transmitter=Transmitter.GABA,
            concentration_at_half_max=3e-3,
            slope=10000.0,
        ),
    )


def excitatory_synapse(initial_potential: float) -> SynapseMembranes:
    return SynapseMembranes(
        cleft_solution=INTERSTITIAL_FLUID,
        transmitter_concentrations=TransmitterConcentrations(glutamate=0.1e-3, gaba=0.1e-3),
        presynaptic_pumps=[glutamate_release()],
        postsynaptic_receptors=[ampa_receptor(initial_potential)],
        surface_area=1e-6,
    )


def inhibitory_synapse(initial_potential: float) -> SynapseMembranes:
    return SynapseMembranes(
        cleft_solution=INTERSTITIAL_FLUID,
        transmitter_concentrations=TransmitterConcentrations(glutamate=0.1e-3, gaba=0.1e-3),
        presynaptic_pumps=[gaba_release()],
        postsynaptic_receptors=[gaba_a_receptor(initial_potential)],
        surface_area=1e-6,
    )


def synapse_pair(stimulator: Stimulator = DEFAULT_STIMULATOR) -> Network:
    """A stimulated squid axon driving a second one through an AMPA synapse."""

    presynaptic = stimulated_giant_axon(stimulator)
    postsynaptic = Neuron(segments=[giant_squid_axon()])
    return Network(
        neurons=[presynaptic, postsynaptic],
        synapses=[
            NetworkSynapse(
                pre_neuron=0,
                pre_segment=0,
                post_neuron=1,
                post_segment=0,
                membranes=excitatory_synapse(-70.0),
            )
        ],
    )


__all__ = [
    "ampa_receptor",
    "excitatory_synapse",
    "gaba_a_receptor",
    "gaba_release",
    "giant_squid_axon",
    "glutamate_release",
    "inhibitory_synapse",
    "k_channels_only",
    "passive_channels",
    "simple_leak",
    "squid_with_passive_attachment",
    "stimulated_giant_axon",
    "synapse_pair",
]
