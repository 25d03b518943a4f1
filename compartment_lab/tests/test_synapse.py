from __future__ import annotations

import pytest

from compartment_lab.engine import examples
from compartment_lab.engine.constants import BODY_TEMPERATURE
from compartment_lab.engine.errors import ConfigurationError
from compartment_lab.engine.kinetics import Sigmoid
from compartment_lab.engine.neuron import Neuron
from compartment_lab.engine.solution import INTERSTITIAL_FLUID
from compartment_lab.engine.synapse import (
    Sensitivity,
    Synapse,
    SynapseMode,
    Transmitter,
    TransmitterConcentrations,
    TransmitterPumpParams,
    apply_synapses,
)


def test_sensitivity_is_half_open_at_half_max() -> None:
    sensitivity = Sensitivity(transmitter=Transmitter.GLUTAMATE, concentration_at_half_max=1e-3, slope=1e5)
    assert sensitivity.gating_coefficient(TransmitterConcentrations(glutamate=1e-3)) == pytest.approx(0.5)
    assert sensitivity.gating_coefficient(TransmitterConcentrations(glutamate=1.01e-3)) == pytest.approx(
        0.7310586, abs=1e-6
    )
    assert sensitivity.gating_coefficient(TransmitterConcentrations(gaba=1.0)) < 0.5


def test_pump_relaxes_toward_voltage_dependent_target() -> None:
    pump = examples.glutamate_release()
    concentrations = TransmitterConcentrations(glutamate=1e-4)
    target = pump.target_concentration(50.0)
    assert target == pytest.approx(1.1e-2, rel=1e-6)
    pump.step(concentrations, 50.0, 1e-5)
    assert 1e-4 < concentrations.glutamate < target
    for _ in range(2_000):
        pump.step(concentrations, 50.0, 1e-5)
    assert concentrations.glutamate == pytest.approx(target, abs=1e-6)
    assert concentrations.gaba == 0.0


def test_pump_clears_transmitter_at_rest() -> None:
    pump = examples.glutamate_release()
    concentrations = TransmitterConcentrations(glutamate=1e-2)
    for _ in range(2_000):
        pump.step(concentrations, -70.0, 1e-5)
    assert concentrations.glutamate == pytest.approx(1e-4, abs=1e-6)


def test_pump_parameters_require_sigmoid_time_constant() -> None:
    with pytest.raises(ConfigurationError):
        TransmitterPumpParams(
            target_concentration_max=1e-2,
            target_concentration_min=1e-4,
            target_concentration_v_at_half_max=0.0,
            target_concentration_v_slope=1.0,
            time_constant="fast",  # type: ignore[arg-type]
        )
    with pytest.raises(ConfigurationError):
        TransmitterPumpParams(
            target_concentration_max=1e-4,
            target_concentration_min=1e-2,
            target_concentration_v_at_half_max=0.0,
            target_concentration_v_slope=1.0,
            time_constant=Sigmoid(v_at_max_tau=0.0, c_base=1e-3, c_amp=0.0, sigma=1.0),
        )


def test_transmitter_parse() -> None:
    assert Transmitter.parse("gaba") is Transmitter.GABA
    with pytest.raises(ConfigurationError):
        Transmitter.parse("dopamine")


def _saturated_contact():
    pre = examples.giant_squid_axon(-70.0)
    post = examples.giant_squid_axon(-70.0)
    membranes = examples.excitatory_synapse(-70.0)
    membranes.transmitter_concentrations.glutamate = 1.1e-2
    return pre, post, membranes


def test_resistive_synapse_pulls_postsynaptic_voltage_toward_receptor_reversal() -> None:
    pre, post, membranes = _saturated_contact()
    apply_synapses([(pre, post, membranes)], BODY_TEMPERATURE, 1e-5, SynapseMode.RESISTIVE)
    assert pre.membrane_potential == -70.0
    assert -70.0 < post.membrane_potential < 0.0
    assert post.synaptic_current == 0.0


def test_accumulating_synapse_stores_current_for_next_tick() -> None:
    pre, post, membranes = _saturated_contact()
    apply_synapses([(pre, post, membranes)], BODY_TEMPERATURE, 1e-5, SynapseMode.ACCUMULATE)
    assert post.membrane_potential == -70.0
    # Inward (negative) receptor current below the AMPA reversal potential.
    assert post.synaptic_current < 0.0


def test_synapses_onto_one_segment_sum_from_a_snapshot() -> None:
    pre, post, first = _saturated_contact()
    second = examples.excitatory_synapse(-70.0)
    second.transmitter_concentrations.glutamate = 1.1e-2
    apply_synapses([(pre, post, first), (pre, post, second)], BODY_TEMPERATURE, 1e-5)

    pre_ref, post_ref, single = _saturated_contact()
    apply_synapses([(pre_ref, post_ref, single)], BODY_TEMPERATURE, 1e-5)
    single_delta = post_ref.membrane_potential + 70.0
    assert post.membrane_potential + 70.0 == pytest.approx(2.0 * single_delta)


def test_intra_neuron_synapse_validation() -> None:
    membranes = examples.excitatory_synapse(-70.0)
    with pytest.raises(ConfigurationError):
        Neuron(segments=[examples.simple_leak()], synapses=[Synapse(pre_segment=0, post_segment=4, membranes=membranes)])


def test_intra_neuron_synapse_steps_with_neuron() -> None:
    membranes = examples.excitatory_synapse(-70.0)
    neuron = Neuron(
        segments=[examples.giant_squid_axon(-70.0), examples.giant_squid_axon(-70.0)],
        synapses=[Synapse(pre_segment=0, post_segment=1, membranes=membranes)],
    )
    neuron.segments[0].membrane_potential = 40.0
    before = membranes.transmitter_concentrations.glutamate
    neuron.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, 1e-5)
    assert membranes.transmitter_concentrations.glutamate > before


def test_inhibitory_synapse_pulls_depolarised_segment_toward_chloride_reversal() -> None:
    pre = examples.giant_squid_axon(-70.0)
    post = examples.giant_squid_axon(-70.0)
    post.membrane_potential = -40.0
    membranes = examples.inhibitory_synapse(-40.0)
    membranes.transmitter_concentrations.gaba = 1.1e-2
    apply_synapses([(pre, post, membranes)], BODY_TEMPERATURE, 1e-5, SynapseMode.RESISTIVE)
    assert -90.0 < post.membrane_potential < -40.0
    assert membranes.transmitter_concentrations.glutamate == pytest.approx(1e-4)
