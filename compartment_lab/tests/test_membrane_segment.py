from __future__ import annotations

import math

import pytest

from compartment_lab.engine import channels, examples
from compartment_lab.engine.constants import BODY_TEMPERATURE
from compartment_lab.engine.errors import ConfigurationError, ZeroConductanceError
from compartment_lab.engine.membrane import Membrane, MembraneChannel
from compartment_lab.engine.reversal import ReversalPotentials
from compartment_lab.engine.segment import Geometry, Segment
from compartment_lab.engine.solution import INTERSTITIAL_FLUID


def _run(segment: Segment, steps: int, dt: float) -> None:
    for _ in range(steps):
        segment.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, dt)


@pytest.mark.parametrize("initial_potential", [-160.0, -80.0, 1.0, 60.0])
def test_chloride_leak_converges_to_chloride_reversal(
    initial_potential: float, body_reversals: ReversalPotentials
) -> None:
    segment = examples.simple_leak(initial_potential)
    _run(segment, 10_000, 1e-3)
    assert abs(segment.membrane_potential - body_reversals.cl) < 1.0


def test_leak_recovery_timecourse(body_reversals: ReversalPotentials) -> None:
    segment = examples.simple_leak(-100.0)
    dt = 1e-4
    reached = None
    for tick in range(1, 2001):
        segment.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, dt)
        if abs(segment.membrane_potential - body_reversals.cl) < 1.0:
            reached = tick * dt
            break
    assert reached is not None
    assert 1e-3 < reached < 9e-3


@pytest.mark.parametrize("initial_potential", [-89.5, 0.0, 100.0])
def test_potassium_only_segment_converges_to_potassium_reversal(
    initial_potential: float, body_reversals: ReversalPotentials
) -> None:
    segment = examples.k_channels_only(initial_potential)
    _run(segment, 10_000, 1e-5)
    assert abs(segment.membrane_potential - body_reversals.k) < 1.0


@pytest.mark.parametrize(
    ("na", "k", "cl"),
    [
        (0.0, 36e-3, 3e-3),
        (3e-3, 2e-3, 1e-3),
        (1e-3, 1e-3, 0.0),
    ],
)
def test_passive_membrane_settles_at_conductance_weighted_potential(
    na: float, k: float, cl: float, body_reversals: ReversalPotentials
) -> None:
    segment = examples.passive_channels(na, k, cl)
    expected = (na * body_reversals.na + k * body_reversals.k + cl * body_reversals.cl) / (na + k + cl)
    assert segment.resting_potential(BODY_TEMPERATURE, INTERSTITIAL_FLUID) == pytest.approx(expected)
    _run(segment, 3_000, 1e-5)
    assert segment.membrane_potential == pytest.approx(expected, abs=1e-3)


def test_giant_axon_stays_physiological_without_input() -> None:
    segment = examples.giant_squid_axon(-70.0)
    lowest = highest = segment.membrane_potential
    for _ in range(10_000):
        segment.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, 1e-5)
        lowest = min(lowest, segment.membrane_potential)
        highest = max(highest, segment.membrane_potential)
    assert math.isfinite(segment.membrane_potential)
    assert -150.0 <= lowest
    assert highest <= 100.0


def test_ampa_channel_reverses_near_zero(body_reversals: ReversalPotentials) -> None:
    membrane = Membrane(membrane_channels=[MembraneChannel(channel=channels.AMPA.build(-70.0), siemens_per_square_cm=1e-3)])
    assert membrane.resting_potential(body_reversals) == pytest.approx(0.0, abs=1.0)


def test_membrane_current_is_outward_above_reversal(body_reversals: ReversalPotentials) -> None:
    entry = MembraneChannel(channel=channels.GIANT_SQUID_LEAK.build(0.0), siemens_per_square_cm=0.3e-3)
    assert entry.current_per_square_cm(body_reversals, body_reversals.cl) == pytest.approx(0.0)
    assert entry.current_per_square_cm(body_reversals, 0.0) > 0.0
    assert entry.current_per_square_cm(body_reversals, -120.0) < 0.0


def test_input_current_depolarises_segment() -> None:
    resting = examples.simple_leak(-80.0)
    driven = examples.simple_leak(-80.0)
    driven.input_current = 10.0
    resting.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, 1e-4)
    driven.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, 1e-4)
    assert driven.membrane_potential > resting.membrane_potential


def test_conductance_report_matches_channel_mix() -> None:
    segment = examples.passive_channels(1e-3, 2e-3, 3e-3)
    conductances = segment.conductances()
    assert conductances.na == pytest.approx(1e-3)
    assert conductances.k == pytest.approx(2e-3)
    assert conductances.cl == pytest.approx(3e-3)
    assert conductances.ca == 0.0
    assert conductances.total == pytest.approx(6e-3)


def test_resting_potential_requires_open_channels(body_reversals: ReversalPotentials) -> None:
    with pytest.raises(ZeroConductanceError):
        Membrane().resting_potential(body_reversals)


def test_geometry_and_membrane_validation() -> None:
    geometry = Geometry(diameter=2.0, length=3.0)
    assert geometry.surface_area == pytest.approx(6.0 * math.pi)
    with pytest.raises(ConfigurationError):
        Geometry(diameter=0.0, length=1.0)
    with pytest.raises(ConfigurationError):
        Membrane(capacitance=0.0)
    with pytest.raises(ConfigurationError):
        MembraneChannel(channel=channels.GIANT_SQUID_LEAK.build(0.0), siemens_per_square_cm=-1.0)


def test_gates_step_at_the_updated_voltage() -> None:
    segment = examples.giant_squid_axon(-70.0)
    segment.membrane_potential = -50.0
    old_v = segment.membrane_potential
    gates = list(segment.membrane.gates())
    before = [gate.magnitude for gate in gates]
    dt = 1e-5

    segment.step(BODY_TEMPERATURE, INTERSTITIAL_FLUID, dt)
    new_v = segment.membrane_potential
    assert new_v != old_v

    def relaxed(gate, magnitude: float, v: float) -> float:
        tau = gate.parameters.tau(v)
        if tau is None:
            return gate.parameters.steady_state(v)
        return magnitude + (gate.parameters.steady_state(v) - magnitude) / tau * dt

    expected = [relaxed(gate, magnitude, new_v) for gate, magnitude in zip(gates, before)]
    stale = [relaxed(gate, magnitude, old_v) for gate, magnitude in zip(gates, before)]
    assert [gate.magnitude for gate in gates] == pytest.approx(expected, rel=1e-12, abs=0.0)
    assert [gate.magnitude for gate in gates] != pytest.approx(stale, rel=1e-12, abs=0.0)
