from __future__ import annotations

import math

import pytest

from compartment_lab.engine.errors import ConfigurationError
from compartment_lab.engine.stimulator import (
    DEFAULT_STIMULATOR,
    Envelope,
    FrequencyRamp,
    LinearRamp,
    SquareWave,
    Stimulator,
)


@pytest.mark.parametrize(
    ("t", "expected"),
    [(0.0, 50.0), (0.01, 50.0), (0.05, 50.0), (0.07, -10.0), (0.11, 50.0), (0.19, -10.0)],
)
def test_square_wave_repeats_every_period(t: float, expected: float) -> None:
    assert DEFAULT_STIMULATOR.current(t) == expected


def test_linear_ramp_interpolates_inside_envelope() -> None:
    stimulator = Stimulator(
        envelope=Envelope(period=1.0, onset=0.2, offset=0.6),
        current_shape=LinearRamp(start_current=0.0, end_current=10.0, off_current=-1.0),
    )
    assert stimulator.current(0.1) == -1.0
    assert stimulator.current(0.2) == pytest.approx(0.0)
    assert stimulator.current(0.4) == pytest.approx(5.0)
    assert stimulator.current(0.6) == pytest.approx(10.0)
    assert stimulator.current(0.8) == -1.0


def test_frequency_ramp_oscillates_around_offset() -> None:
    stimulator = Stimulator(
        envelope=Envelope(period=1.0, onset=0.0, offset=0.5),
        current_shape=FrequencyRamp(on_amplitude=4.0, offset_current=1.0, start_frequency=2.0, end_frequency=10.0),
    )
    assert stimulator.current(0.0) == pytest.approx(1.0)
    # At t = 0.025 s the sweep has reached 2.4 Hz.
    assert stimulator.current(0.025) == pytest.approx(4.0 * math.sin(2.4 * 2.0 * math.pi * 0.025) + 1.0)
    assert stimulator.current(0.75) == 1.0
    samples = [stimulator.current(i * 1e-3) for i in range(500)]
    assert max(samples) <= 5.0 + 1e-9
    assert min(samples) >= -3.0 - 1e-9


def test_envelope_validation() -> None:
    with pytest.raises(ConfigurationError):
        Envelope(period=0.0, onset=0.0, offset=0.1)
    with pytest.raises(ConfigurationError):
        Envelope(period=1.0, onset=0.5, offset=0.5)


def test_unknown_current_shape_is_rejected() -> None:
    stimulator = Stimulator(envelope=Envelope(period=1.0, onset=0.0, offset=0.5), current_shape="pulse")  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        stimulator.current(0.1)


def test_square_wave_fields() -> None:
    shape = SquareWave(on_current=1.0, off_current=0.0)
    assert Stimulator(envelope=Envelope(period=2.0, onset=1.0, offset=1.5), current_shape=shape).current(0.5) == 0.0
