from __future__ import annotations

import numpy as np
import pytest

from compartment_lab.config import SimulationConfig
from compartment_lab.engine import examples
from compartment_lab.engine.errors import SimulationDivergenceError
from compartment_lab.engine.neuron import Neuron
from compartment_lab.engine.synapse import Synapse, SynapseMode
from compartment_lab.scene import build_network, load_scene
from compartment_lab.simulation import detect_spikes, run_simulation


class RecordingMetrics:
    def __init__(self) -> None:
        self.steps: list[tuple[int, int]] = []
        self.divergences: list[tuple[int | None, int]] = []
        self.runs: list[int] = []

    def record_steps(self, count: int, *, neurons: int) -> None:
        self.steps.append((count, neurons))

    def record_run(self, wall_seconds: float, *, steps: int) -> None:
        self.runs.append(steps)

    def record_divergence(self, *, neuron: int | None, segment: int) -> None:
        self.divergences.append((neuron, segment))


def test_detect_spikes_uses_threshold() -> None:
    trace = np.array([-70.0, 5.0, -60.0, -65.0, 3.0, -70.0, -20.0, -70.0])
    assert detect_spikes(trace).tolist() == [1, 4]
    assert detect_spikes(trace, threshold_mv=4.0).tolist() == [1]
    assert detect_spikes(np.array([10.0, 20.0])).size == 0


def test_run_records_samples_every_n_ticks() -> None:
    metrics = RecordingMetrics()
    neuron = Neuron(segments=[examples.simple_leak(-100.0)])
    config = SimulationConfig(dt=1e-4, steps=100, batch_size=30, record_every=10)
    result = run_simulation(neuron, config, metrics=metrics)

    assert result.time.shape == (11,)
    assert result.time[0] == 0.0
    assert result.time[-1] == pytest.approx(1e-2)
    assert result.voltages[0].shape == (11, 1)
    assert result.trace(0, 0)[0] == -100.0
    assert np.all(np.diff(result.trace(0, 0)) > 0.0)
    assert result.spike_counts[0].tolist() == [0]
    assert result.summary["samples"] == 11
    assert result.summary["duration_s"] == pytest.approx(1e-2)
    assert result.summary["neurons"][0]["segments"][0]["min_mv"] == -100.0
    assert [count for count, _ in metrics.steps] == [30, 30, 30, 10]
    assert metrics.runs == [100]
    assert neuron.timestamp == pytest.approx(1e-2)


def test_stimulated_axon_produces_spikes() -> None:
    config = SimulationConfig(dt=1e-5, steps=3_000, record_every=2)
    result = run_simulation(examples.stimulated_giant_axon(), config)
    assert result.spike_counts[0][0] >= 1
    assert result.summary["neurons"][0]["segments"][0]["max_mv"] > 20.0


def test_scene_network_runs_end_to_end() -> None:
    network = build_network(load_scene("giant_squid_soma"))
    result = run_simulation(network, SimulationConfig(dt=1e-5, steps=500, record_every=50))
    assert len(result.voltages) == 1
    assert result.voltages[0].shape == (11, 3)
    assert np.all(np.isfinite(result.voltages[0]))
    payload = result.to_payload()
    assert len(payload["voltages"][0]) == 3
    assert len(payload["voltages"][0][0]) == 11


def test_divergence_is_reported_with_tick() -> None:
    metrics = RecordingMetrics()
    neuron = Neuron(segments=[examples.passive_channels(0.0, 1e3, 0.0)])
    with pytest.raises(SimulationDivergenceError) as excinfo:
        run_simulation(neuron, SimulationConfig(dt=1e-3, steps=500), metrics=metrics)
    assert excinfo.value.tick is not None
    assert 0 < excinfo.value.tick < 500
    assert metrics.divergences == [(0, 0)]
    assert metrics.runs == []


def test_run_records_final_state_when_steps_do_not_divide_evenly() -> None:
    neuron = Neuron(segments=[examples.simple_leak(-100.0)])
    result = run_simulation(neuron, SimulationConfig(dt=1e-4, steps=105, record_every=10))

    assert result.time.shape == (12,)
    assert result.time[-2] == pytest.approx(1e-2)
    assert result.time[-1] == pytest.approx(1.05e-2)
    assert result.summary["samples"] == 12
    assert result.summary["duration_s"] == pytest.approx(1.05e-2)
    assert result.summary["neurons"][0]["segments"][0]["final_mv"] == neuron.segments[0].membrane_potential


def test_run_applies_accumulate_mode_to_intra_neuron_synapses() -> None:
    membranes = examples.excitatory_synapse(-70.0)
    membranes.transmitter_concentrations.glutamate = 1.1e-2
    neuron = Neuron(
        segments=[examples.giant_squid_axon(-70.0), examples.giant_squid_axon(-70.0)],
        synapses=[Synapse(pre_segment=0, post_segment=1, membranes=membranes)],
    )
    run_simulation(neuron, SimulationConfig(dt=1e-5, steps=1, synapse_mode=SynapseMode.ACCUMULATE))

    assert neuron.segments[1].synaptic_current < 0.0
    # Without a resistive kick both segments integrate identically.
    assert neuron.segments[1].membrane_potential == neuron.segments[0].membrane_potential
