"""Batch driver that steps a network and records voltage traces."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np
import numpy.typing as npt
from scipy.signal import find_peaks

from ..config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from ..engine.errors import SimulationDivergenceError
from ..engine.network import Network
from ..engine.neuron import Environment, Neuron
from ..engine.solution import INTERSTITIAL_FLUID, Solution
from ..telemetry import SIMULATION_METRICS, SimulationMetrics

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Sampled traces from a run.

    ``voltages[i]`` has shape ``(samples, segments)`` for neuron ``i`` and
    ``spike_counts[i]`` one entry per segment.
    """

    time: npt.NDArray[np.float64]
    voltages: Tuple[npt.NDArray[np.float64], ...]
    spike_counts: Tuple[npt.NDArray[np.int64], ...]
    summary: Dict[str, Any]

    def trace(self, neuron: int, segment: int) -> npt.NDArray[np.float64]:
        return self.voltages[neuron][:, segment]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "time": self.time.tolist(),
            "voltages": [array.T.tolist() for array in self.voltages],
            "spike_counts": [counts.tolist() for counts in self.spike_counts],
            "summary": self.summary,
        }


def detect_spikes(trace: npt.NDArray[np.float64], threshold_mv: float = 0.0) -> npt.NDArray[np.int64]:
    """Return sample indices of local maxima that exceed ``threshold_mv``."""

    if trace.size < 3:
        return np.zeros(0, dtype=np.int64)
    peaks, _ = find_peaks(trace, height=threshold_mv)
    return peaks.astype(np.int64)


def _summarise(
    time_axis: npt.NDArray[np.float64],
    voltages: List[npt.NDArray[np.float64]],
    config: SimulationConfig,
    wall_seconds: float,
) -> Tuple[Tuple[npt.NDArray[np.int64], ...], Dict[str, Any]]:
    spike_counts: List[npt.NDArray[np.int64]] = []
    neurons: List[Dict[str, Any]] = []
    for array in voltages:
        counts = np.array(
            [detect_spikes(array[:, column], config.spike_threshold_mv).size for column in range(array.shape[1])],
            dtype=np.int64,
        )
        spike_counts.append(counts)
        neurons.append(
            {
                "segments": [
                    {
                        "min_mv": float(np.min(array[:, column])),
                        "max_mv": float(np.max(array[:, column])),
                        "final_mv": float(array[-1, column]),
                        "spikes": int(counts[column]),
                    }
                    for column in range(array.shape[1])
                ]
            }
        )
    summary = {
        "steps": config.steps,
        "dt": config.dt,
        "duration_s": float(time_axis[-1] - time_axis[0]) if time_axis.size else 0.0,
        "samples": int(time_axis.size),
        "wall_seconds": wall_seconds,
        "neurons": neurons,
    }
    return tuple(spike_counts), summary


def _record(network: Network, times: List[float], samples: List[List[List[float]]]) -> None:
    times.append(network.timestamp)
    for index, neuron in enumerate(network.neurons):
        samples[index].append(neuron.voltages())


def run_simulation(
    target: Network | Neuron,
    config: SimulationConfig = DEFAULT_SIMULATION_CONFIG,
    *,
    extracellular_solution: Solution = INTERSTITIAL_FLUID,
    metrics: SimulationMetrics = SIMULATION_METRICS,
) -> SimulationResult:
    """Advance ``target`` by ``config.steps`` ticks and record its voltages.

    Voltages are sampled before the first tick, every ``record_every`` ticks and
    after the last tick. A bare :class:`Neuron` is wrapped in a single-neuron
    network whose synapse mode drives every neuron. The target is mutated in
    place, so a second call continues where the first stopped.
    """

    network = target if isinstance(target, Network) else Network.of(target)
    network.synapse_mode = config.synapse_mode
    environment = Environment(temperature=config.temperature_k, extracellular_solution=extracellular_solution)

    samples: List[List[List[float]]] = [[neuron.voltages()] for neuron in network.neurons]
    times: List[float] = [network.timestamp]
    started = time.perf_counter()
    completed = 0
    LOGGER.debug(
        "Running %d steps at dt=%g s over %d neurons", config.steps, config.dt, len(network.neurons)
    )
    try:
        while completed < config.steps:
            batch = min(config.batch_size, config.steps - completed)
            for _ in range(batch):
                network.step(environment, config.dt)
                completed += 1
                if completed % config.record_every == 0:
                    _record(network, times, samples)
            metrics.record_steps(batch, neurons=len(network.neurons))
            LOGGER.debug("Completed %d/%d steps (t=%.6f s)", completed, config.steps, network.timestamp)
    except SimulationDivergenceError as exc:
        exc.tick = completed
        metrics.record_divergence(neuron=exc.neuron, segment=exc.segment)
        LOGGER.error("Simulation aborted after %d of %d steps: %s", completed, config.steps, exc)
        raise

    if completed % config.record_every:
        _record(network, times, samples)
    wall_seconds = time.perf_counter() - started
    metrics.record_run(wall_seconds, steps=config.steps)
    time_axis = np.asarray(times, dtype=float)
    voltages = [np.asarray(rows, dtype=float) for rows in samples]
    spike_counts, summary = _summarise(time_axis, voltages, config, wall_seconds)
    LOGGER.info(
        "Simulated %.4f s in %d steps (%.2f s wall, %d spikes)",
        summary["duration_s"],
        config.steps,
        wall_seconds,
        int(sum(int(counts.sum()) for counts in spike_counts)),
    )
    return SimulationResult(
        time=time_axis,
        voltages=tuple(voltages),
        spike_counts=spike_counts,
        summary=summary,
    )


__all__ = ["SimulationResult", "detect_spikes", "run_simulation"]
