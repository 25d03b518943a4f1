"""Batch simulation runs.

:func:`run_simulation` advances a :class:`~compartment_lab.engine.Network` (or
a single neuron) for a configured number of ticks and returns a frozen
:class:`SimulationResult` of sampled voltage traces, spike counts and a JSON
friendly summary. The API and the quickstart CLI both go through it.
"""

from .runner import SimulationResult, detect_spikes, run_simulation

__all__ = [
    "SimulationResult",
    "detect_spikes",
    "run_simulation",
]
