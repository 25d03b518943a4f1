"""Command-line helper for running the bundled neuron models locally."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Sequence

from .config import SimulationConfig
from .engine import examples
from .engine.errors import CompartmentLabError, SimulationDivergenceError
from .engine.network import Network
from .engine.neuron import Neuron
from .scene import build_network, list_scenes, load_scene
from .simulation import run_simulation

LOGGER = logging.getLogger(__name__)

SCENE_PREFIX = "scene:"


@dataclass(frozen=True)
class Preset:
    """A ready-made model plus the step size and run length that suit it."""

    build: Callable[[], Network | Neuron]
    description: str
    dt: float = 1e-5
    steps: int = 5_000


def _leak_neuron() -> Neuron:
    return Neuron(segments=[examples.simple_leak(-100.0)])


_PRESETS: Dict[str, Preset] = {
    "giant-axon": Preset(
        build=examples.stimulated_giant_axon,
        description="Hodgkin-Huxley squid axon patch driven by a 50 uA/cm2 square wave.",
    ),
    "leak": Preset(
        build=_leak_neuron,
        description="Passive chloride leak relaxing from -100 mV toward its reversal potential.",
        dt=1e-4,
        steps=200,
    ),
    "passive-pair": Preset(
        build=examples.squid_with_passive_attachment,
        description="Resting squid axon patch joined to a passive leak compartment by a junction.",
    ),
    "synapse-pair": Preset(
        build=examples.synapse_pair,
        description="Stimulated squid axon driving a second axon through an AMPA synapse.",
    ),
}


class QuickstartError(Exception):
    """Raised when the quickstart helper receives invalid input."""


def available_presets() -> Mapping[str, Preset]:
    """Return the preset configurations shipped with the CLI."""

    return dict(_PRESETS)


def _resolve(preset: str) -> tuple[Network | Neuron, str, float, int]:
    if preset.startswith(SCENE_PREFIX):
        name = preset[len(SCENE_PREFIX) :]
        try:
            scene = load_scene(name)
        except KeyError as exc:
            raise QuickstartError(f"Unknown scene '{name}'; bundled scenes: {', '.join(list_scenes())}") from exc
        try:
            network = build_network(scene)
        except CompartmentLabError as exc:
            raise QuickstartError(f"Scene '{name}' could not be built: {exc}") from exc
        return network, f"Bundled scene '{name}'", 1e-5, 5_000
    try:
        entry = _PRESETS[preset]
    except KeyError as exc:
        raise QuickstartError(
            f"Unknown preset '{preset}'; choose one of {sorted(_PRESETS)} or '{SCENE_PREFIX}<name>'"
        ) from exc
    return entry.build(), entry.description, entry.dt, entry.steps


def run_quickstart(
    preset: str = "giant-axon",
    *,
    steps: int | None = None,
    dt: float | None = None,
    record_every: int = 10,
) -> Dict[str, object]:
    """Run ``preset`` and return the result payload with a short description."""

    target, description, default_dt, default_steps = _resolve(preset)
    try:
        config = SimulationConfig(
            dt=default_dt if dt is None else dt,
            steps=default_steps if steps is None else steps,
            record_every=record_every,
        )
    except ValueError as exc:
        raise QuickstartError(str(exc)) from exc
    try:
        result = run_simulation(target, config)
    except SimulationDivergenceError as exc:
        raise QuickstartError(f"{exc} (try a smaller --dt)") from exc
    payload: Dict[str, object] = {"preset": preset, "description": description}
    payload.update(result.to_payload())
    return payload


def summarise_quickstart(payload: Mapping[str, object]) -> str:
    """Create a human-readable summary of a quickstart run."""

    summary = payload.get("summary", {})
    lines = [f"{payload.get('preset')}: {payload.get('description')}"]
    if not isinstance(summary, Mapping):
        lines.append("  No summary available")
        return "\n".join(lines)
    lines.append(
        f"Simulated {float(summary.get('duration_s', 0.0)) * 1e3:.2f} ms "
        f"in {summary.get('steps')} steps of {float(summary.get('dt', 0.0)) * 1e6:g} us"
    )
    for neuron_index, neuron in enumerate(summary.get("neurons", [])):
        for segment_index, segment in enumerate(neuron.get("segments", [])):
            lines.append(
                f"  • neuron {neuron_index} segment {segment_index}: "
                f"min {segment['min_mv']:.2f} mV, max {segment['max_mv']:.2f} mV, "
                f"final {segment['final_mv']:.2f} mV, {segment['spikes']} spike(s)"
            )
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a bundled compartment model with friendly defaults.")
    parser.add_argument(
        "preset",
        nargs="?",
        default="giant-axon",
        help=f"One of {', '.join(sorted(_PRESETS))}, or {SCENE_PREFIX}<name> for a bundled scene",
    )
    parser.add_argument("--steps", type=int, default=None, help="Number of integration ticks")
    parser.add_argument("--dt", type=float, default=None, help="Tick length in seconds")
    parser.add_argument("--record-every", type=int, default=10, help="Sample voltages every N ticks")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON payload instead of a summary")
    parser.add_argument("--list-presets", action="store_true", help="List built-in presets and scenes, then exit")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.list_presets:
        lines = ["Available presets:"]
        for name in sorted(_PRESETS):
            lines.append(f"  • {name}: {_PRESETS[name].description}")
        lines.append("Bundled scenes:")
        for name in list_scenes():
            lines.append(f"  • {SCENE_PREFIX}{name}")
        print("\n".join(lines))
        return 0

    try:
        payload = run_quickstart(
            args.preset,
            steps=args.steps,
            dt=args.dt,
            record_every=args.record_every,
        )
    except QuickstartError as exc:
        LOGGER.debug("Quickstart failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(summarise_quickstart(payload))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
