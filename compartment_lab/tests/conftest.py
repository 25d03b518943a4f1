import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from compartment_lab.engine.constants import BODY_TEMPERATURE
from compartment_lab.engine.neuron import Environment
from compartment_lab.engine.reversal import ReversalPotentials, reversal_potentials
from compartment_lab.engine.solution import EXAMPLE_CYTOPLASM, INTERSTITIAL_FLUID


@pytest.fixture()
def body_reversals() -> ReversalPotentials:
    """Reversal potentials of the example cytoplasm against interstitial fluid at 310 K."""

    return reversal_potentials(EXAMPLE_CYTOPLASM, INTERSTITIAL_FLUID, BODY_TEMPERATURE)


@pytest.fixture()
def environment() -> Environment:
    return Environment(temperature=BODY_TEMPERATURE, extracellular_solution=INTERSTITIAL_FLUID)


@pytest.fixture()
def anyio_backend() -> str:  # pragma: no cover - restrict to asyncio for anyio plugin
    return "asyncio"
