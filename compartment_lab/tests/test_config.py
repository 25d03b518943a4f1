import pytest

from compartment_lab.config import SimulationConfig, TelemetryConfig
from compartment_lab.engine.constants import BODY_TEMPERATURE
from compartment_lab.engine.synapse import SynapseMode


def test_simulation_config_reads_prefixed_environment() -> None:
    env = {
        "COMPARTMENT_SIM_DT": "2e-5",
        "COMPARTMENT_SIM_STEPS": "400",
        "COMPARTMENT_SIM_BATCH_SIZE": "50",
        "COMPARTMENT_SIM_RECORD_EVERY": "4",
        "COMPARTMENT_SIM_TEMPERATURE_K": "300",
        "COMPARTMENT_SIM_SPIKE_THRESHOLD_MV": "-10",
        "COMPARTMENT_SIM_SYNAPSE_MODE": " Accumulate ",
    }

    config = SimulationConfig.from_env(env)

    assert config.dt == 2e-5
    assert config.steps == 400
    assert config.batch_size == 50
    assert config.record_every == 4
    assert config.temperature_k == 300.0
    assert config.spike_threshold_mv == -10.0
    assert config.synapse_mode is SynapseMode.ACCUMULATE
    assert config.duration == pytest.approx(8e-3)


def test_simulation_config_defaults_when_unset() -> None:
    config = SimulationConfig.from_env({"COMPARTMENT_SIM_DT": ""})
    assert config.dt == 1e-5
    assert config.steps == 10_000
    assert config.temperature_k == BODY_TEMPERATURE
    assert config.synapse_mode is SynapseMode.RESISTIVE


@pytest.mark.parametrize(
    "env",
    [
        {"COMPARTMENT_SIM_DT": "fast"},
        {"COMPARTMENT_SIM_STEPS": "1.5"},
        {"COMPARTMENT_SIM_DT": "-1e-5"},
        {"COMPARTMENT_SIM_RECORD_EVERY": "0"},
        {"COMPARTMENT_SIM_TEMPERATURE_K": "0"},
        {"COMPARTMENT_SIM_SYNAPSE_MODE": "chemical"},
    ],
)
def test_simulation_config_rejects_bad_values(env: dict) -> None:
    with pytest.raises(ValueError):
        SimulationConfig.from_env(env)


def test_simulation_config_coerces_mode_strings() -> None:
    config = SimulationConfig(synapse_mode="accumulate")  # type: ignore[arg-type]
    assert config.synapse_mode is SynapseMode.ACCUMULATE


def test_telemetry_endpoint_implies_enabled() -> None:
    config = TelemetryConfig.from_env({"OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4318"})
    assert config.enabled
    assert config.exporter_endpoint == "http://collector:4318"


def test_telemetry_flags_and_ratio_clamp() -> None:
    env = {
        "COMPARTMENT_TELEMETRY_ENABLED": "false",
        "COMPARTMENT_TELEMETRY_SERVICE_NAME": "lab-worker",
        "COMPARTMENT_TELEMETRY_SAMPLING_RATIO": "7",
        "COMPARTMENT_TELEMETRY_CAPTURE_METRICS": "no",
    }
    config = TelemetryConfig.from_env(env)
    assert not config.enabled
    assert config.service_name == "lab-worker"
    assert config.sampling_ratio == 1.0
    assert not config.capture_metrics
    assert config.capture_traces

    assert TelemetryConfig.from_env({"COMPARTMENT_TELEMETRY_SAMPLING_RATIO": "bogus"}).sampling_ratio == 0.1
