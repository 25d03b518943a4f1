"""OpenTelemetry wiring for the service and counters for simulation runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .config import TelemetryConfig

try:  # pragma: no cover - optional dependency
    from opentelemetry import metrics
except ImportError:  # pragma: no cover - optional dependency
    metrics = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from fastapi import FastAPI


@dataclass
class TelemetryManager:
    """Owns the tracer/meter providers installed for one process.

    Nothing is installed unless the configuration is enabled and the
    ``telemetry`` extra (the OpenTelemetry SDK and OTLP exporter) is present.
    """

    config: TelemetryConfig
    _shutdown_hooks: List[Callable[[], Any]] = field(default_factory=list)
    _instrumentor: Optional[Callable[["FastAPI"], None]] = None

    @property
    def enabled(self) -> bool:
        return self._instrumentor is not None

    def configure(self) -> None:
        if not self.config.enabled:
            LOGGER.debug("Telemetry not enabled; skipping exporter setup")
            return
        if not (self.config.capture_traces or self.config.capture_metrics):
            LOGGER.debug("Telemetry enabled but both traces and metrics are switched off")
            return
        try:
            from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
            from opentelemetry.sdk.resources import Resource
        except ImportError:
            LOGGER.warning("OpenTelemetry SDK not installed; telemetry disabled")
            return

        resource = Resource.create(
            {
                "service.name": self.config.service_name,
                "deployment.environment": self.config.environment,
            }
        )
        if self.config.capture_traces:
            self._install_tracing(resource)
        if self.config.capture_metrics:
            self._install_metrics(resource)
        self._instrumentor = FastAPIInstrumentor().instrument_app  # type: ignore[attr-defined]

    def _install_tracing(self, resource: Any) -> None:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

        ratio = min(max(self.config.sampling_ratio, 0.0), 1.0)
        provider = TracerProvider(resource=resource, sampler=TraceIdRatioBased(ratio))
        try:
            provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=self.config.exporter_endpoint)))
        except Exception as exc:  # pragma: no cover - exporter wiring
            LOGGER.warning("Could not attach OTLP span exporter: %s", exc)
            return
        trace.set_tracer_provider(provider)
        self._shutdown_hooks.append(provider.shutdown)
        LOGGER.info("Tracing exported to %s (sampling %.2f)", self.config.exporter_endpoint, ratio)

    def _install_metrics(self, resource: Any) -> None:
        from opentelemetry import metrics as otel_metrics
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

        try:
            reader = PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=self.config.exporter_endpoint))
        except Exception as exc:  # pragma: no cover - exporter wiring
            LOGGER.warning("Could not attach OTLP metric exporter: %s", exc)
            return
        provider = MeterProvider(resource=resource, metric_readers=[reader])
        otel_metrics.set_meter_provider(provider)
        self._shutdown_hooks.append(provider.shutdown)
        LOGGER.info("Metrics exported to %s", self.config.exporter_endpoint)

    def instrument_app(self, app: "FastAPI") -> None:
        if self._instrumentor is None:
            return
        try:
            self._instrumentor(app)
        except Exception as exc:  # pragma: no cover - instrumentation failure
            LOGGER.warning("FastAPI instrumentation failed: %s", exc)

    def shutdown(self) -> None:
        while self._shutdown_hooks:
            hook = self._shutdown_hooks.pop()
            try:
                hook()
            except Exception as exc:  # pragma: no cover - best effort cleanup
                LOGGER.debug("Telemetry shutdown hook failed: %s", exc)


def configure_telemetry(config: TelemetryConfig) -> TelemetryManager:
    manager = TelemetryManager(config=config)
    manager.configure()
    return manager


class SimulationMetrics:
    """Counters for integration ticks, aborted runs and run wall time.

    Every method is a no-op when the OpenTelemetry API is not importable.
    """

    def __init__(self) -> None:
        self._instruments: Dict[str, Any] = {}
        if metrics is None:
            return
        meter = metrics.get_meter("compartment_lab.simulation")
        self._instruments = {
            "steps": meter.create_counter(
                "compartment_lab.simulation.steps", unit="1", description="Integration ticks executed"
            ),
            "divergences": meter.create_counter(
                "compartment_lab.simulation.divergences",
                unit="1",
                description="Runs aborted by a non-finite membrane potential",
            ),
            "wall_time": meter.create_histogram(
                "compartment_lab.simulation.wall_time", unit="s", description="Wall-clock time per completed run"
            ),
        }

    @property
    def enabled(self) -> bool:
        return bool(self._instruments)

    def _emit(self, name: str, method: str, value: float, attributes: Dict[str, int]) -> None:
        instrument = self._instruments.get(name)
        if instrument is None:
            return
        try:
            getattr(instrument, method)(value, attributes=attributes)
        except Exception as exc:  # pragma: no cover - exporter failures
            LOGGER.debug("Dropping %s measurement: %s", name, exc)

    def record_steps(self, count: int, *, neurons: int) -> None:
        if count > 0:
            self._emit("steps", "add", count, {"neurons": neurons})

    def record_divergence(self, *, neuron: int | None, segment: int) -> None:
        attributes = {"segment": segment}
        if neuron is not None:
            attributes["neuron"] = neuron
        self._emit("divergences", "add", 1, attributes)

    def record_run(self, wall_seconds: float, *, steps: int) -> None:
        self._emit("wall_time", "record", wall_seconds, {"steps": steps})


SIMULATION_METRICS = SimulationMetrics()


__all__ = ["SIMULATION_METRICS", "SimulationMetrics", "TelemetryManager", "configure_telemetry"]
