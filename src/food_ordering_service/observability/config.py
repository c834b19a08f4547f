"""Tracing, metrics and structured logging for the ordering service."""

import logging
import os
from dataclasses import dataclass
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

# Paths without server spans (comma-separated regexes).
EXCLUDED_URLS = "health"


@dataclass(frozen=True)
class ObservabilitySettings:
    """Where and how telemetry is shipped."""

    service_name: str = "food-ordering-svc"
    environment: str = "development"
    otlp_endpoint: str = "http://localhost:4318"
    metric_export_interval_ms: int = 60000

    @classmethod
    def from_env(cls) -> "ObservabilitySettings":
        return cls(
            service_name=os.getenv("OTEL_SERVICE_NAME", cls.service_name),
            environment=os.getenv("ENVIRONMENT", cls.environment),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", cls.otlp_endpoint).rstrip("/"),
            metric_export_interval_ms=int(
                os.getenv("OTEL_METRIC_EXPORT_INTERVAL", str(cls.metric_export_interval_ms))
            ),
        )

    @property
    def exporters_enabled(self) -> bool:
        return self.environment != "test"

    def resource(self) -> Resource:
        return Resource.create(
            {
                "service.name": self.service_name,
                "deployment.environment": self.environment,
            }
        )


def build_tracer_provider(settings: ObservabilitySettings) -> TracerProvider:
    """Create a tracer provider, exporting spans over OTLP/HTTP when enabled."""
    provider = TracerProvider(resource=settings.resource())
    if settings.exporters_enabled:
        exporter = OTLPSpanExporter(endpoint=f"{settings.otlp_endpoint}/v1/traces")
        provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def build_meter_provider(settings: ObservabilitySettings) -> MeterProvider:
    """Create a meter provider, exporting order and login counters when enabled."""
    readers: list[PeriodicExportingMetricReader] = []
    if settings.exporters_enabled:
        exporter = OTLPMetricExporter(endpoint=f"{settings.otlp_endpoint}/v1/metrics")
        readers.append(
            PeriodicExportingMetricReader(
                exporter, export_interval_millis=settings.metric_export_interval_ms
            )
        )
    return MeterProvider(resource=settings.resource(), metric_readers=readers)


def setup_observability(app: Any = None, settings: ObservabilitySettings | None = None) -> None:
    """Install global tracer and meter providers and instrument the API.

    Under ENVIRONMENT=test the providers are created without exporters so
    spans and counters stay in-process.

    Args:
        app: Optional FastAPI application to instrument
        settings: Telemetry settings (read from the environment when omitted)
    """
    settings = settings or ObservabilitySettings.from_env()

    trace.set_tracer_provider(build_tracer_provider(settings))
    metrics.set_meter_provider(build_meter_provider(settings))

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)

    if settings.exporters_enabled:
        logger.info(
            f"Telemetry for {settings.service_name} exported to {settings.otlp_endpoint}"
        )
    else:
        logger.info(f"Telemetry for {settings.service_name} kept in-process")


class TraceContextFilter(logging.Filter):
    """Stamp each record with the service name and the active trace/span ids."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")
            record.span_id = format(span_context.span_id, "016x")
        return True


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stderr, correlated with the current trace.

    Args:
        log_level: Logging level name; LOG_LEVEL takes precedence when set
    """
    level_str = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        timestamp=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(TraceContextFilter(ObservabilitySettings.from_env().service_name))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # Request lines come from server spans instead
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))

    logger.info(f"JSON logging configured at {level_str} level")
