"""OpenTelemetry tracer provider for storage calls.

Spans come from the traced() decorator on BlobStorage operations. Exporters:
console (development), otlp (gRPC collector), or none (spans are sampled
and available to in-process processors only).
"""

import logging
import threading

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from blobstore.core.config import Settings, get_settings
from blobstore.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)

EXPORTER_CONSOLE = "console"
EXPORTER_OTLP = "otlp"
EXPORTER_NONE = "none"


def build_span_exporter(
    exporter_type: str, otlp_endpoint: str | None = None
) -> SpanExporter | None:
    """Return the span exporter for exporter_type, or None for "none".

    An OTLP exporter without an endpoint, or an unknown type, falls back to
    the console exporter.
    """
    if exporter_type == EXPORTER_NONE:
        return None
    if exporter_type == EXPORTER_OTLP and otlp_endpoint:
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if exporter_type != EXPORTER_CONSOLE:
        logger.warning(
            "Span exporter %r unusable (endpoint=%r); using console",
            exporter_type,
            otlp_endpoint,
        )
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider lifecycle for one adapter process."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        enabled: bool = True,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None
        self.exporter: SpanExporter | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TelemetryConfig":
        s = settings or get_settings()
        return cls(
            service_name=s.app_name,
            service_version=s.app_version,
            enabled=s.telemetry_enabled,
            environment=s.telemetry_environment,
        )

    def setup_telemetry(
        self,
        exporter_type: str = EXPORTER_CONSOLE,
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Create the tracer provider and register it globally.

        Returns:
            The provider, or None when disabled or when setup failed (storage
            calls still run; their spans are no-ops).
        """
        if not self.enabled:
            logger.info("Telemetry disabled")
            return None
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(sample_rate),
            )
            self.exporter = build_span_exporter(exporter_type, otlp_endpoint)
            if self.exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(self.exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing storage calls: service=%s, version=%s, exporter=%s",
            self.service_name,
            self.service_version,
            type(self.exporter).__name__ if self.exporter else EXPORTER_NONE,
        )
        return provider

    def instrument_logging(self) -> None:
        """Add trace_id/span_id to log records."""
        if self.tracer_provider is None:
            return
        try:
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider,
                set_logging_format=True,
            )
        except Exception as e:
            logger.exception("Failed to instrument logging: %s", e)

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
            logger.info("Telemetry shutdown complete")
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        finally:
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry


def setup_telemetry(settings: Settings | None = None) -> TelemetryConfig:
    """Host entry point: configure logging and tracing from settings.

    Registers the resulting TelemetryConfig globally (see get_telemetry).
    """
    s = settings or get_settings()
    setup_logging(s)
    config = TelemetryConfig.from_settings(s)
    config.setup_telemetry(
        exporter_type=s.telemetry_exporter,
        otlp_endpoint=s.telemetry_otlp_endpoint,
        sample_rate=s.telemetry_sample_rate,
    )
    config.instrument_logging()
    set_telemetry(config)
    return config
