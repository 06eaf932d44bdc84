"""Shared telemetry: logging setup, OpenTelemetry config, tracing helpers, and event sinks."""

from blobstore.shared.telemetry.events import (
    LoggingTelemetry,
    OpenTelemetryTelemetry,
    TelemetryProtocol,
)
from blobstore.shared.telemetry.logging import setup_logging
from blobstore.shared.telemetry.telemetry import (
    TelemetryConfig,
    build_span_exporter,
    get_telemetry,
    set_telemetry,
    setup_telemetry,
)
from blobstore.shared.telemetry.tracing import (
    add_span_event,
    get_trace_id,
    set_span_error,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "build_span_exporter",
    "get_telemetry",
    "set_telemetry",
    "setup_telemetry",
    "traced",
    "add_span_event",
    "set_span_error",
    "get_trace_id",
    "TelemetryProtocol",
    "LoggingTelemetry",
    "OpenTelemetryTelemetry",
]
