"""Telemetry sinks: named events with a string-keyed property bag.

The storage facade reports adapter-level problems (download failures,
partial batch deletes) through a TelemetryProtocol so hosts can route
them to their own monitoring. LoggingTelemetry is the default.
"""

import logging
from typing import Protocol

from blobstore.shared.telemetry.tracing import (
    add_span_event,
    get_trace_id,
    set_span_error,
)

logger = logging.getLogger(__name__)


class TelemetryProtocol(Protocol):
    """Protocol for telemetry sinks."""

    def track_event(self, name: str, properties: dict[str, str] | None = None) -> None:
        """Record a named event."""
        ...

    def track_error(
        self, error: Exception, properties: dict[str, str] | None = None
    ) -> None:
        """Record a handled or propagated error."""
        ...


class LoggingTelemetry:
    """Writes telemetry events to a logger at WARNING level."""

    def __init__(self, sink: logging.Logger | None = None) -> None:
        self._logger = sink or logger

    def track_event(self, name: str, properties: dict[str, str] | None = None) -> None:
        self._logger.warning("telemetry event %s: %s", name, properties or {})

    def track_error(
        self, error: Exception, properties: dict[str, str] | None = None
    ) -> None:
        self._logger.warning(
            "telemetry error %s: %s %s", type(error).__name__, error, properties or {}
        )


class OpenTelemetryTelemetry(LoggingTelemetry):
    """Adds events to the current OpenTelemetry span, then logs them.

    Events emitted outside a recording span are only logged. The current
    trace id, when present, is attached to the logged properties.
    """

    def track_event(self, name: str, properties: dict[str, str] | None = None) -> None:
        props = dict(properties or {})
        add_span_event(name, props)
        trace_id = get_trace_id()
        if trace_id:
            props["trace_id"] = trace_id
        super().track_event(name, props)

    def track_error(
        self, error: Exception, properties: dict[str, str] | None = None
    ) -> None:
        set_span_error(error)
        super().track_error(error, properties)
