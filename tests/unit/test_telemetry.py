"""Unit tests for telemetry sinks, tracing helpers, and TelemetryConfig."""

import logging
from unittest.mock import patch

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from blobstore.core.config import Settings
from blobstore.shared.telemetry.events import LoggingTelemetry, OpenTelemetryTelemetry
from blobstore.shared.telemetry.logging import setup_logging
from blobstore.shared.telemetry.telemetry import (
    TelemetryConfig,
    build_span_exporter,
    get_telemetry,
    set_telemetry,
    setup_telemetry,
)
from blobstore.shared.telemetry.tracing import traced


def test_logging_telemetry_logs_event(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingTelemetry()
    with caplog.at_level(logging.WARNING):
        sink.track_event("AzureBlobStorage", {"message": "Unable to download blob x"})
    assert "AzureBlobStorage" in caplog.text
    assert "Unable to download blob x" in caplog.text


def test_logging_telemetry_logs_error(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingTelemetry()
    with caplog.at_level(logging.WARNING):
        sink.track_error(RuntimeError("boom"), {"blob_key": "a"})
    assert "RuntimeError" in caplog.text
    assert "boom" in caplog.text


def test_opentelemetry_sink_outside_span_still_logs(caplog: pytest.LogCaptureFixture) -> None:
    sink = OpenTelemetryTelemetry()
    with caplog.at_level(logging.WARNING):
        sink.track_event("AzureBlobStorage", {"message": "partial delete"})
    assert "partial delete" in caplog.text


@pytest.mark.asyncio
async def test_traced_preserves_result_and_errors() -> None:
    @traced("test.op")
    async def op(blob_key: str) -> str:
        if blob_key == "bad":
            raise ValueError("bad key")
        return blob_key.upper()

    assert await op(blob_key="ok") == "OK"
    assert op.__name__ == "op"
    with pytest.raises(ValueError, match="bad key"):
        await op(blob_key="bad")


def test_traced_leaves_sync_functions_alone() -> None:
    def plain() -> int:
        return 1

    assert traced()(plain) is plain


def test_disabled_telemetry_returns_none() -> None:
    config = TelemetryConfig("blobstore", "1.0.0", enabled=False)
    assert config.setup_telemetry() is None
    config.instrument_logging()
    config.shutdown()


def test_setup_telemetry_registers_global() -> None:
    previous = get_telemetry()
    try:
        config = setup_telemetry(Settings(_env_file=None, telemetry_enabled=False))
        assert get_telemetry() is config
        assert config.service_name == "blobstore"
        assert config.tracer_provider is None
    finally:
        set_telemetry(previous)


@pytest.mark.asyncio
async def test_traced_wraps_async_generators() -> None:
    @traced("test.stream")
    async def stream(blob_key: str):
        yield blob_key
        if blob_key == "bad":
            raise ValueError("broken stream")
        yield blob_key.upper()

    assert [chunk async for chunk in stream(blob_key="ok")] == ["ok", "OK"]
    assert stream.__name__ == "stream"
    with pytest.raises(ValueError, match="broken stream"):
        async for _ in stream(blob_key="bad"):
            pass


@pytest.mark.parametrize(
    ("exporter_type", "endpoint", "expected"),
    [
        ("console", None, ConsoleSpanExporter),
        ("otlp", "http://localhost:4317", OTLPSpanExporter),
        ("otlp", None, ConsoleSpanExporter),
        ("zipkin", None, ConsoleSpanExporter),
    ],
)
def test_build_span_exporter(exporter_type: str, endpoint: str | None, expected: type) -> None:
    assert isinstance(build_span_exporter(exporter_type, endpoint), expected)


def test_build_span_exporter_none() -> None:
    assert build_span_exporter("none") is None


@pytest.mark.parametrize(
    ("exporter_type", "expected"),
    [("console", ConsoleSpanExporter), ("none", type(None))],
)
def test_enabled_telemetry_creates_provider(exporter_type: str, expected: type) -> None:
    config = TelemetryConfig("blobstore", "1.0.0", enabled=True, environment="test")
    with patch("opentelemetry.trace.set_tracer_provider") as set_provider:
        provider = config.setup_telemetry(exporter_type=exporter_type, sample_rate=0.5)
    try:
        set_provider.assert_called_once_with(provider)
        assert isinstance(provider, TracerProvider)
        assert config.tracer_provider is provider
        assert isinstance(config.exporter, expected)
        assert provider.resource.attributes["service.name"] == "blobstore"
        assert provider.resource.attributes["deployment.environment"] == "test"
    finally:
        config.shutdown()
    assert config.tracer_provider is None


def test_setup_logging_level_follows_debug() -> None:
    sdk_logger = logging.getLogger("azure.core.pipeline.policies.http_logging_policy")
    previous = sdk_logger.level
    try:
        assert setup_logging(Settings(_env_file=None, debug=True)) == logging.DEBUG
        assert sdk_logger.level == logging.DEBUG
        assert setup_logging(Settings(_env_file=None)) == logging.INFO
        assert sdk_logger.level == logging.WARNING
    finally:
        sdk_logger.setLevel(previous)
