"""Tests for tracing helpers and telemetry configuration (no global provider installed)."""

from fastapi import FastAPI
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
import pytest

from codegen.shared.telemetry import (
    TelemetryConfig,
    add_span_attributes,
    add_span_event,
    get_trace_id,
    traced,
)
from codegen.shared.telemetry.telemetry import _build_exporter


@traced("test.sync")
def _double(value: int) -> int:
    return value * 2


@traced()
async def _fail(code: str) -> None:
    raise ValueError(code)


def test_traced_sync_function_returns_result() -> None:
    assert _double(4) == 8
    assert _double.__name__ == "_double"


async def test_traced_async_function_reraises() -> None:
    with pytest.raises(ValueError, match="X-1"):
        await _fail(code="X-1")


def test_span_helpers_are_noops_outside_a_recording_span() -> None:
    add_span_attributes(**{"codegen.attempts": 1})
    add_span_event("codegen.sequence_conflict", {"attempt": 1})
    assert get_trace_id() is None


def test_build_exporter() -> None:
    assert _build_exporter("none", None, None) is None
    assert isinstance(_build_exporter("console", None, None), ConsoleSpanExporter)
    assert isinstance(_build_exporter("otlp", None, None), ConsoleSpanExporter)
    assert isinstance(_build_exporter("bogus", None, None), ConsoleSpanExporter)
    assert isinstance(
        _build_exporter("otlp", "http://localhost:4317", None), OTLPSpanExporter
    )


def test_inactive_telemetry_does_not_instrument() -> None:
    telemetry = TelemetryConfig("codegen", "1.0.0")
    app = FastAPI()
    telemetry.instrument_fastapi(app)
    telemetry.instrument_logging()
    telemetry.shutdown()
    assert not telemetry.active
    assert app.user_middleware == []
