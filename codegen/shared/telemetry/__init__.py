"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from codegen.shared.telemetry.logging import get_logger, setup_logging
from codegen.shared.telemetry.telemetry import TelemetryConfig
from codegen.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    get_trace_id,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "get_trace_id",
]
