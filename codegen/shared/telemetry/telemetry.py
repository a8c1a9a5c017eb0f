"""OpenTelemetry tracing setup for the code generation service.

Exporters: console (development), OTLP gRPC, Jaeger via its OTLP port, or
none (spans are created but dropped). Instrumentation covers FastAPI
requests, SQLAlchemy statements (counter row locks and updates) and log
records (trace_id/span_id injected).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

if TYPE_CHECKING:
    from codegen.core.config import Settings

logger = logging.getLogger(__name__)

# Jaeger accepts OTLP over gRPC on this port.
JAEGER_OTLP_PORT = 4317


def _build_exporter(
    exporter_type: str, otlp_endpoint: str | None, jaeger_endpoint: str | None
) -> SpanExporter | None:
    """Return the span exporter for exporter_type, or None for "none"."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp" and otlp_endpoint:
        logger.info("Using OTLP span exporter: %s", otlp_endpoint)
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if exporter_type == "jaeger" and jaeger_endpoint:
        endpoint = f"{jaeger_endpoint}:{JAEGER_OTLP_PORT}"
        logger.info("Using OTLP span exporter for Jaeger: %s", endpoint)
        return OTLPSpanExporter(endpoint=endpoint, insecure=True)
    if exporter_type != "console":
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Owns the tracer provider and the instrumentations attached to it."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        """Build and initialize telemetry from settings (tracer provider set globally)."""
        telemetry = cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )
        telemetry.setup(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            jaeger_endpoint=settings.telemetry_jaeger_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        return telemetry

    @property
    def active(self) -> bool:
        return self.tracer_provider is not None

    def setup(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        jaeger_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Create the tracer provider and register it as the global provider.

        Args:
            exporter_type: "console", "otlp", "jaeger", or "none".
            otlp_endpoint: OTLP gRPC endpoint (e.g. http://localhost:4317).
            jaeger_endpoint: Jaeger host; OTLP gRPC port is appended.
            sample_rate: Sampling ratio 0.0-1.0.

        Returns:
            TracerProvider, or None if setup failed (tracing stays a no-op).
        """
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
            exporter = _build_exporter(exporter_type, otlp_endpoint, jaeger_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s, version=%s, exporter=%s",
            self.service_name,
            self.service_version,
            exporter_type,
        )
        return provider

    def instrument_fastapi(self, app: FastAPI) -> None:
        """Trace HTTP requests (health checks excluded)."""
        if not self.active:
            return
        FastAPIInstrumentor.instrument_app(
            app,
            tracer_provider=self.tracer_provider,
            excluded_urls="/api/v1/health",
        )
        logger.info("FastAPI instrumentation enabled")

    def instrument_sqlalchemy(self, engine: AsyncEngine) -> None:
        """Trace SQL statements issued through engine."""
        if not self.active:
            return
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine,
            tracer_provider=self.tracer_provider,
        )
        logger.info("SQLAlchemy instrumentation enabled")

    def instrument_logging(self) -> None:
        """Inject trace context (otelTraceID, otelSpanID) into log records."""
        if not self.active:
            return
        LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider)
        logger.info("Logging instrumentation enabled")

    def shutdown(self) -> None:
        """Flush remaining spans and shut the provider down."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        else:
            logger.info("Telemetry shutdown complete")
        self.tracer_provider = None
