"""OpenTelemetry setup: tracer provider, span exporter, and instrumentation.

Built from Settings in the lifespan when TELEMETRY_ENABLED is set and kept
on app.state.telemetry for shutdown. Exporters: "console" (development),
"otlp" (gRPC collector such as Jaeger on :4317), or "none".
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from tokengate.core.config import Settings

logger = logging.getLogger(__name__)

# Health checks, and the verification links whose query string is a one-time secret.
EXCLUDED_URLS = "/api/v1/health,/verify,/api/v1/verify"


def build_exporter(exporter_type: str, otlp_endpoint: str | None = None) -> SpanExporter | None:
    """Return the span exporter for exporter_type; None for "none"."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER=otlp without TELEMETRY_OTLP_ENDPOINT; using console")
    elif exporter_type != "console":
        logger.warning("Unknown exporter type %r; using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Owns the tracer provider and instrumentation for one application lifetime."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.resource = Resource(
            attributes={
                SERVICE_NAME: service_name,
                SERVICE_VERSION: service_version,
                "deployment.environment": environment,
            }
        )
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(settings.app_name, settings.app_version, settings.telemetry_environment)

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider:
        """Create the tracer provider and register it globally."""
        provider = TracerProvider(resource=self.resource, sampler=TraceIdRatioBased(sample_rate))
        exporter = build_exporter(exporter_type, otlp_endpoint)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider
        logger.info("OpenTelemetry initialized (exporter=%s, sample_rate=%s)", exporter_type, sample_rate)
        return provider

    def instrument(self, app: FastAPI) -> None:
        """Server spans for app, client spans for Supabase calls, trace ids on log records."""
        if self.tracer_provider is None:
            return
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.tracer_provider, excluded_urls=EXCLUDED_URLS
        )
        HTTPXClientInstrumentor().instrument(tracer_provider=self.tracer_provider)
        LoggingInstrumentor().instrument(
            tracer_provider=self.tracer_provider, set_logging_format=True
        )

    def shutdown(self) -> None:
        """Flush pending spans and remove the client and logging instrumentation."""
        if self.tracer_provider is None:
            return
        HTTPXClientInstrumentor().uninstrument()
        LoggingInstrumentor().uninstrument()
        self.tracer_provider.shutdown()
        self.tracer_provider = None
        logger.info("Telemetry shut down")
