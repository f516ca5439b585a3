"""Central OTel setup: TracerProvider, httpx and FastAPI instrumentation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from dataspace_core.settings import OTelSettings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | None = None


def init_telemetry(service_name: str | None = None, settings: OTelSettings | None = None) -> None:
    """Initialize OpenTelemetry tracing with an OTLP gRPC exporter.

    Call once at application startup. Subsequent calls are no-ops.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return

    settings = settings or OTelSettings()
    if not settings.enabled:
        logger.info("OTel telemetry disabled via OTEL_ENABLED=false")
        return

    name = service_name or settings.service_name
    resource = Resource.create({SERVICE_NAME: name})

    _tracer_provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=settings.exporter_otlp_endpoint, insecure=True)
    _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(_tracer_provider)

    HTTPXClientInstrumentor().instrument()

    logger.info("OTel telemetry initialized for '%s' → %s", name, settings.exporter_otlp_endpoint)


def shutdown_telemetry() -> None:
    """Flush and shut down the tracer provider."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
        logger.info("OTel telemetry shut down")


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument a FastAPI app with OpenTelemetry tracing."""
    FastAPIInstrumentor.instrument_app(app)
