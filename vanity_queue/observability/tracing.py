"""
OpenTelemetry tracing setup.

Spans are always created; they only leave the process when an OTLP
endpoint is configured.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Tracer

from vanity_queue import __version__
from vanity_queue.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Set by setup_tracing; the global provider can only be installed once
_tracer: Tracer | None = None

# Polled endpoints that would drown out useful traces
_EXCLUDED_URLS = "health,live,metrics"


def setup_tracing(settings: Settings | None = None) -> Tracer:
    """
    Install the tracer provider and return the service tracer.

    Later calls reuse the provider from the first one.

    Args:
        settings: Provides the service name and optional OTLP endpoint.
    """
    global _tracer

    if _tracer is not None:
        return _tracer

    settings = settings or get_settings()
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "service.version": __version__,
            }
        )
    )

    endpoint = settings.otel_exporter_otlp_endpoint
    if endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )
        logger.info("Exporting traces", extra={"endpoint": endpoint})

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(settings.otel_service_name)
    return _tracer


def instrument_fastapi(app: FastAPI) -> None:
    """Create a server span for every request except the polled endpoints."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls=_EXCLUDED_URLS)


def get_tracer() -> Tracer:
    """
    Tracer for library code.

    Before setup_tracing runs this is a tracer from the default no-op
    provider, so callers can open spans unconditionally.
    """
    if _tracer is None:
        return trace.get_tracer("vanity_queue")
    return _tracer
