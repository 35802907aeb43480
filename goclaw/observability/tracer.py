"""OpenTelemetry tracer setup.

Spans are only exported when an OTLP endpoint is configured; otherwise
the API's default no-op provider stays in place and decorators cost
next to nothing.
"""

import logging

from opentelemetry import trace

logger = logging.getLogger(__name__)

TRACER_NAME = "goclaw"

_provider = None


def init_tracer(endpoint: str, service_name: str, insecure: bool = True) -> None:
    """Install an SDK tracer provider exporting to an OTLP gRPC collector."""
    global _provider

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.resources import SERVICE_NAME, Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
    )
    trace.set_tracer_provider(provider)
    _provider = provider
    logger.debug(f"Tracing enabled, exporting to {endpoint}")


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)


def shutdown_tracer() -> None:
    """Flush and stop the SDK provider, if one was installed."""
    global _provider

    if _provider is not None:
        _provider.shutdown()
        _provider = None
