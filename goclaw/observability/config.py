"""Configuration for the observability system."""

import os
from dataclasses import dataclass

from .tracer import init_tracer, shutdown_tracer


@dataclass
class ObservabilityConfig:
    """Configuration for span export.

    Attributes:
        service_name: Service name for trace identification
        otel_endpoint: OTel Collector endpoint (host:port); None disables export
        otel_insecure: Whether to use insecure connection to collector
    """
    service_name: str = "goclaw"
    otel_endpoint: str | None = None
    otel_insecure: bool = True

    @classmethod
    def from_env(cls) -> "ObservabilityConfig":
        """Load from environment variables.

        Environment Variables:
            SERVICE_NAME: Service name for traces
            OTEL_ENDPOINT: OTel Collector endpoint (unset = no export)
            OTEL_INSECURE: Use insecure connection (default: true)
        """
        return cls(
            service_name=os.environ.get("SERVICE_NAME", "goclaw"),
            otel_endpoint=os.environ.get("OTEL_ENDPOINT") or None,
            otel_insecure=os.environ.get("OTEL_INSECURE", "true").lower() == "true",
        )


_initialized = False


def initialize_observability(config: ObservabilityConfig | None = None) -> None:
    """Initialize span export when an endpoint is configured."""
    global _initialized

    if config is None:
        config = ObservabilityConfig.from_env()

    if config.otel_endpoint:
        init_tracer(
            endpoint=config.otel_endpoint,
            service_name=config.service_name,
            insecure=config.otel_insecure,
        )
    _initialized = True


def is_initialized() -> bool:
    """Check if observability is initialized."""
    return _initialized


def shutdown() -> None:
    """Flush pending spans and reset state."""
    global _initialized

    shutdown_tracer()
    _initialized = False
