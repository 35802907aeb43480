"""Observability module for tracing.

Provides decorator-based instrumentation (@traced_agent, @traced_tool,
@traced_llm_client) that opens OTel spans for each agent turn, model
round-trip and tool execution.

Usage:
    from goclaw.observability import initialize_observability, shutdown

    initialize_observability()  # exports only if OTEL_ENDPOINT is set
    ...
    shutdown()
"""

from .config import (
    ObservabilityConfig,
    initialize_observability,
    is_initialized,
    shutdown,
)
from .decorators import traced_agent, traced_llm_client, traced_tool

__all__ = [
    "ObservabilityConfig",
    "initialize_observability",
    "is_initialized",
    "shutdown",
    "traced_agent",
    "traced_llm_client",
    "traced_tool",
]
