"""Decorator-based instrumentation using native OTel spans.

Decorators create proper parent-child span relationships via OTel context,
so a tool span nests under the LLM round-trip's agent turn.

Usage:
    @traced_tool()
    def execute(self, args: dict) -> str:
        ...  # span named tool.<self.name>

    @traced_llm_client(provider="zhipu")
    def chat(self, request: ChatRequest) -> ChatResponse:
        ...
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry.trace import SpanKind, Status, StatusCode

from .serializers import preview
from .tracer import get_tracer

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _get_effective_name(provided_name: str | None, args: tuple, func: Callable) -> str:
    """Get effective component name, checking self.name for methods.

    Priority:
    1. If self.name exists (for class methods), use it
    2. If provided_name is given, use it
    3. Fall back to function name
    """
    if args and hasattr(args[0], "name"):
        instance_name = getattr(args[0], "name", None)
        if isinstance(instance_name, str) and instance_name:
            return instance_name

    return provided_name or func.__name__


def traced_tool(name: str | None = None) -> Callable[[F], F]:
    """Decorator for tool execute methods.

    Creates a child span under the current active span, logs a preview of
    the arguments and result, and records exceptions before re-raising.

    Args:
        name: Tool name for identification. If None, uses self.name from the
              instance or the function name as fallback.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            effective_name = _get_effective_name(name, args, func)
            return _execute_with_tracing(func, effective_name, "tool", args, kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def traced_agent(name: str | None = None) -> Callable[[F], F]:
    """Decorator for agent turn methods.

    If called without an active parent span, this becomes the root span
    of the turn; model calls and tool executions nest beneath it.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            effective_name = _get_effective_name(name, args, func)
            return _execute_with_tracing(func, effective_name, "agent", args, kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def traced_llm_client(provider: str) -> Callable[[F], F]:
    """Decorator for LLM client call methods.

    Records model name and token usage as span attributes when the
    response carries them.

    Args:
        provider: LLM provider name (e.g., "zhipu")
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            return _execute_with_tracing(func, provider, "llm", args, kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def _call_arguments(args: tuple, kwargs: dict) -> Any:
    # Skip self for methods
    positional = args[1:] if args and hasattr(args[0], "__dict__") else args
    if kwargs:
        return {"args": list(positional), "kwargs": kwargs}
    return list(positional)


def _extract_llm_metrics(result: Any) -> dict[str, Any]:
    """Pull token usage and model from a ChatResponse-like result."""
    metrics: dict[str, Any] = {}
    usage = getattr(result, "usage", None)
    if isinstance(usage, dict):
        for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
            if isinstance(usage.get(key), int):
                metrics[f"llm.usage.{key}"] = usage[key]
    model = getattr(result, "model", None)
    if isinstance(model, str) and model:
        metrics["llm.model"] = model
    finish_reason = getattr(result, "finish_reason", None)
    if isinstance(finish_reason, str) and finish_reason:
        metrics["llm.finish_reason"] = finish_reason
    return metrics


def _execute_with_tracing(
    func: Callable, name: str, component_type: str, args: tuple, kwargs: dict
) -> Any:
    """Core tracing execution logic."""
    tracer = get_tracer()
    span_name = f"{component_type}.{name}"

    with tracer.start_as_current_span(name=span_name, kind=SpanKind.INTERNAL) as span:
        span.set_attribute("component.type", component_type)
        span.set_attribute("component.name", name)
        if component_type != "llm":
            logger.debug(f"{span_name} start: {preview(_call_arguments(args, kwargs), 200)}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            span.set_attribute("duration_ms", duration_ms)
            logger.debug(f"{span_name} failed after {duration_ms:.0f}ms: {e}")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        span.set_status(Status(StatusCode.OK))
        span.set_attribute("duration_ms", duration_ms)

        if component_type == "llm":
            for key, value in _extract_llm_metrics(result).items():
                span.set_attribute(key, value)

        logger.debug(f"{span_name} completed in {duration_ms:.0f}ms: {preview(result, 300)}")
        return result
