"""Tests for decorator-based instrumentation with OTel spans."""

from unittest.mock import patch

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from goclaw.core.llm import ChatResponse
from goclaw.observability.decorators import traced_agent, traced_llm_client, traced_tool


@pytest.fixture
def exporter():
    """Route decorator spans to an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    with patch(
        "goclaw.observability.decorators.get_tracer",
        return_value=provider.get_tracer("test"),
    ):
        yield exporter
    provider.shutdown()


class NamedTool:
    name = "read_file"

    @traced_tool()
    def execute(self, args):
        return f"read {args['path']}"


class TestTracedTool:
    """Tests for @traced_tool decorator."""

    def test_returns_result(self, exporter):
        """Test decorated function returns its result unchanged."""

        @traced_tool(name="add_tool")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_span_named_after_instance(self, exporter):
        """Test self.name wins over the function name."""
        NamedTool().execute({"path": "a"})
        spans = exporter.get_finished_spans()
        assert [s.name for s in spans] == ["tool.read_file"]
        assert spans[0].attributes["component.type"] == "tool"
        assert spans[0].status.status_code == StatusCode.OK

    def test_exception_recorded_and_reraised(self, exporter):
        """Test failures mark the span and propagate."""

        @traced_tool(name="broken")
        def broken():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            broken()

        span = exporter.get_finished_spans()[0]
        assert span.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)


class TestTracedAgent:
    """Tests for @traced_agent decorator."""

    def test_tool_span_nests_under_agent(self, exporter):
        """Test parent-child relationship via OTel context."""

        class Agent:
            name = "goclaw"

            @traced_agent()
            def chat(self, text):
                return NamedTool().execute({"path": text})

        Agent().chat("x")

        spans = {s.name: s for s in exporter.get_finished_spans()}
        assert spans["tool.read_file"].parent.span_id == spans["agent.goclaw"].context.span_id


class TestTracedLLMClient:
    """Tests for @traced_llm_client decorator."""

    def test_usage_attributes(self, exporter):
        """Test token usage and model are recorded."""

        class Client:
            @traced_llm_client(provider="zhipu")
            def chat(self, request):
                return ChatResponse.from_dict({
                    "model": "glm-4-flash",
                    "choices": [{"message": {"content": "hi"}, "finish_reason": "stop"}],
                    "usage": {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7},
                })

        Client().chat(None)

        span = exporter.get_finished_spans()[0]
        assert span.name == "llm.zhipu"
        assert span.attributes["llm.usage.total_tokens"] == 7
        assert span.attributes["llm.model"] == "glm-4-flash"
        assert span.attributes["llm.finish_reason"] == "stop"
