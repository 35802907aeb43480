"""Tests for LLM client module."""

import json
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from goclaw.core.config import ZhipuConfig
from goclaw.core.exceptions import ApiError, DecodeError, LLMError
from goclaw.core.llm import (
    ChatRequest,
    ChatResponse,
    LLMClient,
    ToolCall,
    assistant_message,
    tool_message,
    user_message,
)

REQUEST = httpx.Request("POST", "https://open.bigmodel.cn/api/paas/v4/chat/completions")


def _raw_response(body: str) -> MagicMock:
    raw = MagicMock()
    raw.http_response.text = body
    return raw


@pytest.fixture
def client():
    """LLMClient whose SDK call is replaced by a mock."""
    llm = LLMClient(ZhipuConfig(api_key="test-key", model="glm-4-flash", temperature=0.5, max_tokens=256))
    llm.client = MagicMock()
    return llm


def _create(client: LLMClient) -> MagicMock:
    return client.client.chat.completions.with_raw_response.create


class TestToolCall:
    """Tests for ToolCall parsing."""

    def test_from_dict(self):
        """Test parsing a wire tool call."""
        call = ToolCall.from_dict({
            "id": "call_1",
            "type": "function",
            "function": {"name": "read_file", "arguments": '{"path": "a"}'},
        })
        assert call == ToolCall("call_1", "read_file", '{"path": "a"}')

    def test_object_arguments_are_reencoded(self):
        """Test providers sending an object instead of a string."""
        call = ToolCall.from_dict({"id": "c", "function": {"name": "x", "arguments": {"k": 1}}})
        assert json.loads(call.arguments) == {"k": 1}

    def test_missing_arguments_default_to_empty_object(self):
        """Test absent arguments become '{}'."""
        call = ToolCall.from_dict({"id": "c", "function": {"name": "list_dir"}})
        assert call.arguments == "{}"

    def test_to_dict(self):
        """Test wire shape."""
        assert ToolCall("c", "n", "{}").to_dict() == {
            "id": "c",
            "type": "function",
            "function": {"name": "n", "arguments": "{}"},
        }


class TestMessageBuilders:
    """Tests for transient message helpers."""

    def test_assistant_without_tool_calls(self):
        """Test tool_calls key is omitted when empty."""
        assert assistant_message("hi") == {"role": "assistant", "content": "hi"}

    def test_assistant_with_tool_calls(self):
        """Test tool calls are serialized."""
        message = assistant_message("", [ToolCall("c", "n", "{}")])
        assert message["tool_calls"][0]["id"] == "c"

    def test_tool_message(self):
        """Test tool result carries the call id."""
        assert tool_message("X", "call_1") == {"role": "tool", "content": "X", "tool_call_id": "call_1"}


class TestChatRequest:
    """Tests for request payload building."""

    def test_payload_omits_empty_tools(self):
        """Test tools are omitted when none are offered."""
        payload = ChatRequest(messages=[user_message("hi")], model="m").to_payload()
        assert "tools" not in payload
        assert "temperature" not in payload

    def test_payload_includes_tools(self):
        """Test tools and sampling fields are included when set."""
        tools = [{"type": "function", "function": {"name": "x"}}]
        payload = ChatRequest(
            messages=[], tools=tools, model="m", temperature=0.1, max_tokens=10
        ).to_payload()
        assert payload["tools"] == tools
        assert payload["temperature"] == 0.1
        assert payload["max_tokens"] == 10


class TestChatResponse:
    """Tests for response parsing and helpers."""

    def test_content_and_no_tool_calls(self, make_response):
        """Test plain answer."""
        response = make_response("hi")
        assert response.content() == "hi"
        assert response.has_tool_calls() is False
        assert response.tool_calls() == []
        assert response.finish_reason == "stop"

    def test_tool_calls_in_order(self, make_response):
        """Test tool calls keep model order."""
        response = make_response(tool_calls=[("a", "list_dir", {}), ("b", "read_file", {"path": "x"})])
        assert response.has_tool_calls() is True
        assert [tc.id for tc in response.tool_calls()] == ["a", "b"]

    def test_null_content(self):
        """Test null content reads as empty string."""
        response = ChatResponse.from_dict({"choices": [{"message": {"role": "assistant", "content": None}}]})
        assert response.content() == ""

    def test_only_first_choice_consulted(self):
        """Test additional choices are ignored."""
        response = ChatResponse.from_dict({
            "choices": [
                {"message": {"content": "first"}},
                {"message": {"content": "second", "tool_calls": [{"id": "x", "function": {"name": "n"}}]}},
            ]
        })
        assert response.content() == "first"
        assert response.has_tool_calls() is False

    def test_no_choices(self):
        """Test empty choices list."""
        response = ChatResponse.from_dict({"choices": []})
        assert response.content() == ""
        assert response.finish_reason is None

    def test_non_object_raises(self):
        """Test non-object payload is a DecodeError."""
        with pytest.raises(DecodeError):
            ChatResponse.from_dict([1, 2])

    def test_bad_choices_raises(self):
        """Test wrongly shaped choices raise DecodeError."""
        with pytest.raises(DecodeError):
            ChatResponse.from_dict({"choices": "nope"})

    @pytest.mark.parametrize("tool_calls", [
        ["read_file"],
        [{"id": "c1", "function": "read_file"}],
        [{"id": "c1"}],
        [{"id": "c1", "function": {"arguments": "{}"}}],
        [{"id": "c1", "function": {"name": 7}}],
        [{"id": "c1", "function": {"name": "read_file", "arguments": 42}}],
    ])
    def test_malformed_tool_call_raises(self, tool_calls):
        """Test tool call entries that are not usable objects raise DecodeError."""
        with pytest.raises(DecodeError):
            ChatResponse.from_dict({"choices": [{"message": {"content": "", "tool_calls": tool_calls}}]})

    def test_non_string_content_raises(self):
        """Test non-string content is a DecodeError."""
        with pytest.raises(DecodeError):
            ChatResponse.from_dict({"choices": [{"message": {"content": {"text": "hi"}}}]})

    def test_object_arguments_encoded(self):
        """Test arguments sent as an object are re-encoded as JSON."""
        response = ChatResponse.from_dict({"choices": [{"message": {"tool_calls": [
            {"id": "c1", "function": {"name": "read_file", "arguments": {"path": "a"}}}
        ]}}]})
        assert json.loads(response.tool_calls()[0].arguments) == {"path": "a"}


class TestLLMClient:
    """Tests for LLMClient.chat."""

    def test_fills_defaults_from_config(self, client):
        """Test unset model, temperature and max_tokens come from config."""
        _create(client).return_value = _raw_response(
            json.dumps({"choices": [{"message": {"content": "ok"}}]})
        )

        response = client.chat(ChatRequest(messages=[user_message("hi")]))

        assert response.content() == "ok"
        kwargs = _create(client).call_args.kwargs
        assert kwargs["model"] == "glm-4-flash"
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 256
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert "tools" not in kwargs

    def test_request_overrides_kept(self, client):
        """Test explicit request fields win over config."""
        _create(client).return_value = _raw_response('{"choices": []}')
        client.chat(ChatRequest(messages=[], model="glm-4-plus", temperature=0.0))
        kwargs = _create(client).call_args.kwargs
        assert kwargs["model"] == "glm-4-plus"
        assert kwargs["temperature"] == 0.0

    def test_tools_sent(self, client):
        """Test tool definitions are forwarded."""
        tools = [{"type": "function", "function": {"name": "read_file", "parameters": {}}}]
        _create(client).return_value = _raw_response('{"choices": []}')
        client.chat(ChatRequest(messages=[], tools=tools))
        assert _create(client).call_args.kwargs["tools"] == tools

    def test_status_error_becomes_api_error(self, client):
        """Test non-2xx responses raise ApiError with status and body."""
        response = httpx.Response(401, text='{"error": "bad key"}', request=REQUEST)
        _create(client).side_effect = openai.APIStatusError(
            "Unauthorized", response=response, body=None
        )

        with pytest.raises(ApiError) as exc_info:
            client.chat(ChatRequest(messages=[]))

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == '{"error": "bad key"}'

    def test_connection_error_becomes_llm_error(self, client):
        """Test transport failures raise LLMError."""
        _create(client).side_effect = openai.APIConnectionError(request=REQUEST)

        with pytest.raises(LLMError) as exc_info:
            client.chat(ChatRequest(messages=[]))

        assert not isinstance(exc_info.value, ApiError)

    def test_malformed_json_raises_decode_error(self, client):
        """Test an unparseable body raises DecodeError."""
        _create(client).return_value = _raw_response("<html>oops</html>")

        with pytest.raises(DecodeError):
            client.chat(ChatRequest(messages=[]))

    def test_malformed_tool_call_body_raises_decode_error(self, client):
        """Test a tool call whose function is not an object raises DecodeError."""
        _create(client).return_value = _raw_response(json.dumps({"choices": [{"message": {
            "content": "", "tool_calls": [{"id": "c1", "function": "read_file"}],
        }}]}))

        with pytest.raises(DecodeError):
            client.chat(ChatRequest(messages=[]))

    def test_sdk_built_without_retries(self):
        """Test the SDK client does not retry on its own."""
        llm = LLMClient(ZhipuConfig(api_key="k"))
        assert llm.client.max_retries == 0
        assert str(llm.client.base_url).startswith("https://open.bigmodel.cn/api/paas/v4")
