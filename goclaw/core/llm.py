"""OpenAI-compatible chat-completions client for the Zhipu endpoint.

This module provides:
- ChatRequest / ChatResponse / ToolCall: the wire shapes the agent loop uses
- Message builders for the transient in-turn messages
- LLMClient: POSTs requests to <base_url>/chat/completions

The @traced_llm_client decorator handles call instrumentation.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import openai
from openai import OpenAI

from ..observability.decorators import traced_llm_client
from .config import ZhipuConfig
from .exceptions import ApiError, DecodeError, LLMError

logger = logging.getLogger(__name__)

PROVIDER = "zhipu"


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model.

    Attributes:
        id: Model-supplied id, echoed on the tool-result message
        name: Registered tool name
        arguments: JSON-encoded argument object, exactly as sent by the model
    """
    id: str
    name: str
    arguments: str = "{}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCall":
        function = data.get("function") or {}
        arguments = function.get("arguments")
        if arguments is None:
            arguments = "{}"
        elif not isinstance(arguments, str):
            # Some providers send the object itself instead of a JSON string
            arguments = json.dumps(arguments, ensure_ascii=False)
        return cls(
            id=str(data.get("id") or ""),
            name=str(function.get("name") or ""),
            arguments=arguments,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


def _check_tool_call(data: Any) -> None:
    """Raise DecodeError unless `data` can be turned into a ToolCall."""
    if not isinstance(data, dict):
        raise DecodeError("each tool call must be an object")
    function = data.get("function")
    if not isinstance(function, dict):
        raise DecodeError("tool call 'function' must be an object")
    name = function.get("name")
    if not isinstance(name, str) or not name:
        raise DecodeError("tool call 'function.name' must be a non-empty string")
    arguments = function.get("arguments")
    if arguments is not None and not isinstance(arguments, (str, dict)):
        raise DecodeError("tool call 'function.arguments' must be a string or object")


def system_message(content: str) -> dict[str, Any]:
    return {"role": "system", "content": content}


def user_message(content: str) -> dict[str, Any]:
    return {"role": "user", "content": content}


def assistant_message(content: str, tool_calls: list[ToolCall] | None = None) -> dict[str, Any]:
    """Build an assistant message, carrying tool calls when present."""
    message: dict[str, Any] = {"role": "assistant", "content": content or ""}
    if tool_calls:
        message["tool_calls"] = [tc.to_dict() for tc in tool_calls]
    return message


def tool_message(content: str, tool_call_id: str) -> dict[str, Any]:
    return {"role": "tool", "content": content, "tool_call_id": tool_call_id}


@dataclass
class ChatRequest:
    """Chat-completions request.

    Unset model, temperature and max_tokens are filled in by the client
    from configuration.
    """
    messages: list[dict[str, Any]]
    tools: list[dict[str, Any]] | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": self.messages,
        }
        if self.tools:
            payload["tools"] = self.tools
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        return payload


@dataclass
class ChatResponse:
    """Parsed chat-completions response.

    Only the first choice is consulted by the helpers; additional
    choices are kept but ignored.
    """
    choices: list[dict[str, Any]] = field(default_factory=list)
    usage: dict[str, Any] = field(default_factory=dict)
    model: str | None = None
    id: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ChatResponse":
        """Build a response from decoded JSON.

        Raises:
            DecodeError: If the payload does not have the chat-completions shape
        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        choices = data.get("choices") or []
        if not isinstance(choices, list) or not all(isinstance(c, dict) for c in choices):
            raise DecodeError("'choices' must be a list of objects")

        for choice in choices:
            message = choice.get("message")
            if message is not None and not isinstance(message, dict):
                raise DecodeError("'message' must be an object")
            message = message or {}
            content = message.get("content")
            if content is not None and not isinstance(content, str):
                raise DecodeError("'content' must be a string")
            tool_calls = message.get("tool_calls")
            if tool_calls is not None and not isinstance(tool_calls, list):
                raise DecodeError("'tool_calls' must be a list")
            for tool_call in tool_calls or []:
                _check_tool_call(tool_call)

        usage = data.get("usage")
        return cls(
            choices=choices,
            usage=usage if isinstance(usage, dict) else {},
            model=data.get("model"),
            id=data.get("id"),
        )

    def _first_message(self) -> dict[str, Any]:
        if not self.choices:
            return {}
        return self.choices[0].get("message") or {}

    def has_tool_calls(self) -> bool:
        """True iff the first choice's message carries at least one tool call."""
        return bool(self._first_message().get("tool_calls"))

    def content(self) -> str:
        """First choice's message content, empty string when absent."""
        return self._first_message().get("content") or ""

    def tool_calls(self) -> list[ToolCall]:
        """First choice's tool calls, in model order."""
        return [ToolCall.from_dict(tc) for tc in self._first_message().get("tool_calls") or []]

    @property
    def finish_reason(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].get("finish_reason")


class LLMClient:
    """Client for an OpenAI-compatible chat-completions endpoint.

    Requests go to <base_url>/chat/completions with a bearer token.
    Failures are not retried; the caller decides what to do with them.

    Args:
        config: Endpoint, credentials and default sampling parameters
        component_name: Optional name for logging/tracing

    Example:
        client = LLMClient(app_config.zhipu)
        response = client.chat(ChatRequest(messages=[user_message("hi")]))
        print(response.content())
    """

    def __init__(self, config: ZhipuConfig, component_name: str | None = None):
        self.config = config
        self.component_name = component_name
        self.model = config.model
        self.client = OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            max_retries=0,
        )

    @traced_llm_client(provider=PROVIDER)
    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a chat completion request.

        Args:
            request: Messages, optional tools and optional overrides

        Returns:
            Parsed ChatResponse

        Raises:
            ApiError: Non-2xx response
            DecodeError: Response body is not a chat-completions JSON object
            LLMError: Connection failure or timeout
        """
        if request.model is None:
            request.model = self.config.model
        if request.temperature is None:
            request.temperature = self.config.temperature
        if request.max_tokens is None:
            request.max_tokens = self.config.max_tokens

        payload = request.to_payload()
        logger.debug(
            f"POST chat/completions model={request.model} "
            f"messages={len(request.messages)} tools={len(request.tools or [])}"
        )

        try:
            raw = self.client.chat.completions.with_raw_response.create(**payload)
        except openai.APIStatusError as e:
            raise ApiError(e.status_code, e.response.text, provider=PROVIDER) from e
        except openai.APIResponseValidationError as e:
            raise DecodeError(str(e), provider=PROVIDER) from e
        except openai.APIError as e:
            raise LLMError(str(e), provider=PROVIDER) from e

        body = raw.http_response.text
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"{e}: {body[:200]}", provider=PROVIDER) from e

        response = ChatResponse.from_dict(data)
        if response.usage:
            logger.debug(f"Token usage: {response.usage}")
        return response
