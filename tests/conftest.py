"""Shared test fixtures for all tests."""

import json
from unittest.mock import MagicMock

import pytest

from goclaw.agents.context import ContextLoader
from goclaw.core.config import AgentConfig
from goclaw.core.llm import ChatResponse, LLMClient
from goclaw.repositories.inmemory import InMemoryMessageRepository
from goclaw.services.memory_store import MemoryStore
from goclaw.tools import create_default_registry


@pytest.fixture
def message_repository():
    """Create a fresh InMemoryMessageRepository for testing."""
    return InMemoryMessageRepository()


@pytest.fixture
def memory_store(message_repository):
    """Create a MemoryStore over the in-memory repository."""
    return MemoryStore(repository=message_repository, session_id="test-session")


@pytest.fixture
def sqlite_store(tmp_path):
    """Create a SQLite-backed MemoryStore in a temp directory."""
    store = MemoryStore.open(tmp_path / "data" / "goclaw.db", session_id="test-session")
    yield store
    store.close()


@pytest.fixture
def workspace(tmp_path):
    """Create an empty workspace directory."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def make_response():
    """Factory for ChatResponse objects in chat-completions shape."""

    def _make(content="", tool_calls=None, usage=None):
        message = {"role": "assistant", "content": content}
        if tool_calls:
            message["tool_calls"] = [
                {
                    "id": call_id,
                    "type": "function",
                    "function": {"name": name, "arguments": json.dumps(args)},
                }
                for call_id, name, args in tool_calls
            ]
        return ChatResponse.from_dict({
            "id": "chatcmpl-test",
            "model": "glm-4-flash",
            "choices": [{
                "index": 0,
                "message": message,
                "finish_reason": "tool_calls" if tool_calls else "stop",
            }],
            "usage": usage or {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        })

    return _make


@pytest.fixture
def mock_llm():
    """LLMClient stand-in; set chat.side_effect to script responses."""
    return MagicMock(spec=LLMClient)


@pytest.fixture
def make_agent(memory_store, workspace, mock_llm):
    """Factory for an Agent wired to the in-memory store and mock client."""
    from goclaw.agents.agent import Agent

    def _make(max_history=50, max_tool_rounds=16, registry=None):
        return Agent(
            llm=mock_llm,
            store=memory_store,
            registry=registry or create_default_registry(workspace, memory_store),
            context_loader=ContextLoader(workspace),
            config=AgentConfig(max_history=max_history, max_tool_rounds=max_tool_rounds),
        )

    return _make
