"""Agent loop: one user turn through the model and its tool calls.

This module uses the observability decorators for automatic tracing.
The @traced_agent decorator wraps each turn in an `agent.goclaw` span;
model calls and tool executions nest beneath it.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from ..core.config import AgentConfig
from ..core.exceptions import ToolError, TurnBudgetExceeded
from ..core.llm import (
    ChatRequest,
    ChatResponse,
    LLMClient,
    ToolCall,
    assistant_message,
    system_message,
    tool_message,
)
from ..observability.decorators import traced_agent
from ..observability.serializers import preview
from ..prompts.template_renderer import render_template
from ..services.conversation_export import export_conversation
from ..services.memory_store import MemoryStore
from ..tools.registry import ToolRegistry
from .context import ContextLoader, build_context_prompt

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    """Lifecycle of a single user turn."""
    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    TOOLS_PENDING = "tools_pending"
    DONE = "done"
    FAILED = "failed"


class Agent:
    """Conversational agent with tool support.

    Each turn persists the user message, replays the most recent history
    under a freshly built system prompt, lets the model call tools until
    it answers in prose, then persists that answer. Intermediate
    tool-call and tool-result messages live only for the turn.
    """

    name: str = "goclaw"

    def __init__(
        self,
        llm: LLMClient,
        store: MemoryStore,
        registry: ToolRegistry,
        context_loader: ContextLoader,
        config: AgentConfig | None = None,
    ):
        """Initialize the agent.

        Args:
            llm: Completion client
            store: Persisted conversation history
            registry: Tools offered to the model
            context_loader: Source of workspace identity and memory files
            config: History and tool-round limits
        """
        config = config or AgentConfig()
        self.llm = llm
        self.store = store
        self.registry = registry
        self.context_loader = context_loader
        self.max_history = config.max_history
        self.max_tool_rounds = config.max_tool_rounds
        self.state = TurnState.IDLE

    @property
    def workspace_dir(self) -> Path:
        return self.context_loader.workspace_dir

    def build_system_prompt(self) -> str:
        """Render the base prompt and append the workspace context fragment."""
        base = render_template("system_prompt.md.j2", tools=self.registry.list()).strip()
        context = build_context_prompt(self.context_loader.load())
        if context:
            return f"{base}\n\n{context}"
        return base

    @traced_agent()
    def chat(self, user_text: str) -> str:
        """Run one turn and return the model's final reply.

        Raises:
            StorageError: If history cannot be read or written
            LLMError: If a model call fails
            TurnBudgetExceeded: If the model keeps calling tools past the limit
        """
        self.state = TurnState.IDLE
        try:
            reply = self._run_turn(user_text)
        except Exception:
            self.state = TurnState.FAILED
            raise
        self.state = TurnState.DONE
        return reply

    def _run_turn(self, user_text: str) -> str:
        self.store.append("user", user_text)

        messages: list[dict[str, Any]] = [system_message(self.build_system_prompt())]
        messages.extend(self.store.to_provider_format(self.max_history))
        tools = self.registry.as_model_tools()

        response = self._request(messages, tools)
        rounds = 0
        while response.has_tool_calls():
            if rounds >= self.max_tool_rounds:
                raise TurnBudgetExceeded(rounds)
            rounds += 1
            self.state = TurnState.TOOLS_PENDING

            tool_calls = response.tool_calls()
            logger.info(f"Tool round {rounds}: {len(tool_calls)} call(s)")
            messages.append(assistant_message(response.content(), tool_calls))
            for tool_call in tool_calls:
                messages.append(tool_message(self._execute_tool(tool_call), tool_call.id))

            response = self._request(messages, tools)

        reply = response.content()
        if not reply:
            logger.warning(f"Model finished the turn with an empty reply after {rounds} tool round(s)")
        self.store.append("assistant", reply)
        logger.info(f"Turn complete after {rounds} tool round(s)")
        return reply

    def _request(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None
    ) -> ChatResponse:
        self.state = TurnState.AWAITING_MODEL
        # Snapshot: the turn keeps appending to `messages`
        return self.llm.chat(ChatRequest(messages=list(messages), tools=tools))

    def _execute_tool(self, tool_call: ToolCall) -> str:
        """Run one tool call; failures become an error string for the model."""
        logger.info(f"Executing tool: {tool_call.name} args={preview(tool_call.arguments, 200)}")
        try:
            result = self.registry.execute_call(tool_call.name, tool_call.arguments)
        except ToolError as e:
            logger.warning(f"Tool {tool_call.name} failed: {e}")
            return f"Error: {e}"
        logger.debug(f"Tool {tool_call.name} result: {preview(result, 300)}")
        return result

    def chat_simple(self, user_text: str) -> str:
        """Plain chat: history only, no system prompt and no tools."""
        self.store.append("user", user_text)
        messages = self.store.to_provider_format(self.max_history)
        response = self.llm.chat(ChatRequest(messages=list(messages)))
        reply = response.content()
        self.store.append("assistant", reply)
        return reply

    def clear_history(self) -> int:
        return self.store.clear()

    def save_conversation(self, title: str | None = None) -> Path:
        """Export the persisted conversation to memory/conversations/."""
        return export_conversation(self.store, self.workspace_dir, title)
