"""Agent loop and workspace context loading."""

from .agent import Agent, TurnState
from .context import CONTEXT_FILES, ContextFile, ContextLoader, build_context_prompt

__all__ = [
    "CONTEXT_FILES",
    "Agent",
    "ContextFile",
    "ContextLoader",
    "TurnState",
    "build_context_prompt",
]
