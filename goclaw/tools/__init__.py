"""Tools package: the tool contract, registry and built-in tools."""

from pathlib import Path
from typing import TYPE_CHECKING

from .base import BaseTool
from .file import ListDirTool, ReadFileTool, WriteFileTool
from .memory import MemoryGetTool, MemorySearchTool, SaveConversationTool, UpdateMemoryTool
from .registry import ToolRegistry
from .shell import ExecCommandTool

if TYPE_CHECKING:
    from ..services.memory_store import MemoryStore


def create_default_registry(workspace_dir: Path, store: "MemoryStore | None" = None) -> ToolRegistry:
    """Build the registry with every built-in tool.

    save_conversation is only registered when a memory store is given.
    """
    registry = ToolRegistry([
        ReadFileTool(),
        WriteFileTool(),
        ListDirTool(),
        ExecCommandTool(),
        MemorySearchTool(workspace_dir),
        MemoryGetTool(workspace_dir),
        UpdateMemoryTool(workspace_dir),
    ])
    if store is not None:
        registry.register(SaveConversationTool(store, workspace_dir))
    return registry


__all__ = [
    "BaseTool",
    "ExecCommandTool",
    "ListDirTool",
    "MemoryGetTool",
    "MemorySearchTool",
    "ReadFileTool",
    "SaveConversationTool",
    "ToolRegistry",
    "UpdateMemoryTool",
    "WriteFileTool",
    "create_default_registry",
]
