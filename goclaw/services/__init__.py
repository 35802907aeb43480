"""Service layer for conversation memory and export."""

from .conversation_export import export_conversation
from .memory_store import MemoryStore

__all__ = ["MemoryStore", "export_conversation"]
