"""GoClaw: a terminal AI assistant with tool support and persistent memory."""
from .agents import Agent, ContextLoader
from .core.config import AgentConfig, AppConfig, MemoryConfig, ZhipuConfig
from .core.llm import LLMClient
from .infrastructure import Container
from .services.memory_store import MemoryStore
from .tools import ToolRegistry, create_default_registry

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentConfig",
    "AppConfig",
    "Container",
    "ContextLoader",
    "LLMClient",
    "MemoryConfig",
    "MemoryStore",
    "ToolRegistry",
    "ZhipuConfig",
    "create_default_registry",
]
