"""Dependency injection container for the assistant.

This module wires the memory store, tool registry, context loader,
model client and agent from one configuration snapshot.
"""

from dataclasses import dataclass, field

from ..agents.agent import Agent
from ..agents.context import ContextLoader
from ..core.config import AppConfig
from ..core.llm import LLMClient
from ..repositories.inmemory import InMemoryMessageRepository
from ..services.memory_store import MemoryStore
from ..tools import create_default_registry
from ..tools.registry import ToolRegistry


@dataclass
class Container:
    """Dependency injection container.

    The model client and agent are created on first access, so commands
    that only touch history never need an API key.

    Usage:
        container = Container.from_config(AppConfig.load())
        reply = container.agent.chat("hello")
        container.close()

    Attributes:
        config: The configuration snapshot everything was built from
        store: The session's memory store (sole database handle)
        registry: Tools offered to the model
        context_loader: Workspace context file reader
    """

    config: AppConfig
    store: MemoryStore
    registry: ToolRegistry
    context_loader: ContextLoader
    _llm: LLMClient | None = field(default=None, repr=False)
    _agent: Agent | None = field(default=None, repr=False)

    @property
    def llm(self) -> LLMClient:
        if self._llm is None:
            self._llm = LLMClient(self.config.zhipu, component_name="agent")
        return self._llm

    @property
    def agent(self) -> Agent:
        if self._agent is None:
            self._agent = Agent(
                llm=self.llm,
                store=self.store,
                registry=self.registry,
                context_loader=self.context_loader,
                config=self.config.agent,
            )
        return self._agent

    def close(self) -> None:
        """Close the memory store. Safe to call more than once."""
        self.store.close()

    @classmethod
    def from_config(cls, config: AppConfig) -> "Container":
        """Create container from configuration.

        Opens (and if needed creates) the SQLite database at memory.file_path.

        Raises:
            StorageError: If the database cannot be opened
        """
        store = MemoryStore.open(config.memory.file_path, config.agent.session_id)
        return cls._build(config, store)

    @classmethod
    def create_inmemory(cls, config: AppConfig | None = None) -> "Container":
        """Create a container backed by an in-memory repository.

        Convenience method for testing and development.
        """
        config = config or AppConfig()
        store = MemoryStore(InMemoryMessageRepository(), config.agent.session_id)
        return cls._build(config, store)

    @classmethod
    def _build(cls, config: AppConfig, store: MemoryStore) -> "Container":
        workspace_dir = config.memory.workspace_dir
        return cls(
            config=config,
            store=store,
            registry=create_default_registry(workspace_dir, store),
            context_loader=ContextLoader(workspace_dir),
        )


# Global container instance
_container: Container | None = None


def get_container() -> Container | None:
    """Get the global container instance, or None before initialization."""
    return _container


def init_container(config: AppConfig) -> Container:
    """Initialize the global container from configuration."""
    global _container
    _container = Container.from_config(config)
    return _container


def reset_container() -> None:
    """Close and drop the global container."""
    global _container
    if _container is not None:
        _container.close()
    _container = None
