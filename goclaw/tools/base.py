"""Base tool abstraction for all agent tools."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..core.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)


class BaseTool(ABC):
    """Abstract base class for all tools.

    Subclasses must implement:
        - name: Tool identifier used in function calling
        - description: Human-readable description for LLM
        - execute(): Tool execution logic
        - get_parameters_schema(): JSON schema for parameters

    Handlers receive the decoded JSON argument object as a plain dict and
    return the result text. Failures are raised as ToolExecutionError;
    the registry wraps any other exception the same way.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool identifier used in function calling."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for LLM."""
        pass

    @abstractmethod
    def execute(self, args: dict[str, Any]) -> str:
        """Execute the tool with decoded JSON arguments.

        Returns:
            Result text fed back to the model
        """
        pass

    @abstractmethod
    def get_parameters_schema(self) -> dict[str, Any]:
        """Return JSON schema for tool parameters."""
        pass

    def to_openai_schema(self) -> dict[str, Any]:
        """Convert tool to OpenAI function calling schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.get_parameters_schema(),
            },
        }

    # === Argument helpers ===

    def require_str(self, args: dict[str, Any], key: str) -> str:
        """Return a required string argument."""
        value = args.get(key)
        if not isinstance(value, str):
            raise ToolExecutionError(self.name, f"{key} argument is required")
        return value

    def optional_str(self, args: dict[str, Any], key: str, default: str) -> str:
        """Return a string argument, or `default` when missing, null or empty."""
        value = args.get(key)
        if isinstance(value, str) and value:
            return value
        return default

    def optional_int(self, args: dict[str, Any], key: str, default: int) -> int:
        """Return an integer argument.

        JSON numbers may arrive as int or float; floats are truncated.
        Booleans are not numbers here.
        """
        value = args.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return int(value)
