"""Tool registry: name to handler mapping and tool-call dispatch.

The registry is populated once at startup and read-only afterwards.
Registering a second tool under an existing name replaces the first
(last writer wins) and logs a warning.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import jsonschema
from jsonschema import validators
from jsonschema.exceptions import best_match

from ..core.exceptions import ArgumentParseError, ToolError, ToolExecutionError, UnknownTool
from .base import BaseTool

logger = logging.getLogger(__name__)


def _is_number(checker: Any, instance: Any) -> bool:
    return isinstance(instance, (int, float)) and not isinstance(instance, bool)


# JSON numbers decode to int or float; integer options accept both and
# handlers truncate fractional values.
ArgumentValidator = validators.extend(
    jsonschema.Draft7Validator,
    type_checker=jsonschema.Draft7Validator.TYPE_CHECKER.redefine("integer", _is_number),
)


class ToolRegistry:
    """Registry of available tools.

    Example:
        registry = ToolRegistry()
        registry.register(ReadFileTool())
        result = registry.execute_call("read_file", '{"path": "notes.md"}')
    """

    def __init__(self, tools: list[BaseTool] | None = None) -> None:
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Add a tool; an existing tool with the same name is replaced."""
        if tool.name in self._tools:
            logger.warning(f"Tool '{tool.name}' registered twice; replacing previous handler")
        self._tools[tool.name] = tool

    def lookup(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list(self) -> list[BaseTool]:
        """Return registered tools in registration order."""
        return list(self._tools.values())

    def as_model_tools(self) -> list[dict[str, Any]]:
        """Return tool definitions in chat-completions `tools` format."""
        return [tool.to_openai_schema() for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def parse_arguments(self, tool: BaseTool, arguments_json: str) -> dict[str, Any]:
        """Decode and validate a tool-call argument string.

        Keys whose value is null are dropped so optional parameters fall
        back to their defaults.

        Raises:
            ArgumentParseError: If the string is not a JSON object or does
                                not satisfy the tool's parameter schema
        """
        try:
            args = json.loads(arguments_json)
        except (TypeError, json.JSONDecodeError) as e:
            raise ArgumentParseError(tool.name, str(e)) from e

        if not isinstance(args, dict):
            raise ArgumentParseError(
                tool.name, f"expected a JSON object, got {type(args).__name__}"
            )

        args = {key: value for key, value in args.items() if value is not None}

        error = best_match(
            ArgumentValidator(tool.get_parameters_schema()).iter_errors(args)
        )
        if error is not None:
            raise ArgumentParseError(tool.name, error.message)
        return args

    def execute_call(self, name: str, arguments_json: str) -> str:
        """Dispatch one tool call.

        Args:
            name: Tool name requested by the model
            arguments_json: JSON-encoded argument object

        Returns:
            The tool's result text

        Raises:
            UnknownTool: No tool with that name is registered
            ArgumentParseError: Arguments are not a valid JSON object for the tool
            ToolExecutionError: The handler failed
        """
        tool = self.lookup(name)
        if tool is None:
            raise UnknownTool(name)

        args = self.parse_arguments(tool, arguments_json)

        try:
            return tool.execute(args)
        except ToolError:
            raise
        except Exception as e:
            raise ToolExecutionError(name, str(e)) from e
