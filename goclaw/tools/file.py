"""File tools for reading, writing and listing files.

Paths are resolved against the process working directory. These tools
are not sandboxed: the model is trusted with the whole filesystem.
"""
import logging
import os
from pathlib import Path
from typing import Any

from ..core.exceptions import ToolExecutionError
from ..observability.decorators import traced_tool
from .base import BaseTool

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o644


class ReadFileTool(BaseTool):
    """Read the full content of a file."""

    name = "read_file"
    description = "Read the content of a file at the specified path"

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        path = self.require_str(args, "path")
        abs_path = Path(path).expanduser().resolve()

        if not abs_path.exists():
            raise ToolExecutionError(self.name, f"file does not exist: {path}")
        if abs_path.is_dir():
            raise ToolExecutionError(self.name, f"path is a directory: {path}")

        try:
            return abs_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ToolExecutionError(self.name, f"failed to read file: {e}") from e

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute or relative path to the file",
                }
            },
            "required": ["path"],
        }


class WriteFileTool(BaseTool):
    """Create or overwrite a file."""

    name = "write_file"
    description = (
        "Write content to a file at the specified path. "
        "Creates the file if it doesn't exist, overwrites if it does."
    )

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        path = self.require_str(args, "path")
        content = self.require_str(args, "content")
        abs_path = Path(path).expanduser().resolve()

        try:
            abs_path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise ToolExecutionError(self.name, f"failed to create directory: {e}") from e

        data = content.encode("utf-8")
        try:
            fd = os.open(abs_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ToolExecutionError(self.name, f"failed to write file: {e}") from e

        logger.info(f"Wrote {len(data)} bytes to {abs_path}")
        return f"Successfully wrote {len(data)} bytes to {path}"

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute or relative path to the file",
                },
                "content": {
                    "type": "string",
                    "description": "Content to write to the file",
                },
            },
            "required": ["path", "content"],
        }


class ListDirTool(BaseTool):
    """List directory entries tagged [DIR] or [FILE]."""

    name = "list_dir"
    description = "List the contents of a directory at the specified path"

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        path = self.optional_str(args, "path", ".")
        abs_path = Path(path).expanduser().resolve()

        try:
            entries = sorted(os.scandir(abs_path), key=lambda entry: entry.name)
        except OSError as e:
            raise ToolExecutionError(self.name, f"failed to read directory: {e}") from e

        lines = [f"Contents of {abs_path}:"]
        for entry in entries:
            tag = "[DIR] " if entry.is_dir() else "[FILE]"
            lines.append(f"  {tag} {entry.name}")
        return "\n".join(lines) + "\n"

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute or relative path to the directory. Defaults to current directory.",
                }
            },
        }
