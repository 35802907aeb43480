"""Command execution tool.

The command line is split on whitespace and run directly, without a
shell, so pipes, globs and quoting are not interpreted. The only guard
is the wall-clock timeout, after which the child process is killed.
"""
import logging
import subprocess
from typing import Any

from ..core.exceptions import ToolExecutionError
from ..observability.decorators import traced_tool
from .base import BaseTool

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ExecCommandTool(BaseTool):
    """Run a command and return its combined stdout and stderr."""

    name = "exec_command"
    description = "Execute a shell command and return its output. Use with caution."

    def __init__(self, default_timeout: int = DEFAULT_TIMEOUT) -> None:
        self.default_timeout = default_timeout

    @traced_tool()
    def execute(self, args: dict[str, Any]) -> str:
        command = self.require_str(args, "command")
        timeout = self.optional_int(args, "timeout", self.default_timeout)
        if timeout <= 0:
            timeout = self.default_timeout

        parts = command.split()
        if not parts:
            raise ToolExecutionError(self.name, "empty command")

        logger.info(f"Executing command: {parts} (timeout={timeout}s)")
        try:
            completed = subprocess.run(
                parts,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            output = _decode(e.output)
            raise ToolExecutionError(
                self.name,
                f"command timed out after {timeout}s\nOutput: {output}",
            ) from e
        except OSError as e:
            raise ToolExecutionError(self.name, f"command failed: {e}") from e

        output = _decode(completed.stdout)
        if completed.returncode != 0:
            raise ToolExecutionError(
                self.name,
                f"command failed: exit status {completed.returncode}\nOutput: {output}",
            )
        return output

    def get_parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "description": "The shell command to execute",
                },
                "timeout": {
                    "type": "integer",
                    "description": f"Timeout in seconds (default: {self.default_timeout})",
                },
            },
            "required": ["command"],
        }


def _decode(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
