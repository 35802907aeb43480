"""Colored terminal output for the interactive front-end."""

import sys
from typing import ClassVar, TextIO


class Console:
    """Writes colored lines to a stream.

    Colors are ANSI escape codes; they are dropped when `color` is False
    or the stream is not a terminal.
    """

    COLORS: ClassVar[dict[str, str]] = {
        "cyan": "\033[36m",
        "green": "\033[32m",
        "yellow": "\033[33m",
        "red": "\033[31m",
        "white": "\033[37m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, stream: TextIO | None = None, color: bool | None = None):
        """Initialize console output.

        Args:
            stream: Output stream (default: sys.stdout).
            color: Force colors on or off (default: only on a TTY).
        """
        self.stream = stream or sys.stdout
        if color is None:
            color = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.color = color

    def write(self, text: str, color: str | None = None, end: str = "\n") -> None:
        if self.color and color:
            text = f"{self.COLORS[color]}{text}{self.RESET}"
        self.stream.write(text + end)
        self.stream.flush()

    def cyan(self, text: str, end: str = "\n") -> None:
        self.write(text, "cyan", end)

    def green(self, text: str, end: str = "\n") -> None:
        self.write(text, "green", end)

    def yellow(self, text: str, end: str = "\n") -> None:
        self.write(text, "yellow", end)

    def red(self, text: str, end: str = "\n") -> None:
        self.write(text, "red", end)

    def white(self, text: str, end: str = "\n") -> None:
        self.write(text, "white", end)
