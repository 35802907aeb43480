"""Interactive chat loop and slash commands."""

import logging
import signal
import sys
from typing import TextIO

from ..core.exceptions import GoclawError
from ..infrastructure.container import Container
from .console import Console

logger = logging.getLogger(__name__)

BANNER = (
    "╔════════════════════════════════════════╗",
    "║        GoClaw - AI Assistant           ║",
    "║   Powered by Zhipu GLM-4               ║",
    "╚════════════════════════════════════════╝",
)

COMMANDS_HELP = (
    "  /clear          - Clear conversation history",
    "  /save [title]   - Save conversation to memory/conversations/",
    "  /quit           - Exit",
    "  /help           - Show available tools",
)


class QuitRepl(Exception):
    """Raised by /quit and /exit to leave the chat loop."""


def install_signal_handlers(container: Container, console: Console) -> None:
    """Close the memory store and exit 0 on SIGINT or SIGTERM."""

    def handle_signal(signum, frame):
        console.yellow("\n\nShutting down gracefully...")
        container.close()
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def print_banner(console: Console) -> None:
    for line in BANNER:
        console.cyan(line)
    console.white("\nCommands:")
    for line in COMMANDS_HELP:
        console.white(line)
    console.white("\nType your message and press Enter.\n")


def handle_command(line: str, container: Container, console: Console) -> None:
    """Execute one slash command.

    Raises:
        QuitRepl: For /quit and /exit
    """
    parts = line.split(maxsplit=1)
    if not parts:
        return
    command = parts[0]
    argument = parts[1].strip() if len(parts) > 1 else ""

    if command in ("/quit", "/exit"):
        console.yellow("Goodbye!")
        raise QuitRepl()

    if command == "/clear":
        container.agent.clear_history()
        console.yellow("Conversation history cleared.")
    elif command == "/help":
        console.yellow("\nAvailable Tools:")
        for tool in container.registry.list():
            console.white(f"  • {tool.name} - {tool.description}")
        console.white("")
    elif command == "/save":
        path = container.agent.save_conversation(argument or None)
        console.green(f"✓ 对话已保存到 {path}")
    else:
        console.yellow(f"Unknown command: {command}")
        console.yellow("Available: /quit, /exit, /clear, /save, /help")


def run_chat(
    container: Container,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> int:
    """Run the REPL until /quit, /exit or end of input.

    A failed turn prints the error in red and returns to the prompt.

    Returns:
        Process exit code
    """
    console = console or Console()
    input_stream = input_stream or sys.stdin
    print_banner(console)

    try:
        while True:
            console.green("You: ", end="")
            line = input_stream.readline()
            if not line:
                console.white("")
                break

            line = line.strip()
            if not line:
                continue

            try:
                if line.startswith("/"):
                    handle_command(line, container, console)
                    continue

                console.yellow("Thinking...")
                reply = container.agent.chat(line)
            except (GoclawError, OSError) as e:
                logger.debug("Turn failed", exc_info=True)
                console.red(f"\nError: {e}\n")
                continue

            console.cyan(f"AI: {reply}\n")
    except QuitRepl:
        pass
    finally:
        container.close()

    return 0
