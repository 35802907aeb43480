"""Non-interactive subcommands: config and memory management."""

from pathlib import Path

from ..infrastructure.container import Container
from .console import Console

SHOW_LIMIT = 100
RULE = "─────────────────────────────────────"


def run_config(container: Container, console: Console) -> int:
    """Print the effective configuration and the stored message count."""
    config = container.config
    console.yellow("Current Configuration:")
    if config.source:
        console.white(f"  Config File: {config.source}")
    console.white(f"  Zhipu API Key: {config.masked_api_key()}")
    console.white(f"  Zhipu Model: {config.zhipu.model}")
    console.white(f"  Temperature: {config.zhipu.temperature:.2f}")
    console.white(f"  Max Tokens: {config.zhipu.max_tokens}")
    console.white(f"  Memory Path: {config.memory.file_path}")
    console.white(f"  Workspace: {config.memory.workspace}")
    console.white(f"  Max History: {config.agent.max_history}")
    console.white(f"  Message Count: {container.store.count()}")
    return 0


def run_memory_show(container: Container, console: Console) -> int:
    messages = container.store.history(SHOW_LIMIT)
    if not messages:
        console.yellow("No messages in history")
        return 0

    console.yellow(f"\nConversation History ({len(messages)} messages):")
    console.white(RULE)
    for message in messages:
        if message.role == "user":
            console.green(f"\n[User] {message.content}")
        elif message.role == "assistant":
            console.cyan(f"\n[AI] {message.content}")
    console.white(f"\n{RULE}\n")
    return 0


def run_memory_clear(container: Container, console: Console) -> int:
    container.store.clear()
    console.yellow("✓ Conversation history cleared")
    return 0


def run_memory_export(container: Container, console: Console, output: str | None = None) -> int:
    """Write the session as JSON to `output`, or to the console when omitted."""
    data = container.store.export_json()
    if output is None:
        console.write(data)
        return 0

    path = Path(output).expanduser()
    path.write_text(data + "\n", encoding="utf-8")
    console.green(f"✓ Exported {container.store.count()} messages to {path}")
    return 0


def run_memory_import(container: Container, console: Console, source: str) -> int:
    path = Path(source).expanduser()
    count = container.store.import_json(path.read_text(encoding="utf-8"))
    console.green(f"✓ Imported {count} messages from {path}")
    return 0
