#!/usr/bin/env python3
"""Main entry point for the GoClaw assistant.

Subcommands:
    chat                  Start the interactive REPL
    config                Show the effective configuration
    memory show|clear     Inspect or reset conversation history
    memory export|import  JSON round-trip of conversation history
    init                  Write IDENTITY.md / SOUL.md from a questionnaire
"""
import argparse
import logging
import sys
from dataclasses import dataclass

from goclaw.cli import (
    Console,
    InitWizard,
    install_signal_handlers,
    run_chat,
    run_config,
    run_memory_clear,
    run_memory_export,
    run_memory_import,
    run_memory_show,
)
from goclaw.core.config import AppConfig
from goclaw.core.exceptions import GoclawError
from goclaw.infrastructure.container import init_container, reset_container
from goclaw.observability.config import initialize_observability, shutdown


@dataclass
class CliArgs:
    """Parsed command-line arguments."""
    command: str | None
    memory_command: str | None
    config_path: str | None
    log_level: str
    file: str | None = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goclaw",
        description="GoClaw - AI assistant with tool support and persistent memory",
    )
    parser.add_argument("--config", dest="config_path", help="Config file path")
    parser.add_argument(
        "--log-level", "-l",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("chat", help="Start interactive chat")
    subparsers.add_parser("config", help="Show current configuration")
    subparsers.add_parser("init", help="初始化 GoClaw 身份配置")

    memory = subparsers.add_parser("memory", help="Memory management commands")
    memory_commands = memory.add_subparsers(dest="memory_command", required=True)
    memory_commands.add_parser("show", help="Show conversation history")
    memory_commands.add_parser("clear", help="Clear conversation history")
    export = memory_commands.add_parser("export", help="Export history as JSON")
    export.add_argument("file", nargs="?", help="Output file (default: stdout)")
    import_ = memory_commands.add_parser("import", help="Append history from a JSON export")
    import_.add_argument("file", help="JSON file produced by 'memory export'")
    return parser


def parse_arguments(argv: list[str] | None = None) -> tuple[CliArgs, argparse.ArgumentParser]:
    """Parse command-line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return CliArgs(
        command=args.command,
        memory_command=getattr(args, "memory_command", None),
        config_path=args.config_path,
        log_level=args.log_level,
        file=getattr(args, "file", None),
    ), parser


def setup_logging(level: str) -> logging.Logger:
    """Configure logging and return the logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )
    return logging.getLogger(__name__)


def dispatch(args: CliArgs, console: Console) -> int:
    """Load configuration, wire components and run the chosen subcommand."""
    if args.command == "init":
        config = AppConfig.load(args.config_path, require_api_key=False)
        return InitWizard(config.memory.workspace_dir, console).run()

    config = AppConfig.load(args.config_path, require_api_key=args.command == "chat")
    container = init_container(config)
    try:
        if args.command == "chat":
            install_signal_handlers(container, console)
            return run_chat(container, console)
        if args.command == "config":
            return run_config(container, console)
        if args.memory_command == "show":
            return run_memory_show(container, console)
        if args.memory_command == "clear":
            return run_memory_clear(container, console)
        if args.memory_command == "export":
            return run_memory_export(container, console, args.file)
        return run_memory_import(container, console, args.file)
    finally:
        reset_container()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args, parser = parse_arguments(argv)
    if args.command is None:
        parser.print_help()
        return 0

    logger = setup_logging(args.log_level)
    initialize_observability()
    console = Console()

    try:
        return dispatch(args, console)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except (GoclawError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        Console(sys.stderr).red(f"Error: {e}")
        return 1
    finally:
        shutdown()


if __name__ == "__main__":
    sys.exit(main())
