"""Command-line front-end: REPL, subcommands and the init wizard."""

from .commands import (
    run_config,
    run_memory_clear,
    run_memory_export,
    run_memory_import,
    run_memory_show,
)
from .console import Console
from .init_wizard import InitWizard
from .repl import handle_command, install_signal_handlers, run_chat

__all__ = [
    "Console",
    "InitWizard",
    "handle_command",
    "install_signal_handlers",
    "run_chat",
    "run_config",
    "run_memory_clear",
    "run_memory_export",
    "run_memory_import",
    "run_memory_show",
]
