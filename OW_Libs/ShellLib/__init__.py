"""
ShellLib - Command dispatch and console menu

This module maps operator commands onto the editing session and runs the
interactive numbered menu.
"""

from OW_Libs.ShellLib.commands import (
    AppContext,
    Command,
    CommandKind,
    CommandRegistry,
    CommandResult,
    build_default_registry,
    register_default_commands,
)
from OW_Libs.ShellLib.console_shell import ConsoleShell, clean_path_input, format_entry

__all__ = [
    "AppContext",
    "Command",
    "CommandKind",
    "CommandRegistry",
    "CommandResult",
    "build_default_registry",
    "register_default_commands",
    "ConsoleShell",
    "clean_path_input",
    "format_entry",
]
