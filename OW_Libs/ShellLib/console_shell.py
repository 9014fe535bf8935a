"""
Interactive console menu for Open Watermark.

Shows a numbered menu built from the command registry, asks for a path when
the chosen command needs one, dispatches the command and prints the result.
The loop only ends after the Exit command; every other failure, expected or
not, is printed and the menu is shown again.
"""

from typing import Callable, List, Optional
import logging

from OW_Libs.constants import HISTORY_TIME_FORMAT, MENU_PROMPT, MENU_TITLE, PATH_QUOTE_CHARS
from OW_Libs.HistoryLib.operation_history import OperationLogEntry
from OW_Libs.ShellLib.commands import (
    AppContext,
    Command,
    CommandKind,
    CommandRegistry,
    CommandResult,
)

logger = logging.getLogger(__name__)


def format_entry(entry: OperationLogEntry) -> str:
    return f"[{entry.timestamp.strftime(HISTORY_TIME_FORMAT)}] {entry.description}"


def clean_path_input(raw: Optional[str]) -> str:
    """Strip whitespace and surrounding quotes (as left by drag-and-drop)."""
    if raw is None:
        return ""
    return raw.strip().strip(PATH_QUOTE_CHARS).strip()


class ConsoleShell:
    """Numbered-menu front end over a CommandRegistry."""

    def __init__(
        self,
        registry: CommandRegistry,
        context: AppContext,
        input_func: Optional[Callable[[str], str]] = None,
        output_func: Optional[Callable[[str], None]] = None,
    ):
        self.registry = registry
        self.context = context
        self._input = input_func if input_func is not None else input
        self._output = output_func if output_func is not None else print

    def menu_lines(self) -> List[str]:
        lines = [MENU_TITLE, ""]
        for index, kind in enumerate(self.registry.list_commands(), start=1):
            label = self.registry.get_metadata(kind)["label"]
            lines.append(f"  {index}. {label}")
        return lines

    def parse_choice(self, raw: str) -> Optional[CommandKind]:
        commands = self.registry.list_commands()
        text = raw.strip()
        if text.isdigit():
            index = int(text) - 1
            if 0 <= index < len(commands):
                return commands[index]
            return None

        for kind in commands:
            if kind.value == text.lower():
                return kind
        return None

    def read_command(self, kind: CommandKind) -> Command:
        prompt = self.registry.get_metadata(kind).get("path_prompt")
        if prompt is None:
            return Command(kind)
        return Command(kind, clean_path_input(self._input(str(prompt))))

    def show_result(self, result: CommandResult) -> None:
        if result.ok:
            self._output(result.message)
        else:
            self._output(f"[Error]: {result.message}")

        if result.entries:
            self._output("--- Operation history (saved + session) ---")
            for entry in result.entries:
                self._output(format_entry(entry))

    def run_once(self) -> bool:
        """
        Show the menu, run one command and report it.

        Returns:
            False once the Exit command has run, True otherwise
        """
        for line in self.menu_lines():
            self._output(line)

        kind = self.parse_choice(self._input(MENU_PROMPT))
        if kind is None:
            self._output("Unknown option, try again.")
            return True

        # Report an unmet precondition before asking for a path
        blocked = self.registry.check_precondition(self.context, kind)
        if blocked is not None:
            self.show_result(blocked)
            return True

        try:
            result = self.registry.dispatch(self.context, self.read_command(kind))
        except (EOFError, KeyboardInterrupt):
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while running '{kind.value}'")
            self._output(f"[Critical error]: {e}")
            return True

        self.show_result(result)
        return not result.exit_requested

    def run(self) -> int:
        """Loop until Exit. Returns the process exit status."""
        while self.run_once():
            pass
        return 0
