"""
Command Registry and Handlers.

The console shell never calls the editing session directly. Each menu entry
is a tagged Command (a CommandKind plus an optional path) that the registry
dispatches to a handler. Handlers receive an explicit AppContext holding the
session, the history and the configuration; there is no module-level state.

Classes:
    CommandKind: The commands the shell can issue
    Command: A command with its argument
    CommandResult: Outcome of a dispatched command
    AppContext: Everything a handler may touch
    CommandRegistry: Registry mapping CommandKind -> handler

Functions:
    build_default_registry: Create a registry with every built-in command
    register_default_commands: Register the built-in handlers on a registry
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import logging

from OW_Libs.config import AppConfig
from OW_Libs.errors import ImageEditorError, NothingToSaveError
from OW_Libs.HistoryLib.operation_history import OperationHistory, OperationLogEntry
from OW_Libs.ImageEditingLib.editing_session import ImageEditingSession

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    LOAD = "load"
    SELECT_WATERMARK = "select_watermark"
    GRAYSCALE = "grayscale"
    WATERMARK = "watermark"
    SAVE = "save"
    LIST_HISTORY = "list_history"
    EXIT = "exit"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    path: Optional[str] = None


@dataclass
class CommandResult:
    """Outcome of a command.

    Attributes:
        ok: True if the command succeeded
        message: Text to show the operator
        entries: History entries (only for LIST_HISTORY)
        exit_requested: True once the EXIT command has run
    """
    ok: bool
    message: str = ""
    entries: Tuple[OperationLogEntry, ...] = ()
    exit_requested: bool = False

    @classmethod
    def success(cls, message: str, **kwargs) -> "CommandResult":
        return cls(ok=True, message=message, **kwargs)

    @classmethod
    def failure(cls, message: str) -> "CommandResult":
        return cls(ok=False, message=message)


@dataclass
class AppContext:
    session: ImageEditingSession
    history: OperationHistory
    config: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def create(cls, config: AppConfig) -> "AppContext":
        """Build a context whose history is seeded from config.history_path."""
        history = OperationHistory(config.history_path)
        history.seed()
        return cls(session=ImageEditingSession(history), history=history, config=config)


CommandHandler = Callable[[AppContext, Command], CommandResult]
Precondition = Callable[[AppContext], None]


def _path_argument(command: Command) -> str:
    return command.path if command.path is not None else ""


def require_image_to_save(context: AppContext) -> None:
    if not context.session.is_loaded:
        raise NothingToSaveError()


def handle_load(context: AppContext, command: Command) -> CommandResult:
    record = context.session.load(_path_argument(command))
    return CommandResult.success(
        f"Image loaded: {record.path.name} ({record.width}x{record.height})"
    )


def handle_select_watermark(context: AppContext, command: Command) -> CommandResult:
    path = context.session.select_watermark(_path_argument(command))
    return CommandResult.success(f"Watermark selected: {path.name}")


def handle_grayscale(context: AppContext, command: Command) -> CommandResult:
    context.session.grayscale()
    return CommandResult.success("Image converted to grayscale.")


def handle_watermark(context: AppContext, command: Command) -> CommandResult:
    positions = context.session.watermark()
    return CommandResult.success(f"Watermark applied ({len(positions)} tiles).")


def handle_save(context: AppContext, command: Command) -> CommandResult:
    saved = context.session.save(_path_argument(command))
    return CommandResult.success(f"Saved to {saved}")


def handle_list_history(context: AppContext, command: Command) -> CommandResult:
    entries = context.history.entries
    if not entries:
        return CommandResult.success("History is empty.")
    return CommandResult.success(f"{len(entries)} history entries.", entries=entries)


def handle_exit(context: AppContext, command: Command) -> CommandResult:
    error = context.history.flush()
    if error is not None:
        return CommandResult(ok=False, message=str(error), exit_requested=True)
    return CommandResult.success("History saved. Exiting...", exit_requested=True)


class CommandRegistry:
    """
    Registry for command handlers.

    Example:
        >>> registry = build_default_registry()
        >>> result = registry.dispatch(context, Command(CommandKind.GRAYSCALE))
        >>> result.ok
        False
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._handlers: Dict[CommandKind, CommandHandler] = {}
        self._metadata: Dict[CommandKind, Dict[str, object]] = {}

    def register(
        self,
        kind: CommandKind,
        handler: CommandHandler,
        label: str = "",
        path_prompt: Optional[str] = None,
        precondition: Optional[Precondition] = None,
    ) -> None:
        """
        Register a command handler.

        Args:
            kind: The command this handler serves
            handler: Callable accepting (context, command)
            label: Menu label shown by the shell
            path_prompt: Prompt for the path argument, or None if the command takes none
            precondition: Check run before any path is asked for; raises an
                ImageEditorError when the command cannot run yet

        Raises:
            ValueError: If handler is not callable
            RuntimeError: If kind is already registered
        """
        if not callable(handler):
            raise ValueError(f"handler must be callable, got {type(handler)}")

        if kind in self._handlers:
            raise RuntimeError(
                f"Command '{kind.value}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._handlers[kind] = handler
        self._metadata[kind] = {
            "label": str(label or kind.value),
            "path_prompt": path_prompt,
            "precondition": precondition,
        }
        logger.debug(f"Registered handler for command: {kind.value}")

    def unregister(self, kind: CommandKind) -> bool:
        """Remove a handler. Returns False if kind was not registered."""
        if kind in self._handlers:
            del self._handlers[kind]
            del self._metadata[kind]
            logger.debug(f"Unregistered handler for command: {kind.value}")
            return True
        return False

    def get_handler(self, kind: CommandKind) -> CommandHandler:
        """
        Raises:
            KeyError: If kind is not registered
        """
        if kind not in self._handlers:
            available = ", ".join(k.value for k in self.list_commands())
            raise KeyError(
                f"No handler registered for command '{kind.value}'. "
                f"Available commands: {available}"
            )
        return self._handlers[kind]

    def has_handler(self, kind: CommandKind) -> bool:
        return kind in self._handlers

    def list_commands(self) -> List[CommandKind]:
        """Registered commands in registration order (the menu order)."""
        return list(self._handlers.keys())

    def get_metadata(self, kind: CommandKind) -> Dict[str, object]:
        if kind not in self._metadata:
            raise KeyError(f"No metadata for command: {kind.value}")
        return dict(self._metadata[kind])

    def check_precondition(self, context: AppContext, kind: CommandKind) -> Optional[CommandResult]:
        """
        Run the command's precondition, if any.

        Returns:
            None if the command may run, otherwise the failure to report
        """
        precondition = self.get_metadata(kind).get("precondition")
        if precondition is None:
            return None
        try:
            precondition(context)
        except ImageEditorError as e:
            logger.info(f"Command '{kind.value}' not ready: {e}")
            return CommandResult.failure(str(e))
        return None

    def dispatch(self, context: AppContext, command: Command) -> CommandResult:
        """
        Run a command and turn editor errors into a failure result.

        Editor errors (bad paths, undecodable files, missing preconditions)
        become CommandResult.failure. Anything else propagates to the caller.

        Raises:
            KeyError: If the command is not registered
        """
        handler = self.get_handler(command.kind)
        try:
            result = handler(context, command)
        except ImageEditorError as e:
            logger.info(f"Command '{command.kind.value}' failed: {e}")
            return CommandResult.failure(str(e))

        logger.debug(f"Command '{command.kind.value}' succeeded")
        return result


def register_default_commands(registry: CommandRegistry) -> None:
    """Register every built-in command, in menu order."""
    registry.register(
        CommandKind.LOAD,
        handle_load,
        label="Load image (JPG/PNG/BMP)",
        path_prompt="Path to the main image: ",
    )
    registry.register(
        CommandKind.SELECT_WATERMARK,
        handle_select_watermark,
        label="Select watermark (PNG only)",
        path_prompt="Path to the watermark (PNG): ",
    )
    registry.register(CommandKind.GRAYSCALE, handle_grayscale, label="Convert to grayscale")
    registry.register(CommandKind.WATERMARK, handle_watermark, label="Apply watermark")
    registry.register(
        CommandKind.SAVE,
        handle_save,
        label="Save image",
        path_prompt="Output path (for example result.jpg): ",
        precondition=require_image_to_save,
    )
    registry.register(CommandKind.LIST_HISTORY, handle_list_history, label="Show history")
    registry.register(CommandKind.EXIT, handle_exit, label="Exit")


def build_default_registry() -> CommandRegistry:
    registry = CommandRegistry()
    register_default_commands(registry)
    return registry
