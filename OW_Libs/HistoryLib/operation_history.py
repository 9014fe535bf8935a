"""
Operation history storage for Open Watermark.

Every action the operator performs is appended to an in-memory log that is
seeded from a JSON file at startup and written back to it on exit, so the
history spans sessions.

The history file is a pretty-printed JSON array:

    [
      {
        "Operation": "Loaded image: photo.jpg",
        "Time": "2026-10-19T14:03:27.512345+02:00"
      }
    ]

A missing or malformed file is treated as an empty history; writing goes
through a temporary file so a failed flush never truncates the old history.

Classes:
    OperationLogEntry: One immutable, timestamped history entry
    OperationHistory: Append-only log backed by a history file

Functions:
    read_history_file: Strictly parse a history file
    write_history_file: Atomically write entries to a history file
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
import json
import logging

from OW_Libs.atomic_write import write_atomically
from OW_Libs.constants import (
    FIELD_OPERATION,
    FIELD_TIME,
    HISTORY_ENCODING,
    HISTORY_INDENT,
)
from OW_Libs.errors import HistoryPersistError

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class OperationLogEntry:
    """A single history entry.

    Attributes:
        description: Human-readable description of the action
        timestamp: Timezone-aware local time the action happened
    """
    description: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, str]:
        """Convert to the on-disk dictionary form."""
        return {
            FIELD_OPERATION: self.description,
            FIELD_TIME: self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationLogEntry":
        """
        Create from the on-disk dictionary form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"History entry must be an object, got {type(data).__name__}")

        description = data.get(FIELD_OPERATION)
        time_value = data.get(FIELD_TIME)
        if not isinstance(description, str):
            raise ValueError(f"History entry has no '{FIELD_OPERATION}' text")
        if not isinstance(time_value, str):
            raise ValueError(f"History entry has no '{FIELD_TIME}' value")

        timestamp = datetime.fromisoformat(time_value)
        if timestamp.tzinfo is None:
            # Naive times were written in local time
            timestamp = timestamp.astimezone()

        return cls(description=description, timestamp=timestamp)


def read_history_file(history_path: Path) -> List[OperationLogEntry]:
    """
    Parse a history file.

    Args:
        history_path: JSON file to read

    Returns:
        Entries in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a valid history (includes JSON errors)
        RecursionError: If the JSON is nested too deeply to decode
        OSError: If the file cannot be read
    """
    payload = json.loads(Path(history_path).read_text(encoding=HISTORY_ENCODING))

    if not isinstance(payload, list):
        raise ValueError(f"History must be a JSON array, got {type(payload).__name__}")

    return [OperationLogEntry.from_dict(item) for item in payload]


def write_history_file(history_path: Path, entries: Sequence[OperationLogEntry]) -> None:
    """
    Write entries to a history file, replacing it in one step.

    Args:
        history_path: Destination JSON file
        entries: Entries to persist, in order

    Raises:
        OSError: If the file cannot be written
        TypeError: If an entry cannot be serialized
    """
    history_path = Path(history_path)
    text = json.dumps(
        [entry.to_dict() for entry in entries],
        indent=HISTORY_INDENT,
        ensure_ascii=False,
    )

    history_path.parent.mkdir(parents=True, exist_ok=True)
    write_atomically(history_path, text.encode(HISTORY_ENCODING))


class OperationHistory:
    """
    Append-only operation log backed by a JSON file.

    Example:
        >>> history = OperationHistory(Path("history.json"))
        >>> history.seed()
        >>> history.record("Applied filter: Grayscale")
        >>> error = history.flush()
    """

    def __init__(self, history_path: Path):
        self.history_path = Path(history_path)
        self._entries: List[OperationLogEntry] = []
        self._seeded_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[OperationLogEntry, ...]:
        """All entries, oldest first (seeded entries precede session entries)."""
        return tuple(self._entries)

    @property
    def session_entries(self) -> Tuple[OperationLogEntry, ...]:
        return tuple(self._entries[self._seeded_count:])

    def seed(self) -> List[OperationLogEntry]:
        """
        Load previously persisted entries ahead of any session entries.

        A missing or corrupt history file yields no entries; it never raises.

        Returns:
            The entries read from the history file
        """
        try:
            stored = read_history_file(self.history_path)
        except FileNotFoundError:
            logger.debug(f"No history file at {self.history_path}, starting empty")
            stored = []
        except (OSError, ValueError, TypeError, RecursionError) as e:
            # RecursionError: pathologically nested JSON
            logger.warning(f"Ignoring unreadable history file {self.history_path}: {e}")
            stored = []

        session = self._entries[self._seeded_count:]
        self._entries = list(stored) + session
        self._seeded_count = len(stored)
        return list(stored)

    def record(self, description: str, timestamp: Optional[datetime] = None) -> OperationLogEntry:
        """
        Append an entry stamped with the current local time.

        Args:
            description: What happened
            timestamp: Override for the entry time (defaults to now)

        Returns:
            The new entry
        """
        entry = OperationLogEntry(
            description=str(description),
            timestamp=timestamp or _local_now(),
        )
        self._entries.append(entry)
        logger.debug(f"Recorded operation: {entry.description}")
        return entry

    def flush(self) -> Optional[HistoryPersistError]:
        """
        Write the full history to the history file.

        Failures are logged and returned, never raised, so losing the history
        cannot change the outcome of the action that triggered the flush.

        Returns:
            None on success, otherwise the HistoryPersistError describing the failure
        """
        try:
            write_history_file(self.history_path, self._entries)
        except (OSError, TypeError, ValueError) as e:
            error = HistoryPersistError(f"Could not save history to {self.history_path}: {e}")
            logger.error(str(error))
            return error

        logger.info(f"Saved {len(self._entries)} history entries to {self.history_path}")
        return None
