"""
Application configuration for Open Watermark.

Classes:
    AppConfig: Runtime settings shared by the shell and the editing session
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict
import logging

from OW_Libs.constants import HISTORY_FILE_NAME


@dataclass
class AppConfig:
    """Configuration for a console editing run.

    Attributes:
        history_path: JSON file holding the operation history between runs
        log_level: Name of the logging level (DEBUG, INFO, WARNING, ...)
    """
    history_path: Path = Path(HISTORY_FILE_NAME)
    log_level: str = "WARNING"

    def __post_init__(self):
        self.history_path = Path(self.history_path)
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["history_path"] = str(self.history_path)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
