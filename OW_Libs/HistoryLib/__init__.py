"""
HistoryLib - Durable operation history

This module keeps the append-only log of operator actions and persists it
to a JSON file between runs.
"""

from OW_Libs.HistoryLib.operation_history import (
    OperationLogEntry,
    OperationHistory,
    read_history_file,
    write_history_file,
)

__all__ = [
    "OperationLogEntry",
    "OperationHistory",
    "read_history_file",
    "write_history_file",
]
