"""
Atomic file replacement shared by image saving and history flushing.

Data is written to a temporary file in the destination's directory which then
replaces the destination in one step, so readers only ever see the old file
or the complete new one.
"""

from pathlib import Path
from typing import Union
import logging
import os
import tempfile

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o666


def target_file_mode(path: Path) -> int:
    """
    Permission bits the written file should end up with.

    An existing destination keeps its own mode; a new file gets the mode a
    plain open() would give it under the current umask.
    """
    try:
        return path.stat().st_mode & 0o7777
    except FileNotFoundError:
        pass

    # os.umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return DEFAULT_FILE_MODE & ~umask


def write_atomically(path: Union[str, Path], data: bytes) -> Path:
    """
    Replace path with data without ever exposing a partial file.

    Args:
        path: Destination file; its directory must exist
        data: Complete file contents

    Returns:
        The destination path

    Raises:
        OSError: If the temporary file cannot be written or moved into place
    """
    path = Path(path)
    mode = target_file_mode(path)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    logger.debug(f"Wrote {len(data)} bytes to {path} (mode {oct(mode)})")
    return path
