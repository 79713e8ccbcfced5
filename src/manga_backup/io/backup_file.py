"""Backup file I/O - whole-file reads and atomic writes."""

import logging
import os
import tempfile
from pathlib import Path

from manga_backup.core import BackupIOError

logger = logging.getLogger(__name__)


def read_backup_file(path: Path) -> bytes:
    """
    Read a backup file in full.

    Raises:
        BackupIOError: If the file cannot be read.
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise BackupIOError(f"Failed to read backup file {path}: {e}") from e


def write_backup_file(path: Path, data: bytes) -> Path:
    """
    Write a backup file atomically.

    The bytes go to a temporary file next to the target, which replaces the
    target only once it is fully written and synced. A failed write leaves
    the target untouched.

    Returns:
        Path: The resolved path that was written.

    Raises:
        BackupIOError: If the file cannot be written.
    """
    path = Path(path).resolve()
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise BackupIOError(f"Failed to write backup file {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError as e:
                logger.warning("Could not remove temporary backup file %s: %s", tmp_name, e)

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path
