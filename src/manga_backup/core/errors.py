"""Error taxonomy for backup and restore.

Every error is a RuntimeError so callers that follow the fail-fast
convention of the I/O layer keep working unchanged.
"""


class BackupError(RuntimeError):
    """Base class for backup/restore failures."""


class BackupIOError(BackupError):
    """The backup file could not be read or written."""


class SnapshotFormatError(BackupError, ValueError):
    """The snapshot does not have the expected structure."""


class StoreError(BackupError):
    """A store operation failed (constraint violation, driver error)."""
