"""I/O layer - library persistence, snapshot serialization and backup files."""

from .backup_file import read_backup_file, write_backup_file
from .database_manager import DatabaseManager
from .library_store import LibraryStore
from .snapshot_codec import SnapshotCodec

__all__ = [
    "LibraryStore",
    "DatabaseManager",
    "SnapshotCodec",
    "read_backup_file",
    "write_backup_file",
]
