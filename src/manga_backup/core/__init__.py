"""Domain layer - library entities, the snapshot tree and the error taxonomy."""

from .backup_results import BackupResult, RestoreResult
from .errors import BackupError, BackupIOError, SnapshotFormatError, StoreError
from .library_entities import Category, Chapter, Manga, MangaCategory, MangaSync
from .snapshot import BackupSnapshot, MangaEntry

__all__ = [
    "Manga",
    "Chapter",
    "Category",
    "MangaSync",
    "MangaCategory",
    "BackupSnapshot",
    "MangaEntry",
    "BackupResult",
    "RestoreResult",
    "BackupError",
    "BackupIOError",
    "SnapshotFormatError",
    "StoreError",
]
