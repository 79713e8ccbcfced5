"""
Manga Backup - backup and restore for a manga library.

This package provides:
- Snapshots of favorited mangas, their chapters, tracking progress and categories
- A JSON backup file format
- Restore that merges a backup into an existing library in one transaction
"""

__version__ = "0.1.0"

# Make key components available at package level
from manga_backup.core import BackupSnapshot, MangaEntry
from manga_backup.io import DatabaseManager, SnapshotCodec
from manga_backup.services import BackupManager, RestoreOrchestrator

__all__ = [
    "BackupSnapshot",
    "MangaEntry",
    "DatabaseManager",
    "SnapshotCodec",
    "BackupManager",
    "RestoreOrchestrator",
]
