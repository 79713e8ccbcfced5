"""Backup Manager - creates backup files and restores them into the library."""

import logging
from pathlib import Path
from typing import Optional

from manga_backup.core import BackupResult, BackupSnapshot, RestoreResult
from manga_backup.io import LibraryStore, SnapshotCodec, read_backup_file, write_backup_file
from manga_backup.services.backup_builder import BackupBuilder
from manga_backup.services.restore_orchestrator import RestoreOrchestrator

logger = logging.getLogger(__name__)


class BackupManager:
    """Application service tying the store, the builder, the codec and the orchestrator.

    A backup file is either written completely or not at all. A restore
    reads and decodes the whole file before touching the store, then
    commits everything or nothing.
    """

    def __init__(self, store: LibraryStore, codec: Optional[SnapshotCodec] = None) -> None:
        if store is None:
            raise ValueError("LibraryStore must not be None")
        self._store = store
        self._codec = codec or SnapshotCodec()

    def create_backup(self) -> BackupSnapshot:
        return BackupBuilder(self._store).build()

    def backup_to_bytes(self) -> bytes:
        return self._codec.encode(self.create_backup())

    def backup_to_file(self, path: Path) -> BackupResult:
        """
        Serialize the library to a backup file.

        Raises:
            BackupIOError: If the file cannot be written.
            StoreError: If the library cannot be read.
        """
        snapshot = self.create_backup()
        data = self._codec.encode(snapshot)
        written = write_backup_file(path, data)
        logger.info("Backup written to %s", written)
        return BackupResult(
            path=written,
            manga_count=snapshot.manga_count,
            category_count=len(snapshot.categories),
        )

    def restore_from_bytes(self, data: bytes) -> RestoreResult:
        snapshot = self._codec.decode(data)
        return RestoreOrchestrator(self._store).restore(snapshot)

    def restore_from_file(self, path: Path) -> RestoreResult:
        """
        Merge a backup file into the library.

        Raises:
            BackupIOError: If the file cannot be read.
            SnapshotFormatError: If the file is not a valid backup.
            StoreError: If reconciliation fails; nothing is persisted.
        """
        logger.info("Restoring backup from %s", path)
        return self.restore_from_bytes(read_backup_file(path))
