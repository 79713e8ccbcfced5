"""Async workers running backup and restore off the interactive thread."""

import logging
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from manga_backup.io import LibraryStore
from manga_backup.services.backup_manager import BackupManager

logger = logging.getLogger(__name__)

StoreFactory = Callable[[], LibraryStore]


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals. Every signal carries the request token
    the worker was started with.
    """
    finished = Signal(int)
    error = Signal(int, str)
    backup_result = Signal(int, object)  # BackupResult
    restore_result = Signal(int, object)  # RestoreResult


class _StoreWorker(QRunnable):
    """Opens a store of its own for the duration of one operation.

    should_start is asked once the worker is picked up from the pool; when
    it returns False the worker finishes without opening the store.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        path: Path,
        token: int,
        should_start: Optional[Callable[[], bool]] = None,
    ):
        super().__init__()
        self.store_factory = store_factory
        self.should_start = should_start
        self.path = Path(path)
        self.token = token
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        store = None
        try:
            if self.should_start is not None and not self.should_start():
                logger.info("Skipping superseded %s for %s", type(self).__name__, self.path)
                return
            store = self.store_factory()
            self._execute(BackupManager(store))
        except Exception as e:
            logger.error("%s failed for %s: %s", type(self).__name__, self.path, e)
            self.signals.error.emit(self.token, str(e))
        finally:
            if store is not None:
                store.close()
            self.signals.finished.emit(self.token)

    def _execute(self, manager: BackupManager) -> None:
        """Run the operation and emit its result. Subclasses must override."""
        raise NotImplementedError


class BackupWorker(_StoreWorker):
    """Writes a backup file in a background thread."""

    def _execute(self, manager: BackupManager) -> None:
        result = manager.backup_to_file(self.path)
        self.signals.backup_result.emit(self.token, result)


class RestoreWorker(_StoreWorker):
    """
    Restores a backup file in a background thread.

    Once started the restore runs to commit or rollback; there is no way
    to interrupt it.
    """

    def _execute(self, manager: BackupManager) -> None:
        result = manager.restore_from_file(self.path)
        self.signals.restore_result.emit(self.token, result)
