"""Backup Coordinator - single-flight supervisor for backup and restore requests."""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from manga_backup.services import BackupWorker, RestoreWorker, StoreFactory

logger = logging.getLogger(__name__)


class OperationKind(Enum):
    BACKUP = "backup"
    RESTORE = "restore"


class BackupCoordinator(QObject):
    """Starts backup/restore work in a thread pool and delivers the results.

    Each operation kind is single-flight: a new request supersedes the one
    still running, whose result is then dropped instead of delivered. The
    superseded work itself is never interrupted, so a restore that already
    opened its transaction still commits or rolls back. Backup and restore
    are independent of each other.
    """

    # Emitted with a BackupResult
    backup_completed = Signal(object)
    # Emitted with a RestoreResult
    restore_completed = Signal(object)
    # Emitted with (operation kind value, error message)
    operation_failed = Signal(str, str)

    def __init__(self, store_factory: StoreFactory) -> None:
        super().__init__()

        if store_factory is None:
            raise ValueError("Store factory must not be None")

        self._store_factory = store_factory
        # one worker thread per kind: requests of a kind run one after another
        self._pools: Dict[OperationKind, QThreadPool] = {}
        for kind in OperationKind:
            pool = QThreadPool(self)
            pool.setMaxThreadCount(1)
            self._pools[kind] = pool
        self._generation: Dict[OperationKind, int] = {kind: 0 for kind in OperationKind}
        # last token handed out per kind; cancel does not move it
        self._latest_request: Dict[OperationKind, int] = {kind: 0 for kind in OperationKind}
        self._running: Dict[OperationKind, Dict[int, object]] = {
            kind: {} for kind in OperationKind
        }

    def create_backup(self, path: Path) -> int:
        """Start writing a backup to path. Returns the request token."""
        token = self._next_token(OperationKind.BACKUP)
        worker = BackupWorker(self._store_factory, path, token)
        worker.signals.backup_result.connect(self._on_backup_result)
        worker.signals.error.connect(self._on_backup_error)
        worker.signals.finished.connect(self._on_backup_finished)
        self._start(OperationKind.BACKUP, token, worker)
        return token

    def restore_backup(self, path: Path) -> int:
        """Start restoring the backup at path. Returns the request token.

        A restore still waiting in the queue when a newer one arrives is
        skipped; one that already started runs to commit or rollback.
        """
        token = self._next_token(OperationKind.RESTORE)
        worker = RestoreWorker(
            self._store_factory,
            path,
            token,
            should_start=lambda: self._latest_request[OperationKind.RESTORE] == token,
        )
        worker.signals.restore_result.connect(self._on_restore_result)
        worker.signals.error.connect(self._on_restore_error)
        worker.signals.finished.connect(self._on_restore_finished)
        self._start(OperationKind.RESTORE, token, worker)
        return token

    def cancel(self, kind: OperationKind) -> None:
        """Stop listening for the current request of this kind.

        The running work continues to completion; only its result is dropped.
        """
        self._generation[kind] += 1
        logger.info("Detached listener for running %s", kind.value)

    def is_running(self, kind: OperationKind) -> bool:
        return bool(self._running[kind])

    def wait_for_done(self, msecs: int = -1) -> bool:
        done = True
        for pool in self._pools.values():
            done = pool.waitForDone(msecs) and done
        return done

    @Slot(int, object)
    def _on_backup_result(self, token: int, result) -> None:
        if self._is_current(OperationKind.BACKUP, token):
            self.backup_completed.emit(result)

    @Slot(int, object)
    def _on_restore_result(self, token: int, result) -> None:
        if self._is_current(OperationKind.RESTORE, token):
            self.restore_completed.emit(result)

    @Slot(int, str)
    def _on_backup_error(self, token: int, message: str) -> None:
        if self._is_current(OperationKind.BACKUP, token):
            self.operation_failed.emit(OperationKind.BACKUP.value, message)

    @Slot(int, str)
    def _on_restore_error(self, token: int, message: str) -> None:
        if self._is_current(OperationKind.RESTORE, token):
            self.operation_failed.emit(OperationKind.RESTORE.value, message)

    @Slot(int)
    def _on_backup_finished(self, token: int) -> None:
        self._running[OperationKind.BACKUP].pop(token, None)

    @Slot(int)
    def _on_restore_finished(self, token: int) -> None:
        self._running[OperationKind.RESTORE].pop(token, None)

    def _next_token(self, kind: OperationKind) -> int:
        if self._running[kind]:
            logger.info("New %s request supersedes the running one", kind.value)
        self._generation[kind] += 1
        self._latest_request[kind] = self._generation[kind]
        return self._generation[kind]

    def _start(self, kind: OperationKind, token: int, worker) -> None:
        # keep the worker (and its signals object) alive until it reports back
        self._running[kind][token] = worker
        self._pools[kind].start(worker)

    def _is_current(self, kind: OperationKind, token: int) -> bool:
        if token != self._generation[kind]:
            logger.warning("Dropping result of superseded %s request %d", kind.value, token)
            return False
        return True
