"""Restore Orchestrator - runs every reconciler inside a single transaction."""

import logging
from enum import Enum
from typing import Optional

from manga_backup.core import BackupSnapshot, MangaEntry, RestoreResult
from manga_backup.io import LibraryStore
from manga_backup.services.reconcilers import (
    CategoryMapping,
    CategoryReconciler,
    ChapterReconciler,
    MangaReconciler,
    MembershipReconciler,
    SyncReconciler,
)
from manga_backup.services.transaction import run_in_transaction

logger = logging.getLogger(__name__)


class RestoreState(Enum):
    IDLE = "idle"
    BEGIN = "begin"
    RECONCILE_CATEGORIES = "reconcile_categories"
    RECONCILE_MANGA_ENTRIES = "reconcile_manga_entries"
    COMMIT = "commit"
    ABORT = "abort"
    DONE = "done"


class RestoreOrchestrator:
    """
    Merges a snapshot into the store as one all-or-nothing operation.

    Sequence: Begin -> ReconcileCategories -> ReconcileMangaEntries -> Commit.
    Each entry runs ReconcileManga -> FixForeignKeys -> ReconcileChapters ->
    ReconcileSync -> ReconcileMembership. Any exception moves to Abort,
    rolls the transaction back and propagates to the caller.

    Reconciliation annotates the snapshot records with store ids.
    """

    def __init__(
        self,
        store: LibraryStore,
        category_reconciler: Optional[CategoryReconciler] = None,
        manga_reconciler: Optional[MangaReconciler] = None,
        chapter_reconciler: Optional[ChapterReconciler] = None,
        sync_reconciler: Optional[SyncReconciler] = None,
        membership_reconciler: Optional[MembershipReconciler] = None,
    ) -> None:
        if store is None:
            raise ValueError("LibraryStore must not be None")
        self._store = store
        self._categories = category_reconciler or CategoryReconciler(store)
        self._mangas = manga_reconciler or MangaReconciler(store)
        self._chapters = chapter_reconciler or ChapterReconciler(store)
        self._sync = sync_reconciler or SyncReconciler(store)
        self._memberships = membership_reconciler or MembershipReconciler(store)
        self.state = RestoreState.IDLE

    def restore(self, snapshot: BackupSnapshot) -> RestoreResult:
        result = RestoreResult()
        self._transition(RestoreState.BEGIN)
        try:
            run_in_transaction(self._store, lambda: self._reconcile(snapshot, result))
        except Exception:
            self._transition(RestoreState.ABORT)
            logger.exception("Restore aborted; all changes rolled back")
            raise
        self._transition(RestoreState.COMMIT)
        self._transition(RestoreState.DONE)
        logger.info(
            "Restore committed: %d manga(s), %d new categor(ies), "
            "%d chapter(s) inserted, %d updated",
            result.mangas_restored,
            result.categories_inserted,
            result.chapters_inserted,
            result.chapters_updated,
        )
        return result

    def _reconcile(self, snapshot: BackupSnapshot, result: RestoreResult) -> None:
        self._transition(RestoreState.RECONCILE_CATEGORIES)
        mapping = self._categories.reconcile(snapshot.categories)
        result.categories_inserted = mapping.inserted
        result.categories_matched = mapping.matched

        self._transition(RestoreState.RECONCILE_MANGA_ENTRIES)
        for entry in snapshot.entries:
            self._reconcile_entry(entry, mapping, result)

    def _reconcile_entry(
        self, entry: MangaEntry, mapping: CategoryMapping, result: RestoreResult
    ) -> None:
        manga, inserted = self._mangas.reconcile(entry.manga)
        if inserted:
            result.mangas_inserted += 1
        else:
            result.mangas_updated += 1

        self._mangas.fix_foreign_keys(entry, manga)

        chapters = self._chapters.reconcile(manga, entry.chapters)
        result.chapters_inserted += chapters.inserted
        result.chapters_updated += chapters.updated

        sync = self._sync.reconcile(manga, entry.sync)
        result.sync_inserted += sync.inserted
        result.sync_updated += sync.updated

        written, unresolved = self._memberships.reconcile(manga, entry.categories, mapping)
        result.memberships_written += written
        result.unresolved_categories.extend(unresolved)

    def _transition(self, state: RestoreState) -> None:
        logger.debug("Restore state %s -> %s", self.state.value, state.value)
        self.state = state
