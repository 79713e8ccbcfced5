"""Sync Reconciler - merges tracking-service progress matched by service id."""

from typing import List, Sequence

from manga_backup.core import Manga, MangaSync
from .natural_key_reconciler import NaturalKeyReconciler


class SyncReconciler(NaturalKeyReconciler[MangaSync]):
    """Only last_chapter_read is merged, keeping the highest value."""

    kind = "sync"

    @staticmethod
    def natural_key(record: MangaSync) -> int:
        return record.sync_id

    def merge(self, backup: MangaSync, existing: MangaSync) -> None:
        existing.last_chapter_read = max(backup.last_chapter_read, existing.last_chapter_read)

    def list_existing(self, manga: Manga) -> List[MangaSync]:
        return self._store.list_sync(manga)

    def persist(self, records: Sequence[MangaSync]) -> None:
        self._store.upsert_sync(records)
