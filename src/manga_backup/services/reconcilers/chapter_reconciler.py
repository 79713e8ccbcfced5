"""Chapter Reconciler - merges read progress of chapters matched by URL."""

from typing import List, Sequence

from manga_backup.core import Chapter, Manga
from .natural_key_reconciler import NaturalKeyReconciler


class ChapterReconciler(NaturalKeyReconciler[Chapter]):
    """A chapter read on either side stays read; last_page_read never goes back."""

    kind = "chapter"

    @staticmethod
    def natural_key(record: Chapter) -> str:
        return record.url

    def merge(self, backup: Chapter, existing: Chapter) -> None:
        existing.read = backup.read or existing.read
        existing.last_page_read = max(backup.last_page_read, existing.last_page_read)

    def list_existing(self, manga: Manga) -> List[Chapter]:
        return self._store.list_chapters(manga)

    def persist(self, records: Sequence[Chapter]) -> None:
        self._store.upsert_chapters(records)
