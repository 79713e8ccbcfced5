"""Backup Builder - walks the store and assembles a snapshot."""

import logging

from manga_backup.core import BackupSnapshot, Manga, MangaEntry
from manga_backup.io import LibraryStore

logger = logging.getLogger(__name__)


class BackupBuilder:
    """Read-only walk over the library.

    Only favorited mangas are included. Each entry carries the manga's
    chapters, sync records and category names; all store categories are
    added as full records.
    """

    def __init__(self, store: LibraryStore) -> None:
        self._store = store

    def build(self) -> BackupSnapshot:
        snapshot = BackupSnapshot()
        for manga in self._store.list_favorite_mangas():
            snapshot.entries.append(self._build_entry(manga))
        snapshot.categories.extend(self._store.list_categories())
        logger.info(
            "Built snapshot with %d manga(s) and %d categor(ies)",
            len(snapshot.entries),
            len(snapshot.categories),
        )
        return snapshot

    def _build_entry(self, manga: Manga) -> MangaEntry:
        return MangaEntry(
            manga=manga,
            chapters=self._store.list_chapters(manga),
            sync=self._store.list_sync(manga),
            categories=[c.name for c in self._store.list_categories_for_manga(manga)],
        )
