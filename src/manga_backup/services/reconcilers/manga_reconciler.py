"""Manga Reconciler - resolves a backup manga to a store manga."""

import logging
from dataclasses import replace
from typing import Tuple

from manga_backup.core import Manga, MangaEntry
from manga_backup.io import LibraryStore

logger = logging.getLogger(__name__)


class MangaReconciler:
    """
    Looks a backup manga up by (url, source).

    New mangas are inserted as they are in the backup. For a manga already
    in the store, the store record is kept as is (its metadata is assumed to
    be fresher than the backup's) and only re-marked as favorite.
    """

    def __init__(self, store: LibraryStore) -> None:
        self._store = store

    def reconcile(self, backup_manga: Manga) -> Tuple[Manga, bool]:
        """
        Persist the manga of a backup entry.

        Returns:
            Tuple of (resolved manga carrying its store id, True if inserted).
        """
        url, source = backup_manga.natural_key
        db_manga = self._store.find_manga(url, source)
        if db_manga is None:
            backup_manga.id = None
            backup_manga.id = self._store.insert_or_update_manga(backup_manga)
            logger.debug("Inserted manga '%s' with id %s", backup_manga.title, backup_manga.id)
            return backup_manga, True

        resolved = replace(db_manga, favorite=True)
        resolved.id = self._store.insert_or_update_manga(resolved)
        backup_manga.id = resolved.id
        logger.debug("Manga '%s' already stored with id %s", resolved.title, resolved.id)
        return resolved, False

    @staticmethod
    def fix_foreign_keys(entry: MangaEntry, manga: Manga) -> None:
        """Point the entry's chapters and sync records at the resolved manga id."""
        for chapter in entry.chapters:
            chapter.manga_id = manga.id
        for sync in entry.sync:
            sync.manga_id = manga.id
