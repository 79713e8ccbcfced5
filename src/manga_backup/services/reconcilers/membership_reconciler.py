"""Category-Membership Reconciler - replaces a manga's categories wholesale."""

import logging
from typing import List, Sequence, Tuple

from manga_backup.core import Manga, MangaCategory
from manga_backup.io import LibraryStore
from .category_reconciler import CategoryMapping

logger = logging.getLogger(__name__)


class MembershipReconciler:
    """
    Makes the backup's category names the manga's complete category set.

    Memberships are not merged: existing ones are deleted and the resolved
    set is inserted. Names with no store category are skipped.
    """

    def __init__(self, store: LibraryStore) -> None:
        self._store = store

    def reconcile(
        self, manga: Manga, category_names: Sequence[str], mapping: CategoryMapping
    ) -> Tuple[int, List[str]]:
        """
        Returns:
            Tuple of (memberships written, backup names that could not be resolved).
        """
        memberships: List[MangaCategory] = []
        seen = set()
        unresolved: List[str] = []
        for name in category_names:
            category_id = mapping.resolve(name)
            if category_id is None:
                logger.warning(
                    "Manga '%s' refers to unknown category '%s'; skipping", manga.title, name
                )
                unresolved.append(name)
                continue
            if category_id in seen:
                continue
            seen.add(category_id)
            memberships.append(MangaCategory.create(manga, category_id))

        self._store.delete_membership(manga)
        if memberships:
            self._store.insert_membership(memberships)
        return len(memberships), unresolved
