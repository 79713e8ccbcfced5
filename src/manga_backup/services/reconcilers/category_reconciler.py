"""Category Reconciler - matches backup categories to store categories by name."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from manga_backup.core import Category
from manga_backup.io import LibraryStore

logger = logging.getLogger(__name__)


@dataclass
class CategoryMapping:
    """Lower-cased category name -> store category id."""

    ids_by_name: Dict[str, int] = field(default_factory=dict)
    inserted: int = 0
    matched: int = 0

    def resolve(self, name: str) -> Optional[int]:
        return self.ids_by_name.get(name.lower())


class CategoryReconciler:
    """
    Binds every backup category to a store id.

    Names are compared case-insensitively. A backup category whose name is
    already in the store takes over the store id and nothing is written; any
    other category is inserted with a store-assigned id. Categories inserted
    earlier in the same pass count as already present, so duplicate names in
    the backup resolve to the first one.
    """

    def __init__(self, store: LibraryStore) -> None:
        self._store = store

    def reconcile(self, backup_categories: Sequence[Category]) -> CategoryMapping:
        mapping = CategoryMapping()
        for db_category in self._store.list_categories():
            mapping.ids_by_name.setdefault(db_category.name_lower, db_category.id)

        for category in backup_categories:
            existing_id = mapping.ids_by_name.get(category.name_lower)
            if existing_id is not None:
                category.id = existing_id
                mapping.matched += 1
                logger.debug("Category '%s' matches store id %s", category.name, existing_id)
                continue

            category.id = None
            category.id = self._store.insert_category(category)
            mapping.ids_by_name[category.name_lower] = category.id
            mapping.inserted += 1
            logger.debug("Inserted category '%s' with id %s", category.name, category.id)

        return mapping
