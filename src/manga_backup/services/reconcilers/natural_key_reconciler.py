"""Base class for reconcilers that merge records matched by a natural key."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, List, Sequence, TypeVar

from manga_backup.core import Manga
from manga_backup.io import LibraryStore

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass
class MergeOutcome:
    inserted: int = 0
    updated: int = 0


class NaturalKeyReconciler(ABC, Generic[R]):
    """
    Merges a manga's backup records into the records already in the store.

    Records are matched by natural_key(), never by id. A match merges the
    backup record into the store record, which is then queued for update;
    a backup record without match has its id cleared and is queued for insert.
    Both queues go to the store in one batch.
    """

    kind = "record"

    def __init__(self, store: LibraryStore) -> None:
        self._store = store

    @staticmethod
    @abstractmethod
    def natural_key(record: R) -> Hashable:
        pass

    @abstractmethod
    def merge(self, backup: R, existing: R) -> None:
        """Fold backup progress into the existing store record in place."""

    @abstractmethod
    def list_existing(self, manga: Manga) -> List[R]:
        pass

    @abstractmethod
    def persist(self, records: Sequence[R]) -> None:
        pass

    def reconcile(self, manga: Manga, backup_records: Sequence[R]) -> MergeOutcome:
        outcome = MergeOutcome()
        if not backup_records:
            return outcome

        by_key: Dict[Hashable, R] = {
            self.natural_key(record): record for record in self.list_existing(manga)
        }
        queued: Dict[Hashable, R] = {}

        for backup in backup_records:
            key = self.natural_key(backup)
            existing = queued.get(key, by_key.get(key))
            if existing is not None:
                self.merge(backup, existing)
                if key not in queued and key in by_key:
                    outcome.updated += 1
                logger.debug("Merged %s %r into store record", self.kind, key)
            else:
                backup.id = None
                existing = backup
                outcome.inserted += 1
                logger.debug("Queued new %s %r", self.kind, key)
            queued[key] = existing

        self.persist(list(queued.values()))
        return outcome
