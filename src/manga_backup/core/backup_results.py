"""Result records returned by backup and restore operations."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class BackupResult:
    path: Path
    manga_count: int
    category_count: int


@dataclass
class RestoreResult:
    """Counters collected while a snapshot is reconciled into the store."""

    categories_inserted: int = 0
    categories_matched: int = 0
    mangas_inserted: int = 0
    mangas_updated: int = 0
    chapters_inserted: int = 0
    chapters_updated: int = 0
    sync_inserted: int = 0
    sync_updated: int = 0
    memberships_written: int = 0
    unresolved_categories: List[str] = field(default_factory=list)

    @property
    def mangas_restored(self) -> int:
        return self.mangas_inserted + self.mangas_updated
