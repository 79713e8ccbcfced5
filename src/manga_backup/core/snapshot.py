"""Snapshot Model - in-memory tree of a library backup."""

from dataclasses import dataclass, field
from typing import List

from .library_entities import Category, Chapter, Manga, MangaSync


@dataclass
class MangaEntry:
    """One favorited manga with everything that hangs off it.

    Categories are stored by name; ids are not portable between stores.
    """

    manga: Manga
    chapters: List[Chapter] = field(default_factory=list)
    sync: List[MangaSync] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)


@dataclass
class BackupSnapshot:
    """Root of a backup: all categories plus one entry per favorited manga."""

    categories: List[Category] = field(default_factory=list)
    entries: List[MangaEntry] = field(default_factory=list)

    @property
    def manga_count(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.categories and not self.entries
