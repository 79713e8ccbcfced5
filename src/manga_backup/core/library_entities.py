"""Library entities shared by the store, the snapshot codec and the reconcilers."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class Manga:
    """A library item. Identity across stores is (url, source)."""

    id: Optional[int]
    source: int
    url: str
    title: str = ""
    artist: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    status: int = 0
    thumbnail_url: Optional[str] = None
    favorite: bool = False
    last_update: int = 0
    initialized: bool = False
    viewer: int = 0
    chapter_flags: int = 0

    @property
    def natural_key(self) -> Tuple[str, int]:
        return self.url, self.source


@dataclass
class Chapter:
    id: Optional[int]
    manga_id: Optional[int]
    url: str
    name: str = ""
    read: bool = False
    last_page_read: int = 0
    date_fetch: int = 0
    date_upload: int = 0
    chapter_number: float = -1.0


@dataclass
class Category:
    id: Optional[int]
    name: str
    order: int = 0
    flags: int = 0

    @property
    def name_lower(self) -> str:
        """Case-insensitive identity of the category."""
        return self.name.lower()


@dataclass
class MangaSync:
    """Progress of a manga on an external tracking service."""

    id: Optional[int]
    manga_id: Optional[int]
    sync_id: int
    remote_id: int = 0
    title: str = ""
    last_chapter_read: int = 0
    total_chapters: int = 0
    score: float = 0.0
    status: int = 0


@dataclass(frozen=True)
class MangaCategory:
    manga_id: int
    category_id: int

    @classmethod
    def create(cls, manga: Manga, category_id: int) -> "MangaCategory":
        if manga.id is None:
            raise ValueError(f"Manga '{manga.title}' has no store id")
        return cls(manga_id=manga.id, category_id=category_id)
