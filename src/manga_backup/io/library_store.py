"""Library Store abstraction - the narrow interface the backup engine depends on."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from manga_backup.core import Category, Chapter, Manga, MangaCategory, MangaSync


class LibraryStore(ABC):
    """
    Abstract interface over the library database.

    The backup engine holds no storage of its own; it reads and mutates the
    library only through these methods. Implementations assign ids on insert.
    """

    @abstractmethod
    def list_favorite_mangas(self) -> List[Manga]:
        """Return favorited mangas in a stable order."""

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """Return every category in a stable order."""

    @abstractmethod
    def list_chapters(self, manga: Manga) -> List[Chapter]:
        pass

    @abstractmethod
    def list_sync(self, manga: Manga) -> List[MangaSync]:
        pass

    @abstractmethod
    def list_categories_for_manga(self, manga: Manga) -> List[Category]:
        pass

    @abstractmethod
    def find_manga(self, url: str, source: int) -> Optional[Manga]:
        """Look up a manga by its natural key, or None."""

    @abstractmethod
    def insert_or_update_manga(self, manga: Manga) -> int:
        """
        Persist a manga.

        A manga without id is inserted; one with an id is written under that id.

        Returns:
            The store id of the manga.
        """

    @abstractmethod
    def insert_category(self, category: Category) -> int:
        """Insert a category and return its store-assigned id."""

    @abstractmethod
    def upsert_chapters(self, chapters: Sequence[Chapter]) -> None:
        """Insert chapters with no id, update those with one.

        Inserted chapters get their new id assigned in place.
        """

    @abstractmethod
    def upsert_sync(self, syncs: Sequence[MangaSync]) -> None:
        """Insert sync records with no id, update those with one."""

    @abstractmethod
    def delete_membership(self, manga: Manga) -> None:
        """Remove every category membership of a manga."""

    @abstractmethod
    def insert_membership(self, memberships: Sequence[MangaCategory]) -> None:
        pass

    @abstractmethod
    def begin_transaction(self) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    def close(self) -> None:
        """Release resources held by the store."""
