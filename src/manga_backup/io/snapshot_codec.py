"""Snapshot Codec - converts the snapshot tree to and from JSON bytes.

Format:
{
    "categories": [{"id": 1, "name": "Action", "order": 0, "flags": 0}],
    "mangas": [
        {
            "manga": {"id": 1, "source": 1, "url": "...", "title": "...", ...},
            "chapters": [{"id": 1, "manga_id": 1, "url": "...", "read": true, ...}],
            "sync": [{"id": 1, "manga_id": 1, "sync_id": 1, "last_chapter_read": 5, ...}],
            "categories": ["Action"]
        }
    ]
}

Empty arrays and null record fields are left out when encoding, and are
treated as empty or default when decoding.
"""

import json
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple, Type

from manga_backup.core import (
    BackupSnapshot,
    Category,
    Chapter,
    Manga,
    MangaEntry,
    MangaSync,
    SnapshotFormatError,
)

MANGA = "manga"
MANGAS = "mangas"
CHAPTERS = "chapters"
MANGA_SYNC = "sync"
CATEGORIES = "categories"

_INT = (int,)
_NUMBER = (int, float)
_STR = (str,)
_BOOL = (bool,)


class SnapshotCodec:
    """Converts BackupSnapshot <-> plain dict tree <-> UTF-8 JSON bytes."""

    def encode(self, snapshot: BackupSnapshot) -> bytes:
        return json.dumps(self.to_dict(snapshot), ensure_ascii=False).encode("utf-8")

    def decode(self, data: bytes) -> BackupSnapshot:
        """
        Parse serialized snapshot bytes.

        Raises:
            SnapshotFormatError: If the bytes are not JSON or the tree is malformed.
        """
        try:
            root = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise SnapshotFormatError(f"Backup is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"Backup is not valid JSON: {e}") from e
        return self.from_dict(root)

    # --- encoding ---------------------------------------------------------

    def to_dict(self, snapshot: BackupSnapshot) -> Dict[str, Any]:
        root: Dict[str, Any] = {}
        if snapshot.categories:
            root[CATEGORIES] = [_record_to_dict(c) for c in snapshot.categories]
        root[MANGAS] = [self._entry_to_dict(entry) for entry in snapshot.entries]
        return root

    @staticmethod
    def _entry_to_dict(entry: MangaEntry) -> Dict[str, Any]:
        element: Dict[str, Any] = {MANGA: _record_to_dict(entry.manga)}
        if entry.chapters:
            element[CHAPTERS] = [_record_to_dict(c) for c in entry.chapters]
        if entry.sync:
            element[MANGA_SYNC] = [_record_to_dict(s) for s in entry.sync]
        if entry.categories:
            element[CATEGORIES] = list(entry.categories)
        return element

    # --- decoding ---------------------------------------------------------

    def from_dict(self, root: Any) -> BackupSnapshot:
        if not isinstance(root, dict):
            raise SnapshotFormatError("Backup root must be a JSON object")

        categories = [
            self._category_from_dict(item)
            for item in _array_or_empty(root, CATEGORIES, "backup")
        ]
        entries = [
            self._entry_from_dict(element, index)
            for index, element in enumerate(_array_or_empty(root, MANGAS, "backup"))
        ]
        return BackupSnapshot(categories=categories, entries=entries)

    def _entry_from_dict(self, element: Any, index: int) -> MangaEntry:
        where = f"mangas[{index}]"
        if not isinstance(element, dict):
            raise SnapshotFormatError(f"{where} must be an object")
        if MANGA not in element:
            raise SnapshotFormatError(f"{where} is missing the '{MANGA}' record")

        category_names = _array_or_empty(element, CATEGORIES, where)
        for name in category_names:
            if not isinstance(name, str):
                raise SnapshotFormatError(f"{where}.{CATEGORIES} must contain names")

        return MangaEntry(
            manga=self._manga_from_dict(element[MANGA], f"{where}.{MANGA}"),
            chapters=[
                self._chapter_from_dict(item, f"{where}.{CHAPTERS}")
                for item in _array_or_empty(element, CHAPTERS, where)
            ],
            sync=[
                self._sync_from_dict(item, f"{where}.{MANGA_SYNC}")
                for item in _array_or_empty(element, MANGA_SYNC, where)
            ],
            categories=list(category_names),
        )

    @staticmethod
    def _manga_from_dict(data: Any, where: str) -> Manga:
        record = _Record(data, where)
        return Manga(
            id=record.optional("id", _INT),
            source=record.required("source", _INT),
            url=record.required("url", _STR),
            title=record.optional("title", _STR, ""),
            artist=record.optional("artist", _STR),
            author=record.optional("author", _STR),
            description=record.optional("description", _STR),
            genre=record.optional("genre", _STR),
            status=record.optional("status", _INT, 0),
            thumbnail_url=record.optional("thumbnail_url", _STR),
            favorite=record.optional("favorite", _BOOL, False),
            last_update=record.optional("last_update", _INT, 0),
            initialized=record.optional("initialized", _BOOL, False),
            viewer=record.optional("viewer", _INT, 0),
            chapter_flags=record.optional("chapter_flags", _INT, 0),
        )

    @staticmethod
    def _chapter_from_dict(data: Any, where: str) -> Chapter:
        record = _Record(data, where)
        return Chapter(
            id=record.optional("id", _INT),
            manga_id=record.optional("manga_id", _INT),
            url=record.required("url", _STR),
            name=record.optional("name", _STR, ""),
            read=record.optional("read", _BOOL, False),
            last_page_read=record.non_negative("last_page_read"),
            date_fetch=record.optional("date_fetch", _INT, 0),
            date_upload=record.optional("date_upload", _INT, 0),
            chapter_number=float(record.optional("chapter_number", _NUMBER, -1.0)),
        )

    @staticmethod
    def _sync_from_dict(data: Any, where: str) -> MangaSync:
        record = _Record(data, where)
        return MangaSync(
            id=record.optional("id", _INT),
            manga_id=record.optional("manga_id", _INT),
            sync_id=record.required("sync_id", _INT),
            remote_id=record.optional("remote_id", _INT, 0),
            title=record.optional("title", _STR, ""),
            last_chapter_read=record.non_negative("last_chapter_read"),
            total_chapters=record.optional("total_chapters", _INT, 0),
            score=float(record.optional("score", _NUMBER, 0.0)),
            status=record.optional("status", _INT, 0),
        )

    @staticmethod
    def _category_from_dict(data: Any) -> Category:
        record = _Record(data, CATEGORIES)
        return Category(
            id=record.optional("id", _INT),
            name=record.required("name", _STR),
            order=record.optional("order", _INT, 0),
            flags=record.optional("flags", _INT, 0),
        )


class _Record:
    """Typed field access on one decoded JSON object."""

    def __init__(self, data: Any, where: str) -> None:
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"{where} must be an object")
        self._data = data
        self._where = where

    def required(self, key: str, types: Tuple[Type, ...]) -> Any:
        if self._data.get(key) is None:
            raise SnapshotFormatError(f"{self._where} is missing required field '{key}'")
        return self._checked(key, types)

    def optional(self, key: str, types: Tuple[Type, ...], default: Any = None) -> Any:
        if self._data.get(key) is None:
            return default
        return self._checked(key, types)

    def non_negative(self, key: str) -> int:
        value = self.optional(key, _INT, 0)
        if value < 0:
            raise SnapshotFormatError(f"{self._where}.{key} must not be negative")
        return value

    def _checked(self, key: str, types: Tuple[Type, ...]) -> Any:
        value = self._data[key]
        # bool is an int subclass; only accept it where a bool is expected
        if isinstance(value, bool) and bool not in types:
            raise SnapshotFormatError(f"{self._where}.{key} has the wrong type")
        if not isinstance(value, types):
            raise SnapshotFormatError(f"{self._where}.{key} has the wrong type")
        return value


def _array_or_empty(container: Dict[str, Any], key: str, where: str) -> List[Any]:
    value: Optional[Any] = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotFormatError(f"{where}.{key} must be an array")
    return value


def _record_to_dict(record: Any) -> Dict[str, Any]:
    return {key: value for key, value in asdict(record).items() if value is not None}
