"""SQLite-backed library persistence."""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence

from manga_backup.core import (
    Category,
    Chapter,
    Manga,
    MangaCategory,
    MangaSync,
    StoreError,
)
from manga_backup.io.library_store import LibraryStore

logger = logging.getLogger(__name__)

_MANGA_COLUMNS = (
    "source",
    "url",
    "title",
    "artist",
    "author",
    "description",
    "genre",
    "status",
    "thumbnail_url",
    "favorite",
    "last_update",
    "initialized",
    "viewer",
    "chapter_flags",
)


class DatabaseManager(LibraryStore):
    """Owns the SQLite connection, the library schema and its persistence helpers.

    The connection runs in autocommit mode. Writes outside an explicit
    transaction are durable immediately; begin_transaction() groups the
    following writes until commit() or rollback().

    Every sqlite3.Error is re-raised as StoreError.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        try:
            self.connection = sqlite3.connect(str(self.db_path), isolation_level=None)
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA foreign_keys = ON;")
            if str(db_path) != ":memory:":
                self.connection.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open library database {self.db_path}: {e}") from e

    @classmethod
    def open(cls, db_path: Path) -> "DatabaseManager":
        """Open a database and make sure the schema exists."""
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        manager = cls(db_path)
        manager.ensure_schema()
        return manager

    @property
    def in_transaction(self) -> bool:
        return self.connection.in_transaction

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        statements = [
            """
            CREATE TABLE IF NOT EXISTS mangas (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                source INTEGER NOT NULL,
                url TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                artist TEXT,
                author TEXT,
                description TEXT,
                genre TEXT,
                status INTEGER NOT NULL DEFAULT 0,
                thumbnail_url TEXT,
                favorite INTEGER NOT NULL DEFAULT 0,
                last_update INTEGER NOT NULL DEFAULT 0,
                initialized INTEGER NOT NULL DEFAULT 0,
                viewer INTEGER NOT NULL DEFAULT 0,
                chapter_flags INTEGER NOT NULL DEFAULT 0,
                UNIQUE(url, source)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS chapters (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manga_id INTEGER NOT NULL,
                url TEXT NOT NULL,
                name TEXT NOT NULL DEFAULT '',
                read INTEGER NOT NULL DEFAULT 0,
                last_page_read INTEGER NOT NULL DEFAULT 0,
                date_fetch INTEGER NOT NULL DEFAULT 0,
                date_upload INTEGER NOT NULL DEFAULT 0,
                chapter_number REAL NOT NULL DEFAULT -1,

                FOREIGN KEY(manga_id) REFERENCES mangas(id) ON DELETE CASCADE,
                UNIQUE(manga_id, url)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE COLLATE NOCASE,
                sort_order INTEGER NOT NULL DEFAULT 0,
                flags INTEGER NOT NULL DEFAULT 0
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS manga_sync (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manga_id INTEGER NOT NULL,
                sync_id INTEGER NOT NULL,
                remote_id INTEGER NOT NULL DEFAULT 0,
                title TEXT NOT NULL DEFAULT '',
                last_chapter_read INTEGER NOT NULL DEFAULT 0,
                total_chapters INTEGER NOT NULL DEFAULT 0,
                score REAL NOT NULL DEFAULT 0,
                status INTEGER NOT NULL DEFAULT 0,

                FOREIGN KEY(manga_id) REFERENCES mangas(id) ON DELETE CASCADE,
                UNIQUE(manga_id, sync_id)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS mangas_categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manga_id INTEGER NOT NULL,
                category_id INTEGER NOT NULL,

                FOREIGN KEY(manga_id) REFERENCES mangas(id) ON DELETE CASCADE,
                FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE CASCADE,
                UNIQUE(manga_id, category_id)
            );
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_mangas_favorite
            ON mangas(favorite);
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_chapters_manga
            ON chapters(manga_id);
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_manga_sync_manga
            ON manga_sync(manga_id);
            """,
        ]
        try:
            cur = self.connection.cursor()
            for statement in statements:
                cur.execute(statement)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create library schema: {e}") from e

    # --- transactions -----------------------------------------------------

    def begin_transaction(self) -> None:
        if self.connection.in_transaction:
            raise StoreError("A transaction is already in progress")
        self._execute("BEGIN", (), "begin transaction")

    def commit(self) -> None:
        if not self.connection.in_transaction:
            raise StoreError("No transaction in progress")
        self._execute("COMMIT", (), "commit transaction")

    def rollback(self) -> None:
        if not self.connection.in_transaction:
            return
        logger.debug("Rolling back transaction on %s", self.db_path)
        self._execute("ROLLBACK", (), "roll back transaction")

    # --- mangas -----------------------------------------------------------

    def list_favorite_mangas(self) -> List[Manga]:
        rows = self._fetchall(
            "SELECT * FROM mangas WHERE favorite = 1 ORDER BY id ASC",
            (),
            "list favorite mangas",
        )
        return [self._row_to_manga(row) for row in rows]

    def list_mangas(self) -> List[Manga]:
        rows = self._fetchall("SELECT * FROM mangas ORDER BY id ASC", (), "list mangas")
        return [self._row_to_manga(row) for row in rows]

    def get_manga(self, manga_id: int) -> Optional[Manga]:
        rows = self._fetchall(
            "SELECT * FROM mangas WHERE id = ?", (manga_id,), "get manga"
        )
        return self._row_to_manga(rows[0]) if rows else None

    def find_manga(self, url: str, source: int) -> Optional[Manga]:
        rows = self._fetchall(
            "SELECT * FROM mangas WHERE url = ? AND source = ?",
            (url, source),
            "find manga",
        )
        return self._row_to_manga(rows[0]) if rows else None

    def insert_or_update_manga(self, manga: Manga) -> int:
        values = (
            manga.source,
            manga.url,
            manga.title,
            manga.artist,
            manga.author,
            manga.description,
            manga.genre,
            manga.status,
            manga.thumbnail_url,
            int(manga.favorite),
            manga.last_update,
            int(manga.initialized),
            manga.viewer,
            manga.chapter_flags,
        )
        placeholders = ", ".join("?" for _ in _MANGA_COLUMNS)
        if manga.id is None:
            cur = self._execute(
                f"INSERT INTO mangas ({', '.join(_MANGA_COLUMNS)}) VALUES ({placeholders})",
                values,
                f"insert manga '{manga.title}'",
            )
            return cur.lastrowid

        assignments = ", ".join(f"{column} = excluded.{column}" for column in _MANGA_COLUMNS)
        self._execute(
            f"""
            INSERT INTO mangas (id, {', '.join(_MANGA_COLUMNS)})
            VALUES (?, {placeholders})
            ON CONFLICT(id) DO UPDATE SET {assignments}
            """,
            (manga.id,) + values,
            f"update manga '{manga.title}'",
        )
        return manga.id

    # --- chapters ---------------------------------------------------------

    def list_chapters(self, manga: Manga) -> List[Chapter]:
        rows = self._fetchall(
            "SELECT * FROM chapters WHERE manga_id = ? ORDER BY id ASC",
            (manga.id,),
            "list chapters",
        )
        return [self._row_to_chapter(row) for row in rows]

    def upsert_chapters(self, chapters: Sequence[Chapter]) -> None:
        for chapter in chapters:
            values = (
                chapter.manga_id,
                chapter.url,
                chapter.name,
                int(chapter.read),
                chapter.last_page_read,
                chapter.date_fetch,
                chapter.date_upload,
                chapter.chapter_number,
            )
            if chapter.id is None:
                cur = self._execute(
                    """
                    INSERT INTO chapters (
                        manga_id, url, name, read, last_page_read,
                        date_fetch, date_upload, chapter_number
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    values,
                    f"insert chapter {chapter.url}",
                )
                chapter.id = cur.lastrowid
            else:
                self._execute(
                    """
                    UPDATE chapters
                    SET manga_id = ?, url = ?, name = ?, read = ?, last_page_read = ?,
                        date_fetch = ?, date_upload = ?, chapter_number = ?
                    WHERE id = ?
                    """,
                    values + (chapter.id,),
                    f"update chapter {chapter.url}",
                )

    # --- sync -------------------------------------------------------------

    def list_sync(self, manga: Manga) -> List[MangaSync]:
        rows = self._fetchall(
            "SELECT * FROM manga_sync WHERE manga_id = ? ORDER BY id ASC",
            (manga.id,),
            "list sync",
        )
        return [self._row_to_sync(row) for row in rows]

    def upsert_sync(self, syncs: Sequence[MangaSync]) -> None:
        for sync in syncs:
            values = (
                sync.manga_id,
                sync.sync_id,
                sync.remote_id,
                sync.title,
                sync.last_chapter_read,
                sync.total_chapters,
                sync.score,
                sync.status,
            )
            if sync.id is None:
                cur = self._execute(
                    """
                    INSERT INTO manga_sync (
                        manga_id, sync_id, remote_id, title, last_chapter_read,
                        total_chapters, score, status
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    values,
                    f"insert sync {sync.sync_id}",
                )
                sync.id = cur.lastrowid
            else:
                self._execute(
                    """
                    UPDATE manga_sync
                    SET manga_id = ?, sync_id = ?, remote_id = ?, title = ?,
                        last_chapter_read = ?, total_chapters = ?, score = ?, status = ?
                    WHERE id = ?
                    """,
                    values + (sync.id,),
                    f"update sync {sync.sync_id}",
                )

    # --- categories -------------------------------------------------------

    def list_categories(self) -> List[Category]:
        rows = self._fetchall(
            "SELECT * FROM categories ORDER BY sort_order ASC, id ASC",
            (),
            "list categories",
        )
        return [self._row_to_category(row) for row in rows]

    def insert_category(self, category: Category) -> int:
        cur = self._execute(
            "INSERT INTO categories (name, sort_order, flags) VALUES (?, ?, ?)",
            (category.name, category.order, category.flags),
            f"insert category '{category.name}'",
        )
        return cur.lastrowid

    def list_categories_for_manga(self, manga: Manga) -> List[Category]:
        rows = self._fetchall(
            """
            SELECT c.*
            FROM categories c
            JOIN mangas_categories mc ON c.id = mc.category_id
            WHERE mc.manga_id = ?
            ORDER BY c.sort_order ASC, c.id ASC
            """,
            (manga.id,),
            "list categories for manga",
        )
        return [self._row_to_category(row) for row in rows]

    def list_memberships(self) -> List[MangaCategory]:
        rows = self._fetchall(
            "SELECT manga_id, category_id FROM mangas_categories ORDER BY id ASC",
            (),
            "list memberships",
        )
        return [
            MangaCategory(manga_id=row["manga_id"], category_id=row["category_id"])
            for row in rows
        ]

    def delete_membership(self, manga: Manga) -> None:
        self._execute(
            "DELETE FROM mangas_categories WHERE manga_id = ?",
            (manga.id,),
            f"delete categories of manga '{manga.title}'",
        )

    def insert_membership(self, memberships: Sequence[MangaCategory]) -> None:
        for membership in memberships:
            self._execute(
                "INSERT INTO mangas_categories (manga_id, category_id) VALUES (?, ?)",
                (membership.manga_id, membership.category_id),
                "insert manga category",
            )

    def close(self) -> None:
        self.connection.close()

    # --- helpers ----------------------------------------------------------

    def _execute(self, sql: str, params: tuple, action: str) -> sqlite3.Cursor:
        try:
            return self.connection.execute(sql, params)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to {action}: {e}") from e

    def _fetchall(self, sql: str, params: tuple, action: str) -> List[sqlite3.Row]:
        return self._execute(sql, params, action).fetchall()

    @staticmethod
    def _row_to_manga(row: sqlite3.Row) -> Manga:
        return Manga(
            id=row["id"],
            source=row["source"],
            url=row["url"],
            title=row["title"],
            artist=row["artist"],
            author=row["author"],
            description=row["description"],
            genre=row["genre"],
            status=row["status"],
            thumbnail_url=row["thumbnail_url"],
            favorite=bool(row["favorite"]),
            last_update=row["last_update"],
            initialized=bool(row["initialized"]),
            viewer=row["viewer"],
            chapter_flags=row["chapter_flags"],
        )

    @staticmethod
    def _row_to_chapter(row: sqlite3.Row) -> Chapter:
        return Chapter(
            id=row["id"],
            manga_id=row["manga_id"],
            url=row["url"],
            name=row["name"],
            read=bool(row["read"]),
            last_page_read=row["last_page_read"],
            date_fetch=row["date_fetch"],
            date_upload=row["date_upload"],
            chapter_number=row["chapter_number"],
        )

    @staticmethod
    def _row_to_sync(row: sqlite3.Row) -> MangaSync:
        return MangaSync(
            id=row["id"],
            manga_id=row["manga_id"],
            sync_id=row["sync_id"],
            remote_id=row["remote_id"],
            title=row["title"],
            last_chapter_read=row["last_chapter_read"],
            total_chapters=row["total_chapters"],
            score=row["score"],
            status=row["status"],
        )

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            order=row["sort_order"],
            flags=row["flags"],
        )
