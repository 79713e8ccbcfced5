"""Tests for BackupManager - file-level backup and restore."""

import json
from unittest.mock import patch

import pytest

from manga_backup.core import (
    BackupIOError,
    Category,
    Chapter,
    Manga,
    SnapshotFormatError,
    StoreError,
)
from manga_backup.io import DatabaseManager
from manga_backup.services import BackupManager


@pytest.fixture
def store(tmp_path):
    db = DatabaseManager.open(tmp_path / "library.db")
    yield db
    db.close()


@pytest.fixture
def manager(store):
    return BackupManager(store)


def seed(store):
    manga = Manga(id=None, source=1, url="url to manga", title="title", favorite=True)
    manga.id = store.insert_or_update_manga(manga)
    store.upsert_chapters([Chapter(id=None, manga_id=manga.id, url="c1", last_page_read=3)])
    store.insert_category(Category(id=None, name="cat"))
    return manga


def test_backup_to_file_writes_snapshot(manager, store, tmp_path):
    seed(store)
    path = tmp_path / "out" / "backup.json"

    result = manager.backup_to_file(path)

    assert result.path == path.resolve()
    assert result.manga_count == 1
    assert result.category_count == 1
    tree = json.loads(path.read_text(encoding="utf-8"))
    assert tree["mangas"][0]["manga"]["title"] == "title"
    assert tree["mangas"][0]["chapters"][0]["url"] == "c1"
    assert "sync" not in tree["mangas"][0]


def test_backup_store_failure_leaves_no_file(manager, tmp_path):
    path = tmp_path / "backup.json"

    with patch.object(manager._store, "list_categories", side_effect=StoreError("locked")):
        with pytest.raises(StoreError):
            manager.backup_to_file(path)

    assert not path.exists()


def test_restore_from_missing_file_raises_io_error(manager, store, tmp_path):
    with pytest.raises(BackupIOError):
        manager.restore_from_file(tmp_path / "missing.json")

    assert store.list_mangas() == []


def test_malformed_file_fails_before_transaction(manager, store, tmp_path):
    path = tmp_path / "backup.json"
    path.write_text('{"categories": [{"name": "cat"}], "mangas": [{}]}', encoding="utf-8")

    with patch.object(store, "begin_transaction", wraps=store.begin_transaction) as begin:
        with pytest.raises(SnapshotFormatError):
            manager.restore_from_file(path)

    begin.assert_not_called()
    assert store.list_categories() == []


def test_restore_from_bytes(manager, store):
    result = manager.restore_from_bytes(b'{"categories": [{"name": "cat"}], "mangas": []}')

    assert result.categories_inserted == 1
    assert [c.name for c in store.list_categories()] == ["cat"]


def test_none_store_is_rejected():
    with pytest.raises(ValueError, match="LibraryStore must not be None"):
        BackupManager(None)
