"""Tests for SyncReconciler - tracking-service progress merge."""

import pytest

from manga_backup.core import Manga, MangaSync
from manga_backup.io import DatabaseManager
from manga_backup.services import SyncReconciler


@pytest.fixture
def store(tmp_path):
    db = DatabaseManager.open(tmp_path / "library.db")
    yield db
    db.close()


@pytest.fixture
def manga(store):
    manga = Manga(id=None, source=1, url="url to manga", title="title", favorite=True)
    manga.id = store.insert_or_update_manga(manga)
    return manga


def test_last_chapter_read_keeps_maximum(store, manga):
    store.upsert_sync([MangaSync(id=None, manga_id=manga.id, sync_id=1, last_chapter_read=10)])
    backup = [MangaSync(id=None, manga_id=manga.id, sync_id=1, last_chapter_read=4)]

    SyncReconciler(store).reconcile(manga, backup)

    assert store.list_sync(manga)[0].last_chapter_read == 10


def test_backup_progress_ahead_of_store_wins(store, manga):
    store.upsert_sync([MangaSync(id=None, manga_id=manga.id, sync_id=1, last_chapter_read=2)])
    backup = [MangaSync(id=None, manga_id=manga.id, sync_id=1, last_chapter_read=6)]

    outcome = SyncReconciler(store).reconcile(manga, backup)

    assert store.list_sync(manga)[0].last_chapter_read == 6
    assert outcome.updated == 1


def test_only_last_chapter_read_is_merged(store, manga):
    store.upsert_sync(
        [MangaSync(id=None, manga_id=manga.id, sync_id=1, score=8.0, title="store title")]
    )
    backup = [
        MangaSync(id=None, manga_id=manga.id, sync_id=1, score=2.0, title="backup title")
    ]

    SyncReconciler(store).reconcile(manga, backup)

    stored = store.list_sync(manga)[0]
    assert stored.score == 8.0
    assert stored.title == "store title"


def test_new_services_are_inserted(store, manga):
    store.upsert_sync([MangaSync(id=None, manga_id=manga.id, sync_id=1)])
    backup = [MangaSync(id=77, manga_id=manga.id, sync_id=2, last_chapter_read=3)]

    outcome = SyncReconciler(store).reconcile(manga, backup)

    stored = {s.sync_id: s for s in store.list_sync(manga)}
    assert set(stored) == {1, 2}
    assert stored[2].last_chapter_read == 3
    assert outcome.inserted == 1
