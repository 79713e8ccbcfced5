"""Tests for MangaReconciler - natural-key lookup and existing-record-wins policy."""

import pytest

from manga_backup.core import Chapter, Manga, MangaEntry, MangaSync
from manga_backup.io import DatabaseManager
from manga_backup.services import MangaReconciler


@pytest.fixture
def store(tmp_path):
    db = DatabaseManager.open(tmp_path / "library.db")
    yield db
    db.close()


def create_manga(title="title"):
    return Manga(
        id=None,
        source=1,
        url="url to manga",
        title=title,
        author="",
        artist="",
        thumbnail_url="",
        genre="a list of genres",
        description="long description",
        favorite=True,
    )


def test_restore_new_manga(store):
    manga, inserted = MangaReconciler(store).reconcile(create_manga())

    db_mangas = store.list_mangas()
    assert inserted is True
    assert len(db_mangas) == 1
    assert db_mangas[0].title == "title"
    assert db_mangas[0].favorite is True
    assert manga.id == db_mangas[0].id


def test_backup_id_is_cleared_before_insert(store):
    backup = create_manga()
    backup.id = 99

    manga, _ = MangaReconciler(store).reconcile(backup)

    assert manga.id != 99
    assert store.get_manga(99) is None


def test_restore_existing_manga(store):
    store.insert_or_update_manga(create_manga())

    _, inserted = MangaReconciler(store).reconcile(create_manga())

    assert inserted is False
    assert len(store.list_mangas()) == 1


def test_existing_record_wins_over_backup_fields(store):
    manga = create_manga()
    manga.chapter_flags = 1024
    manga.thumbnail_url = "old"
    store.insert_or_update_manga(manga)

    backup = create_manga()
    backup.chapter_flags = 512
    backup.thumbnail_url = "from backup"
    backup.description = "stale description"
    MangaReconciler(store).reconcile(backup)

    db_mangas = store.list_mangas()
    assert len(db_mangas) == 1
    assert db_mangas[0].chapter_flags == 1024
    assert db_mangas[0].thumbnail_url == "old"
    assert db_mangas[0].description == "long description"


def test_existing_manga_is_marked_favorite(store):
    manga = create_manga()
    manga.favorite = False
    existing_id = store.insert_or_update_manga(manga)

    resolved, _ = MangaReconciler(store).reconcile(create_manga())

    assert resolved.id == existing_id
    assert resolved.favorite is True
    assert store.get_manga(existing_id).favorite is True


def test_fix_foreign_keys_rewrites_children():
    entry = MangaEntry(
        manga=create_manga(),
        chapters=[Chapter(id=1, manga_id=50, url="c1"), Chapter(id=2, manga_id=50, url="c2")],
        sync=[MangaSync(id=3, manga_id=50, sync_id=1)],
    )
    resolved = create_manga()
    resolved.id = 7

    MangaReconciler.fix_foreign_keys(entry, resolved)

    assert [c.manga_id for c in entry.chapters] == [7, 7]
    assert entry.sync[0].manga_id == 7
