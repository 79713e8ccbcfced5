#!/usr/bin/env python3
"""
Tests for BackupCoordinator - background execution and single-flight delivery.
"""

import json
import threading

import pytest
from PySide6.QtCore import QCoreApplication

from manga_backup.coordinators import BackupCoordinator, OperationKind
from manga_backup.core import Category, Manga
from manga_backup.io import DatabaseManager


def ensure_qt_app():
    if QCoreApplication.instance() is None:
        QCoreApplication([])


def drain(coordinator):
    """Wait for the workers, then deliver their queued signals."""
    assert coordinator.wait_for_done(10000)
    for _ in range(3):
        QCoreApplication.processEvents()


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "library.db"
    store = DatabaseManager.open(path)
    manga = Manga(id=None, source=1, url="url to manga", title="title", favorite=True)
    store.insert_or_update_manga(manga)
    store.insert_category(Category(id=None, name="cat"))
    store.close()
    return path


@pytest.fixture
def coordinator(db_path):
    ensure_qt_app()
    coordinator = BackupCoordinator(store_factory=lambda: DatabaseManager.open(db_path))
    yield coordinator
    coordinator.wait_for_done()


@pytest.fixture
def received(coordinator):
    events = {"backup": [], "restore": [], "failed": []}
    coordinator.backup_completed.connect(lambda result: events["backup"].append(result))
    coordinator.restore_completed.connect(lambda result: events["restore"].append(result))
    coordinator.operation_failed.connect(
        lambda kind, message: events["failed"].append((kind, message))
    )
    return events


def test_coordinator_fails_fast_on_none_factory():
    ensure_qt_app()
    with pytest.raises(ValueError, match="Store factory must not be None"):
        BackupCoordinator(store_factory=None)


def test_backup_result_is_delivered(coordinator, received, tmp_path):
    path = tmp_path / "backup.json"

    coordinator.create_backup(path)
    drain(coordinator)

    assert len(received["backup"]) == 1
    assert received["backup"][0].manga_count == 1
    assert json.loads(path.read_text(encoding="utf-8"))["categories"][0]["name"] == "cat"
    assert not coordinator.is_running(OperationKind.BACKUP)


def test_new_request_supersedes_result_of_previous(coordinator, received, tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"

    coordinator.create_backup(first)
    coordinator.create_backup(second)
    drain(coordinator)

    # both ran, only the latest result reaches the listener
    assert first.exists()
    assert second.exists()
    assert [r.path for r in received["backup"]] == [second.resolve()]


def test_cancel_detaches_listener_but_work_completes(coordinator, received, tmp_path):
    path = tmp_path / "backup.json"

    coordinator.create_backup(path)
    coordinator.cancel(OperationKind.BACKUP)
    drain(coordinator)

    assert received["backup"] == []
    assert path.exists()


def test_restore_failure_is_reported(coordinator, received, tmp_path):
    coordinator.restore_backup(tmp_path / "missing.json")
    drain(coordinator)

    assert received["restore"] == []
    assert len(received["failed"]) == 1
    kind, message = received["failed"][0]
    assert kind == "restore"
    assert "missing.json" in message


def test_queued_restore_is_skipped_when_superseded(db_path, tmp_path):
    ensure_qt_app()
    entered = threading.Event()
    release = threading.Event()
    opened = []

    def store_factory():
        opened.append(True)
        if len(opened) == 1:
            # hold the first restore inside the pool until the others are queued
            entered.set()
            release.wait(10)
        return DatabaseManager.open(db_path)

    coordinator = BackupCoordinator(store_factory=store_factory)
    results = []
    coordinator.restore_completed.connect(results.append)

    files = []
    for name in ("first", "queued", "latest"):
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps({"categories": [{"name": name}]}), encoding="utf-8")
        files.append(path)

    coordinator.restore_backup(files[0])
    assert entered.wait(10)
    coordinator.restore_backup(files[1])
    coordinator.restore_backup(files[2])
    release.set()
    drain(coordinator)

    # started restore still commits, the queued one never opens the store
    assert len(opened) == 2
    assert len(results) == 1
    assert results[0].categories_inserted == 1
    store = DatabaseManager.open(db_path)
    try:
        names = {c.name for c in store.list_categories()}
    finally:
        store.close()
    assert names == {"cat", "first", "latest"}
    assert not coordinator.is_running(OperationKind.RESTORE)


def test_backup_and_restore_are_independent(coordinator, received, tmp_path):
    restore_file = tmp_path / "restore.json"
    restore_file.write_text(json.dumps({"categories": [{"name": "new"}]}), encoding="utf-8")

    coordinator.restore_backup(restore_file)
    coordinator.create_backup(tmp_path / "backup.json")
    drain(coordinator)

    assert len(received["backup"]) == 1
    assert len(received["restore"]) == 1
    assert received["failed"] == []
