"""Main entry point - create a backup file or restore one from the command line."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from manga_backup.coordinators import BackupCoordinator
from manga_backup.io import DatabaseManager
from manga_backup.services import SettingsManager

logger = logging.getLogger("manga_backup")


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="manga-backup",
        description="Back up the manga library to a file or restore it from one",
    )
    p.add_argument("--db", type=Path, help="Library database (default from settings)")
    p.add_argument("--env-dir", type=Path, help="Directory containing the .env file")
    sub = p.add_subparsers(dest="cmd", required=True)
    backup_p = sub.add_parser("backup", help="Create a backup file")
    backup_p.add_argument("path", nargs="?", type=Path, help="Backup file to write")
    restore_p = sub.add_parser("restore", help="Restore from a backup file")
    restore_p.add_argument("path", nargs="?", type=Path, help="Backup file to read")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    """
    Bootstrap following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    args = build_parser().parse_args(argv)

    # 1. Configuration
    settings = SettingsManager(project_root=args.env_dir)
    configure_logging(settings.get_log_level())
    db_path = args.db or settings.get_database_path()
    backup_path = args.path or settings.get_default_backup_path()

    # 2. Application (event loop for worker signals)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Manga Backup")

    # 3. Coordinator, each worker opens its own connection
    coordinator = BackupCoordinator(store_factory=lambda: DatabaseManager.open(db_path))
    exit_code = {"value": 1}

    def on_backup_completed(result) -> None:
        print(f"backup={result.path} mangas={result.manga_count} categories={result.category_count}")
        exit_code["value"] = 0
        app.quit()

    def on_restore_completed(result) -> None:
        print(
            f"restored mangas={result.mangas_restored} "
            f"new_categories={result.categories_inserted} "
            f"chapters={result.chapters_inserted + result.chapters_updated}"
        )
        exit_code["value"] = 0
        app.quit()

    def on_failed(kind: str, message: str) -> None:
        print(f"error: {kind} failed: {message}", file=sys.stderr)
        exit_code["value"] = 1
        app.quit()

    # 4. Signal wiring
    coordinator.backup_completed.connect(on_backup_completed)
    coordinator.restore_completed.connect(on_restore_completed)
    coordinator.operation_failed.connect(on_failed)

    # 5. Trigger and run the event loop until a result arrives
    if args.cmd == "backup":
        coordinator.create_backup(backup_path)
    else:
        coordinator.restore_backup(backup_path)
    app.exec()
    coordinator.wait_for_done()

    return exit_code["value"]


if __name__ == "__main__":
    sys.exit(main())
