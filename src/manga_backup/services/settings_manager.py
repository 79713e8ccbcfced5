"""Settings Manager - database, backup location and logging configuration."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BACKUP_FILENAME = "backup.json"


class SettingsManager:
    """
    Reads configuration from a .env file and the process environment.

    Recognized variables:
        MANGA_BACKUP_DB_PATH: library database (default ~/.manga_backup/library.db)
        MANGA_BACKUP_DIR: directory for backup files (default ~/.manga_backup/backups)
        MANGA_BACKUP_LOG_LEVEL: logging level name (default INFO)
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Directory holding the .env file.
                         If None, uses the current working directory.
        """
        self._project_root = Path(project_root) if project_root else Path.cwd()
        load_dotenv(dotenv_path=self._project_root / ".env")

    @property
    def home_dir(self) -> Path:
        return Path.home() / ".manga_backup"

    def get_database_path(self) -> Path:
        return self._path_from_env("MANGA_BACKUP_DB_PATH", self.home_dir / "library.db")

    def get_backup_dir(self) -> Path:
        return self._path_from_env("MANGA_BACKUP_DIR", self.home_dir / "backups")

    def get_default_backup_path(self) -> Path:
        return self.get_backup_dir() / DEFAULT_BACKUP_FILENAME

    def get_log_level(self) -> int:
        name = (os.getenv("MANGA_BACKUP_LOG_LEVEL") or "INFO").strip().upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        load_dotenv(dotenv_path=self._project_root / ".env", override=True)

    @staticmethod
    def _path_from_env(name: str, default: Path) -> Path:
        value = os.getenv(name)
        if value and value.strip():
            return Path(value.strip()).expanduser()
        return default
