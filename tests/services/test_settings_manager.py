"""Unit tests for SettingsManager."""

import logging
import os
import tempfile
from pathlib import Path

import pytest

from manga_backup.services import SettingsManager

_VARIABLES = ("MANGA_BACKUP_DB_PATH", "MANGA_BACKUP_DIR", "MANGA_BACKUP_LOG_LEVEL")


@pytest.fixture
def temp_env_dir():
    """Provide a temporary directory for .env files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env():
    """Clean up settings variables from environment before and after test."""
    old_values = {name: os.environ.pop(name, None) for name in _VARIABLES}
    yield
    for name, value in old_values.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


class TestSettingsManagerPaths:
    """Tests for database and backup locations."""

    def test_defaults_live_under_home(self, temp_env_dir, clean_env):
        settings = SettingsManager(project_root=temp_env_dir)

        assert settings.get_database_path() == Path.home() / ".manga_backup" / "library.db"
        assert settings.get_default_backup_path() == (
            Path.home() / ".manga_backup" / "backups" / "backup.json"
        )

    def test_paths_are_read_from_env_file(self, temp_env_dir, clean_env):
        (temp_env_dir / ".env").write_text(
            f"MANGA_BACKUP_DB_PATH={temp_env_dir / 'lib.db'}\n"
            f"MANGA_BACKUP_DIR={temp_env_dir / 'backups'}\n"
        )

        settings = SettingsManager(project_root=temp_env_dir)

        assert settings.get_database_path() == temp_env_dir / "lib.db"
        assert settings.get_default_backup_path() == temp_env_dir / "backups" / "backup.json"

    def test_blank_value_falls_back_to_default(self, temp_env_dir, clean_env):
        os.environ["MANGA_BACKUP_DIR"] = "   "

        settings = SettingsManager(project_root=temp_env_dir)

        assert settings.get_backup_dir() == Path.home() / ".manga_backup" / "backups"


class TestSettingsManagerLogLevel:

    def test_default_level_is_info(self, temp_env_dir, clean_env):
        assert SettingsManager(project_root=temp_env_dir).get_log_level() == logging.INFO

    def test_level_name_is_case_insensitive(self, temp_env_dir, clean_env):
        os.environ["MANGA_BACKUP_LOG_LEVEL"] = "debug"
        assert SettingsManager(project_root=temp_env_dir).get_log_level() == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, temp_env_dir, clean_env):
        os.environ["MANGA_BACKUP_LOG_LEVEL"] = "chatty"
        assert SettingsManager(project_root=temp_env_dir).get_log_level() == logging.INFO


def test_reload_env_overrides_values(temp_env_dir, clean_env):
    env_file = temp_env_dir / ".env"
    env_file.write_text("MANGA_BACKUP_LOG_LEVEL=WARNING\n")
    settings = SettingsManager(project_root=temp_env_dir)
    assert settings.get_log_level() == logging.WARNING

    env_file.write_text("MANGA_BACKUP_LOG_LEVEL=ERROR\n")
    settings.reload_env()

    assert settings.get_log_level() == logging.ERROR
