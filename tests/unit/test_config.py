# ABOUTME: Unit tests for environment-driven Settings.
# ABOUTME: Checks defaults, env parsing, blank handling, and CLI overrides.

from pathlib import Path

from bookstitch.config import Settings
from bookstitch.db.connection import DEFAULT_DB_PATH
from bookstitch.metadata.http import DEFAULT_USER_AGENT


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.google_api_key is None
        assert settings.user_agent == DEFAULT_USER_AGENT

    def test_from_env(self, tmp_path: Path) -> None:
        settings = Settings.from_env(
            {
                "BOOKSTITCH_DB": str(tmp_path / "b.db"),
                "GOOGLE_BOOKS_API_KEY": "secret",
                "BOOKSTITCH_USER_AGENT": "me/1.0",
            }
        )
        assert settings.db_path == tmp_path / "b.db"
        assert settings.google_api_key == "secret"
        assert settings.user_agent == "me/1.0"

    def test_blank_values_ignored(self) -> None:
        settings = Settings.from_env({"GOOGLE_BOOKS_API_KEY": "  ", "BOOKSTITCH_DB": ""})
        assert settings.google_api_key is None
        assert settings.db_path == DEFAULT_DB_PATH

    def test_override(self, tmp_path: Path) -> None:
        base = Settings.from_env({"GOOGLE_BOOKS_API_KEY": "env-key"})
        merged = base.override(db_path=tmp_path / "x.db")
        assert merged.db_path == tmp_path / "x.db"
        assert merged.google_api_key == "env-key"
        assert base.override(google_api_key="cli-key").google_api_key == "cli-key"
