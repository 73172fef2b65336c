# ABOUTME: Runtime settings for bookstitch, read from the environment.
# ABOUTME: CLI options override these; nothing here touches disk or network.

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from bookstitch.db.connection import DEFAULT_DB_PATH
from bookstitch.metadata.http import DEFAULT_USER_AGENT

ENV_DB = "BOOKSTITCH_DB"
ENV_GOOGLE_KEY = "GOOGLE_BOOKS_API_KEY"
ENV_USER_AGENT = "BOOKSTITCH_USER_AGENT"


@dataclass
class Settings:
    """Resolved configuration for one process."""

    db_path: Path = DEFAULT_DB_PATH
    google_api_key: str | None = None
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, ignoring blank values."""
        env = os.environ if environ is None else environ
        db = env.get(ENV_DB, "").strip()
        key = env.get(ENV_GOOGLE_KEY, "").strip()
        agent = env.get(ENV_USER_AGENT, "").strip()
        return cls(
            db_path=Path(db).expanduser() if db else DEFAULT_DB_PATH,
            google_api_key=key or None,
            user_agent=agent or DEFAULT_USER_AGENT,
        )

    def override(
        self, *, db_path: Path | None = None, google_api_key: str | None = None
    ) -> "Settings":
        """Return a copy with CLI-supplied values taking precedence."""
        return Settings(
            db_path=db_path or self.db_path,
            google_api_key=google_api_key or self.google_api_key,
            user_agent=self.user_agent,
        )
