# ABOUTME: Shared Click options for bookstitch CLI commands.
# ABOUTME: Provides reusable decorators for --db and --google-api-key.

from pathlib import Path

import click

from bookstitch.config import ENV_DB, ENV_GOOGLE_KEY
from bookstitch.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    envvar=ENV_DB,
    default=None,
    help=f"Path to the book database (default: {DEFAULT_DB_PATH})",
)

google_key_option = click.option(
    "--google-api-key",
    "google_api_key",
    envvar=ENV_GOOGLE_KEY,
    default=None,
    help="Google Books API key; without it Google lookups are skipped.",
)
