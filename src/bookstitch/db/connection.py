# ABOUTME: SQLite database connection management for the canonical book store.
# ABOUTME: Opens or creates the database, applies schema and migrations.

import sqlite3
from pathlib import Path

from bookstitch.db.schema import MIGRATIONS, SCHEMA_V1

DEFAULT_DB_PATH = Path.home() / ".bookstitch" / "books.db"


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the current schema version from the database."""
    cursor = conn.execute("SELECT MAX(version) FROM schema_version")
    row = cursor.fetchone()
    return row[0] if row and row[0] is not None else 0


def _apply_migrations(conn: sqlite3.Connection) -> None:
    """Apply pending schema migrations sequentially."""
    current = _get_schema_version(conn)
    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)


def open_store(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the book store database.

    Creates the database file and parent directories if they don't exist.
    Applies the schema on first creation, then any pending migrations.
    Pass ":memory:" as a Path-like string for a throwaway store.

    Args:
        path: Path to the database file. Defaults to ~/.bookstitch/books.db.

    Returns:
        A configured sqlite3.Connection with sqlite3.Row rows.
    """
    db_path = path or DEFAULT_DB_PATH
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")

    if not _schema_exists(conn):
        conn.executescript(SCHEMA_V1)

    _apply_migrations(conn)

    return conn
