# ABOUTME: SQLite implementation of the BookStore row-store adapter.
# ABOUTME: Select by unique field, update by id, and insert with ON CONFLICT(isbn) semantics.

import sqlite3
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from bookstitch.db.mapping import BOOK_COLUMNS, Book, row_to_book
from bookstitch.db.store import BookNotFoundError, UniqueViolationError

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Columns that can identify a book on their own.
LOOKUP_FIELDS = frozenset(
    {"isbn", "google_books_id", "openlibrary_work_key", "openlibrary_edition_key"}
)

# A description shorter than this still counts as missing for backfill.
_POOR_DESCRIPTION_LENGTH = 50


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_columns(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - set(BOOK_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown book column(s): {', '.join(sorted(unknown))}")


def _unique_field(exc: sqlite3.IntegrityError) -> str | None:
    """Extract "isbn" from "UNIQUE constraint failed: books.isbn", else None."""
    message = str(exc)
    if "UNIQUE constraint failed" not in message:
        return None
    return message.rsplit(".", 1)[-1].strip() or "unknown"


class BookCatalog:
    """Wraps a sqlite3 connection and provides typed access to the books table.

    Timestamps come from an injectable clock so freshness checks can be
    exercised deterministically.
    """

    def __init__(
        self, conn: sqlite3.Connection, clock: Callable[[], datetime] | None = None
    ) -> None:
        self._conn = conn
        self._clock = clock or _utc_now

    def _stamp(self) -> str:
        return self._clock().astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)

    def get_by_id(self, book_id: int) -> Book | None:
        """Retrieve a book by its row ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return row_to_book(row) if row else None

    def find_by_field(self, field: str, value: Any) -> Book | None:
        """Retrieve the oldest book whose identifier column equals value."""
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look books up by {field!r}")
        cursor = self._conn.execute(
            f"SELECT * FROM books WHERE {field} = ? ORDER BY id LIMIT 1", (value,)
        )
        row = cursor.fetchone()
        return row_to_book(row) if row else None

    def find_by_title_author(self, title: str, author: str) -> Book | None:
        """Retrieve the oldest book with exactly this title and author."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE title = ? AND author = ? ORDER BY id LIMIT 1",
            (title, author),
        )
        row = cursor.fetchone()
        return row_to_book(row) if row else None

    def insert_book(self, fields: Mapping[str, Any], conflict_key: str | None = None) -> int:
        """Insert a new book row.

        Args:
            fields: Column values; must include a title.
            conflict_key: Unique column to upsert on. When set, a collision is
                a no-op at the SQL level and is reported as UniqueViolationError.

        Returns:
            The row ID of the inserted book.

        Raises:
            UniqueViolationError: Another row already holds the unique value.
        """
        _check_columns(fields)
        if conflict_key is not None and conflict_key not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot upsert on {conflict_key!r}")

        stamp = self._stamp()
        row = {**fields, "created_at": stamp, "updated_at": stamp}
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)
        sql = f"INSERT INTO books ({columns}) VALUES ({placeholders})"
        if conflict_key is not None:
            sql += f" ON CONFLICT({conflict_key}) DO NOTHING"

        try:
            cursor = self._conn.execute(sql, list(row.values()))
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            field = _unique_field(exc)
            if field is not None:
                raise UniqueViolationError(f"Duplicate book {field}", field=field) from exc
            raise

        if cursor.rowcount == 0:
            raise UniqueViolationError(
                f"Book with {conflict_key}={fields.get(conflict_key)!r} already exists",
                field=conflict_key,
            )
        return cursor.lastrowid  # type: ignore[return-value]

    def update_book(self, book_id: int, fields: Mapping[str, Any]) -> None:
        """Update one or more columns on a book and bump updated_at.

        Raises:
            BookNotFoundError: If the book_id does not exist.
            UniqueViolationError: If the update collides with another row's ISBN.
        """
        if not fields:
            return
        _check_columns(fields)

        set_clause = ", ".join(f"{k} = ?" for k in fields)
        set_clause += ", updated_at = ?"
        values = [*fields.values(), self._stamp(), book_id]

        try:
            cursor = self._conn.execute(f"UPDATE books SET {set_clause} WHERE id = ?", values)
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            field = _unique_field(exc)
            if field is not None:
                raise UniqueViolationError(f"Duplicate book {field}", field=field) from exc
            raise

        if cursor.rowcount == 0:
            raise BookNotFoundError(f"Book with id {book_id} not found")

    def list_all(self) -> list[Book]:
        """Return all books, ordered by title."""
        cursor = self._conn.execute("SELECT * FROM books ORDER BY title, id")
        return [row_to_book(row) for row in cursor.fetchall()]

    def list_incomplete(self, limit: int | None = None) -> list[Book]:
        """Books missing a cover, a page count, or a usable description.

        Never-attempted books come first, then the least recently attempted,
        so a limited backfill cannot keep picking books no source can fix.
        """
        sql = (
            "SELECT * FROM books "
            "WHERE (cover_url IS NULL AND openlibrary_cover_id IS NULL) "
            "OR total_pages IS NULL "
            "OR description IS NULL OR length(description) < ? "
            "ORDER BY enrichment_attempted_at, updated_at, id"
        )
        params: list[Any] = [_POOR_DESCRIPTION_LENGTH]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        cursor = self._conn.execute(sql, params)
        return [row_to_book(row) for row in cursor.fetchall()]

    def mark_enrichment_attempt(self, book_id: int) -> None:
        """Stamp the book as just tried by backfill; updated_at is left alone."""
        self._conn.execute(
            "UPDATE books SET enrichment_attempted_at = ? WHERE id = ?",
            (self._stamp(), book_id),
        )
        self._conn.commit()

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
