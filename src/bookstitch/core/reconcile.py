# ABOUTME: Record reconciliation: guarantee exactly one canonical book row per incoming record.
# ABOUTME: ISBN lookup, identifier lookup, title+author lookup, then insert with conflict recovery.

import logging
from dataclasses import asdict, dataclass
from typing import Any

from bookstitch.core.merge import UNTITLED, is_good_value, merge_fields
from bookstitch.db.mapping import Book
from bookstitch.db.store import BookStore, is_unique_violation
from bookstitch.metadata.keys import clean_isbn, normalize_edition_key, normalize_work_key
from bookstitch.metadata.types import IncomingRecord

logger = logging.getLogger(__name__)

# Identifier columns tried after ISBN, most specific first.
_IDENTIFIER_LOOKUPS = ("google_books_id", "openlibrary_edition_key", "openlibrary_work_key")


class InsufficientMetadataError(ValueError):
    """Raised when a record has no identifier and lacks a good title or author."""


@dataclass
class ExtractedFields:
    """Column-shaped values pulled out of an IncomingRecord."""

    title: str | None = None
    author: str | None = None
    isbn: str | None = None
    google_books_id: str | None = None
    openlibrary_work_key: str | None = None
    openlibrary_edition_key: str | None = None
    openlibrary_cover_id: int | None = None
    total_pages: int | None = None
    description: str | None = None
    cover_url: str | None = None

    @property
    def has_strong_key(self) -> bool:
        return bool(
            self.isbn
            or self.google_books_id
            or self.openlibrary_work_key
            or self.openlibrary_edition_key
        )

    def columns(self) -> dict[str, Any]:
        """Every column that carries a value."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def insert_row(self) -> dict[str, Any]:
        """Columns for a brand-new row: placeholders dropped, title defaulted."""
        row = {k: v for k, v in self.columns().items() if is_good_value(k, v)}
        row.setdefault("title", UNTITLED)
        return row


def extract_fields(record: IncomingRecord) -> ExtractedFields:
    """Normalize an IncomingRecord into column values.

    Pages and cover ids that are not strictly positive are dropped here so
    they can never reach the store.
    """
    pages = record.total_pages
    cover_id = record.openlibrary_cover_id
    title = record.title.strip() if record.title and record.title.strip() else None
    return ExtractedFields(
        title=title,
        author=record.author,
        isbn=clean_isbn(record.best_isbn),
        google_books_id=(record.google_books_id or "").strip() or None,
        openlibrary_work_key=normalize_work_key(record.openlibrary_work_key),
        openlibrary_edition_key=normalize_edition_key(record.openlibrary_edition_key),
        openlibrary_cover_id=cover_id if is_good_value("openlibrary_cover_id", cover_id) else None,
        total_pages=pages if is_good_value("total_pages", pages) else None,
        description=(record.description or "").strip() or None,
        cover_url=(record.cover_url or "").strip() or None,
    )


def _same_edition(candidate: Book, fields: ExtractedFields) -> bool:
    """False when both sides carry an ISBN and they differ (distinct editions)."""
    return not (fields.isbn and candidate.isbn and candidate.isbn != fields.isbn)


def find_existing(store: BookStore, fields: ExtractedFields) -> Book | None:
    """Locate the canonical row for fields, or None.

    Order: ISBN, then Google/OpenLibrary identifiers, then exact
    title+author. Rows holding a different ISBN are never matched by the
    weaker lookups.
    """
    if fields.isbn:
        found = store.find_by_field("isbn", fields.isbn)
        if found:
            logger.debug("Matched book %d by isbn %s", found.id, fields.isbn)
            return found

    for column in _IDENTIFIER_LOOKUPS:
        value = getattr(fields, column)
        if not value:
            continue
        found = store.find_by_field(column, value)
        if found and _same_edition(found, fields):
            logger.debug("Matched book %d by %s %s", found.id, column, value)
            return found

    if is_good_value("title", fields.title) and is_good_value("author", fields.author):
        found = store.find_by_title_author(fields.title, fields.author)  # type: ignore[arg-type]
        if found and _same_edition(found, fields):
            logger.debug("Matched book %d by title+author", found.id)
            return found

    return None


def _apply_merge(store: BookStore, existing: Book, fields: ExtractedFields) -> None:
    updates = merge_fields(existing, fields.columns())
    if not updates:
        return
    try:
        store.update_book(existing.id, updates)
    except Exception as exc:
        # The ISBN we tried to backfill was claimed by another row meanwhile.
        if not is_unique_violation(exc) or "isbn" not in updates:
            raise
        logger.warning(
            "ISBN %s already belongs to another book; updating book %d without it",
            updates.pop("isbn"),
            existing.id,
        )
        if updates:
            store.update_book(existing.id, updates)
        return
    logger.info("Updated book %d: %s", existing.id, ", ".join(sorted(updates)))


def _on_conflict_refetch(store: BookStore, fields: ExtractedFields, exc: Exception) -> int:
    """Resolve a lost insert race by returning the row that won it."""
    winner = store.find_by_field("isbn", fields.isbn) if fields.isbn else None
    if winner is None:
        winner = find_existing(store, fields)
    if winner is None:
        raise exc
    logger.info("Insert raced with another writer; using book %d", winner.id)
    _apply_merge(store, winner, fields)
    return winner.id


def _can_insert(fields: ExtractedFields) -> bool:
    """Whether a new row could be found again by find_existing."""
    if fields.has_strong_key:
        return True
    return is_good_value("title", fields.title) and is_good_value("author", fields.author)


def ensure_book(store: BookStore, record: IncomingRecord) -> int:
    """Guarantee exactly one canonical row represents record and return its id.

    Idempotent: equivalent records always resolve to the same id, and a
    second call never changes values written by the first. Storage errors
    other than uniqueness violations propagate to the caller.

    Raises:
        InsufficientMetadataError: If the record has no identifier and lacks
            a good title or a good author.
    """
    fields = extract_fields(record)

    existing = find_existing(store, fields)
    if existing is not None:
        _apply_merge(store, existing, fields)
        return existing.id

    if not _can_insert(fields):
        raise InsufficientMetadataError(
            "Record needs an identifier, or both a title and an author"
        )

    row = fields.insert_row()
    conflict_key = "isbn" if fields.isbn else None
    try:
        book_id = store.insert_book(row, conflict_key=conflict_key)
    except Exception as exc:
        if not is_unique_violation(exc):
            raise
        return _on_conflict_refetch(store, fields, exc)

    logger.info("Inserted book %d (%s)", book_id, row["title"])
    return book_id
