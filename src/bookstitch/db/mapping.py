# ABOUTME: The canonical Book dataclass and its conversion from SQLite rows.
# ABOUTME: Lists the writable columns the reconciliation and enrichment stages may touch.

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

# Columns callers may write; id and timestamps are managed by the store.
BOOK_COLUMNS = (
    "title",
    "author",
    "isbn",
    "google_books_id",
    "openlibrary_work_key",
    "openlibrary_edition_key",
    "openlibrary_cover_id",
    "total_pages",
    "description",
    "cover_url",
)


@dataclass
class Book:
    """A canonical, persisted book row."""

    id: int
    title: str
    author: str | None = None
    isbn: str | None = None
    google_books_id: str | None = None
    openlibrary_work_key: str | None = None
    openlibrary_edition_key: str | None = None
    openlibrary_cover_id: int | None = None
    total_pages: int | None = None
    description: str | None = None
    cover_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    enrichment_attempted_at: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def last_modified(self) -> datetime | None:
        """updated_at (or created_at) as an aware UTC datetime."""
        stamp = self.updated_at or self.created_at
        if not stamp:
            return None
        parsed = datetime.fromisoformat(stamp)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


def row_to_book(row: Any) -> Book:
    """Convert a database row (dict-like) to a Book."""
    keys = row.keys()
    return Book(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        isbn=row["isbn"],
        google_books_id=row["google_books_id"],
        openlibrary_work_key=row["openlibrary_work_key"],
        openlibrary_edition_key=row["openlibrary_edition_key"],
        openlibrary_cover_id=row["openlibrary_cover_id"] if "openlibrary_cover_id" in keys else None,
        total_pages=row["total_pages"],
        description=row["description"],
        cover_url=row["cover_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        enrichment_attempted_at=(
            row["enrichment_attempted_at"] if "enrichment_attempted_at" in keys else None
        ),
    )
