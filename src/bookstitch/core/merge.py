# ABOUTME: The monotonic "never regress a good value" merge rule shared by every writer.
# ABOUTME: Decides, column by column, whether an incoming value may replace the stored one.

from collections.abc import Mapping
from typing import Any

from bookstitch.db.mapping import Book
from bookstitch.metadata.display import is_bad_author, is_bad_cover_url, is_bad_title

UNTITLED = "Untitled"

# A description shorter than this is treated as poor when deciding to enrich.
POOR_DESCRIPTION_LENGTH = 50


def is_good_value(column: str, value: Any) -> bool:
    """Whether value is a usable, non-placeholder value for a book column."""
    if value is None:
        return False
    if column == "title":
        return not is_bad_title(value) and str(value).strip() != UNTITLED
    if column == "author":
        return not is_bad_author(value)
    if column == "cover_url":
        return not is_bad_cover_url(value)
    if column in ("total_pages", "openlibrary_cover_id"):
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    if isinstance(value, str):
        return bool(value.strip())
    return True


def merge_fields(existing: Book, incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Compute the column updates that incoming may apply to existing.

    A column is written only when the stored value is not good and the
    incoming value is. The result is therefore empty whenever existing
    already holds good values everywhere incoming has something to say,
    which makes repeated or interleaved merges converge.
    """
    updates: dict[str, Any] = {}
    for column, value in incoming.items():
        if not is_good_value(column, value):
            continue
        if is_good_value(column, getattr(existing, column)):
            continue
        if getattr(existing, column) == value:
            continue
        updates[column] = value
    return updates


def completeness_score(book: Book) -> int:
    """Score display completeness: cover 50, pages 30, description over 120 chars 40."""
    score = 0
    if book.cover_url or book.openlibrary_cover_id:
        score += 50
    if book.total_pages:
        score += 30
    if book.description and len(book.description) > 120:
        score += 40
    return score


def needs_enrichment(book: Book) -> bool:
    """Whether a book is missing a cover, a page count, or a usable description."""
    has_cover = is_good_value("cover_url", book.cover_url) or bool(book.openlibrary_cover_id)
    has_pages = is_good_value("total_pages", book.total_pages)
    has_description = bool(book.description) and len(book.description) >= POOR_DESCRIPTION_LENGTH
    return not (has_cover and has_pages and has_description)
