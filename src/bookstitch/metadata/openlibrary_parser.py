# ABOUTME: Parsing functions for OpenLibrary edition, work, and search JSON responses.
# ABOUTME: Converts OL-specific structures into EditionInfo/WorkInfo and builds cover URLs.

from dataclasses import dataclass
from typing import Any

from bookstitch.metadata.display import clean_description
from bookstitch.metadata.keys import normalize_edition_key, normalize_work_key

_COVERS_BASE_URL = "https://covers.openlibrary.org/b/id"


@dataclass
class EditionInfo:
    """Fields extracted from an OpenLibrary edition (ISBN or /books/) response."""

    edition_key: str | None = None
    work_key: str | None = None
    pages: int | None = None
    cover_id: int | None = None
    description: str | None = None


@dataclass
class WorkInfo:
    """Fields extracted from an OpenLibrary /works/ response."""

    work_key: str | None = None
    cover_id: int | None = None
    description: str | None = None
    pages_median: int | None = None


def positive_int(value: Any) -> int | None:
    """Return value as an int when it is a strictly positive number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def first_cover_id(covers: Any) -> int | None:
    """First positive cover id from an OL "covers" array (OL uses -1 for none)."""
    if not isinstance(covers, list):
        return None
    for cover in covers:
        cover_id = positive_int(cover)
        if cover_id:
            return cover_id
    return None


def _work_key_from(data: dict[str, Any]) -> str | None:
    if data.get("work_key"):
        return normalize_work_key(data["work_key"])
    works = data.get("works")
    if isinstance(works, list) and works and isinstance(works[0], dict):
        return normalize_work_key(works[0].get("key"))
    return None


def parse_edition_response(data: dict[str, Any]) -> EditionInfo:
    """Parse an OpenLibrary edition response (from /isbn/ or /books/).

    The description is cleaned but not length-filtered here; acceptance
    thresholds belong to the caller.
    """
    return EditionInfo(
        edition_key=normalize_edition_key(data.get("key")),
        work_key=_work_key_from(data),
        pages=positive_int(data.get("number_of_pages")),
        cover_id=first_cover_id(data.get("covers")),
        description=clean_description(data.get("description")),
    )


def parse_work_response(data: dict[str, Any]) -> WorkInfo:
    """Parse an OpenLibrary work response.

    Handles the OL quirk where description can be either a plain string
    or a dict with {"type": ..., "value": "actual text"}.
    """
    return WorkInfo(
        work_key=normalize_work_key(data.get("key")),
        cover_id=first_cover_id(data.get("covers")),
        description=clean_description(data.get("description")),
        pages_median=positive_int(data.get("number_of_pages_median")),
    )


def build_cover_url(cover_id: int, size: str = "L") -> str:
    """Build an OpenLibrary cover image URL for a numeric cover id.

    Args:
        cover_id: The OL cover id (from "covers" or "cover_i").
        size: Image size: "S" (small), "M" (medium), or "L" (large).
    """
    return f"{_COVERS_BASE_URL}/{cover_id}-{size}.jpg"
