# ABOUTME: Identity key derivation and identifier canonicalization for incoming book records.
# ABOUTME: Turns ISBNs, OpenLibrary keys, and title/author pairs into stable dedup keys.

import logging
import re
import unicodedata
import uuid
from typing import Any

from bookstitch.metadata.types import IncomingRecord

logger = logging.getLogger(__name__)

_ISBN_STRIP_RE = re.compile(r"[\s-]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_WORK_ID_RE = re.compile(r"^OL\d+W$")
_EDITION_ID_RE = re.compile(r"^OL\d+M$")

# Prefixes a raw `id`/`key` must carry to be trusted as an existing book key.
CANONICAL_PREFIXES = ("isbn:", "ol:", "gb:", "t:")


def first_value(value: Any) -> Any:
    """Unwrap a list/tuple to its first non-empty element; pass scalars through."""
    if isinstance(value, (list, tuple)):
        for item in value:
            if item not in (None, ""):
                return item
        return None
    return value


def clean_isbn(value: Any) -> str | None:
    """Strip hyphens and whitespace from an ISBN, unwrapping array values.

    Returns None for missing or empty input.
    """
    value = first_value(value)
    if value is None or isinstance(value, (dict, bool)):
        return None
    cleaned = _ISBN_STRIP_RE.sub("", str(value))
    return cleaned or None


def _strip_ol_prefix(value: Any) -> str | None:
    value = first_value(value)
    if not isinstance(value, str):
        return None
    s = value.strip()
    if s.startswith("ol:"):
        s = s[3:]
    return s or None


def normalize_work_key(value: Any) -> str | None:
    """Normalize an OpenLibrary work key to the "/works/OL…W" form.

    Accepts "/works/OL1W", "works/OL1W", "ol:/works/OL1W" and bare "OL1W".
    Anything else yields None.
    """
    s = _strip_ol_prefix(value)
    if s is None:
        return None
    if s.startswith("/works/"):
        return s
    if s.startswith("works/"):
        return f"/{s}"
    if _WORK_ID_RE.match(s):
        return f"/works/{s}"
    return None


def normalize_edition_key(value: Any) -> str | None:
    """Normalize an OpenLibrary edition key to the "/books/OL…M" form."""
    s = _strip_ol_prefix(value)
    if s is None:
        return None
    if s.startswith("/books/"):
        return s
    if s.startswith("books/"):
        return f"/{s}"
    if _EDITION_ID_RE.match(s):
        return f"/books/{s}"
    return None


def normalize_text(value: Any) -> str:
    """Lower-case, strip accents, and collapse non-alphanumeric runs to one space."""
    value = first_value(value)
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value).lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM_RE.sub(" ", stripped).strip()


def is_canonical_key(value: Any) -> bool:
    """Whether a string already looks like a derived book key."""
    return isinstance(value, str) and value.strip().startswith(CANONICAL_PREFIXES)


def derive_key(record: IncomingRecord) -> str:
    """Compute the deterministic dedup key for an incoming record.

    Priority, first match wins: explicit book key, source identifier
    (OpenLibrary work/edition, Google Books, generic source pair), ISBN
    (13 over 10 over generic), normalized title/author, random fallback.
    """
    if record.book_key and record.book_key.strip():
        return record.book_key.strip()

    work_key = normalize_work_key(record.openlibrary_work_key)
    if work_key:
        return f"ol:{work_key}"
    edition_key = normalize_edition_key(record.openlibrary_edition_key)
    if edition_key:
        return f"ol:{edition_key}"
    if record.google_books_id:
        return f"gb:{record.google_books_id}"
    if record.source and record.source_id:
        return f"{record.source}:{record.source_id}"

    isbn = clean_isbn(record.isbn13) or clean_isbn(record.isbn10) or clean_isbn(record.isbn)
    if isbn:
        return f"isbn:{isbn}"

    title = normalize_text(record.title)
    author = normalize_text(record.author)
    if title or author:
        return f"t:{title}|a:{author}"

    key = f"unknown:{uuid.uuid4().hex}"
    logger.warning("No identifier found for record, using random key %s", key)
    return key
