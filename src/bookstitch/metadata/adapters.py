# ABOUTME: Source adapters that convert raw Google Books, OpenLibrary, and form payloads.
# ABOUTME: Every payload becomes an IncomingRecord before reconciliation ever sees it.

from collections.abc import Mapping
from typing import Any

from bookstitch.metadata.display import clean_description
from bookstitch.metadata.google_books_parser import (
    industry_isbn,
    normalize_google_cover_url,
    thumbnail_from,
    volume_info,
)
from bookstitch.metadata.keys import (
    clean_isbn,
    first_value,
    is_canonical_key,
    normalize_edition_key,
    normalize_work_key,
)
from bookstitch.metadata.openlibrary_parser import first_cover_id, positive_int
from bookstitch.metadata.types import IncomingRecord


def _text(value: Any) -> str | None:
    value = first_value(value)
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return None
    s = str(value).strip()
    return s or None


def _authors(value: Any) -> list[str]:
    """Coalesce an author field that may be a string, list of strings, or list of dicts."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, Mapping):
        name = _text(value.get("name"))
        return [name] if name else []
    if isinstance(value, (list, tuple)):
        names: list[str] = []
        for item in value:
            names.extend(_authors(item))
        return names
    return []


def _coalesce(*values: Any) -> Any:
    for value in values:
        if value not in (None, "", [], {}):
            return value
    return None


def _first_positive(*values: Any) -> int | None:
    """First value that parses as a strictly positive integer; zero never wins."""
    for value in values:
        number = positive_int(value)
        if number:
            return number
    return None


def _strip_google_prefix(value: str | None) -> str | None:
    if value and value.startswith("google:"):
        return value[len("google:"):] or None
    return value


def from_google_books(volume: Mapping[str, Any]) -> IncomingRecord:
    """Adapt a Google Books volume (search item or /volumes/{id} body)."""
    info = volume_info(dict(volume))
    volume_id = _text(volume.get("id"))
    return IncomingRecord(
        title=_text(info.get("title")),
        authors=_authors(info.get("authors")),
        isbn13=clean_isbn(industry_isbn(info, "ISBN_13")),
        isbn10=clean_isbn(industry_isbn(info, "ISBN_10")),
        google_books_id=volume_id,
        total_pages=positive_int(info.get("pageCount")),
        cover_url=thumbnail_from(info),
        description=clean_description(info.get("description")),
        source="google",
        source_id=volume_id,
    )


def from_openlibrary_search(doc: Mapping[str, Any]) -> IncomingRecord:
    """Adapt an OpenLibrary search.json doc or a subjects API work entry."""
    key = _text(doc.get("key"))
    work_key = normalize_work_key(key)
    cover_id = _first_positive(doc.get("cover_i"), doc.get("cover_id"))
    return IncomingRecord(
        title=_text(doc.get("title")),
        authors=_authors(_coalesce(doc.get("author_name"), doc.get("authors"))),
        isbn=clean_isbn(doc.get("isbn")),
        openlibrary_work_key=work_key,
        openlibrary_edition_key=normalize_edition_key(
            _coalesce(doc.get("cover_edition_key"), first_value(doc.get("edition_key")))
        ),
        openlibrary_cover_id=cover_id,
        total_pages=positive_int(doc.get("number_of_pages_median")),
        source="openlibrary",
        source_id=work_key or key,
    )


def from_openlibrary_edition(edition: Mapping[str, Any]) -> IncomingRecord:
    """Adapt an OpenLibrary edition body (from /isbn/{isbn}.json or /books/{key}.json).

    Edition author entries only carry /authors/ keys, so authors stay empty
    unless the body was pre-resolved with names.
    """
    works = edition.get("works")
    work_ref = works[0].get("key") if isinstance(works, list) and works and isinstance(
        works[0], Mapping
    ) else None
    edition_key = normalize_edition_key(edition.get("key"))
    return IncomingRecord(
        title=_text(edition.get("title")),
        authors=_authors(edition.get("authors")),
        isbn13=clean_isbn(edition.get("isbn_13")),
        isbn10=clean_isbn(edition.get("isbn_10")),
        openlibrary_work_key=normalize_work_key(work_ref),
        openlibrary_edition_key=edition_key,
        openlibrary_cover_id=first_cover_id(edition.get("covers")),
        total_pages=positive_int(edition.get("number_of_pages")),
        description=clean_description(edition.get("description")),
        source="openlibrary",
        source_id=edition_key,
    )


def from_manual_form(form: Mapping[str, Any]) -> IncomingRecord:
    """Adapt user-entered form values; numbers may arrive as strings."""
    return IncomingRecord(
        title=_text(form.get("title")),
        authors=_authors(_coalesce(form.get("authors"), form.get("author"))),
        isbn=clean_isbn(form.get("isbn")),
        total_pages=_first_positive(form.get("total_pages"), form.get("pages")),
        cover_url=_text(form.get("cover_url")),
        description=clean_description(form.get("description")),
        source="manual",
    )


def from_raw(payload: Mapping[str, Any]) -> IncomingRecord:
    """Adapt an arbitrary payload by coalescing every known alternate field name.

    Used when the caller cannot say which source produced the payload.
    A raw `id` or `key` is trusted as a book key only when it already carries
    a canonical prefix (isbn:, ol:, gb:, t:).
    """
    info = volume_info(dict(payload))
    raw_id = payload.get("id")
    raw_key = payload.get("key")

    book_key = _text(payload.get("book_key"))
    if not book_key and is_canonical_key(raw_id):
        book_key = raw_id.strip()
    if not book_key and is_canonical_key(raw_key):
        book_key = raw_key.strip()

    google_id = _text(_coalesce(payload.get("google_books_id"), payload.get("googleBooksId")))
    if not google_id and info and isinstance(raw_id, str) and not is_canonical_key(raw_id):
        google_id = _text(raw_id)

    key_str = raw_key if isinstance(raw_key, str) else ""
    work_key = normalize_work_key(
        _coalesce(
            payload.get("openlibrary_work_key"),
            payload.get("openLibraryWorkKey"),
            payload.get("openLibraryKey"),
            payload.get("openlibrary_key"),
            key_str if "/works/" in key_str else None,
        )
    )
    edition_key = normalize_edition_key(
        _coalesce(
            payload.get("openlibrary_edition_key"),
            payload.get("openLibraryEditionKey"),
            key_str if "/books/" in key_str else None,
        )
    )

    links = info.get("imageLinks") if isinstance(info.get("imageLinks"), dict) else {}
    google_cover = normalize_google_cover_url(
        _coalesce(links.get("thumbnail"), links.get("smallThumbnail"))
    )

    return IncomingRecord(
        title=_text(_coalesce(payload.get("title"), info.get("title"))),
        authors=_authors(
            _coalesce(payload.get("authors"), info.get("authors"), payload.get("author"),
                      payload.get("author_name"))
        ),
        isbn13=clean_isbn(_coalesce(payload.get("isbn13"), payload.get("isbn_13"),
                                    industry_isbn(info, "ISBN_13"))),
        isbn10=clean_isbn(_coalesce(payload.get("isbn10"), payload.get("isbn_10"),
                                    industry_isbn(info, "ISBN_10"))),
        isbn=clean_isbn(payload.get("isbn")),
        google_books_id=_strip_google_prefix(google_id),
        openlibrary_work_key=work_key,
        openlibrary_edition_key=edition_key,
        openlibrary_cover_id=_first_positive(
            payload.get("openlibrary_cover_id"), payload.get("cover_i"), payload.get("coverId"),
        ),
        total_pages=_first_positive(
            payload.get("total_pages"), payload.get("pageCount"), info.get("pageCount"),
            payload.get("pages"), payload.get("number_of_pages"),
        ),
        cover_url=_text(
            _coalesce(payload.get("cover_url"), payload.get("thumbnail"),
                      payload.get("coverUrl"), google_cover)
        ),
        description=clean_description(
            _coalesce(payload.get("description"), info.get("description"))
        ),
        book_key=book_key,
        source=_text(payload.get("source")),
        source_id=_text(payload.get("source_id")),
    )
