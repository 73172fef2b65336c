# ABOUTME: OpenLibrary metadata fetcher for edition, work, and search lookups.
# ABOUTME: Each call returns parsed data or None; fetch failures are logged, never raised.

import logging
from typing import Any

from bookstitch.metadata.adapters import from_openlibrary_edition, from_openlibrary_search
from bookstitch.metadata.http import HttpClient, MetadataFetchError
from bookstitch.metadata.keys import clean_isbn, normalize_edition_key, normalize_work_key
from bookstitch.metadata.openlibrary_parser import (
    EditionInfo,
    WorkInfo,
    parse_edition_response,
    parse_work_response,
)
from bookstitch.metadata.types import IncomingRecord

logger = logging.getLogger(__name__)

_OL_BASE = "https://openlibrary.org"
_SEARCH_LIMIT = 10
_SEARCH_FIELDS = (
    "key,title,author_name,isbn,cover_i,cover_edition_key,number_of_pages_median"
)


class OpenLibraryClient:
    """Metadata fetcher backed by the OpenLibrary JSON API.

    Every lookup is a pure function of an identifier: a parsed dataclass on
    success, None when the request fails or the body is unusable. Uses a
    dependency-injected HttpClient for testability.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return "openlibrary"

    def fetch_by_isbn(self, isbn: str) -> EditionInfo | None:
        """Look up the edition behind an ISBN via /isbn/{isbn}.json."""
        cleaned = clean_isbn(isbn)
        if not cleaned:
            return None
        data = self._get_json(f"{_OL_BASE}/isbn/{cleaned}.json", what=f"isbn {cleaned}")
        return parse_edition_response(data) if data is not None else None

    def fetch_work(self, work_key: str) -> WorkInfo | None:
        """Fetch a work record (covers, description, median page count)."""
        key = normalize_work_key(work_key)
        if not key:
            logger.debug("Ignoring malformed work key %r", work_key)
            return None
        data = self._get_json(f"{_OL_BASE}{key}.json", what=f"work {key}")
        if data is None:
            return None
        work = parse_work_response(data)
        work.work_key = work.work_key or key
        return work

    def fetch_edition(self, edition_key: str) -> EditionInfo | None:
        """Fetch an edition record (pages, covers) by /books/ key."""
        key = normalize_edition_key(edition_key)
        if not key:
            logger.debug("Ignoring malformed edition key %r", edition_key)
            return None
        data = self._get_json(f"{_OL_BASE}{key}.json", what=f"edition {key}")
        if data is None:
            return None
        edition = parse_edition_response(data)
        edition.edition_key = edition.edition_key or key
        return edition

    def fetch_edition_record(self, isbn: str) -> IncomingRecord | None:
        """Fetch the raw edition for an ISBN and adapt it to an IncomingRecord.

        Used by barcode scans when no richer source knows the ISBN.
        """
        cleaned = clean_isbn(isbn)
        if not cleaned:
            return None
        data = self._get_json(f"{_OL_BASE}/isbn/{cleaned}.json", what=f"isbn {cleaned}")
        if data is None:
            return None
        record = from_openlibrary_edition(data)
        if not (record.isbn13 or record.isbn10):
            record.isbn = cleaned
        return record

    def search(self, title: str, author: str | None = None) -> list[IncomingRecord]:
        """Search works by title and optional author via search.json."""
        params: dict[str, str] = {
            "title": title,
            "limit": str(_SEARCH_LIMIT),
            "fields": _SEARCH_FIELDS,
        }
        if author:
            params["author"] = author

        data = self._get_json(
            f"{_OL_BASE}/search.json", params=params, what=f"search title={title!r}"
        )
        if data is None:
            return []
        docs = data.get("docs")
        if not isinstance(docs, list):
            return []
        return [from_openlibrary_search(doc) for doc in docs if isinstance(doc, dict)]

    def _get_json(
        self, url: str, *, what: str, params: dict[str, str] | None = None
    ) -> dict[str, Any] | None:
        try:
            data = self._http.get(url, params=params)
        except MetadataFetchError as exc:
            logger.warning("OpenLibrary %s lookup failed: %s", what, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("OpenLibrary %s lookup returned a malformed body", what)
            return None
        return data
