# ABOUTME: Google Books metadata fetcher for volume lookups and ISBN barcode searches.
# ABOUTME: Requires an API key; a missing key means the source is unavailable, not an error.

import logging
from typing import Any

from bookstitch.metadata.adapters import from_google_books
from bookstitch.metadata.google_books_parser import VolumeInfo, parse_volume_response
from bookstitch.metadata.http import HttpClient, MetadataFetchError
from bookstitch.metadata.keys import clean_isbn
from bookstitch.metadata.types import IncomingRecord

logger = logging.getLogger(__name__)

_GB_BASE = "https://www.googleapis.com/books/v1/volumes"


class GoogleBooksClient:
    """Metadata fetcher backed by the Google Books v1 API."""

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key or None

    @property
    def name(self) -> str:
        return "google"

    @property
    def available(self) -> bool:
        """Whether an API key is configured."""
        return self._api_key is not None

    def fetch_volume(self, volume_id: str) -> VolumeInfo | None:
        """Fetch /volumes/{id}; None when unavailable, failed, or malformed."""
        if not self.available:
            logger.debug("Google Books key missing, skipping volume %s", volume_id)
            return None
        volume_id = volume_id.removeprefix("google:").removeprefix("gb:")
        if not volume_id:
            return None
        data = self._get_json(f"{_GB_BASE}/{volume_id}", {}, what=f"volume {volume_id}")
        if data is None or not isinstance(data.get("volumeInfo"), dict):
            return None
        info = parse_volume_response(data)
        info.volume_id = info.volume_id or volume_id
        return info

    def search_by_isbn(self, isbn: str) -> list[IncomingRecord]:
        """Search volumes by ISBN, as a barcode scan does."""
        cleaned = clean_isbn(isbn)
        if not cleaned or not self.available:
            return []
        data = self._get_json(_GB_BASE, {"q": f"isbn:{cleaned}"}, what=f"isbn {cleaned}")
        if data is None:
            return []
        items = data.get("items")
        if not isinstance(items, list):
            return []
        return [from_google_books(item) for item in items if isinstance(item, dict)]

    def _get_json(
        self, url: str, params: dict[str, str], *, what: str
    ) -> dict[str, Any] | None:
        params = {**params, "key": self._api_key or ""}
        try:
            data = self._http.get(url, params=params)
        except MetadataFetchError as exc:
            logger.warning("Google Books %s lookup failed: %s", what, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Google Books %s lookup returned a malformed body", what)
            return None
        return data
