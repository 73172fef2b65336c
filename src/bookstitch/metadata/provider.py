# ABOUTME: Protocols defining the contract for external metadata fetchers.
# ABOUTME: OpenLibraryClient and GoogleBooksClient implement these; tests substitute fakes.

from typing import Protocol, runtime_checkable

from bookstitch.metadata.google_books_parser import VolumeInfo
from bookstitch.metadata.openlibrary_parser import EditionInfo, WorkInfo
from bookstitch.metadata.types import IncomingRecord


@runtime_checkable
class OpenLibrarySource(Protocol):
    """Identifier-keyed OpenLibrary lookups returning parsed data or None."""

    def fetch_by_isbn(self, isbn: str) -> EditionInfo | None: ...

    def fetch_work(self, work_key: str) -> WorkInfo | None: ...

    def fetch_edition(self, edition_key: str) -> EditionInfo | None: ...

    def fetch_edition_record(self, isbn: str) -> IncomingRecord | None: ...


@runtime_checkable
class GoogleBooksSource(Protocol):
    """Google Books lookups; `available` is False when no API key is set."""

    @property
    def available(self) -> bool: ...

    def fetch_volume(self, volume_id: str) -> VolumeInfo | None: ...

    def search_by_isbn(self, isbn: str) -> list[IncomingRecord]: ...
