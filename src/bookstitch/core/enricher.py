# ABOUTME: Progressive enrichment of canonical books from OpenLibrary and Google Books.
# ABOUTME: Completeness guard, ordered source fallthrough, and a single monotonic merge write.

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from bookstitch.core.merge import completeness_score, is_good_value, merge_fields
from bookstitch.db.mapping import Book
from bookstitch.db.store import BookNotFoundError, BookStore
from bookstitch.metadata.display import clean_description
from bookstitch.metadata.http import MetadataFetchError
from bookstitch.metadata.keys import clean_isbn, normalize_edition_key, normalize_work_key
from bookstitch.metadata.openlibrary_parser import build_cover_url
from bookstitch.metadata.provider import GoogleBooksSource, OpenLibrarySource
from bookstitch.metadata.types import EnrichedFields, EnrichmentHints

logger = logging.getLogger(__name__)

# Descriptions shorter than this (after cleaning) are rejected outright.
MIN_DESCRIPTION_LENGTH = 120

RECENT_WINDOW = timedelta(minutes=30)

# A book scoring at least this (cover + pages + long description) is left alone
# while it is fresh.
SKIP_SCORE = 120

STATUS_SKIP_RECENT = "skip_recent"
STATUS_UPDATED = "updated"
STATUS_UNCHANGED = "unchanged"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _accept_description(raw: object) -> str | None:
    cleaned = clean_description(raw)
    if cleaned and len(cleaned) >= MIN_DESCRIPTION_LENGTH:
        return cleaned
    return None


@dataclass
class EnrichmentResult:
    """Outcome of one enrichment call.

    Attributes:
        status: skip_recent, updated, or unchanged.
        metadata: The book's enrichable fields after the call.
        updated_fields: Columns actually written.
    """

    status: str
    metadata: EnrichedFields
    updated_fields: list[str] = field(default_factory=list)


@dataclass
class _Gathered:
    """Working state while walking the source chain."""

    fields: EnrichedFields = field(default_factory=EnrichedFields)
    edition_fetched: str | None = None
    pages_from_median: bool = False
    cover_from_work: bool = False

    def set_cover(self, cover_id: int, *, from_work: bool = False) -> None:
        self.fields.openlibrary_cover_id = cover_id
        self.fields.cover_url = build_cover_url(cover_id)
        self.cover_from_work = from_work

    @property
    def complete(self) -> bool:
        f = self.fields
        return bool(f.cover_url and f.total_pages and f.description)


def _current_fields(book: Book) -> EnrichedFields:
    return EnrichedFields(
        cover_url=book.cover_url,
        openlibrary_cover_id=book.openlibrary_cover_id,
        total_pages=book.total_pages,
        description=book.description,
        openlibrary_work_key=book.openlibrary_work_key,
        openlibrary_edition_key=book.openlibrary_edition_key,
        google_books_id=book.google_books_id,
    )


class Enricher:
    """Fills in missing cover, pages, description, and cross-reference keys.

    Every source is best-effort: a failing or malformed source contributes
    nothing and the chain moves on. Results are gathered in memory and
    written once, so an interrupted call leaves the row untouched.
    """

    def __init__(
        self,
        store: BookStore,
        openlibrary: OpenLibrarySource,
        google_books: GoogleBooksSource | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        recent_window: timedelta = RECENT_WINDOW,
    ) -> None:
        self._store = store
        self._openlibrary = openlibrary
        self._google = google_books
        self._clock = clock or _utc_now
        self._recent_window = recent_window

    def enrich(self, book_id: int, hints: EnrichmentHints | None = None) -> EnrichmentResult:
        """Enrich one book, considering hint identifiers alongside stored ones.

        Raises:
            BookNotFoundError: If book_id does not exist.
        """
        book = self._store.get_by_id(book_id)
        if book is None:
            raise BookNotFoundError(f"Book with id {book_id} not found")

        if self._is_fresh_and_complete(book):
            logger.debug("Book %d enriched recently and complete; skipping", book_id)
            return EnrichmentResult(status=STATUS_SKIP_RECENT, metadata=_current_fields(book))

        ids = self._merge_hints(book, hints or EnrichmentHints())
        gathered = self.gather(ids)
        found = gathered.filled()
        if not found:
            self._log_empty(ids)

        updates = merge_fields(book, found)
        if gathered.openlibrary_cover_id and "cover_url" not in updates and not is_good_value(
            "cover_url", book.cover_url
        ):
            updates["cover_url"] = build_cover_url(gathered.openlibrary_cover_id)

        if not updates:
            return EnrichmentResult(status=STATUS_UNCHANGED, metadata=_current_fields(book))

        self._store.update_book(book_id, updates)
        logger.info("Enriched book %d: %s", book_id, ", ".join(sorted(updates)))
        merged = _current_fields(book)
        for column, value in updates.items():
            setattr(merged, column, value)
        return EnrichmentResult(
            status=STATUS_UPDATED, metadata=merged, updated_fields=sorted(updates)
        )

    def gather(self, ids: EnrichmentHints) -> EnrichedFields:
        """Walk the source chain for ids without touching the store."""
        state = _Gathered()
        isbn = clean_isbn(ids.isbn)
        work_key = normalize_work_key(ids.openlibrary_work_key)
        edition_key = normalize_edition_key(ids.openlibrary_edition_key)

        if isbn:
            self._guarded("OpenLibrary isbn", self._from_isbn, isbn, state)

        work_key = state.fields.openlibrary_work_key or work_key
        if work_key and not state.complete:
            self._guarded("OpenLibrary work", self._from_work, work_key, state)

        if edition_key and edition_key != state.edition_fetched:
            self._guarded("OpenLibrary edition", self._from_edition, edition_key, state)

        if ids.google_books_id and not state.complete:
            self._guarded("Google Books", self._from_google, ids.google_books_id, state)

        return state.fields

    @staticmethod
    def _guarded(
        source: str, step: Callable[[str, _Gathered], None], key: str, state: _Gathered
    ) -> None:
        try:
            step(key, state)
        except MetadataFetchError as exc:
            logger.warning("%s lookup for %s failed: %s", source, key, exc)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("%s returned unusable data for %s: %s", source, key, exc)

    def _is_fresh_and_complete(self, book: Book) -> bool:
        modified = book.last_modified
        if modified is None:
            return False
        fresh = self._clock() - modified < self._recent_window
        return fresh and completeness_score(book) >= SKIP_SCORE

    @staticmethod
    def _merge_hints(book: Book, hints: EnrichmentHints) -> EnrichmentHints:
        return EnrichmentHints(
            isbn=hints.isbn or book.isbn,
            google_books_id=hints.google_books_id or book.google_books_id,
            openlibrary_work_key=hints.openlibrary_work_key or book.openlibrary_work_key,
            openlibrary_edition_key=hints.openlibrary_edition_key or book.openlibrary_edition_key,
        )

    def _from_isbn(self, isbn: str, state: _Gathered) -> None:
        edition = self._openlibrary.fetch_by_isbn(isbn)
        if edition is None:
            return
        f = state.fields
        if edition.edition_key:
            f.openlibrary_edition_key = edition.edition_key
            state.edition_fetched = edition.edition_key
        if edition.work_key:
            f.openlibrary_work_key = edition.work_key
        if edition.pages:
            f.total_pages = edition.pages
        if edition.cover_id:
            state.set_cover(edition.cover_id)
        description = _accept_description(edition.description)
        if description:
            f.description = description

    def _from_work(self, work_key: str, state: _Gathered) -> None:
        work = self._openlibrary.fetch_work(work_key)
        if work is None:
            return
        f = state.fields
        f.openlibrary_work_key = work.work_key or work_key
        if not f.openlibrary_cover_id and work.cover_id:
            state.set_cover(work.cover_id, from_work=True)
        description = _accept_description(work.description)
        if description and (not f.description or len(description) > len(f.description)):
            f.description = description
        if not f.total_pages and work.pages_median:
            f.total_pages = work.pages_median
            state.pages_from_median = True

    def _from_edition(self, edition_key: str, state: _Gathered) -> None:
        edition = self._openlibrary.fetch_edition(edition_key)
        if edition is None:
            return
        f = state.fields
        f.openlibrary_edition_key = f.openlibrary_edition_key or edition.edition_key or edition_key
        if edition.pages and (not f.total_pages or state.pages_from_median):
            f.total_pages = edition.pages
            state.pages_from_median = False
        if edition.cover_id and (not f.openlibrary_cover_id or state.cover_from_work):
            state.set_cover(edition.cover_id)

    def _from_google(self, volume_id: str, state: _Gathered) -> None:
        if self._google is None or not self._google.available:
            return
        volume = self._google.fetch_volume(volume_id)
        if volume is None:
            return
        f = state.fields
        f.google_books_id = volume.volume_id or volume_id
        if not f.description:
            f.description = _accept_description(volume.description)
        if not f.total_pages and volume.page_count:
            f.total_pages = volume.page_count
        if not f.cover_url and volume.thumbnail_url:
            f.cover_url = volume.thumbnail_url

    def _log_empty(self, ids: EnrichmentHints) -> None:
        has_openlibrary = bool(
            ids.isbn or ids.openlibrary_work_key or ids.openlibrary_edition_key
        )
        google_ready = self._google is not None and self._google.available
        if has_openlibrary:
            reason = "fetch failed"
        elif ids.google_books_id and not google_ready:
            reason = "no OpenLibrary identifiers, Google key missing"
        elif ids.google_books_id:
            reason = "fetch failed"
        else:
            reason = "no identifiers"
        logger.warning("Enrichment returned 0 fields: %s", reason)
