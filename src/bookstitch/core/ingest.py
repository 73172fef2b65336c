# ABOUTME: Call-site orchestration: ingest a record, scan a barcode ISBN, backfill incomplete books.
# ABOUTME: Reconciles first, then enriches best-effort; enrichment failures never fail an ingest.

import logging
from dataclasses import dataclass, field

from bookstitch.core.enricher import STATUS_UPDATED, Enricher, EnrichmentResult
from bookstitch.core.merge import needs_enrichment
from bookstitch.core.reconcile import ensure_book, extract_fields
from bookstitch.db.store import BookStore
from bookstitch.metadata.keys import clean_isbn
from bookstitch.metadata.provider import GoogleBooksSource, OpenLibrarySource
from bookstitch.metadata.types import EnrichmentHints, IncomingRecord

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """The canonical book id plus the enrichment outcome, if enrichment ran."""

    book_id: int
    enrichment: EnrichmentResult | None = None


@dataclass
class BackfillResult:
    """Summary of a backfill run."""

    checked: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    error_details: list[tuple[int, str]] = field(default_factory=list)


def _hints_for(record: IncomingRecord) -> EnrichmentHints:
    fields = extract_fields(record)
    return EnrichmentHints(
        isbn=fields.isbn,
        google_books_id=fields.google_books_id,
        openlibrary_work_key=fields.openlibrary_work_key,
        openlibrary_edition_key=fields.openlibrary_edition_key,
    )


def _has_identifier(hints: EnrichmentHints) -> bool:
    return bool(
        hints.isbn
        or hints.google_books_id
        or hints.openlibrary_work_key
        or hints.openlibrary_edition_key
    )


def ingest_record(
    store: BookStore, record: IncomingRecord, enricher: Enricher | None = None
) -> IngestResult:
    """Reconcile record into the store, then enrich it when worthwhile.

    Enrichment runs only when the book still lacks a cover, pages, or a
    usable description and the record carries a strong identifier. Any
    enrichment error is logged and dropped.
    """
    book_id = ensure_book(store, record)
    result = IngestResult(book_id=book_id)
    if enricher is None:
        return result

    book = store.get_by_id(book_id)
    if book is None or not needs_enrichment(book):
        return result
    hints = _hints_for(record)
    if not (_has_identifier(hints) or book.isbn or book.google_books_id):
        logger.debug("Book %d has no strong identifier; not enriching", book_id)
        return result

    try:
        result.enrichment = enricher.enrich(book_id, hints)
    except Exception:
        logger.exception("Enrichment of book %d failed", book_id)
    return result


def lookup_isbn(
    isbn: str,
    google_books: GoogleBooksSource | None,
    openlibrary: OpenLibrarySource,
) -> IncomingRecord | None:
    """Resolve a scanned ISBN to the richest record any source knows.

    Google Books search first (when available), then the OpenLibrary
    edition, then a bare record holding only the ISBN.
    """
    cleaned = clean_isbn(isbn)
    if not cleaned:
        return None

    if google_books is not None and google_books.available:
        for candidate in google_books.search_by_isbn(cleaned):
            if candidate.title:
                if not candidate.best_isbn:
                    candidate.isbn = cleaned
                return candidate

    record = openlibrary.fetch_edition_record(cleaned)
    if record is not None and record.title:
        return record

    logger.info("No source knows ISBN %s; storing the bare identifier", cleaned)
    return IncomingRecord(isbn=cleaned, source="scan")


def scan_isbn(
    store: BookStore,
    isbn: str,
    google_books: GoogleBooksSource | None,
    openlibrary: OpenLibrarySource,
    enricher: Enricher | None = None,
) -> IngestResult:
    """Barcode flow: look the ISBN up, then ingest whatever was found.

    Raises:
        ValueError: If isbn contains no digits.
    """
    record = lookup_isbn(isbn, google_books, openlibrary)
    if record is None:
        raise ValueError(f"Not an ISBN: {isbn!r}")
    return ingest_record(store, record, enricher)


def backfill(store: BookStore, enricher: Enricher, limit: int | None = None) -> BackfillResult:
    """Enrich every incomplete book, least recently attempted first.

    Each book is stamped as attempted whatever the outcome, so a limited
    run moves on to other books next time.
    """
    result = BackfillResult()
    for book in store.list_incomplete(limit):
        result.checked += 1
        try:
            outcome = enricher.enrich(book.id)
        except Exception as exc:
            logger.warning("Backfill of book %d failed: %s", book.id, exc)
            result.errors += 1
            result.error_details.append((book.id, str(exc)))
        else:
            if outcome.status == STATUS_UPDATED:
                result.updated += 1
            else:
                result.skipped += 1
        finally:
            store.mark_enrichment_attempt(book.id)
    logger.info(
        "Backfill checked %d book(s): %d updated, %d unchanged, %d failed",
        result.checked, result.updated, result.skipped, result.errors,
    )
    return result
