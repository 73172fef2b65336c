# ABOUTME: Integration tests for the full ingest pipeline over a file-backed SQLite store.
# ABOUTME: Real OpenLibrary/Google clients and parsers driven by a FakeHttpClient.

from pathlib import Path

from bookstitch.core.enricher import Enricher
from bookstitch.core.ingest import backfill, ingest_record, scan_isbn
from bookstitch.core.reconcile import ensure_book
from bookstitch.db.catalog import BookCatalog
from bookstitch.db.connection import open_store
from bookstitch.metadata.adapters import from_google_books, from_openlibrary_search
from bookstitch.metadata.google_books import GoogleBooksClient
from bookstitch.metadata.openlibrary import OpenLibraryClient
from bookstitch.metadata.types import EnrichmentHints
from tests.fixtures.fakes import FakeHttpClient
from tests.fixtures.google_books_responses import VOLUME_RESPONSE
from tests.fixtures.openlibrary_responses import (
    ISBN_RESPONSE,
    ISBN_RESPONSE_WITH_DESCRIPTION,
    LONG_DESCRIPTION,
    SEARCH_RESPONSE,
    WORK_DESCRIPTION,
    WORK_RESPONSE,
)

# A search hit with pages but no cover or description, so enrichment still runs.
_BARE_GB_SEARCH = {
    "items": [
        {
            "id": "zyTCAlFPjgYC",
            "volumeInfo": {
                "title": "The Name of the Rose",
                "authors": ["Umberto Eco"],
                "pageCount": 592,
                "industryIdentifiers": [{"type": "ISBN_13", "identifier": "9780156001311"}],
            },
        }
    ]
}


class TestSearchAddFlow:
    """A search hit is reconciled, then enriched from the edition behind its ISBN."""

    def test_search_hit_enriched_without_regressing(self, tmp_path: Path) -> None:
        http = FakeHttpClient(
            {"/isbn/": ISBN_RESPONSE_WITH_DESCRIPTION, "/works/": WORK_RESPONSE}
        )
        openlibrary = OpenLibraryClient(http)
        google = GoogleBooksClient(http, api_key=None)
        conn = open_store(tmp_path / "books.db")
        catalog = BookCatalog(conn)
        enricher = Enricher(catalog, openlibrary, google)

        record = from_openlibrary_search(SEARCH_RESPONSE["docs"][0])
        result = ingest_record(catalog, record, enricher)

        book = catalog.get_by_id(result.book_id)
        conn.close()
        assert book is not None
        # The search doc's median page count was stored first and is kept.
        assert book.total_pages == 502
        assert book.description == LONG_DESCRIPTION
        assert book.cover_url == "https://covers.openlibrary.org/b/id/240727-L.jpg"
        assert book.openlibrary_work_key == "/works/OL456W"
        assert http.urls == ["https://openlibrary.org/isbn/9780156001311.json"]

    def test_google_then_openlibrary_converge_on_one_row(self, tmp_path: Path) -> None:
        conn = open_store(tmp_path / "books.db")
        catalog = BookCatalog(conn)

        from_google = ensure_book(catalog, from_google_books(VOLUME_RESPONSE))
        from_ol = ensure_book(catalog, from_openlibrary_search(SEARCH_RESPONSE["docs"][0]))

        book = catalog.get_by_id(from_google)
        count = catalog.count()
        conn.close()
        assert from_google == from_ol
        assert count == 1
        assert book is not None
        assert book.google_books_id == "zyTCAlFPjgYC"
        assert book.openlibrary_work_key == "/works/OL456W"
        assert book.total_pages == 592


class TestPersistence:
    def test_reconcile_across_reopen(self, tmp_path: Path) -> None:
        db_path = tmp_path / "books.db"
        conn = open_store(db_path)
        first = ensure_book(BookCatalog(conn), from_google_books(VOLUME_RESPONSE))
        conn.close()

        conn = open_store(db_path)
        second = ensure_book(BookCatalog(conn), from_google_books(VOLUME_RESPONSE))
        conn.close()
        assert first == second


class TestScanFlow:
    def test_scan_uses_google_search_then_enriches_from_openlibrary(
        self, tmp_path: Path
    ) -> None:
        http = FakeHttpClient(
            {
                "googleapis.com": _BARE_GB_SEARCH,
                "/isbn/": ISBN_RESPONSE,
                "/works/": WORK_RESPONSE,
            }
        )
        openlibrary = OpenLibraryClient(http)
        google = GoogleBooksClient(http, api_key="k")
        conn = open_store(tmp_path / "books.db")
        catalog = BookCatalog(conn)

        enricher = Enricher(catalog, openlibrary, google)

        result = scan_isbn(catalog, "978-0-15-600131-1", google, openlibrary, enricher)

        book = catalog.get_by_id(result.book_id)
        conn.close()
        assert book is not None
        assert book.title == "The Name of the Rose"
        assert book.isbn == "9780156001311"
        assert book.total_pages == 592
        assert book.openlibrary_edition_key == "/books/OL24364628M"
        assert book.openlibrary_cover_id == 240727
        assert book.description == WORK_DESCRIPTION


class TestGoogleKeyMissing:
    def test_google_only_book_makes_no_requests(self, tmp_path: Path) -> None:
        http = FakeHttpClient({"googleapis.com": VOLUME_RESPONSE})
        conn = open_store(tmp_path / "books.db")
        catalog = BookCatalog(conn)
        book_id = catalog.insert_book({"title": "The Name of the Rose"})
        enricher = Enricher(catalog, OpenLibraryClient(http), GoogleBooksClient(http))

        result = enricher.enrich(book_id, EnrichmentHints(google_books_id="zyTCAlFPjgYC"))
        summary = backfill(catalog, enricher)
        conn.close()

        assert result.updated_fields == []
        assert summary.updated == 0
        assert http.request_log == []
