# ABOUTME: Unit tests for the SQLite BookCatalog, schema, and storage error taxonomy.
# ABOUTME: Validates lookups, ON CONFLICT inserts, update bookkeeping, and constraint checks.

import sqlite3
from pathlib import Path
from types import SimpleNamespace

import pytest

from bookstitch.db.catalog import BookCatalog
from bookstitch.db.connection import open_store
from bookstitch.db.schema import LATEST_VERSION
from bookstitch.db.store import (
    BookNotFoundError,
    BookStore,
    UniqueViolationError,
    is_unique_violation,
)
from tests.fixtures.fakes import FixedClock


class TestOpenStore:
    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "books.db"
        conn = open_store(db_path)
        assert db_path.exists()
        version = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
        assert version == LATEST_VERSION
        conn.close()

    def test_reopen_is_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "books.db"
        open_store(db_path).close()
        conn = open_store(db_path)
        versions = [r[0] for r in conn.execute("SELECT version FROM schema_version")]
        assert versions == [1, 2, 3]
        conn.close()

    def test_wal_mode_for_files(self, tmp_path: Path) -> None:
        conn = open_store(tmp_path / "books.db")
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        conn.close()


class TestBookCatalog:
    def test_satisfies_protocol(self, catalog: BookCatalog) -> None:
        assert isinstance(catalog, BookStore)

    def test_insert_and_get(self, catalog: BookCatalog, clock: FixedClock) -> None:
        book_id = catalog.insert_book({"title": "Dune", "author": "Frank Herbert"})
        book = catalog.get_by_id(book_id)
        assert book is not None
        assert book.title == "Dune"
        assert book.created_at == "2024-03-01T12:00:00"
        assert book.last_modified == clock.now

    def test_get_missing(self, catalog: BookCatalog) -> None:
        assert catalog.get_by_id(999) is None

    def test_find_by_field(self, catalog: BookCatalog) -> None:
        book_id = catalog.insert_book({"title": "Dune", "google_books_id": "gb1"})
        found = catalog.find_by_field("google_books_id", "gb1")
        assert found is not None and found.id == book_id
        assert catalog.find_by_field("google_books_id", "other") is None

    def test_find_by_field_rejects_unknown_column(self, catalog: BookCatalog) -> None:
        with pytest.raises(ValueError, match="Cannot look books up"):
            catalog.find_by_field("title; DROP TABLE books", "x")

    def test_find_by_title_author_exact(self, catalog: BookCatalog) -> None:
        catalog.insert_book({"title": "Dune", "author": "Frank Herbert"})
        assert catalog.find_by_title_author("Dune", "Frank Herbert") is not None
        assert catalog.find_by_title_author("dune", "Frank Herbert") is None

    def test_insert_conflict_reports_unique_violation(self, catalog: BookCatalog) -> None:
        catalog.insert_book({"title": "Dune", "isbn": "9780441172719"}, conflict_key="isbn")
        with pytest.raises(UniqueViolationError) as excinfo:
            catalog.insert_book({"title": "Dune 2", "isbn": "9780441172719"}, conflict_key="isbn")
        assert excinfo.value.field == "isbn"
        assert excinfo.value.code == "23505"
        assert catalog.count() == 1

    def test_plain_insert_duplicate_maps_to_unique_violation(
        self, catalog: BookCatalog
    ) -> None:
        catalog.insert_book({"title": "Dune", "isbn": "1"})
        with pytest.raises(UniqueViolationError):
            catalog.insert_book({"title": "Dune", "isbn": "1"})

    def test_check_constraint_propagates_raw(self, catalog: BookCatalog) -> None:
        with pytest.raises(sqlite3.IntegrityError):
            catalog.insert_book({"title": "Dune", "total_pages": 0})

    def test_unknown_column_rejected(self, catalog: BookCatalog) -> None:
        with pytest.raises(ValueError, match="Unknown book column"):
            catalog.insert_book({"title": "Dune", "rating": 5})

    def test_update_bumps_updated_at(self, catalog: BookCatalog, clock: FixedClock) -> None:
        book_id = catalog.insert_book({"title": "Dune"})
        clock.advance(hours=1)
        catalog.update_book(book_id, {"total_pages": 412})
        book = catalog.get_by_id(book_id)
        assert book is not None
        assert book.total_pages == 412
        assert book.updated_at == "2024-03-01T13:00:00"
        assert book.created_at == "2024-03-01T12:00:00"

    def test_update_missing_raises(self, catalog: BookCatalog) -> None:
        with pytest.raises(BookNotFoundError):
            catalog.update_book(42, {"total_pages": 1})

    def test_update_isbn_collision(self, catalog: BookCatalog) -> None:
        catalog.insert_book({"title": "A", "isbn": "1"})
        other = catalog.insert_book({"title": "B"})
        with pytest.raises(UniqueViolationError):
            catalog.update_book(other, {"isbn": "1"})

    def test_list_incomplete_oldest_first(self, catalog: BookCatalog, clock: FixedClock) -> None:
        complete = catalog.insert_book(
            {"title": "Done", "cover_url": "https://x/c.jpg", "total_pages": 10,
             "description": "d" * 80}
        )
        first = catalog.insert_book({"title": "First"})
        clock.advance(minutes=5)
        second = catalog.insert_book(
            {"title": "Second", "openlibrary_cover_id": 5, "total_pages": 10,
             "description": "short"}
        )
        ids = [b.id for b in catalog.list_incomplete()]
        assert complete not in ids
        assert ids == [first, second]
        assert [b.id for b in catalog.list_incomplete(limit=1)] == [first]

    def test_list_incomplete_puts_attempted_books_last(
        self, catalog: BookCatalog, clock: FixedClock
    ) -> None:
        first = catalog.insert_book({"title": "First"})
        second = catalog.insert_book({"title": "Second"})
        before = catalog.get_by_id(first)

        clock.advance(minutes=5)
        catalog.mark_enrichment_attempt(first)

        assert [b.id for b in catalog.list_incomplete()] == [second, first]
        after = catalog.get_by_id(first)
        assert before is not None and after is not None
        assert after.updated_at == before.updated_at
        assert after.enrichment_attempted_at == "2024-03-01T12:05:00"


class TestIsUniqueViolation:
    def test_recognized_shapes(self) -> None:
        assert is_unique_violation(UniqueViolationError("dup"))
        assert is_unique_violation(SimpleNamespace(code="23505"))  # type: ignore[arg-type]
        assert is_unique_violation(SimpleNamespace(code=23505))  # type: ignore[arg-type]
        assert is_unique_violation(SimpleNamespace(status=409))  # type: ignore[arg-type]
        assert is_unique_violation(SimpleNamespace(status_code=409))  # type: ignore[arg-type]
        response = SimpleNamespace(status_code=409)
        assert is_unique_violation(SimpleNamespace(response=response))  # type: ignore[arg-type]

    def test_other_errors(self) -> None:
        assert not is_unique_violation(RuntimeError("boom"))
        assert not is_unique_violation(SimpleNamespace(status=500))  # type: ignore[arg-type]
        assert not is_unique_violation(sqlite3.OperationalError("locked"))
