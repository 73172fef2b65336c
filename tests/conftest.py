# ABOUTME: Shared pytest fixtures for bookstitch tests.
# ABOUTME: Provides an in-memory store, a catalog on a fixed clock, and fake metadata sources.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from bookstitch.db.catalog import BookCatalog
from bookstitch.db.connection import open_store
from tests.fixtures.fakes import FakeGoogleBooks, FakeOpenLibrary, FixedClock


@pytest.fixture
def conn() -> Iterator[sqlite3.Connection]:
    """A fresh in-memory book store."""
    connection = open_store(Path(":memory:"))
    yield connection
    connection.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def catalog(conn: sqlite3.Connection, clock: FixedClock) -> BookCatalog:
    """A BookCatalog whose timestamps come from the shared fixed clock."""
    return BookCatalog(conn, clock=clock)


@pytest.fixture
def openlibrary() -> FakeOpenLibrary:
    return FakeOpenLibrary()


@pytest.fixture
def google_books() -> FakeGoogleBooks:
    return FakeGoogleBooks()
