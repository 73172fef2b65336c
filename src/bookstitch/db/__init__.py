# ABOUTME: Public API for the bookstitch row-store layer.
# ABOUTME: Exports connection management, the SQLite catalog, and storage errors.

from bookstitch.db.catalog import BookCatalog
from bookstitch.db.connection import DEFAULT_DB_PATH, open_store
from bookstitch.db.mapping import Book
from bookstitch.db.store import (
    BookNotFoundError,
    BookStore,
    StoreError,
    UniqueViolationError,
    is_unique_violation,
)

__all__ = [
    "DEFAULT_DB_PATH",
    "Book",
    "BookCatalog",
    "BookNotFoundError",
    "BookStore",
    "StoreError",
    "UniqueViolationError",
    "is_unique_violation",
    "open_store",
]
