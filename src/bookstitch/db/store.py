# ABOUTME: Row-store adapter contract and storage error taxonomy for canonical books.
# ABOUTME: Uniqueness violations are distinguishable from every other storage failure.

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from bookstitch.db.mapping import Book

UNIQUE_VIOLATION_CODE = "23505"
HTTP_CONFLICT = 409


class StoreError(Exception):
    """Base class for row-store errors raised by bookstitch itself."""


class UniqueViolationError(StoreError):
    """Raised when an insert or update collides with a unique constraint."""

    code = UNIQUE_VIOLATION_CODE

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class BookNotFoundError(StoreError):
    """Raised when an operation targets a book id that does not exist."""


def is_unique_violation(exc: BaseException) -> bool:
    """Whether an error from any storage adapter means "someone else inserted first".

    Recognizes UniqueViolationError, Postgres-style error codes ("23505"),
    and HTTP 409 Conflict statuses from REST-fronted stores.
    """
    if isinstance(exc, UniqueViolationError):
        return True
    if str(getattr(exc, "code", "")) == UNIQUE_VIOLATION_CODE:
        return True
    for attr in ("status", "status_code"):
        if getattr(exc, attr, None) == HTTP_CONFLICT:
            return True
    response = getattr(exc, "response", None)
    return getattr(response, "status_code", None) == HTTP_CONFLICT


@runtime_checkable
class BookStore(Protocol):
    """Row store for canonical books.

    Implementations must raise an error recognized by is_unique_violation()
    when insert_book() collides on the conflict key, and let every other
    failure propagate.
    """

    def get_by_id(self, book_id: int) -> Book | None: ...

    def find_by_field(self, field: str, value: Any) -> Book | None: ...

    def find_by_title_author(self, title: str, author: str) -> Book | None: ...

    def insert_book(self, fields: Mapping[str, Any], conflict_key: str | None = None) -> int: ...

    def update_book(self, book_id: int, fields: Mapping[str, Any]) -> None: ...

    def list_incomplete(self, limit: int | None = None) -> list[Book]: ...

    def mark_enrichment_attempt(self, book_id: int) -> None: ...
