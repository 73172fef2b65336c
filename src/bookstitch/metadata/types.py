# ABOUTME: Core data structures shared by the adapters, reconciliation, and enrichment stages.
# ABOUTME: IncomingRecord is the single normalized shape every raw payload is converted to.

from dataclasses import asdict, dataclass, field


@dataclass
class IncomingRecord:
    """A book record as it arrives from one source, before reconciliation.

    Produced by the adapters in bookstitch.metadata.adapters. Every field is
    optional: a barcode scan may carry only an ISBN, a manual form only a
    title. Never persisted as-is.
    """

    title: str | None = None
    authors: list[str] = field(default_factory=list)
    isbn13: str | None = None
    isbn10: str | None = None
    isbn: str | None = None
    google_books_id: str | None = None
    openlibrary_work_key: str | None = None
    openlibrary_edition_key: str | None = None
    openlibrary_cover_id: int | None = None
    total_pages: int | None = None
    cover_url: str | None = None
    description: str | None = None
    book_key: str | None = None
    source: str | None = None
    source_id: str | None = None

    @property
    def author(self) -> str | None:
        """Joined author string, or None when no author is known."""
        names = [a.strip() for a in self.authors if a and a.strip()]
        return ", ".join(names) if names else None

    @property
    def best_isbn(self) -> str | None:
        return self.isbn13 or self.isbn10 or self.isbn


@dataclass
class EnrichmentHints:
    """Identifiers a caller wants enrichment to consider, persisted or not."""

    isbn: str | None = None
    google_books_id: str | None = None
    openlibrary_work_key: str | None = None
    openlibrary_edition_key: str | None = None


@dataclass
class EnrichedFields:
    """Metadata discovered (or already held) for a Book by enrichment."""

    cover_url: str | None = None
    openlibrary_cover_id: int | None = None
    total_pages: int | None = None
    description: str | None = None
    openlibrary_work_key: str | None = None
    openlibrary_edition_key: str | None = None
    google_books_id: str | None = None

    def as_dict(self) -> dict[str, str | int | None]:
        return asdict(self)

    def filled(self) -> dict[str, str | int]:
        """Only the fields that carry a value."""
        return {k: v for k, v in asdict(self).items() if v is not None}
