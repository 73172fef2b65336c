# ABOUTME: Metadata package: source adapters, identity keys, display checks, and fetchers.
# ABOUTME: Exports IncomingRecord, the normalized shape every raw payload is converted to.

from bookstitch.metadata.adapters import (
    from_google_books,
    from_manual_form,
    from_openlibrary_edition,
    from_openlibrary_search,
    from_raw,
)
from bookstitch.metadata.display import (
    is_bad_author,
    is_bad_cover_url,
    is_bad_title,
    safe_author,
    safe_title,
)
from bookstitch.metadata.keys import derive_key
from bookstitch.metadata.types import EnrichedFields, EnrichmentHints, IncomingRecord

__all__ = [
    "EnrichedFields",
    "EnrichmentHints",
    "IncomingRecord",
    "derive_key",
    "from_google_books",
    "from_manual_form",
    "from_openlibrary_edition",
    "from_openlibrary_search",
    "from_raw",
    "is_bad_author",
    "is_bad_cover_url",
    "is_bad_title",
    "safe_author",
    "safe_title",
]
