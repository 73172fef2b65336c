# ABOUTME: Parsing functions for Google Books volume JSON responses.
# ABOUTME: Extracts description, page count, ISBNs, and a render-safe thumbnail URL.

from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bookstitch.metadata.openlibrary_parser import positive_int

# Query parameters that make Google serve low-resolution or page-curled renders.
_DEGRADING_PARAMS = frozenset({"zoom", "edge"})


@dataclass
class VolumeInfo:
    """Fields extracted from a Google Books volume response."""

    volume_id: str | None = None
    description: str | None = None
    page_count: int | None = None
    thumbnail_url: str | None = None


def normalize_google_cover_url(url: str | None) -> str | None:
    """Strip zoom/edge query parameters and force https on a Google cover URL."""
    if not url or not isinstance(url, str):
        return None
    parts = urlsplit(url.strip())
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True)
             if k not in _DEGRADING_PARAMS]
    scheme = "https" if parts.scheme == "http" else parts.scheme
    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def volume_info(data: dict[str, Any]) -> dict[str, Any]:
    """The volumeInfo block of a volume, or an empty dict when malformed."""
    info = data.get("volumeInfo")
    return info if isinstance(info, dict) else {}


def industry_isbn(info: dict[str, Any], kind: str) -> str | None:
    """Pick the ISBN_13 or ISBN_10 identifier out of industryIdentifiers."""
    identifiers = info.get("industryIdentifiers")
    if not isinstance(identifiers, list):
        return None
    for entry in identifiers:
        if isinstance(entry, dict) and entry.get("type") == kind and entry.get("identifier"):
            return str(entry["identifier"])
    return None


def thumbnail_from(info: dict[str, Any]) -> str | None:
    links = info.get("imageLinks")
    if not isinstance(links, dict):
        return None
    return normalize_google_cover_url(links.get("thumbnail") or links.get("smallThumbnail"))


def parse_volume_response(data: dict[str, Any]) -> VolumeInfo:
    """Parse a Google Books /volumes/{id} response.

    Description is trimmed only; the caller applies cleaning and length
    thresholds.
    """
    info = volume_info(data)
    description = info.get("description")
    return VolumeInfo(
        volume_id=data.get("id") if isinstance(data.get("id"), str) else None,
        description=description.strip() if isinstance(description, str) else None,
        page_count=positive_int(info.get("pageCount")),
        thumbnail_url=thumbnail_from(info),
    )
