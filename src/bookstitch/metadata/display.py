# ABOUTME: Display-safety checks that separate real titles, authors, and covers from placeholders.
# ABOUTME: Also cleans noisy OpenLibrary descriptions; every helper is pure and never raises.

import re
from collections.abc import Mapping
from typing import Any

_DESCRIPTION_CAP = 320

_BAD_TITLE_EXACT = frozenset(
    {
        "(openlibrary book)",
        "métadonnées en cours…",
        "métadonnées en cours...",
        "metadonnees en cours",
    }
)
_BAD_TITLE_FRAGMENT = "openlibrary book"
_BAD_AUTHOR = "Auteur inconnu"

_BAD_COVER_FRAGMENTS = (
    "image not available",
    "imagenotavailable",
    "imagenoavailable",
    "image_not_available",
    "placeholder",
    "no-cover",
    "nocover",
)

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_URL_RE = re.compile(r"https?://\S+")
_ALSO_IN_RE = re.compile(r"\bAlso (contained in|in)\b.*$", re.IGNORECASE | re.DOTALL)
_DASH_RUN_RE = re.compile(r"[-–—]{4,}")
_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_WORD_RE = re.compile(r"\s+\S*$")


def _as_text(value: Any) -> str:
    if value is None or not isinstance(value, (str, int, float)):
        return ""
    return str(value).strip()


def is_bad_title(title: Any) -> bool:
    """True for empty titles and known placeholder titles (case-insensitive)."""
    s = _as_text(title)
    if not s:
        return True
    lowered = s.lower()
    return lowered in _BAD_TITLE_EXACT or _BAD_TITLE_FRAGMENT in lowered


def is_bad_author(author: Any) -> bool:
    """True for empty authors and the "Auteur inconnu" placeholder."""
    s = _as_text(author)
    return not s or s == _BAD_AUTHOR


def is_bad_cover_url(url: Any) -> bool:
    """True when a cover URL is missing or matches a known broken-cover pattern."""
    s = _as_text(url)
    if not s:
        return True
    lowered = s.lower()
    if any(fragment in lowered for fragment in _BAD_COVER_FRAGMENTS):
        return True
    return lowered.startswith("data:") and not lowered.startswith("data:image/")


def _field(entity: Any, name: str) -> Any:
    if entity is None:
        return None
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def safe_title(entity: Any, fallback: str = "Livre") -> str:
    """Best displayable title: the title, then custom_title, then fallback."""
    title = _field(entity, "title")
    if not is_bad_title(title):
        return _as_text(title)
    custom = _field(entity, "custom_title")
    if not is_bad_title(custom):
        return _as_text(custom)
    return fallback


def safe_author(entity: Any) -> str | None:
    """Best displayable author: the author, then custom_author, else None."""
    author = _field(entity, "author")
    if not is_bad_author(author):
        return _as_text(author)
    custom = _field(entity, "custom_author")
    if not is_bad_author(custom):
        return _as_text(custom)
    return None


def clean_description(raw: Any) -> str | None:
    """Strip markup, URLs, and cross-listing noise from a description.

    Accepts OpenLibrary's {"type": ..., "value": ...} shape as well as plain
    strings. Text longer than the cap is cut on a word boundary and gets a
    trailing ellipsis.
    """
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    if not isinstance(raw, str) or not raw:
        return None

    s = _HTML_TAG_RE.sub(" ", raw)
    s = _URL_RE.sub("", s)
    s = _ALSO_IN_RE.sub("", s)
    s = _DASH_RUN_RE.sub(" ", s)
    s = _WHITESPACE_RE.sub(" ", s).strip()

    if len(s) > _DESCRIPTION_CAP:
        s = _TRAILING_WORD_RE.sub("", s[:_DESCRIPTION_CAP]).strip() + "…"
    return s or None
