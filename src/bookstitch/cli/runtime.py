# ABOUTME: Wiring shared by CLI commands: settings, store, fetchers, and the enricher.
# ABOUTME: Commands call these factories so tests can swap in fakes with a single patch.

import json
import sqlite3
from pathlib import Path
from typing import IO, Any

import click

from bookstitch.config import Settings
from bookstitch.core.enricher import Enricher
from bookstitch.db.catalog import BookCatalog
from bookstitch.db.connection import open_store
from bookstitch.metadata.google_books import GoogleBooksClient
from bookstitch.metadata.http import StitchHttpClient
from bookstitch.metadata.openlibrary import OpenLibraryClient


def load_settings(
    db_path: Path | None = None, google_api_key: str | None = None
) -> Settings:
    """Environment settings with CLI values layered on top."""
    return Settings.from_env().override(db_path=db_path, google_api_key=google_api_key)


def open_catalog(settings: Settings) -> tuple[sqlite3.Connection, BookCatalog]:
    conn = open_store(settings.db_path)
    return conn, BookCatalog(conn)


def create_sources(settings: Settings) -> tuple[OpenLibraryClient, GoogleBooksClient]:
    """Create the OpenLibrary and Google Books fetchers over one HTTP client."""
    http_client = StitchHttpClient(user_agent=settings.user_agent)
    return OpenLibraryClient(http_client), GoogleBooksClient(
        http_client, api_key=settings.google_api_key
    )


def create_enricher(
    catalog: BookCatalog, openlibrary: OpenLibraryClient, google_books: GoogleBooksClient
) -> Enricher:
    return Enricher(catalog, openlibrary, google_books)


def read_json_payload(stream: IO[str]) -> dict[str, Any]:
    """Parse one JSON object from a file or stdin.

    Raises:
        click.BadParameter: If the text is not a JSON object.
    """
    try:
        data = json.load(stream)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object")
    return data
