# ABOUTME: The `bookstitch scan` command for adding a book from a scanned barcode ISBN.
# ABOUTME: Looks the ISBN up on Google Books then OpenLibrary, reconciles, and enriches.

from pathlib import Path

import click
from rich.console import Console

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option, google_key_option
from bookstitch.core.ingest import scan_isbn
from bookstitch.metadata.display import safe_author, safe_title

console = Console()


@click.command("scan")
@click.argument("isbn")
@click.option("--enrich/--no-enrich", default=True, help="Enrich after reconciling.")
@db_option
@google_key_option
def scan(isbn: str, enrich: bool, db_path: Path | None, google_api_key: str | None) -> None:
    """Add the book behind a barcode ISBN."""
    settings = runtime.load_settings(db_path, google_api_key)
    openlibrary, google_books = runtime.create_sources(settings)
    conn, catalog = runtime.open_catalog(settings)
    try:
        enricher = runtime.create_enricher(catalog, openlibrary, google_books) if enrich else None
        try:
            result = scan_isbn(catalog, isbn, google_books, openlibrary, enricher)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

        book = catalog.get_by_id(result.book_id)
        author = safe_author(book) or "unknown"
        console.print(f"[green]Book {result.book_id}:[/green] {safe_title(book)} by {author}")
    finally:
        conn.close()
