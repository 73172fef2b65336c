# ABOUTME: The `bookstitch enrich` command for enriching one cataloged book.
# ABOUTME: Accepts extra identifiers as hints and reports which fields were written.

from pathlib import Path

import click
from rich.console import Console

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option, google_key_option
from bookstitch.db.store import BookNotFoundError
from bookstitch.metadata.types import EnrichmentHints

console = Console()


@click.command("enrich")
@click.argument("book_id", type=int)
@click.option("--isbn", default=None, help="ISBN hint.")
@click.option("--google-id", default=None, help="Google Books volume id hint.")
@click.option("--work-key", default=None, help="OpenLibrary work key hint.")
@click.option("--edition-key", default=None, help="OpenLibrary edition key hint.")
@db_option
@google_key_option
def enrich(
    book_id: int,
    isbn: str | None,
    google_id: str | None,
    work_key: str | None,
    edition_key: str | None,
    db_path: Path | None,
    google_api_key: str | None,
) -> None:
    """Fill a book's missing cover, pages, and description."""
    settings = runtime.load_settings(db_path, google_api_key)
    openlibrary, google_books = runtime.create_sources(settings)
    conn, catalog = runtime.open_catalog(settings)
    try:
        enricher = runtime.create_enricher(catalog, openlibrary, google_books)
        hints = EnrichmentHints(
            isbn=isbn,
            google_books_id=google_id,
            openlibrary_work_key=work_key,
            openlibrary_edition_key=edition_key,
        )
        try:
            result = enricher.enrich(book_id, hints)
        except BookNotFoundError as exc:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1) from exc
    finally:
        conn.close()

    if result.updated_fields:
        console.print(f"[green]Updated:[/green] {', '.join(result.updated_fields)}")
    else:
        console.print(f"[yellow]No changes ({result.status}).[/yellow]")
