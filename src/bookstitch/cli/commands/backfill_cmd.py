# ABOUTME: The `bookstitch backfill` command for enriching every incomplete book.
# ABOUTME: Walks books missing a cover, pages, or description, least recently tried first.

from pathlib import Path

import click
from rich.console import Console

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option, google_key_option
from bookstitch.core.ingest import backfill as run_backfill

console = Console()


@click.command("backfill")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum books to check.")
@db_option
@google_key_option
def backfill(limit: int | None, db_path: Path | None, google_api_key: str | None) -> None:
    """Enrich all books that are still missing metadata."""
    settings = runtime.load_settings(db_path, google_api_key)
    openlibrary, google_books = runtime.create_sources(settings)
    conn, catalog = runtime.open_catalog(settings)
    try:
        enricher = runtime.create_enricher(catalog, openlibrary, google_books)
        result = run_backfill(catalog, enricher, limit)
    finally:
        conn.close()

    console.print(
        f"Checked {result.checked} book(s): [green]{result.updated} updated[/green], "
        f"{result.skipped} unchanged, [red]{result.errors} failed[/red]"
    )
    for book_id, message in result.error_details:
        console.print(f"  [red]book {book_id}:[/red] {message}")
