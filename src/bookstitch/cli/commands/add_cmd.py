# ABOUTME: The `bookstitch add` command for ingesting one book record.
# ABOUTME: Accepts a JSON payload in any supported source shape, or manual form flags.

from pathlib import Path
from typing import IO

import click
from rich.console import Console

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option, google_key_option
from bookstitch.core.ingest import ingest_record
from bookstitch.core.reconcile import InsufficientMetadataError
from bookstitch.metadata.adapters import (
    from_google_books,
    from_manual_form,
    from_openlibrary_edition,
    from_openlibrary_search,
    from_raw,
)
from bookstitch.metadata.display import safe_title

console = Console()

_ADAPTERS = {
    "raw": from_raw,
    "google": from_google_books,
    "openlibrary": from_openlibrary_search,
    "edition": from_openlibrary_edition,
    "manual": from_manual_form,
}


@click.command("add")
@click.argument("payload", type=click.File("r"), required=False)
@click.option(
    "--source",
    type=click.Choice(sorted(_ADAPTERS)),
    default="raw",
    show_default=True,
    help="Shape of the JSON payload.",
)
@click.option("--title", default=None, help="Title (manual entry).")
@click.option("--author", default=None, help="Author (manual entry).")
@click.option("--isbn", default=None, help="ISBN (manual entry).")
@click.option("--pages", type=int, default=None, help="Page count (manual entry).")
@click.option("--enrich/--no-enrich", default=True, help="Enrich after reconciling.")
@db_option
@google_key_option
def add(
    payload: IO[str] | None,
    source: str,
    title: str | None,
    author: str | None,
    isbn: str | None,
    pages: int | None,
    enrich: bool,
    db_path: Path | None,
    google_api_key: str | None,
) -> None:
    """Add a book from a JSON payload (file or '-') or from manual flags."""
    if payload is not None:
        record = _ADAPTERS[source](runtime.read_json_payload(payload))
    elif any(v is not None for v in (title, author, isbn, pages)):
        record = from_manual_form(
            {"title": title, "author": author, "isbn": isbn, "pages": pages}
        )
    else:
        raise click.UsageError("Provide a JSON payload or at least one of --title/--author/--isbn.")

    settings = runtime.load_settings(db_path, google_api_key)
    conn, catalog = runtime.open_catalog(settings)
    try:
        enricher = None
        if enrich:
            openlibrary, google_books = runtime.create_sources(settings)
            enricher = runtime.create_enricher(catalog, openlibrary, google_books)
        try:
            result = ingest_record(catalog, record, enricher)
        except InsufficientMetadataError as exc:
            console.print(f"[red]Cannot add book: {exc}.[/red]")
            raise SystemExit(1) from exc

        book = catalog.get_by_id(result.book_id)
        console.print(f"[green]Book {result.book_id}:[/green] {safe_title(book)}")
        if result.enrichment and result.enrichment.updated_fields:
            console.print(
                f"[dim]Enriched: {', '.join(result.enrichment.updated_fields)}[/dim]"
            )
    finally:
        conn.close()
