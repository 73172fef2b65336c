# ABOUTME: The `bookstitch search` command for finding books on OpenLibrary.
# ABOUTME: Lists numbered search hits and optionally ingests one of them with --add.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option, google_key_option
from bookstitch.core.ingest import ingest_record
from bookstitch.core.reconcile import InsufficientMetadataError
from bookstitch.metadata.display import safe_author, safe_title
from bookstitch.metadata.keys import derive_key

console = Console()


@click.command("search")
@click.argument("title")
@click.option("--author", default=None, help="Narrow the search to an author.")
@click.option(
    "--add",
    "add_index",
    type=click.IntRange(min=1),
    default=None,
    help="Add the Nth result to the catalog.",
)
@db_option
@google_key_option
def search(
    title: str,
    author: str | None,
    add_index: int | None,
    db_path: Path | None,
    google_api_key: str | None,
) -> None:
    """Search OpenLibrary by title (and optionally author)."""
    settings = runtime.load_settings(db_path, google_api_key)
    openlibrary, google_books = runtime.create_sources(settings)
    results = openlibrary.search(title, author)

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table()
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Pages", width=6)
    table.add_column("Key", style="dim")
    for index, record in enumerate(results, start=1):
        table.add_row(
            str(index),
            safe_title(record),
            safe_author(record) or "[dim]unknown[/dim]",
            str(record.total_pages or ""),
            derive_key(record),
        )
    console.print(table)

    if add_index is None:
        return
    if add_index > len(results):
        console.print(f"[red]No result #{add_index}; only {len(results)} found.[/red]")
        raise SystemExit(1)

    conn, catalog = runtime.open_catalog(settings)
    try:
        enricher = runtime.create_enricher(catalog, openlibrary, google_books)
        try:
            result = ingest_record(catalog, results[add_index - 1], enricher)
        except InsufficientMetadataError as exc:
            console.print(f"[red]Cannot add result #{add_index}: {exc}.[/red]")
            raise SystemExit(1) from exc
        console.print(f"[green]Added as book {result.book_id}.[/green]")
    finally:
        conn.close()
