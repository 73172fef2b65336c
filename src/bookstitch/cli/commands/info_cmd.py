# ABOUTME: The `bookstitch info` command for displaying one canonical book.
# ABOUTME: Shows every stored field, rendering titles and authors display-safely.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option
from bookstitch.core.merge import completeness_score
from bookstitch.metadata.display import safe_author, safe_title

console = Console()


@click.command("info")
@click.argument("book_id", type=int)
@db_option
def info(book_id: int, db_path: Path | None) -> None:
    """Show detailed metadata for a book by ID."""
    settings = runtime.load_settings(db_path)
    conn, catalog = runtime.open_catalog(settings)
    try:
        book = catalog.get_by_id(book_id)
    finally:
        conn.close()

    if book is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", str(book.id))
    table.add_row("Title", safe_title(book))
    table.add_row("Author", safe_author(book) or "unknown")
    if book.isbn:
        table.add_row("ISBN", book.isbn)
    if book.total_pages:
        table.add_row("Pages", str(book.total_pages))
    if book.google_books_id:
        table.add_row("Google ID", book.google_books_id)
    if book.openlibrary_work_key:
        table.add_row("OL Work", book.openlibrary_work_key)
    if book.openlibrary_edition_key:
        table.add_row("OL Edition", book.openlibrary_edition_key)
    if book.cover_url:
        table.add_row("Cover", book.cover_url)
    if book.description:
        table.add_row("Description", book.description)
    table.add_row("Completeness", f"{completeness_score(book)}/120")
    table.add_row("Added", book.created_at or "")
    table.add_row("Modified", book.updated_at or "")

    console.print(table)
