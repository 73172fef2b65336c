# ABOUTME: The `bookstitch ls` command for listing canonical books.
# ABOUTME: Displays a Rich table of the catalog, optionally only incomplete books.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookstitch.cli import runtime
from bookstitch.cli.options import db_option
from bookstitch.metadata.display import safe_author, safe_title

console = Console()


@click.command("ls")
@db_option
@click.option(
    "--incomplete",
    is_flag=True,
    help="Only books missing a cover, pages, or description.",
)
def ls(db_path: Path | None, incomplete: bool) -> None:
    """List all books in the catalog."""
    settings = runtime.load_settings(db_path)
    conn, catalog = runtime.open_catalog(settings)
    try:
        books = catalog.list_incomplete() if incomplete else catalog.list_all()
    finally:
        conn.close()

    if not books:
        console.print("[yellow]No books in the catalog.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("ISBN")
    table.add_column("Pages", width=6)

    for book in books:
        table.add_row(
            str(book.id),
            safe_title(book),
            safe_author(book) or "[dim]unknown[/dim]",
            book.isbn or "",
            str(book.total_pages or ""),
        )

    console.print(table)
    console.print(f"\n[dim]{len(books)} book(s)[/dim]")
