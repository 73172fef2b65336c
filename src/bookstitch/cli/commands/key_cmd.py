# ABOUTME: The `bookstitch key` command for printing a record's dedup key.
# ABOUTME: Reads a JSON payload from a file or stdin and prints derive_key's result.

from typing import IO

import click

from bookstitch.cli.runtime import read_json_payload
from bookstitch.metadata.adapters import from_raw
from bookstitch.metadata.keys import derive_key


@click.command("key")
@click.argument("payload", type=click.File("r"), default="-")
def key(payload: IO[str]) -> None:
    """Print the deterministic book key for a JSON record (file or stdin)."""
    record = from_raw(read_json_payload(payload))
    click.echo(derive_key(record))
