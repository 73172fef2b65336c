# ABOUTME: CLI package for bookstitch, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from bookstitch.cli.commands import (
    add_cmd,
    backfill_cmd,
    enrich_cmd,
    info_cmd,
    key_cmd,
    ls_cmd,
    scan_cmd,
    search_cmd,
)


def _configure_logging(verbose: bool) -> None:
    """Route debug logging through rich when --verbose is given."""
    if not verbose:
        return
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
    root.setLevel(logging.DEBUG)


@click.group()
@click.version_option(package_name="bookstitch")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """bookstitch - reconcile and enrich book metadata into one canonical catalog."""
    _configure_logging(verbose)


cli.add_command(key_cmd.key)
cli.add_command(add_cmd.add)
cli.add_command(scan_cmd.scan)
cli.add_command(search_cmd.search)
cli.add_command(enrich_cmd.enrich)
cli.add_command(backfill_cmd.backfill)
cli.add_command(info_cmd.info)
cli.add_command(ls_cmd.ls)
