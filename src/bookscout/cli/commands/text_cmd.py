# ABOUTME: The `bookscout text` command: find a book from a free-text description.
# ABOUTME: Runs one request through a Session and exits non-zero when it fails.

import click
from rich.console import Console

from bookscout.cli.cache import ReplyCache
from bookscout.cli.options import (
    catalog_debug_option,
    debug_errors_option,
    raw_option,
    resolve_options,
)
from bookscout.cli.session import Session, create_finder
from bookscout.config import Settings


@click.command("text")
@click.argument("description", nargs=-1, required=True)
@raw_option
@catalog_debug_option
@debug_errors_option
@click.pass_obj
def text(
    settings: Settings,
    description: tuple[str, ...],
    raw_mode: bool | None,
    catalog_debug: bool | None,
    debug_errors: bool | None,
) -> None:
    """Find a book from a free-text DESCRIPTION (plot, characters, fragments)."""
    session = Session(
        create_finder(settings),
        console=Console(),
        options=resolve_options(settings, raw_mode, catalog_debug),
        debug_errors=settings.debug_errors if debug_errors is None else debug_errors,
        cache=ReplyCache(settings.cache_size),
    )
    if not session.handle_text(" ".join(description)):
        raise SystemExit(1)
