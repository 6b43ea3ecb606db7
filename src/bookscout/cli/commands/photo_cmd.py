# ABOUTME: The `bookscout photo` command: identify a book from a cover photo.
# ABOUTME: Reads the image file, runs one request through a Session, exits non-zero on failure.

from pathlib import Path

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


@click.command("photo")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@raw_option
@catalog_debug_option
@debug_errors_option
@click.pass_obj
def photo(
    settings: Settings,
    path: Path,
    raw_mode: bool | None,
    catalog_debug: bool | None,
    debug_errors: bool | None,
) -> None:
    """Identify the book on the cover photo at PATH."""
    session = Session(
        create_finder(settings),
        console=Console(),
        options=resolve_options(settings, raw_mode, catalog_debug),
        debug_errors=settings.debug_errors if debug_errors is None else debug_errors,
        cache=ReplyCache(settings.cache_size),
    )
    if not session.handle_photo(path):
        raise SystemExit(1)
