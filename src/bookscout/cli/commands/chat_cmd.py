# ABOUTME: The `bookscout chat` command: an interactive session reading one request per line.
# ABOUTME: Keeps toggles and the reply cache for the whole session.

import sys

import click
from rich.console import Console

from bookscout.cli.cache import ReplyCache
from bookscout.cli.options import (
    catalog_debug_option,
    debug_errors_option,
    raw_option,
    resolve_options,
)
from bookscout.cli.session import CHAT_HELP, Session, create_finder
from bookscout.config import Settings


@click.command("chat")
@raw_option
@catalog_debug_option
@debug_errors_option
@click.pass_obj
def chat(
    settings: Settings,
    raw_mode: bool | None,
    catalog_debug: bool | None,
    debug_errors: bool | None,
) -> None:
    """Answer descriptions and photos interactively until /quit or end of input."""
    console = Console()
    session = Session(
        create_finder(settings),
        console=console,
        options=resolve_options(settings, raw_mode, catalog_debug),
        debug_errors=settings.debug_errors if debug_errors is None else debug_errors,
        cache=ReplyCache(settings.cache_size),
    )
    console.print(CHAT_HELP, markup=False)

    while True:
        console.print("[bold]>[/bold] ", end="")
        line = sys.stdin.readline()
        if not line:
            break
        if not session.handle_line(line):
            break
    console.print("[dim]Bye.[/dim]")
