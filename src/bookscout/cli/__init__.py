# ABOUTME: CLI package for Bookscout, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from bookscout.cli.commands import chat_cmd, gdebug_cmd, photo_cmd, text_cmd
from bookscout.config import Settings


@click.group()
@click.version_option(package_name="bookscout")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug details.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Bookscout - find a book from a cover photo or a description."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True)],
        )
    try:
        ctx.obj = Settings.from_env()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


cli.add_command(text_cmd.text)
cli.add_command(photo_cmd.photo)
cli.add_command(chat_cmd.chat)
cli.add_command(gdebug_cmd.gdebug)
