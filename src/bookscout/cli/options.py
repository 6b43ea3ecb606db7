# ABOUTME: Shared Click options for Bookscout CLI commands.
# ABOUTME: Request toggles default to the environment (RAW_MODE, FLIBUSTA_DEBUG, DEBUG_ERRORS).

from dataclasses import replace

import click

from bookscout.config import RequestOptions, Settings

raw_option = click.option(
    "--raw/--no-raw",
    "raw_mode",
    default=None,
    help="Show the model's raw output before the answer (default: $RAW_MODE).",
)

catalog_debug_option = click.option(
    "--catalog-debug/--no-catalog-debug",
    "catalog_debug",
    default=None,
    help="Show every catalog search and the final pick (default: $FLIBUSTA_DEBUG).",
)

debug_errors_option = click.option(
    "--debug-errors/--no-debug-errors",
    "debug_errors",
    default=None,
    help="Show an excerpt of unexpected errors instead of a generic message.",
)


def resolve_options(
    settings: Settings, raw_mode: bool | None, catalog_debug: bool | None
) -> RequestOptions:
    """Merge command-line toggles over the environment defaults."""
    options = settings.request_options()
    if raw_mode is not None:
        options = replace(options, raw_mode=raw_mode)
    if catalog_debug is not None:
        options = replace(options, catalog_debug=catalog_debug)
    return options
