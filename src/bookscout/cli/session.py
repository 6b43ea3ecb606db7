# ABOUTME: A presentation session: runs find requests, applies the error policy, caches replies.
# ABOUTME: Also interprets chat lines (/raw, /fdebug, /photo, /quit) for the interactive command.

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from bookscout.catalog.flibusta import FlibustaCatalog
from bookscout.catalog.googlebooks import GoogleBooksLookup
from bookscout.cli.cache import ReplyCache, image_cache_key, text_cache_key
from bookscout.cli.render import print_notes, print_reply, render
from bookscout.config import RequestOptions, Settings
from bookscout.core.finder import BookFinder
from bookscout.core.outcomes import Outcome
from bookscout.errors import ConfigurationError, UserFacingError
from bookscout.extraction.gemini import GeminiExtractor
from bookscout.http import BookscoutHttpClient

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong while processing the request. Try again."
_ERROR_EXCERPT = 800

_ON = frozenset({"on", "1", "true"})
_OFF = frozenset({"off", "0", "false"})

CHAT_HELP = (
    "Describe a book, or use:\n"
    "  /photo PATH      identify a book from a cover photo\n"
    "  /raw on|off      show the model's raw output\n"
    "  /fdebug on|off   show catalog searches\n"
    "  /quit            leave"
)


def create_finder(settings: Settings) -> BookFinder:
    """Wire the default services: Gemini, Flibusta and Google Books."""
    service_http = BookscoutHttpClient(timeout=settings.timeout, max_retries=1)
    # Catalog failures are reported to the user instead of retried.
    catalog_http = BookscoutHttpClient(timeout=settings.timeout, max_retries=0)
    return BookFinder(
        extractor=GeminiExtractor(
            service_http, settings.gemini_api_key, model=settings.gemini_model
        ),
        catalog=FlibustaCatalog(catalog_http, base_url=settings.flibusta_base_url),
        lookup=GoogleBooksLookup(service_http, api_key=settings.google_books_api_key),
    )


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type if mime_type and mime_type.startswith("image/") else "image/jpeg"


class Session:
    """Handles requests for one presentation session (a command run or a chat).

    Toggles live here, not in module globals, and are handed to the finder
    with every request.
    """

    def __init__(
        self,
        finder: BookFinder,
        *,
        console: Console | None = None,
        options: RequestOptions | None = None,
        debug_errors: bool = False,
        cache: ReplyCache | None = None,
    ) -> None:
        self._finder = finder
        self._console = console or Console()
        self.options = options or RequestOptions()
        self.debug_errors = debug_errors
        self.cache = cache or ReplyCache()

    def handle_text(self, text: str) -> bool:
        """Answer a description. Returns False if the request failed."""
        return self._handle(
            text_cache_key(text),
            lambda: self._finder.find_from_text(text, self.options),
        )

    def handle_photo(self, path: Path) -> bool:
        """Answer a cover photo. Returns False if the request failed."""
        try:
            data = path.read_bytes()
        except OSError as exc:
            self._console.print(f"[red]Cannot read photo:[/red] {exc}")
            return False
        mime_type = guess_mime_type(path)
        return self._handle(
            image_cache_key(data),
            lambda: self._finder.find_from_photo(data, mime_type, self.options),
        )

    def handle_line(self, line: str) -> bool:
        """Interpret one chat line. Returns False when the user wants to leave."""
        line = line.strip()
        if not line:
            return True
        if not line.startswith("/"):
            self.handle_text(line)
            return True

        command, _, argument = line.partition(" ")
        argument = argument.strip()
        command = command.lower()
        if command in ("/quit", "/exit"):
            return False
        if command == "/help":
            self._console.print(CHAT_HELP)
        elif command == "/raw":
            self._toggle("raw_mode", "RAW mode", argument)
        elif command == "/fdebug":
            self._toggle("catalog_debug", "Catalog debug", argument)
        elif command == "/photo":
            if argument:
                self.handle_photo(Path(argument).expanduser())
            else:
                self._console.print("Usage: /photo PATH")
        else:
            self._console.print(f"[yellow]Unknown command {command}.[/yellow] Try /help.")
        return True

    def _toggle(self, field_name: str, label: str, argument: str) -> None:
        value = argument.lower()
        if value in _ON:
            self.options = replace(self.options, **{field_name: True})
        elif value in _OFF:
            self.options = replace(self.options, **{field_name: False})
        state = "on" if getattr(self.options, field_name) else "off"
        self._console.print(f"{label} is {state}.")

    def _handle(self, cache_key: str, request: Callable[[], Outcome]) -> bool:
        if not self.options.raw_mode:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Reply cache hit for %s", cache_key)
                print_reply(self._console, cached)
                return True

        try:
            outcome = request()
        except ConfigurationError as exc:
            raise click.ClickException(str(exc)) from exc
        except UserFacingError as exc:
            self._console.print(str(exc), markup=False)
            return False
        except Exception as exc:
            logger.exception("Request failed")
            if self.debug_errors:
                self._console.print(f"Error: {str(exc)[:_ERROR_EXCERPT]}", markup=False)
            else:
                self._console.print(GENERIC_FAILURE)
            return False

        print_notes(self._console, outcome.notes)
        reply = render(outcome, show_details=self.debug_errors)
        print_reply(self._console, reply)
        if outcome.cacheable:
            self.cache.set(cache_key, reply)
        return True
