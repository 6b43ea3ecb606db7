# ABOUTME: Flibusta catalog provider: OPDS title/author search, book pages, download links.
# ABOUTME: Transport failures surface as categorized CatalogUnavailableError, never as empty results.

import logging
from collections.abc import Callable
from typing import TypeVar
from urllib.parse import urljoin

from bookscout.catalog.errors import CatalogErrorKind, CatalogUnavailableError, classify_error
from bookscout.catalog.flibusta_parser import (
    FeedParseError,
    parse_author_ids,
    parse_book_feed,
    parse_book_page,
)
from bookscout.catalog.types import BookInfo, CatalogCandidate
from bookscout.http import HttpClient, HttpRequestError

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

DEFAULT_BASE_URL = "https://flibusta.is"
_MAX_LIMIT = 100


def _clamp_limit(limit: int, fallback: int) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return fallback
    return max(1, min(value, _MAX_LIMIT))


def _normalize_id(book_id: str | int | None) -> str | None:
    """Return the id as a string if it is a positive integer key, else None."""
    value = str(book_id if book_id is not None else "").strip()
    return value if value.isdigit() and int(value) > 0 else None


class FlibustaCatalog:
    """Catalog provider backed by a Flibusta mirror.

    Uses dependency-injected HttpClient for testability. The client should be
    configured without automatic retries: a failed call aborts the resolution
    and is reported to the user.
    """

    def __init__(self, http_client: HttpClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self._http = http_client
        self._base = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "flibusta"

    def search_by_title(self, phrase: str, limit: int = 20) -> list[CatalogCandidate]:
        """Search books whose title matches the phrase."""
        query = (phrase or "").strip()
        if not query:
            return []
        limit = _clamp_limit(limit, 20)

        feed = self._call(
            "search for books",
            lambda: self._http.get_text(
                f"{self._base}/opds/search",
                params={"searchType": "books", "searchTerm": query},
            ),
        )
        return self._parse("search for books", lambda: parse_book_feed(feed))[:limit]

    def search_by_author(self, phrase: str, limit: int = 20) -> list[CatalogCandidate]:
        """List books of the first author whose name matches the phrase."""
        query = (phrase or "").strip()
        if not query:
            return []
        limit = _clamp_limit(limit, 20)

        feed = self._call(
            "search for the author",
            lambda: self._http.get_text(
                f"{self._base}/opds/search",
                params={"searchType": "authors", "searchTerm": query},
            ),
        )
        author_ids = self._parse("search for the author", lambda: parse_author_ids(feed))
        if not author_ids:
            return []

        books_feed = self._call(
            "search for the author",
            lambda: self._http.get_text(f"{self._base}/opds/author/{author_ids[0]}/alphabet"),
        )
        return self._parse("search for the author", lambda: parse_book_feed(books_feed))[:limit]

    def get_metadata(self, book_id: str) -> BookInfo:
        """Fetch the annotation and genres from the book page."""
        clean_id = _normalize_id(book_id)
        if clean_id is None:
            return BookInfo()
        page = self._call(
            "load the book details",
            lambda: self._http.get_text(f"{self._base}/b/{clean_id}"),
        )
        return parse_book_page(page)

    def get_download_url(self, book_id: str, fmt: str = "mobi") -> str:
        """Absolute download URL for a format, or "" when the id is not a valid key."""
        clean_id = _normalize_id(book_id)
        if clean_id is None:
            return ""
        return f"{self._base}/b/{clean_id}/{fmt}"

    def page_url(self, link: str) -> str:
        """Resolve a catalog-relative link against the mirror's base URL."""
        return urljoin(f"{self._base}/", link) if link else ""

    def _call(self, action: str, fn: Callable[[], _T]) -> _T:
        try:
            return fn()
        except HttpRequestError as exc:
            kind = classify_error(exc)
            logger.warning(
                "Catalog call failed (%s) while trying to %s: %s", kind.value, action, exc
            )
            raise CatalogUnavailableError(kind, action) from exc

    def _parse(self, action: str, fn: Callable[[], _T]) -> _T:
        try:
            return fn()
        except FeedParseError as exc:
            logger.warning("Unreadable catalog response while trying to %s: %s", action, exc)
            raise CatalogUnavailableError(CatalogErrorKind.UNKNOWN, action) from exc
