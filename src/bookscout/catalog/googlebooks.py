# ABOUTME: Google Books volumes search used as the secondary metadata lookup.
# ABOUTME: Best-effort: any failure is logged and treated as "no confirmation".

import logging
from typing import Any

from bookscout.catalog.types import VolumeInfo
from bookscout.http import HttpClient, HttpRequestError

logger = logging.getLogger(__name__)

_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"
_MAX_RESULTS = 5


def build_volume_query(title: str, author: str | None = None) -> str:
    """Build a fielded volumes query such as 'intitle:"Dune" inauthor:"Herbert"'."""
    parts = []
    if title.strip():
        parts.append(f'intitle:"{title.strip()}"')
    if author and author.strip():
        parts.append(f'inauthor:"{author.strip()}"')
    return " ".join(parts)


def parse_volume(item: Any) -> VolumeInfo | None:
    """Convert one volumes-search item into VolumeInfo.

    Returns None for items that are not objects or carry no title. Fields the
    API sends as null or with an unexpected type are treated as missing.
    """
    info = item.get("volumeInfo") if isinstance(item, dict) else None
    if not isinstance(info, dict):
        return None
    title = info.get("title")
    if not isinstance(title, str) or not title.strip():
        return None
    raw_authors = info.get("authors") or []
    if not isinstance(raw_authors, list):
        raw_authors = []
    authors = tuple(a.strip() for a in raw_authors if isinstance(a, str) and a.strip())
    return VolumeInfo(
        title=title.strip(),
        authors=authors,
        description=info.get("description") or None,
        canonical_link=info.get("canonicalVolumeLink") or info.get("infoLink") or None,
    )


class GoogleBooksLookup:
    """Secondary lookup that confirms a title/author guess against Google Books."""

    def __init__(
        self,
        http_client: HttpClient,
        api_key: str | None = None,
        lang_restrict: str | None = "ru",
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._lang_restrict = lang_restrict

    def lookup_by_title_author(self, title: str, author: str | None = None) -> VolumeInfo | None:
        """Return the first volume matching title and author, or None."""
        query = build_volume_query(title or "", author)
        if not query:
            return None

        params = {"q": query, "maxResults": str(_MAX_RESULTS), "printType": "books"}
        if self._lang_restrict:
            params["langRestrict"] = self._lang_restrict
        if self._api_key:
            params["key"] = self._api_key

        try:
            data = self._http.get(_VOLUMES_URL, params=params)
        except HttpRequestError as exc:
            logger.warning("Google Books lookup failed for %r: %s", query, exc)
            return None

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return None
        for item in items:
            volume = parse_volume(item)
            if volume is not None:
                return volume
        return None
