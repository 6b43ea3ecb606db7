# ABOUTME: Parsing functions for Flibusta OPDS feeds and book pages.
# ABOUTME: Converts Atom entries into CatalogCandidate and scrapes BookInfo from HTML.

import re
import xml.etree.ElementTree as ET
from typing import Any

from bs4 import BeautifulSoup, Comment, Tag

from bookscout.catalog.types import BookInfo, CatalogCandidate

_ATOM = "{http://www.w3.org/2005/Atom}"
_DC = "{http://purl.org/dc/terms/}"

_BOOK_ID_RE = re.compile(r"tag:book:(\d+)")
_AUTHOR_ID_RE = re.compile(r"tag:author:(\d+)")
_BOOK_PAGE_RE = re.compile(r"^/b/\d+/?$")

_ANNOTATION_HEADING = "аннотация"
_ANNOTATION_STOP = frozenset({"h2", "form", "div", "script"})
_SPACE_RE = re.compile(r"\s+")


class FeedParseError(ValueError):
    """Raised when a catalog response is not a readable OPDS feed."""


def _root(xml_text: str) -> ET.Element:
    try:
        return ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise FeedParseError(f"Invalid OPDS feed: {exc}") from exc


def _strip_html(fragment: str) -> str:
    text = BeautifulSoup(fragment, "html.parser").get_text(" ")
    return _SPACE_RE.sub(" ", text).strip()


def _entry_text(entry: ET.Element, tag: str) -> str:
    node = entry.find(tag)
    return (node.text or "").strip() if node is not None else ""


def parse_book_entry(entry: ET.Element) -> CatalogCandidate | None:
    """Parse one OPDS <entry> describing a book. Returns None for non-book entries."""
    match = _BOOK_ID_RE.search(_entry_text(entry, f"{_ATOM}id"))
    if not match:
        return None
    book_id = match.group(1)

    authors = [
        (name.text or "").strip()
        for name in entry.findall(f"{_ATOM}author/{_ATOM}name")
        if name.text and name.text.strip()
    ]

    link = f"/b/{book_id}"
    formats: dict[str, str] = {}
    for node in entry.findall(f"{_ATOM}link"):
        href = node.get("href", "")
        rel = node.get("rel", "")
        if rel.startswith("http://opds-spec.org/acquisition"):
            fmt = href.rstrip("/").rsplit("/", 1)[-1]
            formats[fmt] = href
        elif _BOOK_PAGE_RE.match(href):
            link = href

    raw: dict[str, Any] = {
        "formats": formats,
        "genres": [
            node.get("label") or node.get("term", "")
            for node in entry.findall(f"{_ATOM}category")
        ],
        "language": _entry_text(entry, f"{_DC}language") or None,
        "annotation": _strip_html(_entry_text(entry, f"{_ATOM}content")) or None,
    }

    return CatalogCandidate(
        id=book_id,
        title=_entry_text(entry, f"{_ATOM}title") or "Unknown",
        author=", ".join(authors) or None,
        link=link,
        raw=raw,
    )


def parse_book_feed(xml_text: str) -> list[CatalogCandidate]:
    """Parse an OPDS acquisition feed into candidates, in feed order."""
    root = _root(xml_text)
    candidates: list[CatalogCandidate] = []
    for entry in root.findall(f"{_ATOM}entry"):
        candidate = parse_book_entry(entry)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def parse_author_ids(xml_text: str) -> list[str]:
    """Extract author ids from an OPDS author-search feed, in feed order."""
    root = _root(xml_text)
    ids: list[str] = []
    for entry in root.findall(f"{_ATOM}entry"):
        match = _AUTHOR_ID_RE.search(_entry_text(entry, f"{_ATOM}id"))
        if match:
            ids.append(match.group(1))
    return ids


def _annotation(soup: BeautifulSoup) -> str | None:
    heading = soup.find(
        "h2", string=lambda s: bool(s) and s.strip().lower() == _ANNOTATION_HEADING
    )
    if heading is None:
        return None
    # The annotation runs from the heading to the next block-level section.
    parts: list[str] = []
    for sibling in heading.next_siblings:
        if isinstance(sibling, Tag):
            if sibling.name in _ANNOTATION_STOP:
                break
            parts.append(sibling.get_text(" "))
        elif not isinstance(sibling, Comment):
            parts.append(str(sibling))
    return _SPACE_RE.sub(" ", " ".join(parts)).strip() or None


def parse_book_page(page_html: str) -> BookInfo:
    """Scrape the annotation and genre names from a Flibusta book page."""
    soup = BeautifulSoup(page_html, "html.parser")
    genres = tuple(
        name for name in (a.get_text(" ", strip=True) for a in soup.select("a.genre")) if name
    )
    return BookInfo(description=_annotation(soup), genres=genres)
