# ABOUTME: Data structures returned by the catalog and the secondary metadata service.
# ABOUTME: Candidates are read-only; the resolver scores and deduplicates them by id.

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote_plus


@dataclass(frozen=True)
class CatalogCandidate:
    """One catalog entry returned by a search.

    Attributes:
        id: Opaque catalog key. Two candidates with equal ids are the same book.
        title: Title as the catalog spells it.
        author: Author display name, if the catalog lists one.
        link: Catalog page path or URL for the book, if known.
        raw: Everything else the catalog returned, untouched.
    """

    id: str
    title: str
    author: str | None = None
    link: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class BookInfo:
    """Extended metadata for a single catalog book."""

    description: str | None = None
    genres: tuple[str, ...] = ()


@dataclass(frozen=True)
class VolumeInfo:
    """A confirmation from the secondary metadata service."""

    title: str
    authors: tuple[str, ...] = ()
    description: str | None = None
    canonical_link: str | None = None

    @property
    def author(self) -> str:
        """First listed author, or an empty string."""
        return self.authors[0] if self.authors else ""

    def link_or_search_url(self) -> str:
        """The volume's own link, or a web search for title and first author."""
        if self.canonical_link:
            return self.canonical_link
        terms = f"{self.title} {self.author}".strip()
        return f"https://www.google.com/search?q={quote_plus(terms)}"
