# ABOUTME: Protocols for the catalog and the secondary metadata lookup collaborators.
# ABOUTME: The resolver and the finder depend only on these contracts.

from typing import Protocol, runtime_checkable

from bookscout.catalog.types import BookInfo, CatalogCandidate, VolumeInfo


@runtime_checkable
class CatalogProvider(Protocol):
    """Protocol for a searchable book catalog with downloadable files.

    Implementations raise CatalogUnavailableError on transport failures.
    """

    def search_by_title(self, phrase: str, limit: int = 20) -> list[CatalogCandidate]: ...

    def search_by_author(self, phrase: str, limit: int = 20) -> list[CatalogCandidate]: ...

    def get_metadata(self, book_id: str) -> BookInfo: ...

    def get_download_url(self, book_id: str, fmt: str = "mobi") -> str: ...

    def page_url(self, link: str) -> str: ...


@runtime_checkable
class SecondaryLookup(Protocol):
    """Protocol for the fallback metadata service used when the catalog has no match."""

    def lookup_by_title_author(self, title: str, author: str | None = None) -> VolumeInfo | None: ...
