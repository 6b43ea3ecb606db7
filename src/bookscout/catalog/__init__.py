# ABOUTME: Catalog package: the book library search service and the secondary metadata lookup.
# ABOUTME: Exports candidate types, provider protocols, and the categorized transport error.

from bookscout.catalog.errors import CatalogErrorKind, CatalogUnavailableError
from bookscout.catalog.provider import CatalogProvider, SecondaryLookup
from bookscout.catalog.types import BookInfo, CatalogCandidate, VolumeInfo

__all__ = [
    "BookInfo",
    "CatalogCandidate",
    "CatalogErrorKind",
    "CatalogProvider",
    "CatalogUnavailableError",
    "SecondaryLookup",
    "VolumeInfo",
]
