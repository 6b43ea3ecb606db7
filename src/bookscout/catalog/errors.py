# ABOUTME: Categorized catalog transport failures with short user-presentable messages.
# ABOUTME: classify_error maps HTTP client failures onto a CatalogErrorKind.

from enum import Enum

import httpx

from bookscout.errors import UserFacingError
from bookscout.http import HttpRequestError


class CatalogErrorKind(str, Enum):
    """Why the catalog could not answer."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    UNKNOWN = "unknown"


_MESSAGES: dict[CatalogErrorKind, str] = {
    CatalogErrorKind.TIMEOUT: "The library is taking too long to answer. Try again in a minute.",
    CatalogErrorKind.NETWORK: "Network problem while contacting the library. Try again.",
    CatalogErrorKind.FORBIDDEN: (
        "Access to the library is blocked right now. A VPN or another network often helps."
    ),
    CatalogErrorKind.RATE_LIMITED: "Too many requests to the library. Wait a minute and retry.",
    CatalogErrorKind.SERVER: "The library is temporarily unavailable. Try a bit later.",
}


class CatalogUnavailableError(UserFacingError):
    """The catalog failed in transit; the message is meant for the user verbatim.

    Attributes:
        kind: Category of the failure.
        action: What was being attempted, e.g. "search for books".
    """

    def __init__(self, kind: CatalogErrorKind, action: str) -> None:
        message = _MESSAGES.get(kind) or f"Could not {action}. Try again a bit later."
        super().__init__(message)
        self.kind = kind
        self.action = action


def classify_error(exc: HttpRequestError) -> CatalogErrorKind:
    """Categorize a failed catalog request.

    Transport failures are recognised from the chained httpx exception;
    HTTP failures from their status code.
    """
    cause = exc.__cause__
    if isinstance(cause, httpx.TimeoutException):
        return CatalogErrorKind.TIMEOUT
    if isinstance(cause, httpx.TransportError):
        return CatalogErrorKind.NETWORK

    status = exc.status_code
    if status == 403:
        return CatalogErrorKind.FORBIDDEN
    if status == 429:
        return CatalogErrorKind.RATE_LIMITED
    if status is not None and status >= 500:
        return CatalogErrorKind.SERVER
    return CatalogErrorKind.UNKNOWN
