# ABOUTME: HTTP client abstraction shared by the extraction, catalog, and lookup services.
# ABOUTME: Provides rate limiting, retry with backoff, per-call timeouts, and injectable transport.

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Response bodies quoted in error messages are cut to this many characters.
_ERROR_BODY_PREVIEW = 500


class HttpRequestError(Exception):
    """Raised when an HTTP request to an external service fails.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never produced one (timeout, DNS, refused connection).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the HTTP operations the external services need."""

    def get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]: ...

    def get_text(self, url: str, params: dict[str, str] | None = None) -> str: ...

    def post(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...


class BookscoutHttpClient:
    """HTTP client with rate limiting, retry and a hard per-call timeout.

    Wraps httpx.Client with configurable request intervals and retry logic
    for transient failures (429, 5xx). Set max_retries to 0 for services
    that must fail fast.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.1,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": "bookscout/0.1.0"},
            "timeout": timeout,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request_time: float = 0.0

    def get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Send a GET request and return the parsed JSON body.

        Raises:
            HttpRequestError: On non-retryable HTTP errors, exhausted retries,
                transport failures, or a body that is not JSON.
        """
        response = self._send("GET", url, params=params)
        return self._json(response, url)

    def get_text(self, url: str, params: dict[str, str] | None = None) -> str:
        """Send a GET request and return the decoded response body."""
        return self._send("GET", url, params=params).text

    def post(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send a JSON POST request and return the parsed JSON body."""
        response = self._send("POST", url, params=params, json=payload)
        return self._json(response, url)

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request with rate limiting and retry.

        Args:
            method: HTTP method name.
            url: The URL to request.
            **kwargs: Passed through to httpx.Client.request.

        Returns:
            The successful (2xx) response.

        Raises:
            HttpRequestError: On non-retryable HTTP errors or exhausted retries.
        """
        self._rate_limit()

        attempts = 1 + self._max_retries
        last_status = 0
        for attempt in range(attempts):
            try:
                response = self._client.request(method, url, **kwargs)
                last_status = response.status_code
            except httpx.HTTPError as exc:
                raise HttpRequestError(f"Request failed: {url}: {exc}") from exc

            if response.is_success:
                return response

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise HttpRequestError(
                    f"HTTP {response.status_code} from {url}: "
                    f"{response.text[:_ERROR_BODY_PREVIEW]}",
                    status_code=response.status_code,
                )

            if attempt < attempts - 1:
                delay = self._retry_delay * (2**attempt)
                logger.warning(
                    "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                    response.status_code,
                    url,
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                time.sleep(delay)

        raise HttpRequestError(
            f"HTTP {last_status} from {url} after {attempts} attempts",
            status_code=last_status,
        )

    @staticmethod
    def _json(response: httpx.Response, url: str) -> dict[str, Any]:
        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(
                f"Invalid JSON from {url}", status_code=response.status_code
            ) from exc

    def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        now = time.monotonic()
        elapsed = now - self._last_request_time
        if elapsed < self._min_interval and self._last_request_time > 0:
            time.sleep(self._min_interval - elapsed)
        self._last_request_time = time.monotonic()
