"""MUBI API client with bounded retries.

Handles HTTP communication with the MUBI browse endpoint
including country headers, error mapping, and retries.
"""

import logging
from types import TracebackType
from typing import Any

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.etl.types import MubiBrowseResponse
from src.settings import settings

logger = logging.getLogger(__name__)


class MubiClientError(Exception):
    """Base exception for MUBI client errors."""

    pass


class MubiRateLimitError(MubiClientError):
    """Raised when rate limit is exceeded."""

    pass


class MubiServerError(MubiClientError):
    """Raised on 5xx responses."""

    pass


_RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.TransportError, MubiRateLimitError, MubiServerError)


class MubiClient:
    """HTTP client for the MUBI browse API.

    The country is selected per request through the ``CLIENT-COUNTRY``
    header. Timeouts, transport errors, 429 and 5xx responses are
    retried with exponential backoff; other errors are raised at once.

    Attributes:
        base_url: Browse endpoint URL.
    """

    def __init__(
        self,
        base_url: str | None = None,
        max_attempts: int | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        backoff_min: float = 2.0,
        backoff_max: float = 10.0,
    ) -> None:
        """Initialize MUBI client with settings.

        Args:
            base_url: Override of the browse endpoint URL.
            max_attempts: Attempts per request (default from settings).
            timeout: Request timeout in seconds (default from settings).
            transport: Optional httpx transport (tests, proxies).
            backoff_min: Minimum wait between retries in seconds.
            backoff_max: Maximum wait between retries in seconds.
        """
        self._base_url = base_url or settings.mubi.base_url
        self._timeout = timeout or settings.mubi.timeout
        self._transport = transport
        self._retrying = Retrying(
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
            stop=stop_after_attempt(max_attempts or settings.mubi.max_retries),
            wait=wait_exponential(multiplier=1, min=backoff_min, max=backoff_max),
            reraise=True,
        )

        # HTTP client
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        """Browse endpoint URL."""
        return self._base_url

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    def __enter__(self) -> "MubiClient":
        """Enter context and create HTTP client."""
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={
                "User-Agent": settings.sync.user_agent,
                "Accept": "application/json",
                "Accept-Language": settings.mubi.accept_language,
                "CLIENT": settings.mubi.client,
            },
            transport=self._transport,
        )
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    def _get(
        self,
        params: dict[str, Any],
        headers: dict[str, str],
    ) -> dict[str, Any]:
        """Execute GET request with retries.

        Args:
            params: Query parameters.
            headers: Per-request headers.

        Returns:
            JSON response as dictionary.

        Raises:
            MubiClientError: On API errors once retries are exhausted.
        """
        if self._client is None:
            msg = "Client not initialized. Use context manager."
            raise MubiClientError(msg)

        return self._retrying(self._send, params, headers)

    def _send(self, params: dict[str, Any], headers: dict[str, str]) -> dict[str, Any]:
        """Send a single request (one retry attempt)."""
        assert self._client is not None

        try:
            response = self._client.get(self._base_url, params=params, headers=headers)
        except httpx.TimeoutException:
            logger.warning(f"Request timeout: page={params.get('page')}")
            raise

        return self._handle_response(response, params)

    @staticmethod
    def _handle_response(
        response: httpx.Response,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Handle HTTP response and extract JSON.

        Args:
            response: HTTP response object.
            params: Request parameters (for logging).

        Returns:
            JSON response as dictionary.

        Raises:
            MubiClientError: On API errors or invalid JSON.
            MubiRateLimitError: When rate limit exceeded (429).
            MubiServerError: On server errors (5xx).
        """
        page = params.get("page")

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                raise MubiClientError(f"Invalid JSON on page {page}: {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "10")
            logger.warning(f"Rate limited. Retry after {retry_after}s")
            raise MubiRateLimitError(f"Rate limited: page {page}")

        if response.status_code >= 500:
            logger.warning(f"MUBI server error {response.status_code}: page {page}")
            raise MubiServerError(f"MUBI API error {response.status_code}: page {page}")

        error_msg = f"MUBI API error {response.status_code}: page {page}"
        logger.error(error_msg)
        raise MubiClientError(error_msg)

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    def browse_films(self, country: str, page: int = 1) -> MubiBrowseResponse:
        """Fetch one page of playable films for a country.

        Args:
            country: Two-letter country code sent as ``CLIENT-COUNTRY``.
            page: Page number (1-based).

        Returns:
            Browse response with films and pagination meta.

        Raises:
            MubiClientError: When the page cannot be fetched or is not
                a browse response.
        """
        params: dict[str, Any] = {
            "sort": settings.mubi.sort,
            "playable": str(settings.mubi.playable_only).lower(),
            "page": page,
        }
        data = self._get(params, headers={"CLIENT-COUNTRY": country})

        if not isinstance(data.get("films"), list) or not isinstance(data.get("meta"), dict):
            raise MubiClientError(f"Unexpected browse response for {country} page {page}")

        return data  # type: ignore[return-value]
