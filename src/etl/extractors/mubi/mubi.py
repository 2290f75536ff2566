"""MUBI extractor for per-country film listings.

Paginates the browse endpoint country by country, with a fixed
delay between consecutive pages and per-country failure isolation.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.etl.errors import PageFetchError
from src.etl.extractors.base import BaseExtractor
from src.etl.extractors.mubi.client import MubiClient, MubiClientError
from src.etl.types import MubiBrowseResponse, MubiFilmData
from src.etl.utils.run_guard import RunGuard
from src.settings import settings


@dataclass
class CountryFetchResult:
    """Raw records fetched for one country.

    Attributes:
        country: Country code.
        records: Raw film records, in page order.
        pages_fetched: Pages successfully fetched.
        total_pages: Page count reported by page 1.
        total_count: Film count reported by page 1.
        error: Failure description when pagination was aborted.
    """

    country: str
    records: list[MubiFilmData] = field(default_factory=list)
    pages_fetched: int = 0
    total_pages: int = 0
    total_count: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Whether pagination stopped on a page failure."""
        return self.error is not None


class MubiExtractor(BaseExtractor):
    """Extracts playable films per country from the MUBI API.

    Countries are fetched sequentially, never in parallel, so the
    inter-page delay bounds the request cadence against upstream
    rate limits.
    """

    name = "mubi"

    def __init__(
        self,
        client: MubiClient | None = None,
        page_delay: float | None = None,
        max_pages: int | None = None,
        keep_partial_pages: bool | None = None,
        guard: RunGuard | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize MUBI extractor.

        Args:
            client: API client (default built from settings).
            page_delay: Seconds between consecutive pages of a country.
            max_pages: Optional cap on pages per country.
            keep_partial_pages: Keep pages fetched before a page failure.
            guard: Cancellation/deadline guard checked before each page.
            sleep: Sleep function (injectable for tests).
        """
        super().__init__()
        self._client = client
        self._page_delay = settings.mubi.page_delay if page_delay is None else page_delay
        self._max_pages = settings.mubi.max_pages if max_pages is None else max_pages
        self._keep_partial = (
            settings.mubi.keep_partial_pages if keep_partial_pages is None else keep_partial_pages
        )
        self._guard = guard or RunGuard()
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Main Extraction
    # -------------------------------------------------------------------------

    def extract(self, **kwargs: Any) -> list[CountryFetchResult]:
        """Fetch every configured country.

        Args:
            **kwargs: Extraction parameters.
                countries: Country codes in processing order
                    (default from settings).

        Returns:
            One CountryFetchResult per country, in processing order.

        Raises:
            SyncCancelledError: When the guard aborts the run.
        """
        countries: list[str] = kwargs.get("countries") or settings.mubi.countries

        self._begin()
        results: list[CountryFetchResult] = []

        client = self._client or MubiClient()
        with client:
            for country in countries:
                result = self.fetch_country(client, country)
                results.append(result)
                self._record_country(country, len(result.records), result.error)

        self._finish()
        return results

    def fetch_country(self, client: MubiClient, country: str) -> CountryFetchResult:
        """Paginate all pages of one country.

        Page 1's ``meta.total_pages`` is authoritative for termination.
        A page failure stops this country only.

        Args:
            client: Open API client.
            country: Country code.

        Returns:
            Records fetched for the country.
        """
        self.logger.info(f"Fetching films for {country}")
        result = CountryFetchResult(country=country)
        page = 1
        total_pages = 1

        while page <= total_pages:
            if page > 1 and self._page_delay > 0:
                self._sleep(self._page_delay)
            self._guard.check(f"{country} page {page}")

            try:
                response = self._fetch_page(client, country, page)
                if page == 1:
                    total_pages = self._resolve_total_pages(response, country)
                    result.total_pages = total_pages
                    result.total_count = self._meta_int(response, "total_count", country)
            except PageFetchError as e:
                self._handle_page_failure(result, e)
                break

            result.records.extend(response["films"])
            result.pages_fetched = page
            self.logger.debug(
                f"{country} page {page}/{total_pages}: {len(response['films'])} films"
            )
            page += 1

        self.logger.info(
            f"{country}: {len(result.records)} films from "
            f"{result.pages_fetched}/{result.total_pages} pages"
        )
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _fetch_page(client: MubiClient, country: str, page: int) -> MubiBrowseResponse:
        """Fetch a page, mapping client failures to PageFetchError."""
        try:
            return client.browse_films(country=country, page=page)
        except (MubiClientError, httpx.HTTPError) as e:
            raise PageFetchError(country, page, e) from e

    @staticmethod
    def _meta_int(response: MubiBrowseResponse, key: str, country: str) -> int:
        """Read a non-negative integer from page 1 pagination meta.

        Raises:
            PageFetchError: If the value is not a non-negative integer.
        """
        value = response["meta"].get(key) or 0
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise PageFetchError(country, 1, ValueError(f"invalid meta.{key}: {value!r}")) from e
        if number < 0:
            raise PageFetchError(country, 1, ValueError(f"invalid meta.{key}: {value!r}"))
        return number

    def _resolve_total_pages(self, response: MubiBrowseResponse, country: str) -> int:
        """Read total pages from page 1, applying the optional cap."""
        total_pages = self._meta_int(response, "total_pages", country)
        if self._max_pages is not None and total_pages > self._max_pages:
            self.logger.info(f"{country}: capping {total_pages} pages to {self._max_pages}")
            total_pages = self._max_pages
        return total_pages

    def _handle_page_failure(self, result: CountryFetchResult, error: PageFetchError) -> None:
        """Record a page failure and apply the partial-pages policy."""
        result.error = str(error)

        if result.records and not self._keep_partial:
            self.logger.warning(
                f"{result.country}: discarding {len(result.records)} records "
                f"from {result.pages_fetched} pages"
            )
            result.records = []
