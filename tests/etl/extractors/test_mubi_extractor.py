"""Unit tests for the per-country MUBI extractor."""

from typing import Any

import httpx
import pytest

from src.etl.errors import SyncCancelledError
from src.etl.extractors.mubi.client import MubiClient, MubiServerError
from src.etl.extractors.mubi.mubi import CountryFetchResult, MubiExtractor
from src.etl.utils.run_guard import RunGuard
from tests.conftest import make_page, make_raw_film


class FakeClient:
    """Client serving canned pages keyed by (country, page)."""

    def __init__(self, pages: dict[tuple[str, int], Any]) -> None:
        self.pages = pages
        self.calls: list[tuple[str, int]] = []
        self.entered = 0

    def __enter__(self) -> "FakeClient":
        self.entered += 1
        return self

    def __exit__(self, *exc: object) -> None:
        pass

    def browse_films(self, country: str, page: int = 1) -> dict[str, Any]:
        self.calls.append((country, page))
        response = self.pages[(country, page)]
        if isinstance(response, Exception):
            raise response
        return response


def _extractor(client: FakeClient, **kwargs: Any) -> MubiExtractor:
    kwargs.setdefault("page_delay", 0)
    kwargs.setdefault("keep_partial_pages", True)
    return MubiExtractor(client=client, **kwargs)  # type: ignore[arg-type]


def _pages(country: str, total: int, per_page: int = 2) -> dict[tuple[str, int], Any]:
    pages = {}
    for page in range(1, total + 1):
        films = [make_raw_film(id=page * 100 + i) for i in range(per_page)]
        pages[(country, page)] = make_page(films, page=page, total_pages=total)
    return pages


class TestCountryFetchResult:
    @staticmethod
    def test_failed_flag() -> None:
        assert CountryFetchResult(country="PT").failed is False
        assert CountryFetchResult(country="PT", error="boom").failed is True


class TestFetchCountry:
    @staticmethod
    def test_paginates_until_total_pages() -> None:
        client = FakeClient(_pages("PT", 3))
        result = _extractor(client).fetch_country(client, "PT")  # type: ignore[arg-type]

        assert client.calls == [("PT", 1), ("PT", 2), ("PT", 3)]
        assert result.pages_fetched == 3
        assert result.total_pages == 3
        assert len(result.records) == 6
        assert not result.failed

    @staticmethod
    def test_total_pages_read_from_first_page_only() -> None:
        pages = _pages("PT", 2)
        pages[("PT", 2)]["meta"]["total_pages"] = 10
        client = FakeClient(pages)

        result = _extractor(client).fetch_country(client, "PT")  # type: ignore[arg-type]
        assert result.pages_fetched == 2

    @staticmethod
    def test_zero_pages_country() -> None:
        client = FakeClient({("PT", 1): make_page([], total_pages=0)})
        result = _extractor(client).fetch_country(client, "PT")  # type: ignore[arg-type]
        assert result.records == []
        assert not result.failed

    @staticmethod
    @pytest.mark.parametrize("key", ["total_pages", "total_count"])
    def test_non_numeric_meta_fails_country(key: str) -> None:
        pages = _pages("PT", 2)
        pages[("PT", 1)]["meta"][key] = "many"
        client = FakeClient(pages)

        result = _extractor(client).fetch_country(client, "PT")  # type: ignore[arg-type]

        assert result.failed
        assert key in (result.error or "")
        assert client.calls == [("PT", 1)]

    @staticmethod
    def test_max_pages_caps_pagination() -> None:
        client = FakeClient(_pages("PT", 5))
        result = _extractor(client, max_pages=2).fetch_country(client, "PT")  # type: ignore[arg-type]
        assert client.calls == [("PT", 1), ("PT", 2)]
        assert result.total_pages == 2

    @staticmethod
    def test_page_failure_keeps_earlier_pages() -> None:
        pages = _pages("PT", 5)
        pages[("PT", 3)] = MubiServerError("MUBI API error 500: page 3")
        client = FakeClient(pages)

        result = _extractor(client).fetch_country(client, "PT")  # type: ignore[arg-type]

        assert result.failed
        assert "Page 3" in (result.error or "")
        assert result.pages_fetched == 2
        assert len(result.records) == 4
        assert ("PT", 4) not in client.calls

    @staticmethod
    def test_page_failure_discards_when_configured() -> None:
        pages = _pages("PT", 3)
        pages[("PT", 2)] = httpx.ConnectError("refused")
        client = FakeClient(pages)

        result = _extractor(client, keep_partial_pages=False).fetch_country(client, "PT")  # type: ignore[arg-type]
        assert result.failed
        assert result.records == []

    @staticmethod
    def test_sleeps_between_pages_only() -> None:
        slept: list[float] = []
        client = FakeClient(_pages("PT", 3))
        extractor = MubiExtractor(
            client=client,  # type: ignore[arg-type]
            page_delay=1.5,
            sleep=slept.append,
        )
        extractor.fetch_country(client, "PT")  # type: ignore[arg-type]
        assert slept == [1.5, 1.5]

    @staticmethod
    def test_cancellation_stops_before_next_page() -> None:
        guard = RunGuard()
        client = FakeClient(_pages("PT", 3))

        def cancel_after_first(_: float) -> None:
            guard.cancel()

        extractor = MubiExtractor(
            client=client,  # type: ignore[arg-type]
            page_delay=1,
            guard=guard,
            sleep=cancel_after_first,
        )
        with pytest.raises(SyncCancelledError):
            extractor.fetch_country(client, "PT")  # type: ignore[arg-type]
        assert client.calls == [("PT", 1)]


class TestExtract:
    @staticmethod
    def test_countries_in_order() -> None:
        pages = {**_pages("PT", 1), **_pages("DE", 2)}
        client = FakeClient(pages)

        results = _extractor(client).extract(countries=["PT", "DE"])

        assert [r.country for r in results] == ["PT", "DE"]
        assert client.calls == [("PT", 1), ("DE", 1), ("DE", 2)]
        assert client.entered == 1

    @staticmethod
    def test_failed_country_does_not_stop_others() -> None:
        pages = {**_pages("PT", 1), **_pages("DE", 1)}
        pages[("PT", 1)] = MubiServerError("down")
        client = FakeClient(pages)

        results = _extractor(client).extract(countries=["PT", "DE"])

        assert results[0].failed
        assert not results[1].failed
        assert len(results[1].records) == 2

    @staticmethod
    def test_bad_pagination_meta_only_aborts_that_country() -> None:
        pages = {**_pages("PT", 1), **_pages("DE", 1)}
        pages[("PT", 1)]["meta"]["total_pages"] = {"n": 3}
        client = FakeClient(pages)

        results = _extractor(client).extract(countries=["PT", "DE"])

        assert results[0].failed
        assert not results[1].failed
        assert len(results[1].records) == 2

    @staticmethod
    def test_records_last_result() -> None:
        pages = {**_pages("PT", 2), **_pages("DE", 1)}
        pages[("DE", 1)] = MubiServerError("down")
        extractor = _extractor(FakeClient(pages))
        extractor.extract(countries=["PT", "DE"])

        summary = extractor.last_result
        assert summary is not None
        assert summary["source"] == "mubi"
        assert summary["records"] == 4
        assert summary["countries"] == 2
        assert summary["failed_countries"] == ["DE"]
        assert summary["success"] is False

    @staticmethod
    def test_with_real_client_and_mock_transport() -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            country = request.headers["CLIENT-COUNTRY"]
            page = int(request.url.params["page"])
            film = make_raw_film(id=f"{country}{page}", title=f"{country} film {page}")
            return httpx.Response(200, json=make_page([film], page=page, total_pages=2))

        client = MubiClient(
            base_url="https://api.test/browse",
            max_attempts=1,
            transport=httpx.MockTransport(handler),
        )
        results = MubiExtractor(client=client, page_delay=0).extract(countries=["PT"])

        assert [r["id"] for r in results[0].records] == ["PT1", "PT2"]
