"""Unit tests for the catalog read service."""

import pytest

from src.api.services.catalog import (
    ALL_COUNTRIES,
    ALL_GENRES,
    CatalogService,
    FilmFilter,
    in_year_bucket,
)
from tests.conftest import make_film


@pytest.fixture
def catalog() -> CatalogService:
    films = [
        make_film(id=1, title="Tokyo Story", genres=["Drama"], film_countries=["Japan"], year=1953, popularity=90.0),
        make_film(id=2, title="Ran", genres=["Drama", "War"], film_countries=["Japan", "France"], year=1985, popularity=70.0),
        make_film(id=3, title="Aftersun", genres=["Drama"], film_countries=["United Kingdom"], year=2022, popularity=95.0),
        make_film(id=4, title="Playtime", genres=["Comedy"], film_countries=["France"], year=1967, popularity=70.0),
        make_film(id=5, title="Past Lives", original_title="Jeon-saeng", genres=["Romance"], film_countries=["United States"], year=2023, popularity=None),
    ]
    return CatalogService(films, page_size=2)


class TestYearBucket:
    @staticmethod
    @pytest.mark.parametrize(
        "year,bucket,expected",
        [
            (1990, 1990, True),
            (1999, 1990, True),
            (2000, 1990, False),
            (1989, 1990, False),
            (2020, 2020, True),
            (2031, 2020, True),
            (2019, 2020, False),
            (None, 1990, False),
        ],
    )
    def test_bucket_rules(year: int | None, bucket: int, expected: bool) -> None:
        assert in_year_bucket(year, bucket) is expected


class TestListFilms:
    @staticmethod
    def test_ordered_by_popularity_ties_keep_snapshot_order(catalog: CatalogService) -> None:
        ids = []
        cursor = None
        while True:
            page = catalog.list_films(cursor=cursor)
            ids.extend(f.id for f in page.films)
            if page.next_cursor is None:
                break
            cursor = page.next_cursor
        assert ids == [3, 1, 2, 4, 5]

    @staticmethod
    def test_page_size_and_cursor(catalog: CatalogService) -> None:
        first = catalog.list_films()
        assert [f.id for f in first.films] == [3, 1]
        assert first.next_cursor == "1"

        second = catalog.list_films(cursor=first.next_cursor)
        assert [f.id for f in second.films] == [2, 4]

    @staticmethod
    def test_last_page_has_no_cursor(catalog: CatalogService) -> None:
        page = catalog.list_films(FilmFilter(genre="Comedy"))
        assert [f.id for f in page.films] == [4]
        assert page.next_cursor is None

    @staticmethod
    def test_unknown_cursor_restarts(catalog: CatalogService) -> None:
        page = catalog.list_films(cursor="999")
        assert [f.id for f in page.films] == [3, 1]

    @staticmethod
    def test_filters_are_conjunctive(catalog: CatalogService) -> None:
        page = catalog.list_films(FilmFilter(genre="Drama", country="Japan", year_bucket="1980"))
        assert [f.id for f in page.films] == [2]

    @staticmethod
    def test_sentinels_disable_filters(catalog: CatalogService) -> None:
        film_filter = FilmFilter(genre=ALL_GENRES, country=ALL_COUNTRIES, year_bucket="all")
        assert catalog.count(film_filter) == 5

    @staticmethod
    def test_last_bucket_open_ended(catalog: CatalogService) -> None:
        assert catalog.count(FilmFilter(year_bucket="2020")) == 2

    @staticmethod
    def test_country_filter_uses_production_countries(catalog: CatalogService) -> None:
        assert catalog.count(FilmFilter(country="France")) == 2
        assert catalog.count(FilmFilter(country="PT")) == 0


class TestLookups:
    @staticmethod
    def test_genres_sorted_distinct(catalog: CatalogService) -> None:
        assert catalog.genres() == ["Comedy", "Drama", "Romance", "War"]

    @staticmethod
    def test_countries_sorted_distinct(catalog: CatalogService) -> None:
        assert catalog.countries() == ["France", "Japan", "United Kingdom", "United States"]

    @staticmethod
    def test_search_case_insensitive(catalog: CatalogService) -> None:
        assert [f.id for f in catalog.search("RAN")] == [2]

    @staticmethod
    def test_search_original_title(catalog: CatalogService) -> None:
        assert [f.id for f in catalog.search("jeon")] == [5]

    @staticmethod
    def test_search_limit(catalog: CatalogService) -> None:
        assert len(catalog.search("t", limit=2)) == 2

    @staticmethod
    def test_search_blank(catalog: CatalogService) -> None:
        assert catalog.search("  ") == []

    @staticmethod
    def test_get(catalog: CatalogService) -> None:
        assert catalog.get(4).title == "Playtime"
        assert catalog.get("4").title == "Playtime"
        assert catalog.get(42) is None
