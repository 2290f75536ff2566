"""Shared pytest fixtures for catalog sync tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from src.etl.aggregation.schemas import Film


def make_film(**overrides: Any) -> Film:
    """Build a Film with sensible defaults."""
    base: dict[str, Any] = {
        "id": 1,
        "title": "Aftersun",
        "original_title": "Aftersun",
        "duration": 101,
        "genres": ["Drama"],
        "available_countries": ["PT"],
        "film_countries": ["United Kingdom"],
        "web_url": "https://mubi.com/films/aftersun",
        "thumbnail_url": "https://images.mubicdn.net/aftersun.jpg",
        "year": 2022,
        "directors": ["Charlotte Wells"],
        "popularity": 50.0,
    }
    base.update(overrides)
    return Film(**base)


def make_raw_film(**overrides: Any) -> dict[str, Any]:
    """Build a raw browse API film record."""
    film_id = overrides.get("id", 1)
    base: dict[str, Any] = {
        "id": film_id,
        "title": "Aftersun",
        "original_title": "Aftersun",
        "duration": 101,
        "genres": ["Drama"],
        "historic_countries": ["United Kingdom"],
        "web_url": f"https://mubi.com/films/{film_id}",
        "stills": {
            "large_overlaid": f"https://images.mubicdn.net/{film_id}/large_overlaid.jpg",
            "medium": f"https://images.mubicdn.net/{film_id}/medium.jpg",
        },
        "year": 2022,
        "directors": [{"name": "Charlotte Wells", "slug": "charlotte-wells"}],
        "popularity": 50,
        "trailer_url": "https://example.com/trailer.mp4",
    }
    base.update(overrides)
    return base


def make_page(
    films: list[dict[str, Any]],
    page: int = 1,
    total_pages: int = 1,
    total_count: int | None = None,
) -> dict[str, Any]:
    """Build a browse API page payload."""
    return {
        "films": films,
        "meta": {
            "current_page": page,
            "total_pages": total_pages,
            "total_count": total_count if total_count is not None else len(films),
        },
    }


@pytest.fixture
def film_factory() -> Callable[..., Film]:
    """Factory building Film instances."""
    return make_film


@pytest.fixture
def raw_film_factory() -> Callable[..., dict[str, Any]]:
    """Factory building raw browse API records."""
    return make_raw_film


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Path of a JSON snapshot inside a temporary directory."""
    return tmp_path / "processed" / "mubi-films.json"


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """SQLAlchemy URL of a temporary SQLite database."""
    return f"sqlite:///{tmp_path / 'catalog.db'}"
