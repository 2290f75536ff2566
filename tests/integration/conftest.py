"""Shared fixtures for read API integration tests.

Builds apps whose lifespan reads a snapshot written into a temporary
directory (JSON file or SQLite database), and ``httpx.AsyncClient``
instances wired to them.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.main import create_app
from src.etl.loaders import DatabaseSnapshotLoader, JsonSnapshotLoader
from src.etl.types import SnapshotMetadata
from tests.conftest import make_film


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply ``@pytest.mark.integration`` to every test collected here."""
    integration_marker = pytest.mark.integration
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(integration_marker)


SNAPSHOT_FILMS = [
    make_film(id=101, title="In the Mood for Love", genres=["Drama", "Romance"], film_countries=["Hong Kong"], year=2000, popularity=88.0, available_countries=["PT", "DE"]),
    make_film(id=102, title="Mulholland Drive", genres=["Mystery"], film_countries=["United States", "France"], year=2001, popularity=92.0),
    make_film(id=103, title="Cléo from 5 to 7", genres=["Drama"], film_countries=["France"], year=1962, popularity=60.0),
    make_film(id=104, title="Perfect Days", genres=["Drama"], film_countries=["Japan"], year=2023, popularity=75.0),
]

SNAPSHOT_METADATA = SnapshotMetadata(
    countries=["PT", "DE"],
    total_films=4,
    films_by_country={"PT": 4, "DE": 1},
    failed_countries=[],
    last_sync={
        "timestamp": "2024-05-01T12:00:00.000Z",
        "total_films": 4,
        "changes": {"added": 4, "removed": 0, "modified": 0},
    },
)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """JSON snapshot holding the sample catalog."""
    path = tmp_path / "mubi-films.json"
    JsonSnapshotLoader(path).write_snapshot(SNAPSHOT_FILMS, SNAPSHOT_METADATA)
    return path


async def _serve(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest.fixture
def app(snapshot_file: Path) -> FastAPI:
    """App serving the sample snapshot."""
    return create_app(lambda: JsonSnapshotLoader(snapshot_file))


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an ``httpx.AsyncClient`` wired to the app, lifespan included."""
    async for c in _serve(app):
        yield c


@pytest.fixture
async def broken_client(tmp_path: Path) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app whose snapshot is corrupt."""
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    async for c in _serve(create_app(lambda: JsonSnapshotLoader(path))):
        yield c


@pytest.fixture
def database_dir(tmp_path: Path) -> Path:
    """Directory of a SQLite database holding the sample catalog."""
    directory = tmp_path / "db"
    directory.mkdir()
    with DatabaseSnapshotLoader(f"sqlite:///{directory / 'catalog.db'}") as loader:
        loader.write_snapshot(SNAPSHOT_FILMS, SNAPSHOT_METADATA)
    return directory


@pytest.fixture
async def database_client(database_dir: Path) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app served from the database backend."""
    url = f"sqlite:///{database_dir / 'catalog.db'}"
    async for c in _serve(create_app(lambda: DatabaseSnapshotLoader(url))):
        yield c
