"""ETL snapshot loaders package.

Provides loaders that read the previous catalog snapshot and
replace it atomically, backed by a JSON file or a SQL database.
"""

from pathlib import Path

from src.etl.loaders.base import BaseSnapshotLoader, LoaderStats
from src.etl.loaders.database import DatabaseSnapshotLoader
from src.etl.loaders.json import JsonSnapshotLoader
from src.settings import settings
from src.settings.storage import BACKEND_DATABASE, BACKEND_JSON


def create_loader(
    backend: str | None = None,
    path: Path | str | None = None,
    url: str | None = None,
) -> BaseSnapshotLoader:
    """Build the snapshot loader for a storage backend.

    Args:
        backend: 'json' or 'database' (default from STORAGE_BACKEND).
        path: Snapshot file for the JSON backend.
        url: SQLAlchemy URL for the database backend.

    Returns:
        Unopened snapshot loader.

    Raises:
        ValueError: If the backend is unknown.
    """
    backend = (backend or settings.storage.backend).lower()

    if backend == BACKEND_JSON:
        return JsonSnapshotLoader(path)
    if backend == BACKEND_DATABASE:
        return DatabaseSnapshotLoader(url)

    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = [
    "BaseSnapshotLoader",
    "LoaderStats",
    "JsonSnapshotLoader",
    "DatabaseSnapshotLoader",
    "create_loader",
]
