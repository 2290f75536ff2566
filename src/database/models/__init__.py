"""SQLAlchemy ORM models for the catalog database.

Usage:
    from src.database.models import Base, CatalogFilm, CatalogMetadata

Tables:
    - catalog_films: One row per film of the current snapshot
    - catalog_metadata: Snapshot metadata document
"""

from src.database.models.base import Base, SyncStampMixin
from src.database.models.catalog import CatalogFilm, CatalogMetadata

__all__ = [
    "Base",
    "SyncStampMixin",
    "CatalogFilm",
    "CatalogMetadata",
]
