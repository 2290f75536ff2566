"""Database package for the catalog snapshot.

Provides the connection handle and ORM models used by the
database snapshot loader.

Usage:
    from src.database import DatabaseConnection

    db = DatabaseConnection("sqlite:///data/catalog.db")
    db.create_tables()
    with db.session() as session:
        ...
"""

from src.database.connection import DatabaseConnection
from src.database.models import Base, CatalogFilm, CatalogMetadata

__all__ = [
    "DatabaseConnection",
    "Base",
    "CatalogFilm",
    "CatalogMetadata",
]
