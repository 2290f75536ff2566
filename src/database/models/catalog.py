"""Catalog snapshot SQLAlchemy models.

One row per film of the current snapshot plus a single metadata row.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base, SyncStampMixin

# =============================================================================
# FILM
# =============================================================================


class CatalogFilm(Base):
    """Film document of the current catalog snapshot.

    Attributes:
        film_key: Film id as text (numeric ids are restored on read).
        position: Order of the film within the snapshot.
        first_seen: When the film first entered the snapshot.
        last_updated: When the row was last written by a sync.
    """

    __tablename__ = "catalog_films"

    film_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(500))
    duration: Mapped[int | None] = mapped_column(Integer)
    genres: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    available_countries: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    film_countries: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    directors: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    web_url: Mapped[str | None] = mapped_column(Text)
    thumbnail_url: Mapped[str | None] = mapped_column(Text)
    year: Mapped[int | None] = mapped_column(Integer, index=True)
    popularity: Mapped[float | None] = mapped_column(Float)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    first_seen: Mapped[datetime] = mapped_column(nullable=False)
    last_updated: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CatalogFilm(film_key='{self.film_key}', title='{self.title}')>"


# =============================================================================
# METADATA
# =============================================================================


class CatalogMetadata(SyncStampMixin, Base):
    """Snapshot metadata document (single row, id 1)."""

    __tablename__ = "catalog_metadata"

    SINGLETON_ID = 1

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CatalogMetadata(id={self.id})>"
