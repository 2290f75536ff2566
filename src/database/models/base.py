"""Declarative base for the catalog tables."""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Shared metadata for catalog tables.

    Every ``Mapped[datetime]`` column is stored timezone-aware.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class SyncStampMixin:
    """Stamps the row with the time a sync last wrote it."""

    synced_at: Mapped[datetime] = mapped_column(
        default=_utc_now,
        onupdate=_utc_now,
        nullable=False,
    )
