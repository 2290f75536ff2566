"""Pydantic schemas for API responses.

Film payloads reuse the snapshot Film model, so the API serves the
same camelCase documents as the persisted snapshot.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from src.etl.aggregation.schemas import Film

# =============================================================================
# HEALTH
# =============================================================================


class SnapshotComponentHealth(BaseModel):
    """Loaded snapshot status."""

    loaded: bool = False
    films: int = 0
    last_sync: str | None = None


class StorageComponentHealth(BaseModel):
    """Snapshot storage reachability."""

    backend: str
    reachable: bool = False


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(examples=["healthy"])
    version: str = Field(examples=["1.0.0"])
    snapshot: SnapshotComponentHealth = Field(default_factory=SnapshotComponentHealth)
    storage: StorageComponentHealth | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# FILM SCHEMAS
# =============================================================================


class FilmListResponse(BaseModel):
    """Cursor-paginated film list response."""

    data: list[Film]
    next_cursor: str | None = Field(
        default=None,
        description="Pass as 'cursor' to get the next page; null on the last page",
    )


class CountResponse(BaseModel):
    """Film count response."""

    count: int


class ValuesResponse(BaseModel):
    """Sorted distinct values (genres or countries)."""

    data: list[str]


class SearchResponse(BaseModel):
    """Title search response schema."""

    query: str
    results: list[Film]
    count: int


# =============================================================================
# METADATA SCHEMAS
# =============================================================================


class ChangesResponse(BaseModel):
    """Change counts of the last sync."""

    added: int = 0
    removed: int = 0
    modified: int = 0


class LastSyncResponse(BaseModel):
    """Summary of the last successful sync."""

    timestamp: str
    total_films: int
    changes: ChangesResponse


class MetadataResponse(BaseModel):
    """Snapshot metadata response."""

    countries: list[str] = Field(default_factory=list)
    total_films: int = 0
    films_by_country: dict[str, int] = Field(default_factory=dict)
    failed_countries: list[str] = Field(default_factory=list)
    last_sync: LastSyncResponse | None = None
