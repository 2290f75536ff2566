"""Pydantic schemas for the film catalog.

Defines the canonical Film entity shared by the normalizer,
aggregator, differ, snapshot loaders and read API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# TYPES
# =============================================================================

FilmId = int | str
"""Film identifier. Digit-only strings are coerced to int."""

ComparisonKey = tuple[Any, ...]
"""Canonical tuple used to detect modified films."""


def _canonical(values: list[str]) -> tuple[str, ...]:
    """Order-insensitive form of a multi-valued field."""
    return tuple(sorted(set(values)))


# =============================================================================
# FILM
# =============================================================================


class Film(BaseModel):
    """Canonical normalized film record.

    Serializes with the camelCase keys of the published snapshot
    (``originalTitle``, ``availableCountries``, ``thumbnail``...).

    Attributes:
        id: Upstream film identifier (immutable).
        title: Display title.
        original_title: Original language title.
        duration: Runtime in minutes.
        genres: Genre names.
        available_countries: Countries where the film is playable.
        film_countries: Production countries.
        web_url: Public film page.
        thumbnail_url: Still image URL.
        year: Release year.
        directors: Director names, in upstream order.
        popularity: Upstream popularity score, used for ordering only.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    id: FilmId
    title: str = Field(min_length=1)
    original_title: str | None = None
    duration: int | None = None
    genres: list[str] = Field(default_factory=list)
    available_countries: list[str] = Field(default_factory=list)
    film_countries: list[str] = Field(default_factory=list)
    web_url: str | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnail")
    year: int | None = None
    directors: list[str] = Field(default_factory=list)
    popularity: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: Any) -> Any:
        """Coerce digit-only string ids to int."""
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @field_validator("genres", "available_countries", "film_countries", "directors", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat a null multi-valued field as empty."""
        return [] if v is None else v

    def comparison_key(self) -> ComparisonKey:
        """Build the canonical key used for change detection.

        Multi-valued fields are compared as sorted sets so reordering
        alone never counts as a modification. ``popularity`` is left out.

        Returns:
            Tuple of compared field values.
        """
        return (
            self.title,
            self.original_title,
            _canonical(self.available_countries),
            _canonical(self.film_countries),
            self.duration,
            _canonical(self.genres),
            self.web_url,
            self.thumbnail_url,
            self.year,
            _canonical(self.directors),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the snapshot document shape (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")
