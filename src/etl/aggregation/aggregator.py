"""Multi-country film aggregator.

Merges per-country film lists into one deduplicated catalog keyed
by film id, accumulating the countries where each film is available.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.etl.aggregation.merger import merge_sighting
from src.etl.aggregation.schemas import Film, FilmId

logger = logging.getLogger(__name__)


# =============================================================================
# AGGREGATION STATISTICS
# =============================================================================


@dataclass
class AggregationStats:
    """Aggregation statistics.

    Attributes:
        start_time: Aggregation start timestamp.
        end_time: Aggregation end timestamp.
        input_sightings: Films received across all countries.
        duplicates_merged: Sightings folded into an existing film.
        final_count: Distinct films in the output.
        films_by_country: Sightings per country.
    """

    start_time: datetime | None = None
    end_time: datetime | None = None
    input_sightings: int = 0
    duplicates_merged: int = 0
    final_count: int = 0
    films_by_country: dict[str, int] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        """Calculate aggregation duration in seconds."""
        if not self.start_time or not self.end_time:
            return 0.0
        delta = self.end_time - self.start_time
        return round(delta.total_seconds(), 2)

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "duration_seconds": self.duration_seconds,
            "input_sightings": self.input_sightings,
            "duplicates_merged": self.duplicates_merged,
            "final_count": self.final_count,
            "films_by_country": dict(self.films_by_country),
        }

    def log_summary(self) -> None:
        """Log aggregation summary."""
        logger.info(
            "Aggregation complete in %.2fs: %d sightings -> %d films (%d merged)",
            self.duration_seconds,
            self.input_sightings,
            self.final_count,
            self.duplicates_merged,
        )


# =============================================================================
# AGGREGATOR
# =============================================================================


class Aggregator:
    """Merges per-country film lists into one catalog.

    Countries are processed in mapping order, which callers build from
    the configured country list, so repeated runs over identical input
    produce identical output ordering.

    Attributes:
        stats: Statistics of the last aggregation.
    """

    def __init__(self) -> None:
        """Initialize aggregator with empty statistics."""
        self.stats = AggregationStats()

    def aggregate(self, per_country: Mapping[str, list[Film]]) -> list[Film]:
        """Aggregate per-country films into distinct films.

        Args:
            per_country: Normalized films keyed by source country.

        Returns:
            One film per distinct id, in first-sighting order.
        """
        self.stats = AggregationStats(start_time=datetime.now(UTC))
        films: dict[FilmId, Film] = {}

        for country, country_films in per_country.items():
            self.stats.films_by_country[country] = len(country_films)
            logger.debug("Aggregating %d films from %s", len(country_films), country)

            for sighting in country_films:
                self.stats.input_sightings += 1
                existing = films.get(sighting.id)
                if existing is not None:
                    self.stats.duplicates_merged += 1
                films[sighting.id] = merge_sighting(existing, sighting)

        result = list(films.values())
        self.stats.end_time = datetime.now(UTC)
        self.stats.final_count = len(result)
        self.stats.log_summary()
        return result
