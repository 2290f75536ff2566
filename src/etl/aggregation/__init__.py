"""Aggregation module for multi-country film data fusion.

This module provides the canonical Film schema, the explicit merge
policy for repeated sightings, and the aggregator folding per-country
lists into one catalog.

Example:
    >>> from src.etl.aggregation import Aggregator
    >>> aggregator = Aggregator()
    >>> films = aggregator.aggregate({"PT": pt_films, "DE": de_films})
"""

from src.etl.aggregation.aggregator import AggregationStats, Aggregator
from src.etl.aggregation.merger import merge_sighting, union_countries
from src.etl.aggregation.schemas import ComparisonKey, Film, FilmId

__all__ = [
    # Main orchestrator
    "Aggregator",
    "AggregationStats",
    # Merge policy
    "merge_sighting",
    "union_countries",
    # Schemas
    "Film",
    "FilmId",
    "ComparisonKey",
]
