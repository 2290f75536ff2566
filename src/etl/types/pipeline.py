"""Extraction summary types.

TypedDict definitions for the statistics an extractor reports
after fetching every requested country.
"""

from typing import NotRequired, TypedDict


class ExtractionSummary(TypedDict):
    """Statistics of one multi-country extraction."""

    source: str
    success: bool
    records: int
    countries: int
    failed_countries: list[str]
    errors: NotRequired[list[str]]
    duration_seconds: NotRequired[float]
