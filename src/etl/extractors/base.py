"""Base extractor abstract class.

Tracks per-country outcomes of one extraction so every
extractor reports the same summary shape.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from src.etl.types import ExtractionSummary


class BaseExtractor(ABC):
    """Abstract base class for per-country catalog extractors.

    Subclasses call ``_begin`` before the first country, then
    ``_record_country`` once per country, and ``_finish`` at the end.

    Attributes:
        name: Extractor identifier (e.g., 'mubi').
    """

    name: str = "base"

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"etl.extractor.{self.name}")
        self._started_at: float | None = None
        self._records = 0
        self._countries: list[str] = []
        self._failed_countries: list[str] = []
        self._errors: list[str] = []
        self._summary: ExtractionSummary | None = None

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def last_result(self) -> ExtractionSummary | None:
        """Summary of the last completed extraction."""
        return self._summary

    @abstractmethod
    def extract(self, **kwargs: Any) -> Any:
        """Fetch every requested country.

        Args:
            **kwargs: Extractor-specific parameters.

        Returns:
            Extractor-specific payload.
        """

    # -------------------------------------------------------------------------
    # Bookkeeping
    # -------------------------------------------------------------------------

    def _begin(self) -> None:
        self._started_at = time.monotonic()
        self._records = 0
        self._countries = []
        self._failed_countries = []
        self._errors = []
        self._summary = None
        self._logger.info(f"Starting {self.name} extraction")

    def _record_country(self, country: str, records: int, error: str | None = None) -> None:
        """Account for one processed country.

        Args:
            country: Country code.
            records: Raw records kept for the country.
            error: Failure description, if pagination was aborted.
        """
        self._countries.append(country)
        self._records += records
        if error is not None:
            self._failed_countries.append(country)
            self._errors.append(error)
            self._logger.error(error)

    def _finish(self) -> ExtractionSummary:
        """Close the extraction and build its summary."""
        elapsed = 0.0 if self._started_at is None else time.monotonic() - self._started_at

        self._summary = ExtractionSummary(
            source=self.name,
            success=not self._failed_countries,
            records=self._records,
            countries=len(self._countries),
            failed_countries=list(self._failed_countries),
            errors=list(self._errors),
            duration_seconds=elapsed,
        )
        self._logger.info(
            f"Completed {self.name} extraction: {self._records} records from "
            f"{len(self._countries)} countries ({len(self._failed_countries)} failed) "
            f"in {elapsed:.2f}s"
        )
        return self._summary
