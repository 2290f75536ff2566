"""MUBI data normalizer.

Transforms raw browse API film records into canonical Film
entities, dropping API noise.
"""

import logging
from typing import Any

from pydantic import ValidationError

from src.etl.aggregation.schemas import Film
from src.etl.errors import MalformedRecordError
from src.etl.types import MubiDirectorData, MubiFilmData

logger = logging.getLogger(__name__)


class MubiNormalizer:
    """Normalizes MUBI API data into Film entities.

    Missing optional fields become None or an empty list. Only a
    missing id or title makes a record malformed.
    """

    THUMBNAIL_RENDITION = "large_overlaid"

    # -------------------------------------------------------------------------
    # Film Normalization
    # -------------------------------------------------------------------------

    def normalize_film(self, raw: MubiFilmData, source_country: str) -> Film:
        """Normalize a raw film record.

        Args:
            raw: Raw MUBI film record.
            source_country: Country whose listing returned the record.

        Returns:
            Film seeded with ``available_countries = [source_country]``.

        Raises:
            MalformedRecordError: If the record is not an object or lacks
                id or title.
        """
        if not isinstance(raw, dict):
            raise MalformedRecordError(f"Film record is not an object: {type(raw).__name__}")

        film_id = raw.get("id")
        title = self._clean_string(raw.get("title"))

        if film_id is None or film_id == "":
            raise MalformedRecordError("Film record without id", record_id=None)
        if not title:
            raise MalformedRecordError(f"Film {film_id} without title", record_id=film_id)

        try:
            return Film(
                id=film_id,
                title=title,
                original_title=self._clean_string(raw.get("original_title")),
                duration=self._parse_int(raw.get("duration")),
                genres=self._string_list(raw.get("genres")),
                available_countries=[source_country],
                film_countries=self._string_list(raw.get("historic_countries")),
                web_url=raw.get("web_url") or None,
                thumbnail_url=self._extract_thumbnail(raw.get("stills")),
                year=self._parse_int(raw.get("year")),
                directors=self._extract_directors(raw.get("directors")),
                popularity=self._parse_float(raw.get("popularity")),
            )
        except ValidationError as e:
            raise MalformedRecordError(f"Film {film_id} failed validation: {e}", film_id) from e

    def normalize_films(
        self,
        raw_films: list[MubiFilmData],
        source_country: str,
    ) -> tuple[list[Film], int]:
        """Normalize multiple films, dropping malformed records.

        Args:
            raw_films: Raw film records of one country.
            source_country: Country whose listing returned the records.

        Returns:
            Tuple of (normalized films, dropped record count).
        """
        normalized: list[Film] = []
        dropped = 0
        for raw in raw_films:
            try:
                normalized.append(self.normalize_film(raw, source_country))
            except MalformedRecordError as e:
                dropped += 1
                logger.warning(f"Dropped malformed record from {source_country}: {e}")
        return normalized, dropped

    # -------------------------------------------------------------------------
    # Field Helpers
    # -------------------------------------------------------------------------

    def _extract_thumbnail(self, stills: Any) -> str | None:
        """Pick the overlaid large still, if any."""
        if not isinstance(stills, dict):
            return None
        return stills.get(self.THUMBNAIL_RENDITION) or None

    @staticmethod
    def _extract_directors(directors: list[MubiDirectorData] | None) -> list[str]:
        """Extract director names, keeping upstream order."""
        if not directors:
            return []
        names = []
        for director in directors:
            name = director.get("name") if isinstance(director, dict) else director
            if isinstance(name, str) and name.strip():
                names.append(name.strip())
        return names

    @staticmethod
    def _string_list(values: Any) -> list[str]:
        """Keep non-empty strings of a list field."""
        if not isinstance(values, list):
            return []
        return [v.strip() for v in values if isinstance(v, str) and v.strip()]

    @staticmethod
    def _clean_string(value: Any) -> str | None:
        """Strip whitespace, mapping blank strings to None."""
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    @staticmethod
    def _parse_int(value: Any) -> int | None:
        """Parse an optional integer field."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _parse_float(value: Any) -> float | None:
        """Parse an optional float field."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
