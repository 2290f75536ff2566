"""ETL extractors package.

Provides data extraction from upstream sources:
- MUBI: Per-country playable film listings

Classes:
    BaseExtractor: Abstract base for all extractors.
    MubiExtractor: MUBI browse API extractor.
"""

from src.etl.extractors.base import BaseExtractor
from src.etl.extractors.mubi import (
    CountryFetchResult,
    MubiClient,
    MubiClientError,
    MubiExtractor,
    MubiNormalizer,
    MubiRateLimitError,
    MubiServerError,
)

__all__ = [
    # Base
    "BaseExtractor",
    # MUBI
    "MubiExtractor",
    "MubiClient",
    "MubiNormalizer",
    "CountryFetchResult",
    "MubiClientError",
    "MubiRateLimitError",
    "MubiServerError",
]
