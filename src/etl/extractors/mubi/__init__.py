"""MUBI extractor package.

Provides extraction of per-country film listings from the MUBI API.

Classes:
    MubiExtractor: Paginates every configured country.
    MubiClient: HTTP client with bounded retries.
    MubiNormalizer: Raw record to Film transformation.
    CountryFetchResult: Raw records fetched for one country.

Exceptions:
    MubiClientError: Base client error.
    MubiRateLimitError: Rate limit exceeded.
    MubiServerError: Upstream server error.

Usage:
    from src.etl.extractors.mubi import MubiExtractor

    extractor = MubiExtractor()
    results = extractor.extract(countries=["PT", "DE"])
"""

from src.etl.extractors.mubi.client import (
    MubiClient,
    MubiClientError,
    MubiRateLimitError,
    MubiServerError,
)
from src.etl.extractors.mubi.mubi import CountryFetchResult, MubiExtractor
from src.etl.extractors.mubi.normalizer import MubiNormalizer

__all__ = [
    "MubiExtractor",
    "MubiClient",
    "MubiNormalizer",
    "CountryFetchResult",
    "MubiClientError",
    "MubiRateLimitError",
    "MubiServerError",
]
