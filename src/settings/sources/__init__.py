"""Data source settings for catalog extraction.

Exports configuration classes for upstream sources:
- MUBI browse API (REST)
"""

from src.settings.sources.mubi import DEFAULT_COUNTRIES, MubiSettings, parse_countries

__all__ = [
    "MubiSettings",
    "DEFAULT_COUNTRIES",
    "parse_countries",
]
