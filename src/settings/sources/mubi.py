"""MUBI browse API configuration settings.

Upstream REST API serving per-country film availability.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COUNTRIES = (
    "PT,DE,GB,US,FR,JP,AR,ES,IT,CA,BR,AU,NL,SE,IN,ZA,MX,AF,EG,KR,NO,CL,NZ,TR"
)
"""Countries queried by default, in processing order."""


class MubiSettings(BaseSettings):
    """MUBI browse API configuration.

    Attributes:
        base_url: Browse endpoint URL.
        countries_raw: Comma-separated country codes, in processing order.
        sort: Upstream sort key.
        playable_only: Restrict to films playable in the country.
        page_delay: Fixed delay between consecutive pages of one country.
        max_retries: Attempts per page before giving up.
        max_pages: Optional cap on pages per country.
        keep_partial_pages: Keep pages fetched before a page failure.
    """

    base_url: str = Field(
        default="https://api.mubi.com/v4/browse/films",
        alias="MUBI_BASE_URL",
    )
    countries_raw: str = Field(default=DEFAULT_COUNTRIES, alias="MUBI_COUNTRIES")

    # Request parameters
    sort: str = Field(default="popularity_quality_score", alias="MUBI_SORT")
    playable_only: bool = Field(default=True, alias="MUBI_PLAYABLE_ONLY")
    accept_language: str = Field(default="en", alias="MUBI_ACCEPT_LANGUAGE")
    client: str = Field(default="web", alias="MUBI_CLIENT")

    # Rate limiting and retries
    page_delay: float = Field(default=1.0, ge=0.0, alias="MUBI_PAGE_DELAY")
    timeout: float = Field(default=30.0, gt=0.0, alias="MUBI_TIMEOUT")
    max_retries: int = Field(default=3, ge=1, alias="MUBI_MAX_RETRIES")

    # Pagination
    max_pages: int | None = Field(default=None, ge=1, alias="MUBI_MAX_PAGES")
    keep_partial_pages: bool = Field(default=True, alias="MUBI_KEEP_PARTIAL_PAGES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("countries_raw")
    @classmethod
    def validate_countries(cls, v: str) -> str:
        """Validate every code is a two-letter country code."""
        codes = parse_countries(v)
        if not codes:
            raise ValueError("MUBI_COUNTRIES must list at least one country")
        for code in codes:
            if len(code) != 2 or not code.isalpha():
                raise ValueError(f"Invalid country code in MUBI_COUNTRIES: {code!r}")
        return ",".join(codes)

    @property
    def countries(self) -> list[str]:
        """Parse countries from comma-separated string."""
        return parse_countries(self.countries_raw)


def parse_countries(raw: str) -> list[str]:
    """Split, uppercase and deduplicate country codes keeping their order.

    Args:
        raw: Comma-separated codes (e.g. ``"pt, DE,GB"``).

    Returns:
        Ordered list of unique uppercase codes.
    """
    codes: list[str] = []
    for part in raw.split(","):
        code = part.strip().upper()
        if code and code not in codes:
            codes.append(code)
    return codes
