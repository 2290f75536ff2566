"""MUBI API data types.

TypedDict definitions for data structures returned by
the MUBI browse endpoint.
"""

from typing import NotRequired, TypedDict


class MubiDirectorData(TypedDict):
    """Director entry embedded in a film record."""

    name: str
    name_upcase: NotRequired[str]
    slug: NotRequired[str]


class MubiStillsData(TypedDict, total=False):
    """Still image URLs keyed by rendition."""

    small: str
    medium: str
    standard: str
    retina: str
    small_overlaid: str
    large_overlaid: str


class MubiFilmData(TypedDict):
    """Film record from the browse endpoint.

    Only the fields read by the normalizer are declared; the API
    returns many more.
    """

    id: int
    title: str
    original_title: NotRequired[str | None]
    year: NotRequired[int | None]
    duration: NotRequired[int | None]
    genres: NotRequired[list[str]]
    historic_countries: NotRequired[list[str]]
    available_countries: NotRequired[list[str]]
    web_url: NotRequired[str | None]
    stills: NotRequired[MubiStillsData | None]
    directors: NotRequired[list[MubiDirectorData] | None]
    popularity: NotRequired[float | None]


class MubiPageMeta(TypedDict):
    """Pagination metadata of a browse response."""

    current_page: int
    total_pages: int
    total_count: int


class MubiBrowseResponse(TypedDict):
    """Browse endpoint response."""

    films: list[MubiFilmData]
    meta: MubiPageMeta
