"""Read-only catalog service over a materialized snapshot.

Filters, orders and pages the films of the last persisted snapshot
for the consumer API.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.etl.aggregation.schemas import Film, FilmId
from src.etl.types import SnapshotMetadata
from src.settings import settings

# Filter values meaning "no filter", as sent by the catalog frontend
ALL_GENRES = "All genres"
ALL_COUNTRIES = "All countries"
ALL_YEARS = "all"

LAST_YEAR_BUCKET = 2020
"""Open-ended decade: bucket 2020 matches every year from 2020 on."""

_SENTINELS = frozenset({ALL_GENRES, ALL_COUNTRIES, ALL_YEARS, ""})


def _is_set(value: str | None) -> bool:
    """Whether a filter value actually restricts the listing."""
    return value is not None and value.strip() not in _SENTINELS


def in_year_bucket(year: int | None, bucket: int) -> bool:
    """Check whether a release year falls into a decade bucket.

    Args:
        year: Film release year.
        bucket: First year of the decade (e.g. 1990).

    Returns:
        True for ``bucket <= year < bucket + 10``, or ``year >= 2020``
        for the last bucket.
    """
    if year is None:
        return False
    if bucket >= LAST_YEAR_BUCKET:
        return year >= bucket
    return bucket <= year < bucket + 10


# =============================================================================
# QUERY TYPES
# =============================================================================


@dataclass(frozen=True)
class FilmFilter:
    """Conjunction of listing filters.

    Attributes:
        genre: Genre the film must have.
        year_bucket: Decade bucket as text (e.g. "1990"), or "all".
        country: Production country the film must have.
    """

    genre: str | None = None
    year_bucket: str | None = None
    country: str | None = None

    def matches(self, film: Film) -> bool:
        """Check whether a film passes every active filter.

        Raises:
            ValueError: If the year bucket is not a number.
        """
        if _is_set(self.genre) and self.genre not in film.genres:
            return False
        if _is_set(self.country) and self.country not in film.film_countries:
            return False
        if _is_set(self.year_bucket):
            bucket = int(self.year_bucket)  # type: ignore[arg-type]
            if not in_year_bucket(film.year, bucket):
                return False
        return True


@dataclass
class FilmPage:
    """One page of a film listing.

    Attributes:
        films: Films of the page.
        next_cursor: Cursor for the following page, None on the last page.
    """

    films: list[Film] = field(default_factory=list)
    next_cursor: str | None = None


# =============================================================================
# SERVICE
# =============================================================================


class CatalogService:
    """Answers catalog queries from an in-memory snapshot.

    Films are ordered once by popularity descending; films with equal
    or missing popularity keep their snapshot order.
    """

    def __init__(
        self,
        films: Iterable[Film],
        metadata: SnapshotMetadata | None = None,
        page_size: int | None = None,
    ) -> None:
        """Initialize service.

        Args:
            films: Films of the snapshot, in snapshot order.
            metadata: Snapshot metadata, if any.
            page_size: Films per page (default from API_PAGE_SIZE).
        """
        snapshot = list(films)
        self._films = sorted(
            snapshot,
            key=lambda f: (f.popularity is None, -(f.popularity or 0.0)),
        )
        self._by_id: dict[str, Film] = {str(f.id): f for f in snapshot}
        self._metadata = metadata
        self._page_size = page_size or settings.api.page_size

    @property
    def metadata(self) -> SnapshotMetadata | None:
        """Snapshot metadata."""
        return self._metadata

    @property
    def page_size(self) -> int:
        """Films per page."""
        return self._page_size

    def __len__(self) -> int:
        return len(self._films)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_films(self, film_filter: FilmFilter | None = None, cursor: str | None = None) -> FilmPage:
        """List one page of films matching the filter.

        Args:
            film_filter: Filters to apply (default: none).
            cursor: Id of the last film of the previous page. Unknown
                cursors restart from the first page.

        Returns:
            FilmPage with at most ``page_size`` films.
        """
        matching = self._filter(film_filter)

        start = 0
        if cursor is not None:
            for index, film in enumerate(matching):
                if str(film.id) == cursor:
                    start = index + 1
                    break

        films = matching[start : start + self._page_size]
        has_more = start + self._page_size < len(matching)
        next_cursor = str(films[-1].id) if films and has_more else None
        return FilmPage(films=films, next_cursor=next_cursor)

    def count(self, film_filter: FilmFilter | None = None) -> int:
        """Count films matching the filter."""
        return len(self._filter(film_filter))

    def genres(self) -> list[str]:
        """Sorted distinct genres."""
        return sorted({genre for film in self._films for genre in film.genres})

    def countries(self) -> list[str]:
        """Sorted distinct production countries."""
        return sorted({country for film in self._films for country in film.film_countries})

    def search(self, term: str, limit: int = 20) -> list[Film]:
        """Case-insensitive substring search on titles.

        Matches either the display title or the original title.

        Args:
            term: Text to look for.
            limit: Maximum results.

        Returns:
            Matching films in listing order.
        """
        needle = term.strip().casefold()
        if not needle:
            return []

        results: list[Film] = []
        for film in self._films:
            titles = (film.title, film.original_title or "")
            if any(needle in title.casefold() for title in titles):
                results.append(film)
                if len(results) >= limit:
                    break
        return results

    def get(self, film_id: FilmId) -> Film | None:
        """Get a film by id, or None if unknown."""
        return self._by_id.get(str(film_id))

    def _filter(self, film_filter: FilmFilter | None) -> list[Film]:
        if film_filter is None:
            return list(self._films)
        return [film for film in self._films if film_filter.matches(film)]
