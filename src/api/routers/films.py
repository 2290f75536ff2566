"""Film endpoints for REST API.

Provides endpoints for listing, counting, searching and retrieving
films of the last persisted catalog snapshot.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies.catalog import Catalog
from src.api.schemas import CountResponse, FilmListResponse, SearchResponse, ValuesResponse
from src.api.services.catalog import FilmFilter
from src.etl.aggregation.schemas import Film

router = APIRouter(
    prefix="/films",
    tags=["Films"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_film_filter(
    genre: Annotated[str | None, Query(description="Genre, or 'All genres'")] = None,
    year: Annotated[
        str | None,
        Query(pattern=r"^(all|\d{4})$", description="Decade bucket (e.g. 1990), or 'all'"),
    ] = None,
    country: Annotated[str | None, Query(description="Production country, or 'All countries'")] = None,
) -> FilmFilter:
    """Parse listing filter parameters.

    Args:
        genre: Genre filter.
        year: Decade bucket filter.
        country: Production country filter.

    Returns:
        FilmFilter conjunction.
    """
    return FilmFilter(genre=genre, year_bucket=year, country=country)


Filter = Annotated[FilmFilter, Depends(get_film_filter)]


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.get(
    "",
    response_model=FilmListResponse,
    summary="List films",
    description="Get one page of films sorted by popularity, with optional filters.",
)
def list_films(
    catalog: Catalog,
    film_filter: Filter,
    cursor: Annotated[str | None, Query(description="next_cursor of the previous page")] = None,
) -> FilmListResponse:
    """Get a page of films.

    Args:
        catalog: Catalog service.
        film_filter: Listing filters.
        cursor: Id of the last film of the previous page.

    Returns:
        Films of the page and the cursor of the next one.
    """
    page = catalog.list_films(film_filter, cursor)
    return FilmListResponse(data=page.films, next_cursor=page.next_cursor)


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count films",
    description="Count films matching the listing filters.",
)
def count_films(catalog: Catalog, film_filter: Filter) -> CountResponse:
    """Count films matching the filters."""
    return CountResponse(count=catalog.count(film_filter))


@router.get(
    "/genres",
    response_model=ValuesResponse,
    summary="List genres",
)
def list_genres(catalog: Catalog) -> ValuesResponse:
    """Get sorted distinct genres."""
    return ValuesResponse(data=catalog.genres())


@router.get(
    "/countries",
    response_model=ValuesResponse,
    summary="List production countries",
)
def list_countries(catalog: Catalog) -> ValuesResponse:
    """Get sorted distinct production countries."""
    return ValuesResponse(data=catalog.countries())


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search by title",
    description="Case-insensitive substring search on display and original titles.",
)
def search_films(
    catalog: Catalog,
    q: Annotated[str, Query(min_length=1, max_length=200)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> SearchResponse:
    """Search films by title.

    Args:
        catalog: Catalog service.
        q: Text to look for.
        limit: Maximum results.

    Returns:
        Matching films.
    """
    results = catalog.search(q, limit)
    return SearchResponse(query=q, results=results, count=len(results))


@router.get(
    "/{film_id}",
    response_model=Film,
    summary="Get film details",
)
def get_film(film_id: str, catalog: Catalog) -> Film:
    """Get film by id.

    Args:
        film_id: Film identifier.
        catalog: Catalog service.

    Returns:
        The film.

    Raises:
        HTTPException: 404 if film not found.
    """
    film = catalog.get(film_id)
    if film is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Film with id {film_id} not found",
        )
    return film
