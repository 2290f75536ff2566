"""Snapshot status endpoints for REST API."""

from fastapi import APIRouter, Request

from src.api.dependencies.catalog import Catalog
from src.api.schemas import (
    HealthResponse,
    MetadataResponse,
    SnapshotComponentHealth,
    StorageComponentHealth,
)
from src.settings import settings

router = APIRouter(tags=["Snapshot"])


@router.get(
    "/metadata",
    response_model=MetadataResponse,
    summary="Snapshot metadata",
    description="Countries, counts and last sync summary of the served snapshot.",
)
def get_metadata(catalog: Catalog) -> MetadataResponse:
    """Get the metadata of the loaded snapshot."""
    if catalog.metadata is None:
        return MetadataResponse(total_films=len(catalog))
    return MetadataResponse.model_validate(catalog.metadata)


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
    description="Verify API is running, report the loaded snapshot and ping its storage.",
)
def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Reports ``degraded`` when no snapshot could be loaded or when the
    snapshot storage no longer answers.
    """
    storage = _storage_health(request)
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return HealthResponse(status="degraded", version=settings.api.version, storage=storage)

    last_sync = (catalog.metadata or {}).get("last_sync") or {}
    return HealthResponse(
        status="healthy" if storage is None or storage.reachable else "degraded",
        version=settings.api.version,
        snapshot=SnapshotComponentHealth(
            loaded=True,
            films=len(catalog),
            last_sync=last_sync.get("timestamp"),
        ),
        storage=storage,
    )


def _storage_health(request: Request) -> StorageComponentHealth | None:
    factory = getattr(request.app.state, "loader_factory", None)
    if factory is None:
        return None
    loader = factory()
    return StorageComponentHealth(backend=loader.name, reachable=loader.check_storage())
