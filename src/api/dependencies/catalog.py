"""Catalog service dependency.

The service is built once in the application lifespan and stored
on ``app.state``; request handlers receive it through this dependency.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.api.services.catalog import CatalogService


def get_catalog(request: Request) -> CatalogService:
    """Get the catalog service loaded at startup.

    Args:
        request: Incoming request.

    Returns:
        CatalogService of the application.

    Raises:
        HTTPException: 503 if no snapshot could be loaded.
    """
    catalog: CatalogService | None = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog snapshot is not loaded",
        )
    return catalog


Catalog = Annotated[CatalogService, Depends(get_catalog)]
