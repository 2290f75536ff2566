"""FastAPI application entry point.

Creates and configures the catalog read API. The snapshot is read
once at startup through the configured snapshot loader.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import films, snapshot
from src.api.services.catalog import CatalogService
from src.etl.errors import SnapshotReadError
from src.etl.loaders import BaseSnapshotLoader, create_loader
from src.etl.utils import setup_logger
from src.settings import settings

logger = setup_logger("api")

LoaderFactory = Callable[[], BaseSnapshotLoader]


# =============================================================================
# SNAPSHOT LOADING
# =============================================================================


def load_catalog(loader: BaseSnapshotLoader) -> CatalogService | None:
    """Read the persisted snapshot into a catalog service.

    Args:
        loader: Snapshot loader to read from.

    Returns:
        CatalogService, or None if the snapshot is unreadable.
    """
    try:
        with loader:
            films = loader.read_films()
            metadata = loader.read_metadata()
    except SnapshotReadError as e:
        logger.error(f"Cannot load catalog snapshot: {e}")
        return None

    logger.info(f"Serving {len(films)} films from {loader.name} snapshot")
    return CatalogService(films, metadata)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================


def create_app(loader_factory: LoaderFactory | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        loader_factory: Builds the snapshot loader read at startup
            (default: backend from STORAGE_BACKEND).

    Returns:
        Configured FastAPI instance.
    """
    factory = loader_factory or create_loader

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.loader_factory = factory
        app.state.catalog = load_catalog(factory())
        yield
        app.state.catalog = None

    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="Read-only REST API over the synchronized MUBI catalog",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    _configure_cors(app)
    _register_routers(app)
    return app


def _configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )


def _register_routers(app: FastAPI) -> None:
    """Register API routers.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(films.router, prefix="/api/v1")
    app.include_router(snapshot.router, prefix="/api/v1")


app = create_app()
