"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Storage Wiring**: Building (or accepting) the snapshot store and engine.
2.  **Exception Handling**: Handlers so domain errors return structured JSON.
3.  **Routing**: Mounting the snapshot router and the health probe.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (an in-memory store per test app instance).
-   Configuration injection (distinct databases for Dev/Prod).
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from versionable import __version__
from versionable.api.routers import snapshots
from versionable.core.errors import SnapshotNotFoundError
from versionable.core.registry import VersioningRegistry
from versionable.core.settings import get_logger, load_settings
from versionable.storage.base import SnapshotStore
from versionable.storage.sqlite import SqliteSnapshotStore
from versionable.versioning.engine import VersioningEngine

logger = get_logger(__name__)


def create_app(store: SnapshotStore | None = None) -> FastAPI:
    """
    Construct and configure the Versionable FastAPI application.

    Parameters
    ----------
    store : SnapshotStore | None
        Snapshot storage to serve. Defaults to the SQLite file configured by
        `VERSIONABLE_DB_PATH`.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = load_settings()
    if store is None:
        store = SqliteSnapshotStore(cfg.db_path)
        logger.info("Serving snapshots from %s", cfg.db_path)

    app = FastAPI(
        title="Versionable API",
        description="Read-only access to record snapshot history",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.engine = VersioningEngine(store, VersioningRegistry())

    # -----------------------------------------------------------------------
    # Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(SnapshotNotFoundError)
    async def not_found_handler(request: Request, exc: SnapshotNotFoundError) -> JSONResponse:
        """Map missing snapshots to HTTP 404."""
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "detail": str(exc), "path": request.url.path},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "detail": str(exc)},
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(snapshots.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok", "environment": cfg.environment, "version": __version__}

    return app


__all__ = ["create_app"]
