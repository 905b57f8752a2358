"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS (Cross-Origin Resource Sharing) for the blog frontend.
2.  **Exception Handling**: Maps store errors onto structured JSON responses.
3.  **Routing**: Mounting the Posts and Talk routers plus `/health`.
4.  **Lifecycle**: Building the stores, preloading both collections on startup,
    draining the write queue on shutdown.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). Each app instance owns
its own :class:`StoreRegistry` on `app.state.stores`, so tests can point
separate instances at separate temporary files.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogstore import __version__
from blogstore.api.routers import posts, talk
from blogstore.api.schemas import ErrorResponse
from blogstore.core.errors import InvalidRecord, WriteFailed
from blogstore.core.settings import Settings, get_logger, load_settings
from blogstore.stores.registry import StoreRegistry

logger = get_logger("blogstore.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ASGI Lifespan context manager.

    - **Startup**: Preload Posts and Talk so the cache is warm before the first request.
    - **Shutdown**: Let queued writes finish, then stop the writer thread.
    """
    stores: StoreRegistry = app.state.stores
    cfg: Settings = app.state.settings

    stores.preload()
    logger.info("Server ready on http://%s:%s", cfg.host, cfg.port)
    logger.info("Posts file: %s", stores.posts.backend.label)
    logger.info("Talk file:  %s", stores.talk.disk.label)

    yield

    logger.info("Shutting down, draining write queue...")
    stores.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Construct and configure the blogstore FastAPI application.

    Parameters
    ----------
    settings:
        Configuration to build the stores from; defaults to the cached
        process settings.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = settings or load_settings()

    app = FastAPI(
        title="blogstore API",
        description="Posts and Talk JSON collections",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.stores = StoreRegistry.from_settings(cfg)

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(InvalidRecord)
    async def invalid_record_handler(request: Request, exc: InvalidRecord) -> JSONResponse:
        """Client data failed the required-field check: HTTP 400."""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=str(exc)).model_dump(exclude_none=True),
        )

    @app.exception_handler(WriteFailed)
    async def write_failed_handler(request: Request, exc: WriteFailed) -> JSONResponse:
        """A write had no fallback: HTTP 500 with backend diagnostics."""
        logger.error("[ERROR] %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(exc), debug=exc.diagnostics).model_dump(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all so unexpected failures still return structured JSON."""
        logger.exception("[ERROR] %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(posts.router)
    app.include_router(talk.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness check."""
        return {"status": "ok", "environment": cfg.environment, "version": __version__}

    return app


__all__ = ["create_app"]
