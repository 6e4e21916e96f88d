"""
Word Map Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures logging and global exception handling, and provides a
test-friendly application factory.

Startup deliberately loads no assets: the analyzer, coordinate table,
vocabulary and vector table are all loaded on first use.
"""

from __future__ import annotations

import logging
from fastapi import FastAPI

from .config import settings
from .core.errors import (
    WordMapError,
    unhandled_exception_handler,
    wordmap_error_handler,
)

from .api import (
    health_routes,
    page_routes,
    wordmap_routes,
)


logger = logging.getLogger("wordmap.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="wordmap-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(WordMapError, wordmap_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(page_routes.router)
    app.include_router(wordmap_routes.router)

    # --------------------------------------------------------------
    # Lifecycle Hooks
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup() -> None:
        logger.info(
            "Starting wordmap-server (assets from %s, dim=%d)",
            settings.asset_base,
            settings.embedding_dim,
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down wordmap-server")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
