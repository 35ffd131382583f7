"""Storefront catalog main application module.

This module builds the FastAPI application and configures core middleware,
routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import cart_router, health_router, products_router
from storefront.api.errors import setup_exception_handlers
from storefront.api.middleware import setup_middleware
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.database import Database
from storefront.infrastructure.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    settings: Settings = app.state.settings

    # Startup
    configure_logging(settings)
    logger.info(
        "Starting storefront catalog",
        version=settings.api_version,
        debug=settings.debug,
    )
    if getattr(app.state, "database", None) is None:
        app.state.database = Database.from_settings(settings)

    yield

    # Shutdown
    logger.info("Shutting down storefront catalog")
    await app.state.database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use; defaults to the environment.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront Catalog API",
        description="Product catalog, search and cart backend",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = None

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware (request ID, API key auth, error handling)
    setup_middleware(app, api_key=settings.api_key)
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)
    app.include_router(cart_router)

    return app


app = create_app()
