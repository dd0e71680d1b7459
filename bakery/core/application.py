"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from bakery.adapters.api import api_router, root_router
from bakery.core.config.settings import settings
from bakery.core.handlers import register_exception_handlers
from bakery.core.lifecycle import create_lifespan_manager
from bakery.core.middleware import configure_middleware
from bakery.domain.security.trackers import SecurityTrackers


def create_application(trackers: Optional[SecurityTrackers] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        trackers: Security trackers to attach. Built from settings when
            omitted; tests pass their own to control the clock.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Pier Repostería shop backend: accounts, sign-in and request hardening.",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    app.state.security = trackers if trackers is not None else SecurityTrackers.from_settings(settings)

    # Configure middleware
    configure_middleware(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(root_router)
    app.include_router(api_router, prefix="/api")

    return app
