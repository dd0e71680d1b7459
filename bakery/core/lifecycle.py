"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from bakery.core.config.settings import settings
from bakery.core.logging import logger
from bakery.domain.security.sweeper import SecuritySweeper
from bakery.infrastructure.database import check_database_health, create_db_and_tables


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Check the database, create tables and run the tracker sweeps.

        The sweeps are cancelled on shutdown. Tracker state itself is not
        persisted and is lost with the process.

        Args:
            app (FastAPI): The FastAPI application instance

        Raises:
            RuntimeError: If database is unavailable during startup
        """
        # Startup
        if not await check_database_health():
            logger.error("database_unavailable_on_startup")
            raise RuntimeError("Database unavailable")
        await create_db_and_tables()

        sweeper = SecuritySweeper.for_trackers(app.state.security, settings)
        sweeper.start()
        app.state.sweeper = sweeper
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        await sweeper.stop()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
