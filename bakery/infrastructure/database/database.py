"""
Asynchronous Database Connection Module

This module manages the async SQLAlchemy engine backing the user store. The
engine is created lazily on first use so that importing the application never
opens a connection, and tests can point ``DATABASE_URL`` at an in-memory
SQLite database before anything touches it.

Key Components:
    - get_engine: The cached asynchronous engine.
    - get_session_factory: Factory for ``AsyncSession`` objects.
    - get_db_session: FastAPI dependency yielding a session with rollback on error.
    - check_database_health: Connectivity probe with retry logic.
    - create_db_and_tables: Creates tables on startup.
"""

import time
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import text
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bakery.core.config.settings import settings
from bakery.core.logging import logger


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=get_engine(), class_=AsyncSession, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.

    Rolls back the transaction if the request handler raises and always closes
    the session afterwards.

    Yields:
        AsyncSession: An asynchronous database session.
    """
    async with get_session_factory()() as session:
        logger.debug("database_session_created")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("database_session_rollback")
            raise
        finally:
            await session.close()
            logger.debug("database_session_closed")


@retry(
    stop=stop_after_attempt(settings.DATABASE_CONNECT_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def _ping() -> None:
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def check_database_health() -> bool:
    """
    Performs a health check on the database connection.

    Transient ``OperationalError`` failures are retried with exponential
    backoff before the check gives up.

    Returns:
        bool: True if the database answered, False otherwise.
    """
    start_time = time.time()
    try:
        await _ping()
    except SQLAlchemyError as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            execution_time=time.time() - start_time,
        )
        return False
    logger.info("database_health_check_success", execution_time=time.time() - start_time)
    return True


async def create_db_and_tables() -> None:
    """
    Creates database tables with logging.
    """
    # Registers the users table on SQLModel.metadata.
    from bakery.domain.entities.user import User  # noqa: F401

    start_time = time.time()
    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )
