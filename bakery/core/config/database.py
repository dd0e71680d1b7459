"""
Database settings.
"""
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """
    Connection settings for the user store.

    ``DATABASE_URL`` must use an async driver (``sqlite+aiosqlite`` for local
    development, ``postgresql+asyncpg`` in production).
    """
    DATABASE_URL: str = "sqlite+aiosqlite:///./bakery.db"
    DATABASE_ECHO: bool = False
    DATABASE_CONNECT_RETRIES: int = 3
