from bakery.infrastructure.database.database import (
    check_database_health,
    create_db_and_tables,
    get_db_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "check_database_health",
    "create_db_and_tables",
    "get_db_session",
    "get_engine",
    "get_session_factory",
]
