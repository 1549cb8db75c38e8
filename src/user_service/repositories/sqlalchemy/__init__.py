"""SQLAlchemy repository implementations."""

from user_service.repositories.sqlalchemy.database import (
    build_engine,
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    ping,
    reset_database,
    Base,
)
from user_service.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from user_service.repositories.sqlalchemy.entry_repo import SqlAlchemyEntryRepository

__all__ = [
    "build_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "ping",
    "reset_database",
    "Base",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyEntryRepository",
]
