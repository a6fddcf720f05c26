"""Database package with engine and session management."""

from quickinvoice.db.session import (
    async_session_maker,
    create_engine,
    dispose_engine,
    enable_sqlite_savepoints,
    engine,
    get_session,
)

__all__ = [
    "async_session_maker",
    "create_engine",
    "dispose_engine",
    "enable_sqlite_savepoints",
    "engine",
    "get_session",
]
