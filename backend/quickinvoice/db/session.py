"""Database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Register all models with SQLAlchemy (required for relationship resolution)
import quickinvoice.models  # noqa: F401
from quickinvoice.config import settings


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver defers BEGIN until the first DML statement, which
    breaks SAVEPOINT (used when a seller's counter row is first created).
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the async engine with pool settings suited to the backend."""
    if database_url.startswith("sqlite"):
        options: dict[str, Any] = {}
        if ":memory:" in database_url:
            # One shared connection, otherwise every session sees an empty database
            options = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        sqlite_engine = create_async_engine(database_url, echo=echo, **options)
        enable_sqlite_savepoints(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        database_url,
        echo=echo,  # SQL logging controlled via structlog configuration
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=300,  # Recycle connections after 5 minutes
    )


engine = create_engine(settings.database_url)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session."""
    async with async_session_maker() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose of the engine and release all connections.

    Should be called during application shutdown.
    """
    await engine.dispose()
