"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (see migrations/). Engine and
session factory are created lazily on first use so import does not trigger
Settings validation. Without DATABASE_URL no engine is created and callers
that need the counter store get SqlNotConfiguredException.
"""

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from codegen.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool/driver options; SQLite pools take no size arguments."""
    settings = get_settings()
    if database_url.startswith("sqlite"):
        return {}
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": settings.db_pool_size if settings.db_pool_size is not None else 10,
        "max_overflow": (
            settings.db_max_overflow if settings.db_max_overflow is not None else 20
        ),
    }
    if "asyncpg" in database_url:
        options["connect_args"] = {
            "command_timeout": (
                settings.db_command_timeout
                if settings.db_command_timeout is not None
                else 30
            )
        }
    return options


def enable_sqlite_transactions(async_engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself on SQLite so SAVEPOINTs nest correctly.

    The sqlite3 driver otherwise begins lazily and a RELEASE of the outermost
    savepoint would commit the whole transaction.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use (when DATABASE_URL is set)."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        return
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        **_engine_options(settings.database_url),
    )
    if settings.database_url.startswith("sqlite"):
        enable_sqlite_transactions(engine)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database engine created (%s)", engine.url.render_as_string())


def get_engine() -> AsyncEngine | None:
    """Return the lazily created engine, or None when no database is configured."""
    _ensure_engine()
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession] | None:
    """Return the session factory, or None when no database is configured."""
    _ensure_engine()
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine (shutdown) and reset the lazy globals."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""

