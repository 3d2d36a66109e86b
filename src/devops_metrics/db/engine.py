"""Async engine and session lifecycle for the metrics database."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from devops_metrics.config import get_settings
from devops_metrics.db.models import Base
from devops_metrics.logging import get_logger

logger = get_logger(__name__)

# Created lazily from settings; reset by dispose_engine()
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use.

    SQLite gets one connection per session (``NullPool``) with foreign keys
    enforced. Other backends use the default pool.
    """
    global _engine
    if _engine is None:
        url = make_url(get_settings().database_url)
        if url.get_backend_name() == "sqlite":
            _engine = create_async_engine(url, poolclass=NullPool)
            event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            _engine = create_async_engine(url, pool_pre_ping=True)
        logger.debug("Database engine created for {}", url.render_as_string(hide_password=True))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on clean exit and rolls back on any exception.

    Sync services commit in batches on top of this; the final commit here
    only covers whatever they left pending.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create every table from the ORM metadata (``devmetrics db init``).

    Alembic migrations remain the way to evolve an existing database.
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Created {} tables", len(Base.metadata.tables))


async def drop_tables() -> None:
    """Drop every table. Destroys all synced data."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
