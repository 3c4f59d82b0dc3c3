"""Read-only PostgreSQL access through SQLAlchemy async sessions.

The feed service never writes: connections are opened with
``default_transaction_read_only`` and a statement timeout so a slow feed
query cannot hold a pooled connection indefinitely.

Usage:
    from app.database.connection import get_session
    from app.database.orm import Dashboard

    async with get_session() as session:
        dashboard = await session.get(Dashboard, 42)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings
from app.core.logging import get_logger


logger = get_logger("database")

_ASYNC_SCHEMES = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}


def get_async_database_url(url: str) -> str:
    """Point a plain ``postgresql://`` URL at the asyncpg driver."""
    for prefix, async_prefix in _ASYNC_SCHEMES.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix):]
    return url


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_sqlalchemy_engine() -> AsyncEngine:
    """Create the shared engine on first use."""
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    _engine = create_async_engine(
        get_async_database_url(settings.database_url),
        pool_size=settings.db_pool_min_size,
        max_overflow=settings.db_pool_max_size - settings.db_pool_min_size,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {
                "application_name": "analystfeed",
                "default_transaction_read_only": "on",
                "statement_timeout": str(settings.db_statement_timeout_ms),
            },
        },
    )
    _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        f"Database engine ready (pool {settings.db_pool_min_size}-{settings.db_pool_max_size})"
    )
    return _engine


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a session; any error rolls the transaction back."""
    if _session_factory is None:
        await init_sqlalchemy_engine()

    async with _session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def close_sqlalchemy_engine() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine disposed")


async def ping_database() -> bool:
    """Run ``SELECT 1`` against the database."""
    async with get_session() as session:
        await session.execute(text("SELECT 1"))
    return True
