"""Database session management with the psycopg3 async driver.

The engine is created lazily on first use so importing the application
never opens connections or requires a configured DSN.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from teamflow_tasks.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Create (once) the process-wide async engine."""
    db_settings = get_db_settings()
    engine = create_async_engine(
        db_settings.get_sqlalchemy_url(),
        **db_settings.sqlalchemy_engine_kwargs(),
    )
    logger.info("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the process-wide engine."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield a session for one unit of work.

    Reads only; the session is rolled back on exit so no transaction is
    left open, including when the caller is cancelled mid-query.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def close_database() -> None:
    """Dispose the engine if it was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_engine.cache_clear()
        get_session_factory.cache_clear()
        logger.info("Database engine disposed")
