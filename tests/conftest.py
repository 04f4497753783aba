"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off real infrastructure
    - Cursor Fixtures: deterministic secret and clock
    - Database Fixtures: in-memory SQLite via aiosqlite
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from teamflow_tasks.core.pagination import CursorCodec
from teamflow_tasks.core.settings import clear_all_settings_cache
from tests.utils import BASE_TIME, FrozenClock

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("PAGINATION_CURSOR_SECRET", "test-cursor-secret")
os.environ.setdefault("LOG_JSON_LOGS", "false")

TEST_SECRET = b"test-cursor-secret"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings (and the codec built from them) for every test."""
    from teamflow_tasks.features.tasks.dependencies import get_cursor_codec

    clear_all_settings_cache()
    get_cursor_codec.cache_clear()
    yield
    clear_all_settings_cache()
    get_cursor_codec.cache_clear()


# ============================================================================
# Cursor Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FrozenClock:
    """Clock pinned to BASE_TIME; call ``advance`` to move it."""
    return FrozenClock(BASE_TIME)


@pytest.fixture
def codec(clock: FrozenClock) -> CursorCodec:
    """Cursor codec with a fixed secret and the frozen clock."""
    return CursorCodec(TEST_SECRET, clock=clock)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session over a freshly created schema.

    Example:
        async def test_find(db_session):
            db_session.add_all(sequential_tasks(3))
            await db_session.commit()
    """
    from teamflow_tasks.core.database.base import Base
    from teamflow_tasks.features.tasks import models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app() -> FastAPI:
    """Create FastAPI application for testing."""
    from teamflow_tasks.app.main import create_app

    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app via ASGITransport."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
