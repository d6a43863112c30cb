"""Shared fixtures: in-memory SQLite engines and persistence contexts.

Every test gets a fresh database. Tables come from ``SQLModel.metadata``,
which holds every table model defined by the collected test modules.
"""

from typing import AsyncGenerator, Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from datalayer.db.context import AsyncDbContext, DbContext


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def context(engine: Engine) -> Generator[DbContext, None, None]:
    """Persistence context that keeps attribute values after commit."""
    with DbContext(engine, expire_on_commit=False) as db_context:
        yield db_context
        db_context.rollback()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory aiosqlite engine with all tables."""
    eng = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def async_context(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncDbContext, None]:
    """Async persistence context that keeps attribute values after commit."""
    async with AsyncDbContext(async_engine, expire_on_commit=False) as db_context:
        yield db_context
        await db_context.rollback()
