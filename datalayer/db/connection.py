"""Engines and persistence context factories."""

import logging
from functools import lru_cache
from typing import Any, AsyncGenerator, Generator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import create_engine

from .config import settings
from .context import AsyncDbContext, DbContext

logger = logging.getLogger(__name__)


def create_db_engine(url: Optional[str] = None, **kwargs: Any) -> Engine:
    """Create a synchronous engine (defaults to the configured URL)."""
    kwargs.setdefault("echo", settings.sql_echo)
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url or settings.sqlalchemy_url, **kwargs)


def create_async_db_engine(url: Optional[str] = None, **kwargs: Any) -> AsyncEngine:
    """Create an asynchronous engine (defaults to the configured async URL)."""
    kwargs.setdefault("echo", settings.sql_echo)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url or settings.async_sqlalchemy_url, **kwargs)


def context_factory(
    engine: Engine, schema_name: Optional[str] = None
) -> "sessionmaker[DbContext]":
    """Session maker producing :class:`DbContext` instances."""
    return sessionmaker(
        bind=engine,
        class_=DbContext,
        schema_name=schema_name,
        expire_on_commit=False,
    )


def async_context_factory(
    engine: AsyncEngine, schema_name: Optional[str] = None
) -> "async_sessionmaker[AsyncDbContext]":
    """Session maker producing :class:`AsyncDbContext` instances."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncDbContext,
        schema_name=schema_name,
        expire_on_commit=False,
    )


@lru_cache
def get_context_factory() -> "sessionmaker[DbContext]":
    """Lazily built factory for the configured database."""
    return context_factory(create_db_engine(), settings.schema_name)


@lru_cache
def get_async_context_factory() -> "async_sessionmaker[AsyncDbContext]":
    """Lazily built async factory for the configured database."""
    return async_context_factory(create_async_db_engine(), settings.schema_name)


def get_db() -> Generator[DbContext, None, None]:
    """Yield a context per unit of work.

    Commits when the consumer finishes, rolls back on error, always closes.
    """
    context = get_context_factory()()
    try:
        yield context
        context.commit()
    except Exception:
        logger.warning("Unit of work failed, rolling back")
        context.rollback()
        raise
    finally:
        context.close()


async def get_async_db() -> AsyncGenerator[AsyncDbContext, None]:
    """Async counterpart of :func:`get_db`."""
    context = get_async_context_factory()()
    try:
        yield context
        await context.commit()
    except Exception:
        logger.warning("Unit of work failed, rolling back")
        await context.rollback()
        raise
    finally:
        await context.close()
