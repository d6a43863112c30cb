"""Database access: contexts, repositories and transaction scopes."""

from .connection import (
    async_context_factory,
    context_factory,
    create_async_db_engine,
    create_db_engine,
    get_async_db,
    get_db,
)
from .context import AsyncDbContext, DbContext
from .repositories import AsyncRepository, Repository
from .tracking import EntityState, get_entity_state
from .transaction import async_transaction_scope, transaction_scope

__all__ = [
    "AsyncDbContext",
    "AsyncRepository",
    "DbContext",
    "EntityState",
    "Repository",
    "async_context_factory",
    "async_transaction_scope",
    "context_factory",
    "create_async_db_engine",
    "create_db_engine",
    "get_async_db",
    "get_db",
    "get_entity_state",
    "transaction_scope",
]
