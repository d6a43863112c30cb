"""Transaction scopes with the project's default isolation level."""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransactionOrigin

from .config import settings

logger = logging.getLogger(__name__)


def _in_explicit_transaction(session: Session) -> bool:
    """True if a transaction was begun on purpose, not by autobegin on a read."""
    if session.in_nested_transaction():
        return True
    transaction = session.get_transaction()
    return (
        transaction is not None
        and transaction.origin is not SessionTransactionOrigin.AUTOBEGIN
    )


@contextmanager
def transaction_scope(
    session: Session, isolation_level: Optional[str] = None
) -> Iterator[Session]:
    """Run a block inside a transaction.

    Joins the session's transaction if one was begun explicitly, for example
    by an enclosing scope. Otherwise begins a transaction at
    ``isolation_level`` (default: configured, READ COMMITTED) that commits
    when the block exits and rolls back if it raises. A transaction the
    session began implicitly for earlier reads is committed first, so the
    new one gets the isolation level. No timeout is applied.

    Example:
        with transaction_scope(context):
            repo.insert(order)
            repo.update(customer)
    """
    if _in_explicit_transaction(session):
        logger.debug("Joining active transaction")
        yield session
        return

    if session.in_transaction():
        logger.debug("Committing implicit transaction before scope")
        session.commit()

    level = isolation_level or settings.transaction_isolation_level
    with session.begin():
        session.connection(execution_options={"isolation_level": level})
        logger.debug(f"Began transaction at {level}")
        yield session


@asynccontextmanager
async def async_transaction_scope(
    session: AsyncSession, isolation_level: Optional[str] = None
) -> AsyncIterator[AsyncSession]:
    """Async counterpart of :func:`transaction_scope`."""
    if _in_explicit_transaction(session.sync_session):
        logger.debug("Joining active transaction")
        yield session
        return

    if session.in_transaction():
        logger.debug("Committing implicit transaction before scope")
        await session.commit()

    level = isolation_level or settings.transaction_isolation_level
    async with session.begin():
        await session.connection(execution_options={"isolation_level": level})
        logger.debug(f"Began transaction at {level}")
        yield session
