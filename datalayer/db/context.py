"""Persistence contexts - sessions bound to a database schema.

A context is the unit of work: it tracks entity changes and commits them.
Repositories only register changes on it; opening, committing and closing
belong to the caller.
"""

import logging
from typing import Any, Optional

from sqlalchemy import event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

logger = logging.getLogger(__name__)

# Key in Session.info collecting instances deleted by a flush
_FLUSHED_DELETES_KEY = "datalayer.flushed_deletes"


def _schema_bound(bind: Any, schema_name: Optional[str]) -> Any:
    if bind is None or schema_name is None:
        return bind
    return bind.execution_options(schema_translate_map={None: schema_name})


class DbContext(Session):
    """Session whose unqualified tables resolve to ``schema_name``.

    Entities whose deletion was committed are detached from the context,
    whether or not it expires instances on commit.
    """

    def __init__(
        self,
        bind: Optional[Engine] = None,
        schema_name: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(bind=_schema_bound(bind, schema_name), **kwargs)
        self.schema_name = schema_name


@event.listens_for(DbContext, "persistent_to_deleted")
def _collect_flushed_delete(session: Session, instance: Any) -> None:
    session.info.setdefault(_FLUSHED_DELETES_KEY, []).append(instance)


@event.listens_for(DbContext, "after_transaction_end")
def _detach_committed_deletes(
    session: Session, transaction: SessionTransaction
) -> None:
    if transaction.parent is not None:
        return
    # Rolled back deletions are persistent again; only committed ones remain deleted
    for instance in session.info.pop(_FLUSHED_DELETES_KEY, []):
        if inspect(instance).deleted:
            session.expunge(instance)
            logger.debug(f"Detached deleted {type(instance).__name__}")


class AsyncDbContext(AsyncSession):
    """Async counterpart of :class:`DbContext`."""

    sync_session_class = DbContext

    def __init__(
        self,
        bind: Optional[AsyncEngine] = None,
        schema_name: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(bind=_schema_bound(bind, schema_name), **kwargs)
        self.schema_name = schema_name
