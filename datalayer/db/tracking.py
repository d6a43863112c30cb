"""Change-tracking state of entities within a persistence context."""

from enum import Enum
from typing import Any

from sqlalchemy import inspect


class EntityState(str, Enum):
    """Tracking state of an entity relative to one context."""

    DETACHED = "detached"
    ADDED = "added"
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    DELETED = "deleted"


def get_entity_state(session: Any, entity: Any) -> EntityState:
    """Derive the tracking state of ``entity`` from SQLAlchemy's instance state.

    Args:
        session: Sync or async session (async sessions are unwrapped)
        entity: Mapped instance

    Returns:
        The entity state; entities tracked by another session are DETACHED
    """
    sync_session = getattr(session, "sync_session", session)
    state = inspect(entity)

    if state.transient or state.detached or state.session is not sync_session:
        return EntityState.DETACHED
    if state.pending:
        return EntityState.ADDED
    if state.deleted or entity in sync_session.deleted:
        return EntityState.DELETED
    if sync_session.is_modified(entity):
        return EntityState.MODIFIED
    return EntityState.UNCHANGED
