"""Base entities for SQLModel tables."""

from typing import Any, Optional

from sqlalchemy import inspect
from sqlmodel import Field, SQLModel

# Key in the SQLAlchemy instance state info dict; never a table column
_IS_NEW_KEY = "datalayer.is_new"


class EntityBase(SQLModel):
    """Identity semantics shared by all entities.

    Entities compare equal when they map to the same table and carry the
    same, assigned identifier. Entities without an identifier are only
    equal to themselves.
    """

    def is_new(self) -> bool:
        """Whether the entity has not been stored yet.

        Abstract: implemented by :class:`Entity` and :class:`AssignedIdEntity`.
        """
        raise NotImplementedError

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, EntityBase):
            return NotImplemented
        own_id = getattr(self, "id", None)
        if own_id is None:
            return False
        return (
            getattr(type(self), "__table__", None)
            is getattr(type(other), "__table__", None)
            and own_id == getattr(other, "id", None)
        )

    def __hash__(self) -> int:
        own_id = getattr(self, "id", None)
        if own_id is None:
            return object.__hash__(self)
        return hash((getattr(type(self), "__table__", None), own_id))


class Entity(EntityBase):
    """Entity with a database generated integer identifier."""

    id: Optional[int] = Field(default=None, primary_key=True)

    def is_new(self) -> bool:
        return self.id in (None, 0)


class AssignedIdEntity(EntityBase):
    """Entity whose identifier is assigned by the application.

    Subclasses declare their own ``id`` primary key. Since any identifier
    value may be a real one, novelty is an explicit flag set with
    :meth:`mark_as_new`.
    """

    def is_new(self) -> bool:
        return bool(inspect(self).info.get(_IS_NEW_KEY, False))

    def mark_as_new(self) -> None:
        inspect(self).info[_IS_NEW_KEY] = True
