"""Entity base classes."""

from .base import AssignedIdEntity, Entity, EntityBase

__all__ = [
    "AssignedIdEntity",
    "Entity",
    "EntityBase",
]
