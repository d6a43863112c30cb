"""Errors raised by the data layer itself.

Database errors raised by SQLAlchemy are never wrapped; they reach the
caller unchanged.
"""

from typing import Any, Optional


class DataLayerError(Exception):
    """Base class for data layer errors."""


class InvalidQueryParametersError(DataLayerError, ValueError):
    """Query parameters are missing or unusable for the requested operation."""

    def __init__(self, message: str, argument: str):
        super().__init__(message)
        self.argument = argument


class EntityNotFoundError(DataLayerError, LookupError):
    """No entity matches the given identifier."""

    def __init__(self, model: type, id: Any):
        super().__init__(f"{model.__name__} with id {id!r} not found")
        self.model = model
        self.id = id


class MappingError(DataLayerError):
    """A projection model cannot be mapped from an entity."""

    def __init__(self, message: str, model: Optional[type] = None):
        super().__init__(message)
        self.model = model
