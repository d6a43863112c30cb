"""Projection of entity queries onto read models."""

import logging
from typing import Any, Protocol, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.engine import Row
from sqlalchemy.sql import Select

from .exceptions import MappingError

logger = logging.getLogger(__name__)

M = TypeVar("M")


class DataMapper(Protocol):
    """Maps a composed entity statement to a projection model.

    Implementations must keep the statement's filter, order and limits
    intact: only the selected columns may change.
    """

    def project(self, statement: Select, model: Type[M]) -> Select:
        ...

    def to_model(self, row: Row, model: Type[M]) -> M:
        ...


class ColumnMapper:
    """Default mapper selecting the entity columns named like the model fields.

    Works with any pydantic model, including non-table SQLModel classes
    such as ``ProductRead``.
    """

    def project(self, statement: Select, model: Type[M]) -> Select:
        entity = statement.column_descriptions[0]["entity"]
        if entity is None:
            raise MappingError("Statement does not select a mapped entity", model)

        column_attrs = inspect(entity).column_attrs
        columns = [
            getattr(entity, name) for name in _field_names(model) if name in column_attrs
        ]
        if not columns:
            raise MappingError(
                f"{model.__name__} shares no column with {entity.__name__}", model
            )

        logger.debug(
            f"Projecting {entity.__name__} onto {model.__name__} "
            f"({len(columns)} columns)"
        )
        return statement.with_only_columns(*columns)

    def to_model(self, row: Row, model: Type[M]) -> M:
        return model.model_validate(dict(row._mapping))  # type: ignore[attr-defined]


def _field_names(model: Any) -> list:
    if isinstance(model, type) and issubclass(model, BaseModel):
        return list(model.model_fields)
    raise MappingError(f"{model!r} is not a pydantic model", model)
