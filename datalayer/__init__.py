"""Generic repositories over SQLAlchemy/SQLModel.

Typical use:

    from datalayer import FilterRule, QueryParameters, Repository

    with context_factory(engine)() as context:
        repo = Repository(context, Product)
        cheap = repo.get_list(QueryParameters(filter=FilterRule(Product.price < 5)))
"""

from .db import AsyncRepository, DbContext, EntityState, Repository, transaction_scope
from .exceptions import (
    DataLayerError,
    EntityNotFoundError,
    InvalidQueryParametersError,
    MappingError,
)
from .mapping import ColumnMapper, DataMapper
from .models import AssignedIdEntity, Entity, EntityBase
from .query import (
    FilterRule,
    PagedResult,
    PageRule,
    QueryParameters,
    SortOrder,
    SortRule,
)

__all__ = [
    "AssignedIdEntity",
    "AsyncRepository",
    "ColumnMapper",
    "DataLayerError",
    "DataMapper",
    "DbContext",
    "Entity",
    "EntityBase",
    "EntityNotFoundError",
    "EntityState",
    "FilterRule",
    "InvalidQueryParametersError",
    "MappingError",
    "PagedResult",
    "PageRule",
    "QueryParameters",
    "Repository",
    "SortOrder",
    "SortRule",
    "transaction_scope",
]
