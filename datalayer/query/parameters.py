"""Query parameters - filter, sort and page clauses for repository reads."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from sqlalchemy.sql import ColumnElement

T = TypeVar("T")

# A SQL expression, or a callable building one from the entity class
Expression = Union[ColumnElement[Any], Callable[[type], Any]]


class SortOrder(str, Enum):
    """Direction of a sort clause."""

    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class FilterRule:
    """Boolean expression rows must satisfy.

    Attributes:
        expression: e.g. ``Product.price > 10`` or
            ``lambda m: m.name.startswith("a")``
    """

    expression: Optional[Expression] = None


@dataclass(frozen=True)
class SortRule:
    """Single sort key with direction.

    Attributes:
        expression: Column or expression to order by, or a callable
            returning one for the entity class
        order: Sort direction (default: ascending)
    """

    expression: Optional[Expression] = None
    order: SortOrder = SortOrder.ASCENDING


@dataclass(frozen=True)
class PageRule:
    """Zero-based page descriptor."""

    index: int = 0
    size: int = 0

    @property
    def is_valid(self) -> bool:
        return self.size > 0 and self.index >= 0

    @property
    def offset(self) -> int:
        return self.size * self.index


@dataclass(frozen=True)
class QueryParameters(Generic[T]):
    """Filter, sort and page clauses; each one is optional and independent."""

    filter: Optional[FilterRule] = None
    sort: Optional[SortRule] = None
    page: Optional[PageRule] = None
