"""Query parameters and their translation into SQL statements."""

from .composer import compose, compose_for_count, resolve_expression
from .paged_result import PagedResult
from .parameters import FilterRule, PageRule, QueryParameters, SortOrder, SortRule

__all__ = [
    "FilterRule",
    "PagedResult",
    "PageRule",
    "QueryParameters",
    "SortOrder",
    "SortRule",
    "compose",
    "compose_for_count",
    "resolve_expression",
]
