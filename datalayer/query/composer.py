"""Translate query parameters into SQLAlchemy statements.

Clauses are always applied in the same order: filter, then sort, then page.
"""

from typing import Any, Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.sql import ClauseElement, Select

from .parameters import FilterRule, QueryParameters, SortOrder


def resolve_expression(expression: Any, model: type) -> Any:
    """Return a SQL expression, calling ``expression(model)`` if it is a builder."""
    if isinstance(expression, ClauseElement) or hasattr(
        expression, "__clause_element__"
    ):
        return expression
    if callable(expression):
        return expression(model)
    return expression


def _apply_filter(
    statement: Select, model: type, rule: Optional[FilterRule]
) -> Select:
    if rule is None or rule.expression is None:
        return statement
    return statement.where(resolve_expression(rule.expression, model))


def compose(model: type, query_parameters: Optional[QueryParameters] = None) -> Select:
    """Build the select statement for a read.

    Args:
        model: Mapped entity class
        query_parameters: Optional filter/sort/page clauses

    Returns:
        ``select(model)`` with the present clauses applied
    """
    statement = select(model)
    if query_parameters is None:
        return statement

    statement = _apply_filter(statement, model, query_parameters.filter)

    sort = query_parameters.sort
    if sort is not None and sort.expression is not None:
        key = resolve_expression(sort.expression, model)
        if sort.order == SortOrder.DESCENDING:
            statement = statement.order_by(desc(key))
        else:
            statement = statement.order_by(asc(key))

    page = query_parameters.page
    if page is not None and page.is_valid:
        statement = statement.offset(page.offset).limit(page.size)

    return statement


def compose_for_count(
    model: type, query_parameters: Optional[QueryParameters] = None
) -> Select:
    """Build a ``COUNT(*)`` statement; only the filter clause is applied."""
    statement = select(func.count()).select_from(model)
    if query_parameters is None:
        return statement
    return _apply_filter(statement, model, query_parameters.filter)
