"""Schema helpers for table definitions."""

from typing import Any, Optional

from sqlalchemy import Index


def unique_index(*columns: Any, name: Optional[str] = None) -> Index:
    """Unique index over one or more columns, in the given order.

    Columns may be ``Column`` objects or column names; names only resolve
    inside ``__table_args__``. Without ``name`` the metadata naming
    convention applies (``ix_<table>_<column>``).

    Example:
        __table_args__ = (unique_index("first_name", "last_name", name="ix_user_full_name"),)
    """
    if not columns:
        raise ValueError("unique_index requires at least one column")
    return Index(name, *columns, unique=True)
