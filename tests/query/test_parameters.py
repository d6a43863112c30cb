"""Tests for query parameters and paged results."""

import dataclasses

import pytest

from datalayer.query import PagedResult, PageRule, QueryParameters, SortOrder, SortRule


@pytest.mark.parametrize(
    "index, size, valid",
    [
        (0, 1, True),
        (3, 20, True),
        (0, 0, False),
        (0, -1, False),
        (-1, 10, False),
    ],
)
def test_page_rule_validity(index: int, size: int, valid: bool) -> None:
    """A page is valid iff size > 0 and index >= 0."""
    assert PageRule(index=index, size=size).is_valid is valid


def test_page_rule_offset() -> None:
    """Offset should be size * index."""
    assert PageRule(index=3, size=25).offset == 75


def test_sort_rule_default_order() -> None:
    """Sort order should default to ascending."""
    assert SortRule("name").order == SortOrder.ASCENDING


def test_query_parameters_are_immutable() -> None:
    """Query parameters should not change after construction."""
    params = QueryParameters(page=PageRule(index=0, size=10))

    with pytest.raises(dataclasses.FrozenInstanceError):
        params.page = None  # type: ignore[misc]


def test_paged_result_navigation() -> None:
    """Should derive page count and neighbours from the totals."""
    first = PagedResult(page_index=0, page_size=2, items=["a", "b"], total_count=5)
    last = PagedResult(page_index=2, page_size=2, items=["e"], total_count=5)

    assert first.total_pages == 3
    assert first.has_next
    assert not first.has_previous
    assert not last.has_next
    assert last.has_previous


def test_paged_result_empty() -> None:
    """An empty result should have no pages."""
    result = PagedResult(page_index=0, page_size=10)

    assert result.items == []
    assert result.total_pages == 0
    assert not result.has_next
