"""Paged result container."""

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of items plus the total number of matching items.

    ``total_count`` counts every row matching the filter, regardless of
    paging.
    """

    page_index: int
    page_size: int
    items: List[T] = field(default_factory=list)
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total_count // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0
