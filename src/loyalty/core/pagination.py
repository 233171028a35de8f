import math
from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def count_pages(total: int, page_size: int) -> int:
    """Number of pages for `total` items; an empty list still has one page."""
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int) -> int:
    """Clamp a requested page number into `[1, count_pages(total, page_size)]`."""
    return min(max(page, 1), count_pages(total, page_size))


class Page(BaseModel, Generic[T]):
    """One locally sliced page of an already fetched list."""

    items: list[T] = Field(..., description="Items on the current page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    page: int = Field(..., description="Current page number, starting at 1", ge=1)
    page_size: int = Field(..., description="Maximum items per page", ge=1)

    @property
    def total_pages(self) -> int:
        return count_pages(self.total, self.page_size)

    @property
    def has_next(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice `items` to the requested page, clamping the page number first."""
    page = clamp_page(page, len(items), page_size)
    start = (page - 1) * page_size
    return Page(items=list(items[start : start + page_size]), total=len(items), page=page, page_size=page_size)
