from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class EngineState(Generic[T]):
    """Snapshot of a pagination engine, as read by the presentation layer."""

    current_page: int = 1
    query_epoch: int = 0
    items: list[T] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    has_next_page: bool = False
    total_items: int = 0
    page_size: int = 1

    @property
    def data(self) -> list[T]:
        return self.items

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @property
    def total_pages(self) -> int:
        """Approximate page count derived from the estimated total."""
        if self.total_items <= 0:
            return 0
        return math.ceil(self.total_items / self.page_size)

    @property
    def item_range(self) -> ItemRange:
        return ItemRange.for_page(self.current_page, self.page_size, self.total_items)


@dataclass(frozen=True)
class ItemRange:
    """1-based bounds of the items shown on a page, e.g. 11 to 20 of 25."""

    start: int
    end: int
    total: int

    @classmethod
    def for_page(cls, page: int, page_size: int, total_items: int) -> ItemRange:
        if total_items <= 0:
            return cls(start=0, end=0, total=0)
        start = min((page - 1) * page_size + 1, total_items)
        end = min(page * page_size, total_items)
        return cls(start=start, end=end, total=total_items)

    def __str__(self) -> str:
        return f"Showing {self.start} to {self.end} of {self.total} items"


def page_links(
    current_page: int,
    total_pages: int,
    *,
    range_displayed: int = 3,
    margin_displayed: int = 1,
) -> list[int | None]:
    """Page numbers to render in a pager control; ``None`` marks a break.

    Keeps ``margin_displayed`` pages at either end and a window of
    ``range_displayed`` pages around the current one. Nothing is rendered
    for a single page.

    >>> page_links(5, 10)
    [1, None, 4, 5, 6, None, 10]
    """
    if total_pages <= 1:
        return []
    if total_pages <= range_displayed:
        return list(range(1, total_pages + 1))

    selected = min(max(current_page, 1), total_pages) - 1
    left_side = range_displayed / 2
    right_side = range_displayed - left_side
    if selected > total_pages - right_side:
        right_side = total_pages - selected
        left_side = range_displayed - right_side
    elif selected < left_side:
        left_side = selected
        right_side = range_displayed - left_side

    # On the first page the window does not count the current page twice
    if selected == 0 and range_displayed > 1:
        right_side -= 1

    links: list[int | None] = []
    for index in range(total_pages):
        page = index + 1
        if page <= margin_displayed or page > total_pages - margin_displayed:
            links.append(page)
        elif selected - left_side <= index <= selected + right_side:
            links.append(page)
        elif links and links[-1] is not None:
            links.append(None)
    return links
