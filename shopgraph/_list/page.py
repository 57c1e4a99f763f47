from __future__ import annotations
__all__ = [
    "Page",
    "PageableItems",
]
import functools
import math
import typing


class PageableItems[T](typing.Protocol):
    def count(self) -> int: ...
    def __getitem__(self, val: slice) -> typing.Iterable[T]: ...


class Page[T]:
    """
    A single page of items. Fetches one extra item to find out whether there is a next page.
    Works with anything that supports `count()` and slicing, e.g. a Django QuerySet.
    """

    def __init__(self, all_items: PageableItems[T], /, page: int, size: int) -> None:
        self._all_items = all_items
        self._page_num = page
        self._page_size = size

    @functools.cached_property
    def _items_plus_one(self) -> list[T]:
        start = (self._page_num - 1) * self._page_size
        return list(self._all_items[start:start + self._page_size + 1])

    @property
    def items(self) -> list[T]:
        """Return the items on this page."""
        return self._items_plus_one[:self._page_size]

    @property
    def page_size(self) -> int:
        """Return the number of items per page."""
        return self._page_size

    @property
    def current_page(self) -> int:
        """Return the current page number."""
        return self._page_num

    @functools.cached_property
    def total_items_count(self) -> int:
        """Return the total number of items."""
        return self._all_items.count()

    @property
    def total_pages_count(self) -> int:
        """Return the total number of pages."""
        return math.ceil(self.total_items_count / self.page_size)

    @property
    def has_next_page(self) -> bool:
        """Return True if there is a next page."""
        return len(self._items_plus_one) > self._page_size

    @property
    def has_previous_page(self) -> bool:
        """Return True if there is a previous page."""
        return self._page_num > 1

    def evaluate(self) -> Page[T]:
        """Run both queries (items and count) right away, e.g. inside `sync_to_async`."""
        _ = self._items_plus_one, self.total_items_count
        return self
