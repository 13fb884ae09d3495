from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from pagewalk.core.query import Filter, FilterOperator, SortDirection
from pagewalk.lifecycle.observability import track_query
from pagewalk.sources.base import FetchRequest, FetchResult, describe_filters
from pagewalk.utils.types import get_field

logger = logging.getLogger(__name__)

_MISSING = object()


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(actual: Any, expected: Any) -> bool:
        if actual is _MISSING or actual is None:
            return False
        try:
            return op(actual, expected)
        except TypeError:
            return False

    return check


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple, set))


def _whole_value(value: Any) -> Any:
    # Filter values arrive as tuples; stored arrays are usually lists
    return tuple(value) if isinstance(value, list) else value


_PREDICATES: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUALS: lambda actual, expected: actual is not _MISSING
    and _whole_value(actual) == _whole_value(expected),
    FilterOperator.NOT_EQUALS: lambda actual, expected: actual is not _MISSING
    and _whole_value(actual) != _whole_value(expected),
    FilterOperator.LESS_THAN: _compare(lambda a, b: a < b),
    FilterOperator.LESS_OR_EQUAL: _compare(lambda a, b: a <= b),
    FilterOperator.GREATER_THAN: _compare(lambda a, b: a > b),
    FilterOperator.GREATER_OR_EQUAL: _compare(lambda a, b: a >= b),
    FilterOperator.IN: lambda actual, expected: actual is not _MISSING and actual in expected,
    FilterOperator.NOT_IN: lambda actual, expected: actual is not _MISSING and actual not in expected,
    FilterOperator.ARRAY_CONTAINS: lambda actual, expected: _is_array(actual) and expected in actual,
    FilterOperator.ARRAY_CONTAINS_ANY: lambda actual, expected: _is_array(actual)
    and any(value in actual for value in expected),
}


def matches_filter(item: Any, condition: Filter) -> bool:
    actual = get_field(item, condition.field, _MISSING)
    return _PREDICATES[condition.operator](actual, condition.value)


class MemoryCollectionSource:
    """In-process collection with the same contract as a remote store.

    Items lacking the order field, or holding null in it, are left out of
    ordered results, the way document stores drop documents that cannot be
    placed in an index. Ties on the order field are broken by item id, so
    cursors stay stable. Dotted order and filter fields read nested values.

    Every request is recorded in ``requests`` so callers can tell whether a
    navigation reached the source at all.
    """

    def __init__(self, items: Iterable[Any] = (), *, name: str = "memory", id_field: str = "id") -> None:
        self.name = name
        self._id_field = id_field
        self._items: list[Any] = list(items)
        self.requests: list[FetchRequest] = []

    # --- Mutation ---

    def add(self, item: Any) -> None:
        self._items.append(item)

    def remove(self, item_id: Any) -> None:
        self._items = [
            item for item in self._items if get_field(item, self._id_field) != item_id
        ]

    def __len__(self) -> int:
        return len(self._items)

    # --- CollectionSource ---

    async def fetch(self, request: FetchRequest) -> FetchResult[Any]:
        self.requests.append(request)
        async with track_query("fetch", self.name, "memory", filter=describe_filters(request.filters)) as ctx:
            ordered = self._ordered(request.order_by_field, request.order_direction, request.filters)
            if request.after_cursor is not None:
                ordered = [
                    item for item in ordered
                    if self._is_after(self._key(item, request.order_by_field), request.after_cursor, request.order_direction)
                ]
            batch = ordered[: request.page_size]
            ctx["result_count"] = len(batch)

        last_cursor = self._key(batch[-1], request.order_by_field) if batch else None
        logger.debug(f"Fetched {len(batch)} items from '{self.name}' after {request.after_cursor!r}")
        return FetchResult(items=[self._copy(item) for item in batch], last_cursor=last_cursor)

    async def count(self, filters: tuple[Filter, ...]) -> int:
        async with track_query("count", self.name, "memory", filter=describe_filters(filters)) as ctx:
            total = sum(1 for item in self._items if all(matches_filter(item, f) for f in filters))
            ctx["result_count"] = total
        return total

    # --- Internal ---

    def _key(self, item: Any, order_by_field: str) -> tuple[Any, Any]:
        return (get_field(item, order_by_field), get_field(item, self._id_field))

    def _ordered(self, order_by_field: str, direction: SortDirection, filters: tuple[Filter, ...]) -> list[Any]:
        selected = [
            item for item in self._items
            if get_field(item, order_by_field, _MISSING) not in (_MISSING, None)
            and all(matches_filter(item, f) for f in filters)
        ]
        return sorted(
            selected,
            key=lambda item: self._sort_key(self._key(item, order_by_field)),
            reverse=direction is SortDirection.DESCENDING,
        )

    @staticmethod
    def _sort_key(key: tuple[Any, Any]) -> tuple[Any, bool, Any]:
        # Items without an id sort after their ties instead of comparing None
        value, item_id = key
        return (value, item_id is None, item_id)

    @classmethod
    def _is_after(cls, key: tuple[Any, Any], cursor: tuple[Any, Any], direction: SortDirection) -> bool:
        if direction is SortDirection.DESCENDING:
            return cls._sort_key(key) < cls._sort_key(cursor)
        return cls._sort_key(key) > cls._sort_key(cursor)

    @staticmethod
    def _copy(item: Any) -> Any:
        return dict(item) if isinstance(item, dict) else item
