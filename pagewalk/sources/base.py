from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, runtime_checkable

from pagewalk.core.query import Filter, QuerySpec, SortDirection
from pagewalk.utils.types import Cursor, T


@dataclass(frozen=True)
class FetchRequest:
    """One forward-only page request against a collection source."""

    order_by_field: str
    order_direction: SortDirection
    filters: tuple[Filter, ...]
    page_size: int
    after_cursor: Cursor | None = None

    @classmethod
    def from_spec(cls, spec: QuerySpec, after_cursor: Cursor | None = None, page_size: int | None = None) -> FetchRequest:
        return cls(
            order_by_field=spec.order_by_field,
            order_direction=spec.order_direction,
            filters=spec.filters,
            page_size=page_size or spec.page_size,
            after_cursor=after_cursor,
        )


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """An ordered batch plus the opaque cursor of its last item."""

    items: list[T] = field(default_factory=list)
    last_cursor: Cursor | None = None


@runtime_checkable
class CollectionSource(Protocol[T]):
    """Ordered, cursor-paginated view of a remote collection.

    Implementations must keep ordering stable for a fixed order field and
    direction, return at most ``page_size`` items, and raise
    :class:`~pagewalk.utils.exceptions.TransportError` for backend failures.
    """

    async def fetch(self, request: FetchRequest) -> FetchResult[T]: ...


@runtime_checkable
class CountableSource(Protocol):
    """A source that can count matching items on the server."""

    async def count(self, filters: tuple[Filter, ...]) -> int: ...


def describe_filters(filters: tuple[Filter, ...]) -> dict[str, Any]:
    """Flatten filters into a dict for logs and query events."""
    return {f"{f.field} {f.operator.value}": f.value for f in filters}
