from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Iterable

from pagewalk.utils.types import DEFAULT_PAGE_SIZE


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class FilterOperator(str, Enum):
    """Comparison operators a collection source can push down to the server."""

    EQUALS = "=="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"


@dataclass(frozen=True)
class Filter:
    """A single ``field operator value`` predicate."""

    field: str
    operator: FilterOperator
    value: Any

    def __post_init__(self) -> None:
        # Accept the symbolic form, e.g. Filter("status", "==", "approved")
        if not isinstance(self.operator, FilterOperator):
            object.__setattr__(self, "operator", FilterOperator(self.operator))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))


def _coerce_filters(filters: Iterable[Filter | tuple[str, str, Any]]) -> tuple[Filter, ...]:
    coerced = []
    for item in filters:
        if isinstance(item, Filter):
            coerced.append(item)
        else:
            coerced.append(Filter(*item))
    return tuple(coerced)


@dataclass(frozen=True)
class QuerySpec:
    """Immutable description of what is being browsed.

    Two specs are *equivalent* when everything except ``search_term`` matches.
    Any non-equivalent change invalidates cached page cursors.
    """

    order_by_field: str
    order_direction: SortDirection = SortDirection.ASCENDING
    filters: tuple[Filter, ...] = ()
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str = ""
    search_fields: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if not isinstance(self.order_direction, SortDirection):
            object.__setattr__(self, "order_direction", SortDirection(self.order_direction))
        object.__setattr__(self, "filters", _coerce_filters(self.filters))
        object.__setattr__(self, "search_fields", frozenset(self.search_fields))

    @classmethod
    def for_record(cls, record_class: type, **overrides: Any) -> QuerySpec:
        """Build a spec from the inner ``Settings`` of a Record subclass."""
        from pagewalk.utils.settings import SettingsResolver

        order_field, direction = SettingsResolver.get_ordering(record_class)
        defaults: dict[str, Any] = {
            "order_by_field": order_field,
            "order_direction": direction,
            "page_size": SettingsResolver.get_page_size(record_class),
            "search_fields": SettingsResolver.get_search_fields(record_class),
        }
        defaults.update(overrides)
        return cls(**defaults)

    @property
    def search_active(self) -> bool:
        return bool(self.search_term.strip()) and bool(self.search_fields)

    def equivalent(self, other: QuerySpec | None) -> bool:
        """Compare every field except ``search_term``."""
        if other is None:
            return False
        return replace(self, search_term="") == replace(other, search_term="")

    def with_search(self, term: str) -> QuerySpec:
        return replace(self, search_term=term)

    def with_filters(self, *filters: Filter | tuple[str, str, Any]) -> QuerySpec:
        return replace(self, filters=_coerce_filters(filters))

    def with_order(self, field_name: str, direction: SortDirection | str | None = None) -> QuerySpec:
        return replace(
            self,
            order_by_field=field_name,
            order_direction=direction or self.order_direction,
        )


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def between_dates(field_name: str, start: date | str, end: date | str) -> tuple[Filter, Filter]:
    """Inclusive date range over a field that stores ISO-8601 strings.

    The end bound is pushed to the last millisecond of ``end`` so a whole
    day is covered.
    """
    start_at = datetime.combine(_as_date(start), time.min)
    end_at = datetime.combine(_as_date(end), time(23, 59, 59, 999000))
    if end_at < start_at:
        raise ValueError("end date must not be before start date")
    return (
        Filter(field_name, FilterOperator.GREATER_OR_EQUAL, start_at.isoformat(timespec="milliseconds")),
        Filter(field_name, FilterOperator.LESS_OR_EQUAL, end_at.isoformat(timespec="milliseconds")),
    )
