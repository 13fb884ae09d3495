from pagewalk.core.query import (
    Filter,
    FilterOperator,
    QuerySpec,
    SortDirection,
    between_dates,
)
from pagewalk.core.cursor_cache import PageCursorCache
from pagewalk.core.counting import CountEstimator, CountStrategy
from pagewalk.core.engine import PaginationEngine
from pagewalk.core.feed import CursorFeed, FeedState
from pagewalk.core.record import Record, _record_registry
from pagewalk.core.search import apply_search
from pagewalk.core.sessions import EngineRegistry

__all__ = [
    "Filter",
    "FilterOperator",
    "QuerySpec",
    "SortDirection",
    "between_dates",
    "PageCursorCache",
    "CountEstimator",
    "CountStrategy",
    "PaginationEngine",
    "CursorFeed",
    "FeedState",
    "Record",
    "apply_search",
    "EngineRegistry",
    "_record_registry",
]
