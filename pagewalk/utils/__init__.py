from pagewalk.utils.exceptions import (
    PagewalkError,
    TransportError,
    NavigationError,
    StaleResponseDiscarded,
    NotConnected,
)
from pagewalk.utils.pagination import EngineState, ItemRange, page_links
from pagewalk.utils.types import (
    DocumentData,
    FilterSpec,
    SortSpec,
    Cursor,
    merge_filters,
    DEFAULT_PAGE_SIZE,
)

__all__ = [
    "PagewalkError",
    "TransportError",
    "NavigationError",
    "StaleResponseDiscarded",
    "NotConnected",
    "EngineState",
    "ItemRange",
    "page_links",
    "DocumentData",
    "FilterSpec",
    "SortSpec",
    "Cursor",
    "merge_filters",
    "DEFAULT_PAGE_SIZE",
]
