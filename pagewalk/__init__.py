from pagewalk.core import (
    CountEstimator,
    CountStrategy,
    CursorFeed,
    EngineRegistry,
    FeedState,
    Filter,
    FilterOperator,
    PageCursorCache,
    PaginationEngine,
    QuerySpec,
    Record,
    SortDirection,
    between_dates,
)
from pagewalk.sources import (
    CollectionSource,
    CountableSource,
    FetchRequest,
    FetchResult,
    MemoryCollectionSource,
    MongoCollectionSource,
    connect,
    disconnect,
    get_client,
    get_database,
)
from pagewalk.lifecycle import (
    enable_tracing,
    disable_tracing,
    QueryEvent,
    add_listener,
)
from pagewalk.utils import (
    PagewalkError,
    TransportError,
    NavigationError,
    StaleResponseDiscarded,
    NotConnected,
    EngineState,
    ItemRange,
    page_links,
)

__all__ = [
    # Core
    "PaginationEngine",
    "CursorFeed",
    "FeedState",
    "QuerySpec",
    "Filter",
    "FilterOperator",
    "SortDirection",
    "between_dates",
    "PageCursorCache",
    "CountEstimator",
    "CountStrategy",
    "EngineRegistry",
    "Record",
    # Sources
    "CollectionSource",
    "CountableSource",
    "FetchRequest",
    "FetchResult",
    "MemoryCollectionSource",
    "MongoCollectionSource",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "QueryEvent",
    "add_listener",
    # Utils
    "PagewalkError",
    "TransportError",
    "NavigationError",
    "StaleResponseDiscarded",
    "NotConnected",
    "EngineState",
    "ItemRange",
    "page_links",
]
