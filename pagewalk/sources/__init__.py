from pagewalk.sources.base import (
    CollectionSource,
    CountableSource,
    FetchRequest,
    FetchResult,
)
from pagewalk.sources.connection import connect, disconnect, get_client, get_database
from pagewalk.sources.memory import MemoryCollectionSource
from pagewalk.sources.mongo import MongoCollectionSource

__all__ = [
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
]
