from __future__ import annotations

import logging
from typing import Any

import pymongo
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from pagewalk.core.query import Filter, FilterOperator, SortDirection
from pagewalk.lifecycle.observability import track_query
from pagewalk.sources.base import FetchRequest, FetchResult
from pagewalk.sources.connection import get_database
from pagewalk.utils.exceptions import TransportError
from pagewalk.utils.settings import SettingsResolver
from pagewalk.utils.types import DocumentData, FilterSpec, SortSpec, get_field, merge_filters

logger = logging.getLogger(__name__)

_MONGO_OPERATORS: dict[FilterOperator, str] = {
    FilterOperator.EQUALS: "$eq",
    FilterOperator.NOT_EQUALS: "$ne",
    FilterOperator.LESS_THAN: "$lt",
    FilterOperator.LESS_OR_EQUAL: "$lte",
    FilterOperator.GREATER_THAN: "$gt",
    FilterOperator.GREATER_OR_EQUAL: "$gte",
    FilterOperator.IN: "$in",
    FilterOperator.NOT_IN: "$nin",
    # $in against an array field matches when any element is listed
    FilterOperator.ARRAY_CONTAINS_ANY: "$in",
}

_LIST_OPERATORS = (FilterOperator.IN, FilterOperator.NOT_IN, FilterOperator.ARRAY_CONTAINS_ANY)


def translate_filter(condition: Filter) -> FilterSpec:
    """Translate one pushed-down predicate into a MongoDB clause.

    Negative operators require the field to exist, so documents lacking it
    are excluded the same way an indexed document store would.
    """
    if condition.operator is FilterOperator.ARRAY_CONTAINS:
        return {condition.field: {"$elemMatch": {"$eq": condition.value}}}

    value = condition.value
    if condition.operator in _LIST_OPERATORS or isinstance(value, tuple):
        value = list(value)

    clause: dict[str, Any] = {_MONGO_OPERATORS[condition.operator]: value}
    if condition.operator in (FilterOperator.NOT_EQUALS, FilterOperator.NOT_IN):
        clause["$exists"] = True
    if condition.operator is FilterOperator.EQUALS and not isinstance(value, list):
        # A scalar must not match a single element of an array field
        clause["$not"] = {"$type": "array"}
    return {condition.field: clause}


def translate_cursor(order_by_field: str, direction: SortDirection, cursor: tuple[Any, Any]) -> FilterSpec:
    """Keyset condition selecting documents strictly after ``cursor``.

    The cursor is ``(order value, _id)``; ``_id`` breaks ties between equal
    order values.
    """
    value, last_id = cursor
    op = "$lt" if direction is SortDirection.DESCENDING else "$gt"
    if order_by_field == "_id":
        return {"_id": {op: last_id}}
    return {
        "$or": [
            {order_by_field: {op: value}},
            {order_by_field: value, "_id": {op: last_id}},
        ]
    }


def translate_sort(order_by_field: str, direction: SortDirection) -> SortSpec:
    pymongo_direction = DESCENDING if direction is SortDirection.DESCENDING else ASCENDING
    sort_spec: SortSpec = [(order_by_field, pymongo_direction)]
    if order_by_field != "_id":
        sort_spec.append(("_id", pymongo_direction))
    return sort_spec


def _combine(clauses: list[FilterSpec]) -> FilterSpec:
    clauses = [clause for clause in clauses if clause]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class MongoCollectionSource:
    """Collection source backed by a pymongo ``AsyncCollection``.

    Args:
        collection: The collection to browse.
        model: Optional pydantic model (usually a Record subclass) each raw
            document is validated into. Without it, raw dicts are returned
            with a string ``id`` alongside ``_id``.
        base_filter: MongoDB filter applied to every fetch and count, e.g.
            ``{"deleted_at": None}``.
        timeout: Seconds allowed per round trip; ``None`` defers to the client.
    """

    def __init__(
        self,
        collection: AsyncCollection,
        *,
        model: type | None = None,
        base_filter: FilterSpec | None = None,
        timeout: float | None = None,
    ) -> None:
        self._collection = collection
        self._model = model
        self._base_filter: FilterSpec = base_filter or {}
        self._timeout = timeout

    @classmethod
    def for_record(
        cls,
        record_class: type,
        base_filter: FilterSpec | None = None,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> MongoCollectionSource:
        """Bind a source to the collection named in a Record's Settings.

        Keyword arguments are merged into ``base_filter``.
        """
        db = get_database(SettingsResolver.get_connection_alias(record_class))
        collection = db[SettingsResolver.get_collection_name(record_class)]
        return cls(
            collection,
            model=record_class,
            base_filter=merge_filters(base_filter, **kwargs),
            timeout=timeout,
        )

    @property
    def name(self) -> str:
        return self._collection.name

    def build_query(self, request: FetchRequest) -> FilterSpec:
        clauses: list[FilterSpec] = [self._base_filter]
        if request.order_by_field != "_id":
            clauses.append({request.order_by_field: {"$exists": True, "$ne": None}})
        clauses.extend(translate_filter(f) for f in request.filters)
        if request.after_cursor is not None:
            clauses.append(translate_cursor(request.order_by_field, request.order_direction, request.after_cursor))
        return _combine(clauses)

    async def fetch(self, request: FetchRequest) -> FetchResult[Any]:
        query = self.build_query(request)
        sort_spec = translate_sort(request.order_by_field, request.order_direction)
        raw_docs: list[DocumentData] = []
        try:
            async with track_query("fetch", self.name, "mongo", filter=query) as ctx:
                with pymongo.timeout(self._timeout):
                    cursor = self._collection.find(query).sort(sort_spec).limit(request.page_size)
                    async for raw in cursor:
                        raw_docs.append(raw)
                ctx["result_count"] = len(raw_docs)
        except PyMongoError as e:
            logger.error(f"Fetch from '{self.name}' failed: {e}")
            raise TransportError(str(e)) from e

        last_cursor = None
        if raw_docs:
            last = raw_docs[-1]
            last_cursor = (get_field(last, request.order_by_field), last["_id"])
        return FetchResult(items=[self._convert(raw) for raw in raw_docs], last_cursor=last_cursor)

    async def count(self, filters: tuple[Filter, ...]) -> int:
        query = _combine([self._base_filter, *(translate_filter(f) for f in filters)])
        try:
            async with track_query("count", self.name, "mongo", filter=query) as ctx:
                with pymongo.timeout(self._timeout):
                    total = await self._collection.count_documents(query)
                ctx["result_count"] = total
        except PyMongoError as e:
            logger.error(f"Count on '{self.name}' failed: {e}")
            raise TransportError(str(e)) from e
        return total

    def _convert(self, raw: DocumentData) -> Any:
        if self._model is not None:
            return self._model.model_validate(raw)
        raw.setdefault("id", str(raw["_id"]))
        return raw
