from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic

from pagewalk.core.query import QuerySpec
from pagewalk.core.search import apply_search
from pagewalk.sources.base import CollectionSource, FetchRequest
from pagewalk.utils.exceptions import PagewalkError
from pagewalk.utils.types import Cursor, T, get_item_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedState(Generic[T]):
    items: list[T] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    has_more: bool = True
    query_epoch: int = 0

    @property
    def total_loaded(self) -> int:
        return len(self.items)


class CursorFeed(Generic[T]):
    """Load-more browsing: each batch is appended to what is already shown.

    Unlike :class:`~pagewalk.core.engine.PaginationEngine` there are no page
    numbers, only the cursor of the last batch. Items already present (by id)
    are not appended twice, and the search term filters each batch as it
    arrives.
    """

    def __init__(self, source: CollectionSource[T], spec: QuerySpec) -> None:
        self._source = source
        self._spec = spec
        self._epoch = 0
        self._items: list[T] = []
        self._seen_ids: set = set()
        self._last_cursor: Cursor | None = None
        self._loading = False
        self._error: str | None = None
        self._has_more = True

    @property
    def state(self) -> FeedState[T]:
        return FeedState(
            items=list(self._items),
            loading=self._loading,
            error=self._error,
            has_more=self._has_more,
            query_epoch=self._epoch,
        )

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    async def reset(self, spec: QuerySpec | None = None) -> FeedState[T]:
        """Drop everything loaded so far and load the first batch again."""
        if spec is not None:
            self._spec = spec
        self._epoch += 1
        self._items = []
        self._seen_ids = set()
        self._last_cursor = None
        self._has_more = True
        self._loading = False
        return await self.load_more()

    async def load_more(self) -> FeedState[T]:
        if self._loading or not self._has_more:
            return self.state

        self._error = None
        self._loading = True
        epoch = self._epoch
        request = FetchRequest.from_spec(self._spec, after_cursor=self._last_cursor)
        result = None
        error: str | None = None
        try:
            result = await self._source.fetch(request)
        except PagewalkError as e:
            error = str(e)
        except Exception as e:
            logger.exception("Unexpected failure loading more items")
            error = str(e) or "An error occurred"
        finally:
            if epoch == self._epoch:
                self._loading = False

        if epoch != self._epoch:
            logger.debug(f"Discarding feed batch from epoch {epoch}; current epoch is {self._epoch}")
            return self.state

        if error is not None:
            self._error = error
            return self.state

        batch = list(result.items)
        appended = 0
        for item in apply_search(batch, self._spec.search_term, self._spec.search_fields):
            item_id = get_item_id(item)
            if item_id is not None and item_id in self._seen_ids:
                continue
            if item_id is not None:
                self._seen_ids.add(item_id)
            self._items.append(item)
            appended += 1

        if batch and result.last_cursor is not None:
            self._last_cursor = result.last_cursor
        self._has_more = len(batch) == self._spec.page_size
        logger.debug(f"Feed appended {appended} of {len(batch)} fetched items; has_more={self._has_more}")
        return self.state
