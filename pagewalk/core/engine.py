from __future__ import annotations

import asyncio
import logging
from typing import Any, Generic

from pagewalk.core.counting import CountEstimator
from pagewalk.core.cursor_cache import PageCursorCache
from pagewalk.core.query import QuerySpec
from pagewalk.core.search import apply_search
from pagewalk.sources.base import CollectionSource, FetchRequest, FetchResult
from pagewalk.utils.exceptions import NavigationError, PagewalkError, StaleResponseDiscarded
from pagewalk.utils.pagination import EngineState
from pagewalk.utils.types import DEFAULT_PAGE_SIZE, T

logger = logging.getLogger(__name__)

_NOT_CONFIGURED = "Engine is not configured; call configure() first"


class PaginationEngine(Generic[T]):
    """Page-numbered browsing over a forward-only, cursor-paginated source.

    The engine remembers the cursor that ends every page it has fetched, so
    any visited page (and the one right after the furthest visited page) can
    be reached with a single request. Jumping further ahead is refused with a
    NavigationError instead of silently walking the gap.

    One engine serves one consumer. Navigation is serialized by the
    ``loading`` flag, which is raised before the first await of every fetch;
    ``next_page``, ``previous_page``, ``go_to_page`` and ``fetch_page`` are
    no-ops while it is set. Query changes and ``refresh`` are never blocked:
    they start a new query epoch, and responses from an older epoch are
    dropped on arrival.

    Failures never propagate. Each operation returns the new EngineState,
    with ``error`` set when the operation failed.

    The total count is estimated alongside every page-1 fetch. By default
    ``configure`` and ``refresh`` return once both are done. With
    ``await_count=False`` they return as soon as the page arrives, and
    ``total_items`` is filled in later; ``wait_for_count()`` waits for it.

    Example::

        engine = PaginationEngine(MongoCollectionSource.for_record(Student))
        await engine.configure(QuerySpec.for_record(Student))
        state = await engine.next_page()
    """

    def __init__(
        self,
        source: CollectionSource[T],
        *,
        count_estimator: CountEstimator | None = None,
        estimate_count: bool = True,
        await_count: bool = True,
    ) -> None:
        self._source = source
        if count_estimator is None and estimate_count:
            count_estimator = CountEstimator(source)
        self._counter = count_estimator
        self._await_count = await_count
        self._count_tasks: set[asyncio.Task] = set()

        self._spec: QuerySpec | None = None
        self._cache = PageCursorCache()
        self._epoch = 0
        self._current_page = 1
        self._raw_items: list[T] = []
        self._items: list[T] = []
        self._loading = False
        self._error: str | None = None
        self._has_next_page = False
        self._total_items = 0

    # --- Read-only view ---

    @property
    def state(self) -> EngineState[T]:
        return EngineState(
            current_page=self._current_page,
            query_epoch=self._epoch,
            items=list(self._items),
            loading=self._loading,
            error=self._error,
            has_next_page=self._has_next_page,
            total_items=self._total_items,
            page_size=self._spec.page_size if self._spec else DEFAULT_PAGE_SIZE,
        )

    @property
    def spec(self) -> QuerySpec | None:
        return self._spec

    @property
    def data(self) -> list[T]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def query_epoch(self) -> int:
        return self._epoch

    @property
    def has_next_page(self) -> bool:
        return self._has_next_page

    @property
    def has_previous_page(self) -> bool:
        return self._current_page > 1

    @property
    def total_items(self) -> int:
        return self._total_items

    @property
    def total_pages(self) -> int:
        return self.state.total_pages

    @property
    def cursor_cache(self) -> PageCursorCache:
        return self._cache

    # --- Query shape ---

    async def configure(self, spec: QuerySpec) -> EngineState[T]:
        """Adopt a new query.

        A change limited to ``search_term`` re-filters the page already in
        memory without a round trip. Any other change starts a new epoch:
        cursors are dropped and page 1 is fetched.
        """
        if spec.equivalent(self._spec):
            self._spec = spec
            self._items = apply_search(self._raw_items, spec.search_term, spec.search_fields)
            logger.debug(f"Search changed to {spec.search_term!r}; {len(self._items)} items match on page {self._current_page}")
            return self.state

        self._spec = spec
        return await self._restart()

    async def refresh(self) -> EngineState[T]:
        """Forget all cursors and reload page 1 of the same query."""
        if self._spec is None:
            self._error = _NOT_CONFIGURED
            return self.state
        return await self._restart()

    def close(self) -> None:
        """Abandon the session; in-flight responses will be discarded."""
        self._epoch += 1
        self._cache.clear()
        self._loading = False
        for task in self._count_tasks:
            task.cancel()

    async def wait_for_count(self) -> EngineState[T]:
        """Wait for count estimates still running in the background."""
        if self._count_tasks:
            await asyncio.gather(*self._count_tasks, return_exceptions=True)
        return self.state

    # --- Navigation ---

    async def next_page(self) -> EngineState[T]:
        if not self._has_next_page or self._loading:
            return self.state
        return await self.fetch_page(self._current_page + 1)

    async def previous_page(self) -> EngineState[T]:
        if self._current_page == 1 or self._loading:
            return self.state
        return await self.fetch_page(self._current_page - 1)

    async def go_to_page(self, page: int) -> EngineState[T]:
        if page == self._current_page or self._loading:
            return self.state
        return await self.fetch_page(page)

    async def fetch_page(self, page: int) -> EngineState[T]:
        """Load ``page`` using the cursor that ends the page before it."""
        if self._spec is None:
            self._error = _NOT_CONFIGURED
            return self.state
        if self._loading:
            return self.state

        try:
            request, epoch = self._begin_fetch(page)
        except NavigationError as e:
            logger.debug(f"Refused page {page}: cursor frontier is page {self._cache.frontier}")
            self._error = str(e)
            return self.state

        await self._run_fetch(page, request, epoch)
        return self.state

    # --- Internal ---

    async def _restart(self) -> EngineState[T]:
        self._epoch += 1
        self._cache.clear()
        self._current_page = 1
        self._raw_items = []
        self._items = []
        self._has_next_page = False
        logger.debug(f"Starting query epoch {self._epoch} ordered by '{self._spec.order_by_field}'")

        request, epoch = self._begin_fetch(1)
        pending: list[Any] = [self._run_fetch(1, request, epoch)]
        if self._counter is not None:
            if self._await_count:
                pending.append(self._estimate_total(self._spec, epoch))
            else:
                task = asyncio.create_task(self._estimate_total(self._spec, epoch))
                self._count_tasks.add(task)
                task.add_done_callback(self._count_tasks.discard)
        await asyncio.gather(*pending)
        return self.state

    def _begin_fetch(self, page: int) -> tuple[FetchRequest, int]:
        """Synchronous half of a fetch: resolve the cursor and raise ``loading``."""
        self._error = None
        if page < 1:
            raise NavigationError("Cannot navigate to this page")

        cursor = None
        if page > 1:
            cursor = self._cache.get(page - 2)
            if cursor is None:
                raise NavigationError("Cannot navigate to this page")

        self._loading = True
        return FetchRequest.from_spec(self._spec, after_cursor=cursor), self._epoch

    async def _run_fetch(self, page: int, request: FetchRequest, epoch: int) -> None:
        result: FetchResult[T] | None = None
        error: str | None = None
        try:
            result = await self._source.fetch(request)
        except PagewalkError as e:
            error = str(e)
        except Exception as e:
            logger.exception(f"Unexpected failure fetching page {page}")
            error = str(e) or "An error occurred"
        finally:
            if epoch == self._epoch:
                self._loading = False

        try:
            self._ensure_current(epoch)
        except StaleResponseDiscarded as e:
            logger.debug(str(e))
            return

        if error is not None:
            logger.debug(f"Fetching page {page} failed: {error}")
            self._error = error
            return

        self._apply(page, result)

    def _apply(self, page: int, result: FetchResult[T]) -> None:
        batch = list(result.items)
        self._raw_items = batch
        self._items = apply_search(batch, self._spec.search_term, self._spec.search_fields)
        if batch and result.last_cursor is not None:
            self._cache.set(page - 1, result.last_cursor)
        # A short page is taken as proof that nothing follows
        self._has_next_page = len(batch) == self._spec.page_size
        self._current_page = page
        logger.debug(
            f"Page {page}: {len(batch)} fetched, {len(self._items)} shown, "
            f"has_next={self._has_next_page}, frontier={self._cache.frontier}"
        )

    async def _estimate_total(self, spec: QuerySpec, epoch: int) -> None:
        try:
            total = await self._counter.estimate_total(spec)
        except Exception as e:
            logger.warning(f"Could not estimate total items: {e}")
            return
        if epoch == self._epoch:
            self._total_items = total

    def _ensure_current(self, epoch: int) -> None:
        if epoch != self._epoch:
            raise StaleResponseDiscarded(
                f"Discarding response from query epoch {epoch}; current epoch is {self._epoch}"
            )
