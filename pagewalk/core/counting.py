from __future__ import annotations

import logging
from enum import Enum

from pagewalk.core.query import QuerySpec
from pagewalk.sources.base import CollectionSource, CountableSource, FetchRequest
from pagewalk.utils.types import DEFAULT_SCAN_BATCH_SIZE

logger = logging.getLogger(__name__)


class CountStrategy(str, Enum):
    AUTO = "auto"
    SERVER = "server"
    SCAN = "scan"


class CountEstimator:
    """Best-effort total for a query, used only for pager affordances.

    The result may be stale relative to concurrent writes and ignores the
    search term. Navigation never depends on it.
    """

    def __init__(
        self,
        source: CollectionSource,
        strategy: CountStrategy = CountStrategy.AUTO,
        scan_batch_size: int = DEFAULT_SCAN_BATCH_SIZE,
    ) -> None:
        if scan_batch_size < 1:
            raise ValueError("scan_batch_size must be >= 1")
        self._source = source
        self._strategy = CountStrategy(strategy)
        self._scan_batch_size = scan_batch_size

    @property
    def strategy(self) -> CountStrategy:
        """The strategy actually used once AUTO is resolved."""
        if self._strategy is CountStrategy.AUTO:
            if isinstance(self._source, CountableSource):
                return CountStrategy.SERVER
            return CountStrategy.SCAN
        return self._strategy

    async def estimate_total(self, spec: QuerySpec) -> int:
        strategy = self.strategy
        if strategy is CountStrategy.SERVER:
            if not isinstance(self._source, CountableSource):
                raise TypeError(f"{type(self._source).__name__} cannot count on the server")
            total = await self._source.count(spec.filters)
        else:
            total = await self._scan(spec)
        logger.debug(f"Estimated {total} items for '{spec.order_by_field}' using {strategy.value}")
        return total

    async def _scan(self, spec: QuerySpec) -> int:
        """Walk the whole filtered collection in large cursor batches. O(n)."""
        total = 0
        cursor = None
        while True:
            request = FetchRequest.from_spec(spec, after_cursor=cursor, page_size=self._scan_batch_size)
            result = await self._source.fetch(request)
            total += len(result.items)
            if len(result.items) < self._scan_batch_size or result.last_cursor is None:
                return total
            cursor = result.last_cursor
