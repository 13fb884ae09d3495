import pytest

from pagewalk import CountEstimator, CountStrategy, MemoryCollectionSource, QuerySpec


class FetchOnly:
    """Exposes fetch but not count, forcing a scan."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    async def fetch(self, request):
        self.calls += 1
        return await self.inner.fetch(request)


@pytest.fixture
def graded_source():
    return MemoryCollectionSource(
        [{"id": f"{i:03d}", "grade": 11 if i % 3 else 12} for i in range(25)]
    )


async def test_auto_prefers_server_count(graded_source):
    estimator = CountEstimator(graded_source)
    assert estimator.strategy is CountStrategy.SERVER
    assert await estimator.estimate_total(QuerySpec(order_by_field="id")) == 25


async def test_auto_falls_back_to_scan(graded_source):
    estimator = CountEstimator(FetchOnly(graded_source))
    assert estimator.strategy is CountStrategy.SCAN


async def test_scan_walks_in_batches(graded_source):
    source = FetchOnly(graded_source)
    estimator = CountEstimator(source, scan_batch_size=10)
    assert await estimator.estimate_total(QuerySpec(order_by_field="id")) == 25
    assert source.calls == 3


async def test_scan_exact_multiple_needs_one_more_batch(graded_source):
    source = FetchOnly(graded_source)
    estimator = CountEstimator(source, scan_batch_size=5)
    assert await estimator.estimate_total(QuerySpec(order_by_field="id")) == 25
    assert source.calls == 6


async def test_strategies_agree_with_filters(graded_source):
    spec = QuerySpec(order_by_field="id", filters=[("grade", "==", 12)])
    server = await CountEstimator(graded_source, CountStrategy.SERVER).estimate_total(spec)
    scan = await CountEstimator(graded_source, CountStrategy.SCAN, scan_batch_size=4).estimate_total(spec)
    assert server == scan == 9


async def test_search_term_is_ignored(graded_source):
    spec = QuerySpec(order_by_field="id", search_fields={"id"}, search_term="001")
    assert await CountEstimator(graded_source).estimate_total(spec) == 25


async def test_server_strategy_requires_countable_source(graded_source):
    estimator = CountEstimator(FetchOnly(graded_source), CountStrategy.SERVER)
    with pytest.raises(TypeError):
        await estimator.estimate_total(QuerySpec(order_by_field="id"))


def test_invalid_batch_size(graded_source):
    with pytest.raises(ValueError):
        CountEstimator(graded_source, scan_batch_size=0)
