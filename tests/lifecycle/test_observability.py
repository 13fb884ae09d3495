import logging

import pytest

from pagewalk import FetchRequest, MemoryCollectionSource, PaginationEngine, QuerySpec, SortDirection
from pagewalk.lifecycle.observability import (
    QueryEvent,
    add_listener,
    clear_events,
    disable_tracing,
    enable_tracing,
    get_events,
    remove_listener,
    track_query,
)


@pytest.fixture
def source():
    return MemoryCollectionSource([{"id": f"{i:02d}", "name": f"student {i}"} for i in range(5)], name="students")


def _request() -> FetchRequest:
    return FetchRequest("id", SortDirection.ASCENDING, (), 2)


class TestObservability:
    async def test_tracing_disabled_by_default(self, source):
        await source.fetch(_request())
        assert get_events() == []

    async def test_enable_tracing_captures_fetches(self, source):
        enable_tracing(capture_events=True)
        await source.fetch(_request())
        events = get_events()
        assert len(events) == 1
        assert events[0].operation == "fetch"
        assert events[0].collection == "students"
        assert events[0].source == "memory"
        assert events[0].result_count == 2

    async def test_disable_tracing_clears_state(self, source):
        enable_tracing(capture_events=True)
        await source.fetch(_request())
        disable_tracing()
        assert get_events() == []

    async def test_slow_fetch_logs_warning(self, source, caplog):
        enable_tracing(slow_query_ms=0.0)
        with caplog.at_level(logging.WARNING, logger="pagewalk"):
            await source.fetch(_request())
        assert any("Slow fetch" in record.message for record in caplog.records)

    async def test_listener_receives_events(self, source):
        received: list[QueryEvent] = []
        enable_tracing()
        add_listener(received.append)
        await source.count(())
        assert [e.operation for e in received] == ["count"]
        assert received[0].result_count == 5

        remove_listener(received.append)
        await source.count(())
        assert len(received) == 1

    async def test_engine_navigation_emits_fetch_and_count(self, source):
        enable_tracing(capture_events=True)
        engine = PaginationEngine(source)
        await engine.configure(QuerySpec(order_by_field="id", page_size=2))
        assert sorted(e.operation for e in get_events()) == ["count", "fetch"]

        clear_events()
        await engine.next_page()
        assert [e.operation for e in get_events()] == ["fetch"]

    async def test_failed_round_trip_is_marked(self):
        enable_tracing(capture_events=True)
        with pytest.raises(RuntimeError):
            async with track_query("fetch", "students", "test"):
                raise RuntimeError("boom")
        events = get_events()
        assert events[0].failed is True
        assert events[0].duration_ms >= 0
