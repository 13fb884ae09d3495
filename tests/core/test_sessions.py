import pytest

from pagewalk import EngineRegistry, MemoryCollectionSource, PaginationEngine, QuerySpec


@pytest.fixture
def registry():
    source = MemoryCollectionSource([{"id": letter} for letter in "ABCDE"])
    return EngineRegistry(lambda: PaginationEngine(source), max_sessions=2)


def test_same_key_same_engine(registry):
    assert registry.get("alice") is registry.get("alice")


def test_sessions_do_not_share_engines(registry):
    assert registry.get("alice") is not registry.get("bob")
    assert len(registry) == 2


async def test_sessions_navigate_independently(registry):
    spec = QuerySpec(order_by_field="id", page_size=2)
    alice = registry.get("alice")
    bob = registry.get("bob")
    await alice.configure(spec)
    await bob.configure(spec)
    await alice.next_page()
    assert alice.current_page == 2
    assert bob.current_page == 1
    assert len(bob.cursor_cache) == 1


def test_least_recently_used_is_evicted(registry):
    alice = registry.get("alice")
    registry.get("bob")
    registry.get("alice")
    registry.get("carol")
    assert "bob" not in registry
    assert "alice" in registry
    assert registry.get("alice") is alice


async def test_discard_closes_engine(registry):
    engine = registry.get("alice")
    await engine.configure(QuerySpec(order_by_field="id", page_size=2))
    epoch = engine.query_epoch
    registry.discard("alice")
    assert "alice" not in registry
    assert engine.query_epoch == epoch + 1
    assert len(engine.cursor_cache) == 0


def test_invalid_capacity():
    with pytest.raises(ValueError):
        EngineRegistry(lambda: None, max_sessions=0)
