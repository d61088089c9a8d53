"""
Tests for the in-memory result store.
"""

from coverly_api.entities import SearchResultEntity
from coverly_api.protocols import ResultStore
from coverly_api.repositories import MemoryResultStore


def _result(total: int = 0) -> SearchResultEntity:
    return SearchResultEntity(total_items=total)


def test_satisfies_result_store_protocol(clock):
    assert isinstance(MemoryResultStore(clock=clock), ResultStore)


def test_missing_key_reads_as_absent(clock):
    assert MemoryResultStore(clock=clock).get("nope") is None


def test_returns_value_while_fresh(clock):
    store = MemoryResultStore(ttl=60.0, clock=clock)
    store.put("k", _result(3))

    clock.advance(59)

    assert store.get("k") == _result(3)


def test_entry_expires_at_ttl(clock):
    store = MemoryResultStore(ttl=60.0, clock=clock)
    store.put("k", _result(3))

    clock.advance(60)

    assert store.get("k") is None
    # Expired entries linger until overwritten
    assert len(store) == 1


def test_put_overwrites_and_restarts_lifetime(clock):
    store = MemoryResultStore(ttl=60.0, clock=clock)
    store.put("k", _result(1))
    clock.advance(50)
    store.put("k", _result(2))
    clock.advance(50)

    assert store.get("k") == _result(2)
    assert len(store) == 1


def test_clear_reports_removed_entries(clock):
    store = MemoryResultStore(clock=clock)
    store.put("a", _result())
    store.put("b", _result())

    assert store.clear() == 2
    assert len(store) == 0
    assert store.get("a") is None


def test_zero_ttl_never_serves_entries(clock):
    store = MemoryResultStore(ttl=0, clock=clock)
    store.put("k", _result())

    assert store.get("k") is None
