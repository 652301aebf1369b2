import asyncio

import pytest

from asset_advisor.infrastructure.cache.memory_store import InMemoryTTLStore
from asset_advisor.infrastructure.cache.null_store import NullStore


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(store, clock):
    await store.set("k", {"a": 1}, ttl_seconds=10)
    assert await store.get("k") == {"a": 1}

    clock.advance(10)
    assert await store.get("k") is None
    assert store.size == 0


@pytest.mark.asyncio
async def test_get_returns_independent_copy(store):
    value = {"rankings": [1, 2]}
    await store.set("k", value, ttl_seconds=60)
    value["rankings"].append(3)

    fetched = await store.get("k")
    fetched["rankings"].append(4)

    assert await store.get("k") == {"rankings": [1, 2]}


@pytest.mark.asyncio
async def test_incr_float_keeps_first_expiry(store, clock):
    assert await store.incr_float("usage:d", 1.5, ttl_seconds=10) == 1.5
    clock.advance(5)
    assert await store.incr_float("usage:d", 1.0, ttl_seconds=10) == 2.5

    clock.advance(6)
    assert await store.get("usage:d") is None
    assert await store.incr_float("usage:d", 1.0, ttl_seconds=10) == 1.0


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost():
    store = InMemoryTTLStore()

    await asyncio.gather(*(store.incr_float("counter", 0.25, 60) for _ in range(200)))

    assert await store.get("counter") == pytest.approx(50.0)


@pytest.mark.asyncio
async def test_prefix_operations_skip_expired_entries(store, clock):
    await store.set("rankings:a", 1, ttl_seconds=5)
    await store.set("rankings:b", 2, ttl_seconds=60)
    await store.set("chat:c", 3, ttl_seconds=60)

    clock.advance(6)

    assert await store.count_prefix("rankings:") == 1
    assert await store.count_prefix("") == 2
    assert await store.delete_prefix("rankings:") == 1
    assert await store.get("chat:c") == 3


@pytest.mark.asyncio
async def test_cleanup_and_close(store, clock):
    await store.set("a", 1, ttl_seconds=1)
    await store.set("b", 2, ttl_seconds=100)
    clock.advance(2)

    assert store.cleanup() == 1
    await store.close()
    assert store.size == 0


@pytest.mark.asyncio
async def test_null_store_always_misses():
    store = NullStore()
    await store.set("k", 1, ttl_seconds=60)

    assert await store.get("k") is None
    assert await store.incr_float("k", 2.0, ttl_seconds=60) == 0.0
    assert await store.count_prefix("") == 0
    assert await store.delete_prefix("") == 0
