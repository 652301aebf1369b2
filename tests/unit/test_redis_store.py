import json

import pytest

from asset_advisor.infrastructure.cache.redis_cache import RedisStore


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.expiry[key] = ex

    async def incrbyfloat(self, key, amount):
        total = float(self.data.get(key, 0)) + amount
        self.data[key] = str(total)
        return total

    async def ttl(self, key):
        if key not in self.data:
            return -2
        return self.expiry.get(key, -1)

    async def expire(self, key, seconds):
        self.expiry[key] = seconds

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    async def scan_iter(self, match=None):
        prefix = match.rstrip("*")
        for key in list(self.data):
            if key.startswith(prefix):
                yield key

    async def close(self):
        self.closed = True


class BrokenRedis:
    def __getattr__(self, name):
        async def _fail(*args, **kwargs):
            raise ConnectionError("redis down")

        return _fail


@pytest.mark.asyncio
async def test_values_are_json_encoded_under_prefix():
    client = FakeRedis()
    store = RedisStore(prefix="advisor:", client=client)

    await store.set("rankings:x", {"status": "success"}, ttl_seconds=1800)

    assert json.loads(client.data["advisor:rankings:x"]) == {"status": "success"}
    assert client.expiry["advisor:rankings:x"] == 1800
    assert await store.get("rankings:x") == {"status": "success"}
    assert await store.get("rankings:missing") is None


@pytest.mark.asyncio
async def test_incr_float_sets_expiry_once():
    client = FakeRedis()
    store = RedisStore(client=client)

    assert await store.incr_float("usage:2026-02-10", 0.5, ttl_seconds=86400) == 0.5
    client.expiry["advisor:usage:2026-02-10"] = 100
    assert await store.incr_float("usage:2026-02-10", 0.25, ttl_seconds=86400) == 0.75

    assert client.expiry["advisor:usage:2026-02-10"] == 100
    assert await store.get("usage:2026-02-10") == 0.75


@pytest.mark.asyncio
async def test_prefix_operations_use_scan():
    client = FakeRedis()
    store = RedisStore(client=client)
    await store.set("chat:a", "1", ttl_seconds=60)
    await store.set("chat:b", "2", ttl_seconds=60)
    await store.set("rankings:c", "3", ttl_seconds=60)

    assert await store.count_prefix("chat:") == 2
    assert await store.delete_prefix("chat:") == 2
    assert await store.count_prefix("") == 1

    await store.close()
    assert client.closed is True


@pytest.mark.asyncio
async def test_backend_errors_degrade_to_miss():
    store = RedisStore(client=BrokenRedis())

    assert await store.get("k") is None
    await store.set("k", 1, ttl_seconds=60)
    await store.delete("k")
    assert await store.incr_float("k", 1.0, ttl_seconds=60) == 0.0
    assert await store.count_prefix("") == 0
    assert await store.delete_prefix("") == 0
    await store.close()


def test_url_required_without_client():
    with pytest.raises(ValueError):
        RedisStore(url=None)


def test_build_store_follows_settings():
    from asset_advisor.config import Settings
    from asset_advisor.infrastructure.cache.factory import build_store
    from asset_advisor.infrastructure.cache.memory_store import InMemoryTTLStore

    memory = build_store(Settings(_env_file=None, REDIS_ENABLED=False))
    redis_backed = build_store(Settings(_env_file=None, REDIS_ENABLED=True, REDIS_URL="redis://localhost:6379/1"))

    assert isinstance(memory, InMemoryTTLStore)
    assert isinstance(redis_backed, RedisStore)


def test_build_store_returns_null_store_when_cache_disabled():
    from asset_advisor.config import Settings
    from asset_advisor.infrastructure.cache.factory import build_store
    from asset_advisor.infrastructure.cache.null_store import NullStore

    store = build_store(Settings(_env_file=None, CACHE_ENABLED=False, REDIS_ENABLED=True))

    assert isinstance(store, NullStore)
