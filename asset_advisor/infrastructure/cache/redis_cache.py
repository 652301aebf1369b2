"""
Redis-backed key/value store for rankings, responses and spend counters.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisStore:
    def __init__(self, url: Optional[str] = None, prefix: str = "advisor:", client: Any = None):
        if client is None:
            if not url:
                raise ValueError("Redis URL is required")
            client = redis.Redis.from_url(url, decode_responses=True)
        self._client = client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client.get(self._key(key))
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as exc:
            logger.debug("Redis get failed for %s: %s", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self._client.set(self._key(key), json.dumps(value), ex=ttl_seconds)
        except Exception as exc:
            logger.debug("Redis set failed for %s: %s", key, exc)

    async def incr_float(self, key: str, amount: float, ttl_seconds: int) -> float:
        full_key = self._key(key)
        try:
            total = await self._client.incrbyfloat(full_key, amount)
            # -1: key exists without expiry, i.e. it was just created
            if await self._client.ttl(full_key) < 0:
                await self._client.expire(full_key, ttl_seconds)
            return float(total)
        except Exception as exc:
            logger.warning("Redis increment failed for %s: %s", key, exc)
            return 0.0

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except Exception as exc:
            logger.debug("Redis delete failed for %s: %s", key, exc)

    async def delete_prefix(self, prefix: str) -> int:
        try:
            keys = [k async for k in self._client.scan_iter(match=f"{self._key(prefix)}*")]
            if not keys:
                return 0
            return int(await self._client.delete(*keys))
        except Exception as exc:
            logger.debug("Redis delete_prefix failed for %s: %s", prefix, exc)
            return 0

    async def count_prefix(self, prefix: str) -> int:
        try:
            count = 0
            async for _ in self._client.scan_iter(match=f"{self._key(prefix)}*"):
                count += 1
            return count
        except Exception as exc:
            logger.debug("Redis count_prefix failed for %s: %s", prefix, exc)
            return 0

    async def close(self) -> None:
        try:
            await self._client.close()
        except Exception:
            return
