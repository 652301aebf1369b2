"""
In-memory TTL store.
Lazy expiry on read plus an explicit sweep.
"""

from __future__ import annotations

import asyncio
import copy
import time
from typing import Any, Callable, Dict, Optional, Tuple


class InMemoryTTLStore:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, Tuple[Any, float]] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    def _live_value(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    async def get(self, key: str) -> Optional[Any]:
        value = self._live_value(key)
        # Callers get their own copy; cached entries stay untouched
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._store[key] = (copy.deepcopy(value), self._clock() + ttl_seconds)

    async def incr_float(self, key: str, amount: float, ttl_seconds: int) -> float:
        async with self._lock:
            current = self._live_value(key)
            if current is None:
                expires_at = self._clock() + ttl_seconds
                total = float(amount)
            else:
                expires_at = self._store[key][1]
                total = float(current) + float(amount)
            self._store[key] = (total, expires_at)
            return total

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._store if k.startswith(prefix)]
        for k in keys:
            del self._store[k]
        return len(keys)

    async def count_prefix(self, prefix: str) -> int:
        self.cleanup()
        return sum(1 for k in self._store if k.startswith(prefix))

    def cleanup(self) -> int:
        """Remove expired entries."""
        now = self._clock()
        expired = [k for k, (_, exp) in self._store.items() if now >= exp]
        for k in expired:
            del self._store[k]
        return len(expired)

    async def close(self) -> None:
        self._store.clear()

    @property
    def size(self) -> int:
        return len(self._store)
