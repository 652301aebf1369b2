"""
Store used when no cache backend is available: permanent miss, no-op writes.
"""

from __future__ import annotations

from typing import Any, Optional


class NullStore:
    async def get(self, key: str) -> Optional[Any]:
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        return None

    async def incr_float(self, key: str, amount: float, ttl_seconds: int) -> float:
        return 0.0

    async def delete(self, key: str) -> None:
        return None

    async def delete_prefix(self, prefix: str) -> int:
        return 0

    async def count_prefix(self, prefix: str) -> int:
        return 0

    async def close(self) -> None:
        return None
