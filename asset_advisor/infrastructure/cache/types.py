"""
Key/value store protocol for type hints.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """
    TTL-bound key/value store shared by the ranking cache, the response
    cache and the spend ledger.

    Implementations never raise on backend failure: reads degrade to a
    miss, writes to a no-op.
    """

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    async def incr_float(self, key: str, amount: float, ttl_seconds: int) -> float:
        """Atomically add `amount`; TTL is applied when the key is created."""
        ...

    async def delete(self, key: str) -> None:
        ...

    async def delete_prefix(self, prefix: str) -> int:
        ...

    async def count_prefix(self, prefix: str) -> int:
        ...

    async def close(self) -> None:
        ...
