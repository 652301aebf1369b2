"""
Fixed-window request counter per client.
"""

from __future__ import annotations

import logging

from asset_advisor.infrastructure.cache.ranking_cache import RATE_LIMIT_PREFIX
from asset_advisor.infrastructure.cache.types import KeyValueStore

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, store: KeyValueStore, max_requests: int = 30, window_seconds: int = 60):
        self._store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def is_rate_limited(self, client_id: str) -> bool:
        try:
            count = await self._store.incr_float(RATE_LIMIT_PREFIX + client_id, 1, self.window_seconds)
        except Exception as exc:
            # Allow request on error
            logger.error("Error checking rate limit for client %s: %s", client_id, exc)
            return False

        limited = count > self.max_requests
        if limited:
            logger.warning(
                "Rate limit exceeded for client: %s (%d > %d)",
                client_id,
                int(count),
                self.max_requests,
            )
        return limited
