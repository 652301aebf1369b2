"""
Namespaced, best-effort cache over a key/value store.

Rankings live under `rankings:<fingerprint>` and explanation responses
under `chat:<key>`. Any store error is logged and turned into a miss.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from asset_advisor.domain.models import ExplanationResponse, RankingResult
from asset_advisor.infrastructure.cache.types import KeyValueStore

logger = logging.getLogger(__name__)

RANKINGS_PREFIX = "rankings:"
CHAT_PREFIX = "chat:"
USAGE_PREFIX = "usage:"
RATE_LIMIT_PREFIX = "rate_limit:"

RANKING_TTL_SECONDS = 30 * 60
CHAT_TTL_SECONDS = 12 * 3600
USAGE_TTL_SECONDS = 24 * 3600


class RankingCache:
    def __init__(
        self,
        store: KeyValueStore,
        ranking_ttl_seconds: int = RANKING_TTL_SECONDS,
        chat_ttl_seconds: int = CHAT_TTL_SECONDS,
    ):
        self._store = store
        self.ranking_ttl_seconds = ranking_ttl_seconds
        self.chat_ttl_seconds = chat_ttl_seconds

    # ------------------------------------------------------------------
    # GENERIC
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self._store.get(key)
        except Exception as exc:
            logger.debug("Cache get failed for %s: %s", key, exc)
            return None
        if value is None:
            logger.debug("Cache miss for key: %s", key)
        else:
            logger.debug("Cache hit for key: %s", key)
        return value

    async def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self._store.set(key, value, ttl_seconds)
            logger.debug("Cached value for key: %s with TTL: %ss", key, ttl_seconds)
        except Exception as exc:
            logger.debug("Cache put failed for %s: %s", key, exc)

    # ------------------------------------------------------------------
    # RANKINGS
    # ------------------------------------------------------------------

    async def get_rankings(self, fingerprint: str) -> Optional[RankingResult]:
        raw = await self.get(RANKINGS_PREFIX + fingerprint)
        if raw is None:
            return None
        try:
            return RankingResult.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable cached rankings %s: %s", fingerprint, exc)
            return None

    async def put_rankings(self, fingerprint: str, result: RankingResult) -> None:
        await self.put(RANKINGS_PREFIX + fingerprint, result.to_dict(), self.ranking_ttl_seconds)

    # ------------------------------------------------------------------
    # EXPLANATIONS
    # ------------------------------------------------------------------

    async def get_explanation(self, key: str) -> Optional[ExplanationResponse]:
        raw = await self.get(CHAT_PREFIX + key)
        if raw is None:
            return None
        try:
            return ExplanationResponse.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable cached response %s: %s", key, exc)
            return None

    async def put_explanation(self, key: str, response: ExplanationResponse) -> None:
        await self.put(CHAT_PREFIX + key, response.to_dict(), self.chat_ttl_seconds)

    # ------------------------------------------------------------------
    # MAINTENANCE
    # ------------------------------------------------------------------

    async def cache_stats(self) -> Dict[str, int]:
        try:
            rankings = await self._store.count_prefix(RANKINGS_PREFIX)
            chat = await self._store.count_prefix(CHAT_PREFIX)
            total = await self._store.count_prefix("")
        except Exception as exc:
            logger.error("Error getting cache stats: %s", exc)
            return {"total_keys": 0, "ranking_entries": 0, "chat_entries": 0}
        return {"total_keys": total, "ranking_entries": rankings, "chat_entries": chat}

    async def clear_all(self) -> int:
        removed = 0
        for prefix in (RANKINGS_PREFIX, CHAT_PREFIX, USAGE_PREFIX, RATE_LIMIT_PREFIX):
            try:
                removed += await self._store.delete_prefix(prefix)
            except Exception as exc:
                logger.error("Error clearing %s cache entries: %s", prefix, exc)
        logger.info("Cleared %d cache entries", removed)
        return removed
