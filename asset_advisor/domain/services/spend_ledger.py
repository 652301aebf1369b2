"""
SPEND LEDGER
Daily language-model spend, bucketed by calendar day.

A day's total only ever grows; a new day simply starts a new key, so
there is no reset operation.
"""

import logging
from typing import Callable, Optional

from asset_advisor.domain.models import UsageStats
from asset_advisor.infrastructure.cache.ranking_cache import USAGE_PREFIX, USAGE_TTL_SECONDS
from asset_advisor.infrastructure.cache.types import KeyValueStore
from asset_advisor.utils.time import today_key

logger = logging.getLogger(__name__)


class SpendLedger:
    def __init__(
        self,
        store: KeyValueStore,
        daily_limit: float = 5.0,
        cost_per_1k_tokens: float = 0.002,
        near_limit_pct: float = 80.0,
        ttl_seconds: int = USAGE_TTL_SECONDS,
        today: Callable[[], str] = today_key,
    ):
        if daily_limit <= 0:
            raise ValueError("Daily limit must be positive")
        self._store = store
        self.daily_limit = daily_limit
        self.cost_per_1k_tokens = cost_per_1k_tokens
        self.near_limit_pct = near_limit_pct
        self.ttl_seconds = ttl_seconds
        self._today = today

    def _day(self, day: Optional[str]) -> str:
        return day or self._today()

    def cost_for_tokens(self, total_tokens: int) -> float:
        if total_tokens <= 0:
            return 0.0
        return (total_tokens / 1000.0) * self.cost_per_1k_tokens

    async def track(self, cost: float, day: Optional[str] = None) -> float:
        """
        Add `cost` to the day's total and return the new total.

        The increment is a single atomic store operation, so concurrent
        settlements never lose each other's updates.
        """
        if cost < 0:
            raise ValueError("Spend can only be incremented")
        key = USAGE_PREFIX + self._day(day)
        if cost == 0:
            return await self.daily_total(day)
        total = await self._store.incr_float(key, cost, self.ttl_seconds)
        logger.info("Updated daily usage for %s: $%.4f (+$%.4f)", self._day(day), total, cost)
        if total >= self.daily_limit:
            logger.warning("Daily budget exceeded: $%.2f >= $%.2f", total, self.daily_limit)
        return total

    async def daily_total(self, day: Optional[str] = None) -> float:
        try:
            value = await self._store.get(USAGE_PREFIX + self._day(day))
        except Exception as exc:
            logger.debug("Usage lookup failed: %s", exc)
            return 0.0
        return float(value) if value is not None else 0.0

    async def is_over_limit(self, day: Optional[str] = None) -> bool:
        return await self.daily_total(day) >= self.daily_limit

    async def is_near_limit(self, day: Optional[str] = None) -> bool:
        total = await self.daily_total(day)
        return (total / self.daily_limit) * 100 > self.near_limit_pct

    async def stats(self, day: Optional[str] = None) -> UsageStats:
        used = await self.daily_total(day)
        percent = (used / self.daily_limit) * 100
        return UsageStats(
            daily_usage=used,
            daily_limit=self.daily_limit,
            remaining_budget=max(0.0, self.daily_limit - used),
            usage_percent=percent,
            is_near_limit=percent > self.near_limit_pct,
            is_over_limit=used >= self.daily_limit,
        )
