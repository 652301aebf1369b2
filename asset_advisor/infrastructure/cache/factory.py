"""
Cache store factory (config-driven).
"""

from __future__ import annotations

import logging

from asset_advisor.config import Settings
from asset_advisor.infrastructure.cache.memory_store import InMemoryTTLStore
from asset_advisor.infrastructure.cache.null_store import NullStore
from asset_advisor.infrastructure.cache.redis_cache import RedisStore
from asset_advisor.infrastructure.cache.types import KeyValueStore

logger = logging.getLogger(__name__)


def build_store(config: Settings) -> KeyValueStore:
    if not config.CACHE_ENABLED:
        logger.warning("Cache disabled - every lookup misses and spend is not tracked")
        return NullStore()
    if config.REDIS_ENABLED:
        try:
            store = RedisStore(config.REDIS_URL, prefix=config.CACHE_PREFIX)
            logger.info("Using Redis cache store")
            return store
        except Exception as exc:
            logger.error("Redis store unavailable, falling back to memory: %s", exc)
    logger.info("Using in-memory cache store")
    return InMemoryTTLStore()
