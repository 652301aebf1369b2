"""
Provider chain - try primary, then fallbacks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from asset_advisor.domain.models import SnapshotBatch
from asset_advisor.infrastructure.market_data.types import MarketSnapshotProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedProvider:
    name: str
    provider: MarketSnapshotProvider


class ChainedSnapshotProvider:
    """
    Returns the first usable (fresh, non-empty) batch. Each provider gets
    its own timeout; a slow or failing provider just hands over to the next.
    """

    def __init__(self, providers: List[NamedProvider], timeout_seconds: float = 5.0):
        if not providers:
            raise ValueError("At least one snapshot provider is required")
        self.providers = providers
        self.timeout_seconds = timeout_seconds
        self.last_source: Optional[str] = None

    async def get_snapshot_batch(self) -> SnapshotBatch:
        for named in self.providers:
            try:
                batch = await asyncio.wait_for(
                    named.provider.get_snapshot_batch(),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning("Snapshot provider %s timed out", named.name)
                continue
            except Exception as exc:
                logger.warning("Snapshot provider %s failed: %s", named.name, exc)
                continue
            if batch.is_usable:
                self.last_source = named.name
                return batch
            logger.info("Snapshot provider %s returned no usable data", named.name)
        self.last_source = None
        return SnapshotBatch(source="none", is_fresh=False)
