"""
Market snapshot provider protocol for type hints.
"""

from __future__ import annotations

from typing import Protocol

from asset_advisor.domain.models import SnapshotBatch


class MarketSnapshotProvider(Protocol):
    async def get_snapshot_batch(self) -> SnapshotBatch:
        """Latest refresh cycle; an empty or stale batch means 'no data'."""
        ...
