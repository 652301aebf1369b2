"""
Sample NSE equity + AMFI fund snapshots.

Used when no live market data collaborator is wired in. Values are fixed
per symbol so repeated runs produce identical rankings.
"""

from __future__ import annotations

import dataclasses
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Optional

from asset_advisor.domain.models import (
    LIVE_FEED,
    AssetSnapshot,
    MutualFundSnapshot,
    SnapshotBatch,
)
from asset_advisor.utils.time import now_ist

logger = logging.getLogger(__name__)

NSE_SAMPLE = (
    ("RELIANCE", "Reliance Industries Ltd.", 2850.50, 2.3),
    ("TCS", "Tata Consultancy Services Ltd.", 4125.75, 1.8),
    ("INFY", "Infosys Ltd.", 1875.25, 1.2),
    ("HDFC", "HDFC Bank Ltd.", 2650.00, 0.9),
    ("ICICI", "ICICI Bank Ltd.", 1235.60, 0.5),
    ("BHARTIARTL", "Bharti Airtel Ltd.", 1156.30, -0.8),
    ("ITC", "ITC Ltd.", 495.80, 1.5),
    ("LT", "Larsen & Toubro Ltd.", 3890.25, 2.1),
    ("WIPRO", "Wipro Ltd.", 689.40, 0.7),
    ("MARUTI", "Maruti Suzuki India Ltd.", 12450.60, 1.9),
    ("HCLTECH", "HCL Technologies Ltd.", 1789.35, 1.1),
    ("BAJFINANCE", "Bajaj Finance Ltd.", 8920.80, 2.8),
    ("ASIANPAINT", "Asian Paints Ltd.", 3456.20, 1.3),
    ("NESTLEIND", "Nestle India Ltd.", 27890.45, 0.6),
    ("COALINDIA", "Coal India Ltd.", 456.70, -0.4),
)

AMFI_SAMPLE = (
    ("100001", "Aditya Birla Sun Life Equity Fund - Growth", 785.45),
    ("100002", "SBI Blue Chip Fund - Growth", 92.34),
    ("100003", "ICICI Prudential Focused Blue Chip Equity Fund - Growth", 156.78),
    ("100004", "HDFC Top 100 Fund - Growth", 1245.67),
    ("100005", "Axis Blue Chip Fund - Growth", 89.23),
    ("100006", "Kotak Select Focus Fund - Growth", 234.56),
    ("100007", "Franklin India Blue Chip Fund - Growth", 567.89),
    ("100008", "DSP Top 100 Equity Fund - Growth", 345.12),
    ("100009", "Mirae Asset Large Cap Fund - Growth", 123.45),
    ("100010", "Nippon India Large Cap Fund - Growth", 678.90),
)


class SampleSnapshotProvider:
    SOURCE = "NSE/BSE EOD + AMFI NAV (Sample)"

    def __init__(
        self,
        refresh_interval: timedelta = timedelta(hours=1),
        max_age: timedelta = timedelta(hours=2),
        clock: Callable[[], datetime] = now_ist,
    ):
        self.refresh_interval = refresh_interval
        self.max_age = max_age
        self._clock = clock
        self._batch: Optional[SnapshotBatch] = None

    @property
    def last_refreshed(self) -> Optional[datetime]:
        return self._batch.fetched_at if self._batch else None

    def is_data_fresh(self) -> bool:
        fetched = self.last_refreshed
        return fetched is not None and self._clock() - fetched < self.max_age

    async def get_snapshot_batch(self) -> SnapshotBatch:
        fetched = self.last_refreshed
        if fetched is None or self._clock() - fetched >= self.refresh_interval:
            self._batch = self._load()
            logger.info(
                "Loaded sample market data: %d equities, %d funds",
                len(self._batch.equities),
                len(self._batch.mutual_funds),
            )
        # Freshness is judged when served, not when loaded
        return dataclasses.replace(self._batch, is_fresh=self.is_data_fresh())

    def _load(self) -> SnapshotBatch:
        fetched_at = self._clock()
        equities = tuple(
            AssetSnapshot(
                symbol=symbol,
                name=name,
                price=price,
                change_percent=change,
                volume=self._volume_for(symbol),
                as_of=fetched_at,
            )
            for symbol, name, price, change in NSE_SAMPLE
        )
        funds = tuple(
            MutualFundSnapshot(
                scheme_code=code,
                scheme_name=name,
                nav=nav,
                change_percent=self._fund_change_for(code),
                nav_date=fetched_at.date(),
            )
            for code, name, nav in AMFI_SAMPLE
        )
        return SnapshotBatch(
            equities=equities,
            mutual_funds=funds,
            source=self.SOURCE,
            data_profile=LIVE_FEED,
            fetched_at=fetched_at,
            is_fresh=True,
        )

    @staticmethod
    def _volume_for(symbol: str) -> int:
        # 100K to 10M shares
        return random.Random(symbol).randint(100_000, 10_000_000)

    @staticmethod
    def _fund_change_for(code: str) -> float:
        # -3% to +3%
        return round((random.Random(code).random() - 0.5) * 6, 2)
