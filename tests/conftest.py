from datetime import datetime, timedelta

import pytest

from asset_advisor.domain.models import RequestProfile, RiskPreference
from asset_advisor.domain.services.spend_ledger import SpendLedger
from asset_advisor.infrastructure.cache.memory_store import InMemoryTTLStore
from asset_advisor.infrastructure.cache.ranking_cache import RankingCache
from asset_advisor.utils.time import IST

TEST_DAY = "2026-02-10"


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_770_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDateTimeClock:
    """Manually advanced IST datetime clock."""

    def __init__(self, start: datetime = datetime(2026, 2, 10, 10, 0, tzinfo=IST)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return InMemoryTTLStore(clock=clock)


@pytest.fixture()
def cache(store):
    return RankingCache(store)


@pytest.fixture()
def ledger(store):
    return SpendLedger(store, daily_limit=5.0, cost_per_1k_tokens=0.002, today=lambda: TEST_DAY)


@pytest.fixture()
def profile():
    return RequestProfile(
        amount=50000,
        horizon_days=180,
        risk_preference=RiskPreference.MODERATE,
    )


@pytest.fixture()
def dt_clock():
    return FakeDateTimeClock()
