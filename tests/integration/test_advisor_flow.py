import pytest

import asset_advisor.infrastructure.llm.openai_client as openai_module
from asset_advisor.config import Settings
from asset_advisor.domain.models import AssetType, RequestProfile, ResultStatus
from asset_advisor.infrastructure.cache.memory_store import InMemoryTTLStore
from asset_advisor.infrastructure.cache.null_store import NullStore
from asset_advisor.infrastructure.market_data.sample_provider import SampleSnapshotProvider
from asset_advisor.services.container import AdvisorServices, bootstrap


class FakeResponse:
    status_code = 200
    text = ""

    def json(self):
        return {
            "choices": [{"message": {"content": "HDFC Bank shows steady deposit growth and profit."}}],
            "usage": {"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
        }


class FakeClient:
    calls = 0

    def __init__(self, *args, **kwargs):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, url, headers=None, json=None):
        FakeClient.calls += 1
        return FakeResponse()


def _settings(**overrides):
    values = {"OPENAI_API_KEY": "sk-integration-test-key", "REDIS_ENABLED": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_rank_then_explain_flow(monkeypatch):
    FakeClient.calls = 0
    monkeypatch.setattr(openai_module.httpx, "AsyncClient", FakeClient)
    bootstrap(_settings())
    services = AdvisorServices.from_settings(_settings(), store=InMemoryTTLStore())

    profile = RequestProfile(amount=500000, horizon_days=365, asset_type="ALL", max_results=20)
    first = await services.rankings.rank(profile)
    second = await services.rankings.rank(profile)

    assert first.status is ResultStatus.SUCCESS
    assert first.metadata.data_source == SampleSnapshotProvider.SOURCE
    assert len(first.rankings) == 20
    assert AssetType.MUTUAL_FUND in {r.asset_type for r in first.rankings}
    assert [r.rank for r in first.rankings] == list(range(1, 21))
    assert second.metadata.cache_hit is True
    assert services.rankings.freshness()["isFresh"] is True

    answer = await services.explanations.explain("HDFC", "How are deposits trending?")
    again = await services.explanations.explain("HDFC", "How are deposits trending?")

    assert answer.status is ResultStatus.SUCCESS
    assert again == answer
    assert FakeClient.calls == 1
    usage = (await services.explanations.usage_stats()).to_dict()
    assert usage["dailyUsage"] == pytest.approx(0.0004)
    assert usage["status"] == "OK"

    stats = await services.cache.cache_stats()
    assert stats["ranking_entries"] == 1
    assert stats["chat_entries"] == 1

    await services.close()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_exhausted_budget_keeps_answering(monkeypatch):
    FakeClient.calls = 0
    monkeypatch.setattr(openai_module.httpx, "AsyncClient", FakeClient)
    services = AdvisorServices.from_settings(
        _settings(BUDGET_DAILY_LIMIT=0.0001),
        store=InMemoryTTLStore(),
    )

    first = await services.explanations.explain("TCS", "Margins?")
    second = await services.explanations.explain("TCS", "Outlook for next year?")

    assert first.status is ResultStatus.SUCCESS
    assert second.status is ResultStatus.FALLBACK
    assert FakeClient.calls == 1
    assert (await services.explanations.usage_stats()).status == "BUDGET_EXCEEDED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_rate_limiter_wired_from_settings():
    services = AdvisorServices.from_settings(
        _settings(RATE_LIMIT_MAX_REQUESTS=2),
        store=InMemoryTTLStore(),
    )

    results = [await services.rate_limiter.is_rate_limited("10.0.0.1") for _ in range(3)]

    assert results == [False, False, True]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_disabled_cache_recomputes_and_keeps_answering(monkeypatch):
    FakeClient.calls = 0
    monkeypatch.setattr(openai_module.httpx, "AsyncClient", FakeClient)
    services = AdvisorServices.from_settings(_settings(CACHE_ENABLED=False))

    assert isinstance(services.store, NullStore)

    profile = RequestProfile(amount=50000, horizon_days=90)
    first = await services.rankings.rank(profile)
    second = await services.rankings.rank(profile)
    assert first.status is ResultStatus.SUCCESS
    assert second.metadata.cache_hit is False

    await services.explanations.explain("TCS", "Margins?")
    await services.explanations.explain("TCS", "Margins?")
    assert FakeClient.calls == 2
    assert (await services.explanations.usage_stats()).daily_usage == 0.0
    assert await services.rate_limiter.is_rate_limited("10.0.0.1") is False
