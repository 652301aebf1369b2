"""
Service wiring.
Builds the ranking and explanation services from settings; the only
place that reads configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from asset_advisor.config import Settings, settings
from asset_advisor.core.logging import get_logger, setup_logging
from asset_advisor.domain.services.explanation_gateway import ExplanationGateway
from asset_advisor.domain.services.ranking_orchestrator import RankingOrchestrator
from asset_advisor.domain.services.score_engine import ScoreEngine
from asset_advisor.domain.services.spend_ledger import SpendLedger
from asset_advisor.infrastructure.cache.factory import build_store
from asset_advisor.infrastructure.cache.ranking_cache import RankingCache
from asset_advisor.infrastructure.cache.rate_limiter import RateLimiter
from asset_advisor.infrastructure.cache.types import KeyValueStore
from asset_advisor.infrastructure.llm.openai_client import OpenAICompletionClient
from asset_advisor.infrastructure.market_data.provider_chain import (
    ChainedSnapshotProvider,
    NamedProvider,
)
from asset_advisor.infrastructure.market_data.sample_provider import SampleSnapshotProvider
from asset_advisor.infrastructure.market_data.types import MarketSnapshotProvider
from asset_advisor.utils.logging_redaction import install_redaction_filter

logger = get_logger(__name__)


def bootstrap(config: Settings = settings) -> None:
    """Process-level setup: logging + secret redaction."""
    setup_logging(config.LOG_LEVEL)
    install_redaction_filter()


@dataclass
class AdvisorServices:
    store: KeyValueStore
    cache: RankingCache
    ledger: SpendLedger
    rate_limiter: RateLimiter
    rankings: RankingOrchestrator
    explanations: ExplanationGateway

    @classmethod
    def from_settings(
        cls,
        config: Settings = settings,
        provider: Optional[MarketSnapshotProvider] = None,
        store: Optional[KeyValueStore] = None,
    ) -> "AdvisorServices":
        store = store if store is not None else build_store(config)
        cache = RankingCache(
            store,
            ranking_ttl_seconds=config.RANKING_CACHE_TTL_SECONDS,
            chat_ttl_seconds=config.EXPLANATION_CACHE_TTL_SECONDS,
        )
        ledger = SpendLedger(
            store,
            daily_limit=config.BUDGET_DAILY_LIMIT,
            cost_per_1k_tokens=config.BUDGET_COST_PER_1K_TOKENS,
            near_limit_pct=config.BUDGET_NEAR_LIMIT_PCT,
            ttl_seconds=config.USAGE_TTL_SECONDS,
        )

        if provider is None:
            provider = ChainedSnapshotProvider(
                [
                    NamedProvider(
                        "sample",
                        SampleSnapshotProvider(
                            refresh_interval=timedelta(minutes=config.MARKET_DATA_REFRESH_MINUTES),
                            max_age=timedelta(hours=config.MARKET_DATA_MAX_AGE_HOURS),
                        ),
                    )
                ],
                timeout_seconds=config.MARKET_DATA_TIMEOUT_SECONDS,
            )

        rankings = RankingOrchestrator(
            provider=provider,
            engine=ScoreEngine(),
            cache=cache,
            mutual_fund_amount_threshold=config.MUTUAL_FUND_AMOUNT_THRESHOLD,
            fetch_timeout_seconds=config.MARKET_DATA_TIMEOUT_SECONDS,
        )

        client = OpenAICompletionClient(
            api_key=config.OPENAI_API_KEY,
            base_url=config.LLM_BASE_URL,
            model=config.LLM_MODEL,
            max_tokens=config.LLM_MAX_TOKENS,
            temperature=config.LLM_TEMPERATURE,
            timeout_seconds=config.LLM_TIMEOUT_SECONDS,
        )
        explanations = ExplanationGateway(
            client=client,
            ledger=ledger,
            cache=cache,
            cost_protection=config.BUDGET_COST_PROTECTION,
        )

        if not client.is_configured:
            logger.warning("OPENAI_API_KEY not set - explanations will use fallback answers")

        return cls(
            store=store,
            cache=cache,
            ledger=ledger,
            rate_limiter=RateLimiter(
                store,
                max_requests=config.RATE_LIMIT_MAX_REQUESTS,
                window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
            ),
            rankings=rankings,
            explanations=explanations,
        )

    async def close(self) -> None:
        await self.store.close()
