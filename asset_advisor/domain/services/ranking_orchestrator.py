"""
RANKING ORCHESTRATOR
Public ranking operation: cache -> market data -> score -> rank -> cache

RESPONSIBILITIES:
- Serve cached rankings inside their TTL
- Score every snapshot of the current batch
- Dense, stable, score-ordered ranks
- Degrade to synthesized rankings on missing data or any failure

RULES:
❌ Never raises to the caller
❌ Never mutates snapshots
✅ Rank assignment only after the full set is scored
"""

import asyncio
import dataclasses
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from asset_advisor.domain.models import (
    DEFAULT_DISCLAIMER,
    FALLBACK_NOTICE,
    AssetSnapshot,
    AssetType,
    MutualFundSnapshot,
    RankedAsset,
    RankingMetadata,
    RankingResult,
    RequestProfile,
    ResultStatus,
    SnapshotBatch,
)
from asset_advisor.domain.services.mock_rankings import assign_ranks, generate_mock_rankings
from asset_advisor.domain.services.score_engine import ScoreEngine
from asset_advisor.infrastructure.cache.ranking_cache import RankingCache
from asset_advisor.infrastructure.market_data.types import MarketSnapshotProvider
from asset_advisor.utils.time import format_ist

logger = logging.getLogger(__name__)

MOCK_SOURCE = "Mock Data (Synthesized)"
FALLBACK_SOURCE = "Mock Data (Fallback)"
CACHE_SOURCE_PREFIX = "Cache + "


class RankingOrchestrator:
    """
    Ranking Orchestrator
    Composes provider + engine + cache into `rank(profile)`
    """

    def __init__(
        self,
        provider: MarketSnapshotProvider,
        engine: ScoreEngine,
        cache: RankingCache,
        mutual_fund_amount_threshold: float = 100000.0,
        fetch_timeout_seconds: float = 5.0,
        timer: Callable[[], float] = time.perf_counter,
    ):
        self._provider = provider
        self._engine = engine
        self._cache = cache
        self.mutual_fund_amount_threshold = mutual_fund_amount_threshold
        self.fetch_timeout_seconds = fetch_timeout_seconds
        self._timer = timer
        self._last_batch: Optional[SnapshotBatch] = None

    async def rank(self, profile: RequestProfile) -> RankingResult:
        """
        Rank assets for a request profile

        Args:
            profile: Validated request profile

        Returns:
            RankingResult; status=fallback when the computation failed
        """
        start = self._timer()
        logger.info("Generating rankings for request: %s", profile.fingerprint)

        cached = await self._cache.get_rankings(profile.fingerprint)
        if cached is not None:
            logger.info("Returning %d cached rankings", len(cached.rankings))
            return self._from_cache(cached, start)

        try:
            result = await self._compute(profile, start)
            await self._cache.put_rankings(profile.fingerprint, result)
            return result
        except Exception:
            logger.exception("Error generating rankings")
            return self._fallback(profile, start)

    async def _compute(self, profile: RequestProfile, start: float) -> RankingResult:
        batch = await self._fetch_batch()

        if not batch.is_usable:
            logger.info("No usable market data, synthesizing rankings")
            rankings = generate_mock_rankings(profile)
            return self._build(profile, rankings, len(rankings), MOCK_SOURCE, start)

        candidates = self._score_batch(profile, batch)
        if not candidates:
            logger.info("No snapshots match asset type %s, synthesizing rankings", profile.asset_type.value)
            rankings = generate_mock_rankings(profile)
            return self._build(profile, rankings, len(rankings), MOCK_SOURCE, start)

        ranked = assign_ranks(candidates)[: profile.max_results]
        return self._build(profile, ranked, len(candidates), batch.source, start)

    async def _fetch_batch(self) -> SnapshotBatch:
        try:
            batch = await asyncio.wait_for(
                self._provider.get_snapshot_batch(),
                timeout=self.fetch_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Market data fetch timed out after %ss", self.fetch_timeout_seconds)
            batch = SnapshotBatch(source="timeout", is_fresh=False)
        self._last_batch = batch
        return batch

    def _score_batch(self, profile: RequestProfile, batch: SnapshotBatch) -> List[RankedAsset]:
        candidates: List[RankedAsset] = []

        for snapshot in self._select_equities(profile, batch.equities):
            candidates.append(self._to_ranked(snapshot, profile, batch))

        if self._include_funds(profile, len(candidates)) and batch.mutual_funds:
            funds = [self._to_ranked(fund, profile, batch) for fund in batch.mutual_funds]
            if profile.asset_type != AssetType.MUTUAL_FUND:
                # Funds only fill the room left under max_results
                room = profile.max_results - len(candidates)
                funds = sorted(funds, key=lambda a: a.score, reverse=True)[:room]
            candidates.extend(funds)

        return candidates

    @staticmethod
    def _select_equities(
        profile: RequestProfile, equities: Tuple[AssetSnapshot, ...]
    ) -> List[AssetSnapshot]:
        if profile.asset_type == AssetType.ALL:
            return list(equities)
        if profile.asset_type == AssetType.MUTUAL_FUND:
            return []
        return [s for s in equities if s.asset_type == profile.asset_type]

    def _include_funds(self, profile: RequestProfile, equity_count: int) -> bool:
        if profile.asset_type == AssetType.MUTUAL_FUND:
            return True
        if profile.asset_type == AssetType.ETF:
            return False
        wants_funds = profile.is_conservative or profile.amount > self.mutual_fund_amount_threshold
        return wants_funds and equity_count < profile.max_results

    def _to_ranked(self, snapshot, profile: RequestProfile, batch: SnapshotBatch) -> RankedAsset:
        result = self._engine.score(snapshot, profile, batch.data_profile, batch.is_fresh)
        asset_type = (
            AssetType.MUTUAL_FUND if isinstance(snapshot, MutualFundSnapshot) else snapshot.asset_type
        )
        return RankedAsset(
            symbol=snapshot.symbol,
            name=snapshot.name,
            score=result.score,
            confidence=result.confidence,
            rank=0,
            recommendation=result.recommendation,
            last_price=snapshot.price,
            change=snapshot.change_display,
            asset_type=asset_type,
        )

    def _elapsed_ms(self, start: float) -> int:
        return int((self._timer() - start) * 1000)

    def _build(
        self,
        profile: RequestProfile,
        rankings: List[RankedAsset],
        total_assets: int,
        data_source: str,
        start: float,
        status: ResultStatus = ResultStatus.SUCCESS,
        disclaimer: str = DEFAULT_DISCLAIMER,
    ) -> RankingResult:
        metadata = RankingMetadata(
            total_assets=total_assets,
            displayed_assets=len(rankings),
            data_source=data_source,
            processing_time_ms=self._elapsed_ms(start),
            cache_hit=False,
            disclaimer=disclaimer,
            last_updated=format_ist(),
            request_params=self._request_params(profile),
        )
        return RankingResult(rankings=tuple(rankings), status=status, metadata=metadata)

    @staticmethod
    def _request_params(profile: RequestProfile) -> Dict[str, str]:
        return {
            "amount": f"₹{profile.amount:,.0f}",
            "horizon": f"{profile.horizon_days} days",
            "riskProfile": profile.risk_preference.value,
        }

    def _from_cache(self, cached: RankingResult, start: float) -> RankingResult:
        source = cached.metadata.data_source
        if not source.startswith(CACHE_SOURCE_PREFIX):
            source = CACHE_SOURCE_PREFIX + source
        metadata = dataclasses.replace(
            cached.metadata,
            cache_hit=True,
            data_source=source,
            processing_time_ms=self._elapsed_ms(start),
        )
        return dataclasses.replace(cached, metadata=metadata)

    def _fallback(self, profile: RequestProfile, start: float) -> RankingResult:
        logger.warning("Using fallback response due to error")
        rankings = generate_mock_rankings(profile)
        return self._build(
            profile,
            rankings,
            len(rankings),
            FALLBACK_SOURCE,
            start,
            status=ResultStatus.FALLBACK,
            disclaimer=DEFAULT_DISCLAIMER + FALLBACK_NOTICE,
        )

    def freshness(self) -> Dict[str, object]:
        """Provider label, last fetch time and freshness of the last batch."""
        batch = self._last_batch
        if batch is None:
            return {"source": None, "lastFetched": None, "isFresh": False}
        return {
            "source": batch.source,
            "lastFetched": format_ist(batch.fetched_at) if batch.fetched_at else None,
            "isFresh": batch.is_fresh,
        }
