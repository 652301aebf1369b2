"""
SCORE ENGINE
Turn one market snapshot into (score, confidence, recommendation)

RESPONSIBILITIES:
- Additive weighted score from a 0.5 base
- Completeness-driven confidence
- Risk-aware recommendation label

RULES:
❌ No I/O, no caching, no ranking
❌ Never raises on bad snapshot data
✅ Pure calculation
✅ Deterministic output
✅ Score always inside [0, 1], confidence inside [30, 95]
"""

import logging
import math
from typing import Union

from asset_advisor.domain.models import (
    EOD_TABLE,
    AssetSnapshot,
    DataSourceProfile,
    MutualFundSnapshot,
    Recommendation,
    RequestProfile,
    RiskPreference,
    ScoreResult,
)

logger = logging.getLogger(__name__)

Snapshot = Union[AssetSnapshot, MutualFundSnapshot]


class ScoreEngine:
    """
    Score Engine
    One scoring policy for every data source; the source only changes
    the constants it is parameterised with.
    """

    BASE_SCORE = 0.5
    LIQUIDITY_WEIGHT = 0.2
    STABILITY_WEIGHT = 0.25
    RISK_WEIGHT = 0.25

    # Funds move less, so they start higher and react less to change%
    FUND_BASE_SCORE = 0.6
    FUND_MOMENTUM_WEIGHT = 0.05
    FUND_NAV_DATE_BONUS = 10

    # Bands on the absolute fractional daily return
    LOW_THRESHOLD = 0.02
    MID_THRESHOLD = 0.04
    HIGH_THRESHOLD = 0.05

    CONFIDENCE_MIN = 30
    CONFIDENCE_MAX = 95
    EXTREME_HIGH = 0.8
    EXTREME_LOW = 0.2
    EXTREME_PENALTY = 10

    RECOMMENDATION_CONFIDENCE_FLOOR = 60

    def score(
        self,
        snapshot: Snapshot,
        profile: RequestProfile,
        data_profile: DataSourceProfile = EOD_TABLE,
        is_fresh: bool = False,
    ) -> ScoreResult:
        """
        Score a single snapshot for a request profile

        Args:
            snapshot: Equity/ETF or mutual fund snapshot
            profile: Investor request profile
            data_profile: Source descriptor (weights, bounds, field flags)
            is_fresh: Whether the batch was refreshed recently

        Returns:
            ScoreResult with score in [0, 1] and bounded confidence
        """
        if isinstance(snapshot, MutualFundSnapshot):
            return self.score_fund(snapshot, profile, data_profile, is_fresh)
        return self.score_equity(snapshot, profile, data_profile, is_fresh)

    def score_equity(
        self,
        snapshot: AssetSnapshot,
        profile: RequestProfile,
        data_profile: DataSourceProfile = EOD_TABLE,
        is_fresh: bool = False,
    ) -> ScoreResult:
        try:
            score = self._equity_score(snapshot, profile.risk_preference, data_profile)
            confidence = self._equity_confidence(snapshot, score, data_profile, is_fresh)
        except Exception as exc:
            logger.warning(
                "Error calculating score for %s: %s",
                getattr(snapshot, "symbol", "<unknown>"),
                exc,
            )
            score = self.BASE_SCORE
            confidence = data_profile.base_confidence

        score = round(score, 4)
        return ScoreResult(
            score=score,
            confidence=confidence,
            recommendation=self.recommend(score, confidence, profile.risk_preference),
        )

    def score_fund(
        self,
        fund: MutualFundSnapshot,
        profile: RequestProfile,
        data_profile: DataSourceProfile = EOD_TABLE,
        is_fresh: bool = False,
    ) -> ScoreResult:
        try:
            signal = fund.daily_return
            score = self.FUND_BASE_SCORE + fund.change_percent * self.FUND_MOMENTUM_WEIGHT
            score += self.risk_adjustment(profile.risk_preference, signal) * self.RISK_WEIGHT
            score = self._clamp_score(score, data_profile)

            confidence = data_profile.base_confidence
            if fund.nav_date is not None:
                confidence += self.FUND_NAV_DATE_BONUS
            if data_profile.reports_freshness and is_fresh:
                confidence += data_profile.freshness_bonus
            confidence = self._finalize_confidence(confidence, score)
        except Exception as exc:
            logger.warning(
                "Error calculating fund score for %s: %s",
                getattr(fund, "scheme_code", "<unknown>"),
                exc,
            )
            score = self.BASE_SCORE
            confidence = data_profile.base_confidence

        score = round(score, 4)
        return ScoreResult(
            score=score,
            confidence=confidence,
            recommendation=self.recommend(score, confidence, profile.risk_preference),
        )

    def _equity_score(
        self,
        snapshot: AssetSnapshot,
        risk: RiskPreference,
        data_profile: DataSourceProfile,
    ) -> float:
        daily_return = snapshot.daily_return
        score = self.BASE_SCORE

        # Momentum
        score += daily_return * data_profile.momentum_weight

        # Liquidity
        if snapshot.volume is not None:
            volume_score = min(snapshot.volume / data_profile.volume_reference, 1.0)
            score += volume_score * self.LIQUIDITY_WEIGHT

        # Stability
        if data_profile.has_range and snapshot.high is not None and snapshot.low is not None:
            day_range = (snapshot.high - snapshot.low) / snapshot.price
            score += max(0.0, 1.0 - day_range) * self.STABILITY_WEIGHT

        # Risk preference
        score += self.risk_adjustment(risk, daily_return) * self.RISK_WEIGHT

        return self._clamp_score(score, data_profile)

    def _equity_confidence(
        self,
        snapshot: AssetSnapshot,
        score: float,
        data_profile: DataSourceProfile,
        is_fresh: bool,
    ) -> int:
        confidence = data_profile.base_confidence

        if snapshot.volume is not None and snapshot.volume > 0:
            confidence += data_profile.volume_bonus
        if data_profile.has_range and snapshot.high is not None and snapshot.low is not None:
            confidence += data_profile.range_bonus
        if data_profile.has_prev_close and snapshot.prev_close is not None:
            confidence += data_profile.prev_close_bonus
        if data_profile.reports_freshness and is_fresh:
            confidence += data_profile.freshness_bonus

        return self._finalize_confidence(confidence, score)

    def _finalize_confidence(self, confidence: int, score: float) -> int:
        # Extreme scores are the least trustworthy
        if score > self.EXTREME_HIGH or score < self.EXTREME_LOW:
            confidence -= self.EXTREME_PENALTY
        return int(min(self.CONFIDENCE_MAX, max(self.CONFIDENCE_MIN, confidence)))

    @staticmethod
    def _clamp_score(score: float, data_profile: DataSourceProfile) -> float:
        if not math.isfinite(score):
            raise ValueError(f"non-finite score {score!r}")
        bounded = max(data_profile.score_floor, min(data_profile.score_ceiling, score))
        return max(0.0, min(1.0, bounded))

    @classmethod
    def risk_adjustment(cls, risk: RiskPreference, signal: float) -> float:
        """
        Step adjustment on |signal| for the investor's risk preference

        Logic:
        - CONSERVATIVE: +0.3 below LOW, else -0.2
        - AGGRESSIVE: +0.3 above HIGH, else -0.1
        - MODERATE: +0.2 strictly between LOW and MID, else 0
        """
        magnitude = abs(signal)
        if risk == RiskPreference.CONSERVATIVE:
            return 0.3 if magnitude < cls.LOW_THRESHOLD else -0.2
        if risk == RiskPreference.AGGRESSIVE:
            return 0.3 if magnitude > cls.HIGH_THRESHOLD else -0.1
        return 0.2 if cls.LOW_THRESHOLD < magnitude < cls.MID_THRESHOLD else 0.0

    @classmethod
    def recommend(cls, score: float, confidence: int, risk: RiskPreference) -> Recommendation:
        """Map score + confidence to BUY / HOLD / SELL"""
        if confidence < cls.RECOMMENDATION_CONFIDENCE_FLOOR:
            return Recommendation.HOLD

        if score > 0.75:
            return Recommendation.BUY
        if score > 0.6:
            return Recommendation.HOLD if risk == RiskPreference.CONSERVATIVE else Recommendation.BUY
        if score > 0.4:
            return Recommendation.HOLD
        return Recommendation.HOLD if risk == RiskPreference.AGGRESSIVE else Recommendation.SELL
