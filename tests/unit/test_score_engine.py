from datetime import date
from types import SimpleNamespace

import pytest

from asset_advisor.domain.models import (
    EOD_TABLE,
    LIVE_FEED,
    AssetSnapshot,
    MutualFundSnapshot,
    Recommendation,
    RequestProfile,
    RiskPreference,
)
from asset_advisor.domain.services.score_engine import ScoreEngine


def _profile(risk="MODERATE"):
    return RequestProfile(amount=50000, horizon_days=180, risk_preference=risk)


def test_full_eod_snapshot_scores_every_component():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(
        symbol="RELIANCE",
        name="Reliance Industries Ltd.",
        price=100.0,
        change_percent=2.04,
        volume=500_000,
        high=101.0,
        low=97.0,
        prev_close=98.0,
    )

    result = engine.score(snapshot, _profile(), EOD_TABLE)

    # 0.5 + 0.3*0.0204 + 0.2*0.5 + 0.25*0.96 + 0.25*0.2
    assert result.score == pytest.approx(0.8961, abs=1e-4)
    # 50 + 20 + 15 + 15, -10 for an extreme score
    assert result.confidence == 90
    assert result.recommendation is Recommendation.BUY


def test_eod_snapshot_without_volume_or_range_caps_confidence():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(
        symbol="ITC",
        name="ITC Ltd.",
        price=101.0,
        change_percent=1.0,
        prev_close=100.0,
    )

    result = engine.score(snapshot, _profile(), EOD_TABLE)

    assert result.confidence <= 65
    assert result.score == pytest.approx(0.503, abs=1e-4)


def test_live_snapshot_without_volume_caps_confidence_even_when_fresh():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(symbol="TCS", name="TCS", price=4000.0, change_percent=1.0)

    result = engine.score(snapshot, _profile(), LIVE_FEED, is_fresh=True)

    assert result.confidence == 65
    assert result.score == pytest.approx(0.504, abs=1e-4)


def test_eod_score_clamped_to_one():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(
        symbol="BAJFINANCE",
        name="Bajaj Finance",
        price=110.0,
        change_percent=10.0,
        volume=5_000_000,
        high=110.0,
        low=110.0,
    )

    result = engine.score(snapshot, _profile("AGGRESSIVE"), EOD_TABLE)

    assert result.score == 1.0


def test_live_score_clamped_to_floor():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(symbol="COALINDIA", name="Coal India", price=10.0, change_percent=-90.0)

    result = engine.score(snapshot, _profile("CONSERVATIVE"), LIVE_FEED)

    assert result.score == 0.2
    assert result.confidence == 60
    assert result.recommendation is Recommendation.SELL


def test_bad_snapshot_falls_back_to_base_score():
    engine = ScoreEngine()

    result = engine.score_equity(SimpleNamespace(symbol="BAD"), _profile(), EOD_TABLE)

    assert result.score == 0.5
    assert result.confidence == EOD_TABLE.base_confidence
    assert result.recommendation is Recommendation.HOLD


def test_non_finite_change_falls_back_to_base_score():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(symbol="NAN", name="NaN Ltd.", price=10.0, change_percent=float("nan"))

    result = engine.score(snapshot, _profile(), LIVE_FEED)

    assert result.score == 0.5
    assert result.confidence == LIVE_FEED.base_confidence


def test_fund_scoring_uses_fund_base_and_nav_date():
    engine = ScoreEngine()
    fund = MutualFundSnapshot(
        scheme_code="100002",
        scheme_name="SBI Blue Chip Fund - Growth",
        nav=92.34,
        change_percent=1.0,
        nav_date=date(2026, 2, 10),
    )

    moderate = engine.score(fund, _profile(), EOD_TABLE)
    conservative = engine.score(fund, _profile("CONSERVATIVE"), EOD_TABLE)

    assert moderate.score == pytest.approx(0.65)
    assert moderate.confidence == 60
    assert moderate.recommendation is Recommendation.BUY
    assert conservative.score == pytest.approx(0.725)
    assert conservative.recommendation is Recommendation.HOLD


@pytest.mark.parametrize(
    "risk, signal, expected",
    [
        (RiskPreference.CONSERVATIVE, 0.019, 0.3),
        (RiskPreference.CONSERVATIVE, 0.02, -0.2),
        (RiskPreference.CONSERVATIVE, -0.03, -0.2),
        (RiskPreference.MODERATE, 0.02, 0.0),
        (RiskPreference.MODERATE, 0.03, 0.2),
        (RiskPreference.MODERATE, -0.03, 0.2),
        (RiskPreference.MODERATE, 0.04, 0.0),
        (RiskPreference.AGGRESSIVE, 0.05, -0.1),
        (RiskPreference.AGGRESSIVE, 0.051, 0.3),
        (RiskPreference.AGGRESSIVE, -0.08, 0.3),
    ],
)
def test_risk_adjustment_bands(risk, signal, expected):
    assert ScoreEngine.risk_adjustment(risk, signal) == expected


@pytest.mark.parametrize(
    "score, confidence, risk, expected",
    [
        (0.9, 59, RiskPreference.MODERATE, Recommendation.HOLD),
        (0.8, 80, RiskPreference.CONSERVATIVE, Recommendation.BUY),
        (0.7, 80, RiskPreference.CONSERVATIVE, Recommendation.HOLD),
        (0.7, 80, RiskPreference.MODERATE, Recommendation.BUY),
        (0.5, 80, RiskPreference.AGGRESSIVE, Recommendation.HOLD),
        (0.3, 80, RiskPreference.AGGRESSIVE, Recommendation.HOLD),
        (0.3, 80, RiskPreference.MODERATE, Recommendation.SELL),
    ],
)
def test_recommendation_mapping(score, confidence, risk, expected):
    assert ScoreEngine.recommend(score, confidence, risk) is expected


def test_recommendation_follows_the_reported_score():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(symbol="HDFC", name="HDFC Bank Ltd.", price=100.0, change_percent=0.0, volume=875_200)

    result = engine.score(snapshot, _profile("CONSERVATIVE"), EOD_TABLE)

    # 0.5 + 0.2*0.8752 + 0.25*0.3 = 0.75004
    assert result.score == 0.75
    assert result.confidence == 70
    assert result.recommendation is Recommendation.HOLD


def test_live_snapshot_with_day_range_earns_range_bonus():
    engine = ScoreEngine()
    snapshot = AssetSnapshot(
        symbol="LT",
        name="Larsen & Toubro Ltd.",
        price=100.0,
        change_percent=1.0,
        volume=5_000_000,
        high=101.0,
        low=99.0,
    )

    result = engine.score(snapshot, _profile(), LIVE_FEED)

    # 0.5 + 0.4*0.01 + 0.2*0.5 + 0.25*0.98
    assert result.score == pytest.approx(0.849, abs=1e-4)
    # 60 + 15 + 10, -10 for an extreme score
    assert result.confidence == 75
