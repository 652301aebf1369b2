"""
Synthesized rankings used when no usable market data is available.

Values are pseudo-random but seeded from the request fingerprint, so the
same request always gets the same fallback set.
"""

import hashlib
import random
from typing import List, Sequence

from asset_advisor.domain.models import AssetType, RankedAsset, RequestProfile
from asset_advisor.domain.services.score_engine import ScoreEngine


MOCK_UNIVERSE = (
    ("RELIANCE", "Reliance Industries Ltd."),
    ("TCS", "Tata Consultancy Services Ltd."),
    ("INFY", "Infosys Ltd."),
    ("HDFC", "HDFC Bank Ltd."),
    ("ICICI", "ICICI Bank Ltd."),
    ("BAJAJ-AUTO", "Bajaj Auto Ltd."),
    ("WIPRO", "Wipro Ltd."),
    ("ITC", "ITC Ltd."),
    ("SBIN", "State Bank of India"),
    ("LT", "Larsen & Toubro Ltd."),
)


def seed_for(fingerprint: str) -> int:
    digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
    return int(digest[:16], 16)


def assign_ranks(assets: Sequence[RankedAsset]) -> List[RankedAsset]:
    """
    Sort by score (descending, stable) and hand out dense 1-based ranks.
    """
    ordered = sorted(assets, key=lambda a: a.score, reverse=True)
    return [
        RankedAsset(
            symbol=a.symbol,
            name=a.name,
            score=a.score,
            confidence=a.confidence,
            rank=position,
            recommendation=a.recommendation,
            last_price=a.last_price,
            change=a.change,
            asset_type=a.asset_type,
        )
        for position, a in enumerate(ordered, start=1)
    ]


def generate_mock_rankings(profile: RequestProfile) -> List[RankedAsset]:
    """Bounded, deterministic ranking set for a profile."""
    rng = random.Random(seed_for(profile.fingerprint))
    count = min(len(MOCK_UNIVERSE), profile.max_results)

    assets: List[RankedAsset] = []
    for i in range(count):
        symbol, name = MOCK_UNIVERSE[i]

        base_score = 0.9 - (i * 0.05)
        score = round(max(0.5, min(1.0, base_score + (rng.random() - 0.5) * 0.1)), 4)
        confidence = max(70, 95 - (i * 3))
        price = 1000.0 + rng.random() * 3000
        change = (rng.random() - 0.5) * 10

        assets.append(
            RankedAsset(
                symbol=symbol,
                name=name,
                score=score,
                confidence=confidence,
                rank=i + 1,
                recommendation=ScoreEngine.recommend(score, confidence, profile.risk_preference),
                last_price=round(price, 2),
                change=f"{change:+.2f}%",
                asset_type=AssetType.EQUITY,
            )
        )

    return assign_ranks(assets)
