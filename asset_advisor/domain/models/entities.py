"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


DEFAULT_DISCLAIMER = (
    "This analysis is for educational purposes only and should not be considered "
    "as investment advice. Please consult with a financial advisor before making "
    "investment decisions."
)
FALLBACK_NOTICE = " Note: Using fallback data due to system error."


class RiskPreference(str, Enum):
    """Investor risk appetite"""
    CONSERVATIVE = "CONSERVATIVE"
    MODERATE = "MODERATE"
    AGGRESSIVE = "AGGRESSIVE"


class AssetType(str, Enum):
    """Asset type filter / snapshot kind"""
    EQUITY = "EQUITY"
    MUTUAL_FUND = "MUTUAL_FUND"
    ETF = "ETF"
    ALL = "ALL"


class Recommendation(str, Enum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


class ResultStatus(str, Enum):
    SUCCESS = "success"
    FALLBACK = "fallback"
    ERROR = "error"


@dataclass(frozen=True)
class RequestProfile:
    """Ranking request - Immutable"""
    amount: float
    horizon_days: int
    risk_preference: RiskPreference = RiskPreference.MODERATE
    asset_type: AssetType = AssetType.EQUITY
    max_results: int = 10

    def __post_init__(self):
        # Accept raw strings from the wire
        object.__setattr__(self, "risk_preference", RiskPreference(self.risk_preference))
        object.__setattr__(self, "asset_type", AssetType(self.asset_type))

        if self.amount is None or self.amount <= 0:
            raise ValueError("Investment amount must be positive")
        if not 1 <= self.horizon_days <= 3650:
            raise ValueError("Horizon must be between 1 and 3650 days")
        if not 1 <= self.max_results <= 50:
            raise ValueError("Max results must be between 1 and 50")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequestProfile":
        """Build from the camelCase wire payload."""
        return cls(
            amount=float(data["amountInr"]),
            horizon_days=int(data["horizonDays"]),
            risk_preference=data.get("riskPreference", RiskPreference.MODERATE.value),
            asset_type=data.get("assetType", AssetType.EQUITY.value),
            max_results=int(data.get("maxResults", 10)),
        )

    @property
    def fingerprint(self) -> str:
        """Canonical cache identity; 100000 and 100000.0 collapse to one key."""
        return (
            f"ranking_{self.amount:.2f}_{self.horizon_days}_"
            f"{self.risk_preference.value}_{self.asset_type.value}_{self.max_results}"
        )

    @property
    def is_short_term(self) -> bool:
        return self.horizon_days <= 90

    @property
    def is_medium_term(self) -> bool:
        return 90 < self.horizon_days <= 540

    @property
    def is_long_term(self) -> bool:
        return self.horizon_days > 540

    @property
    def is_conservative(self) -> bool:
        return self.risk_preference == RiskPreference.CONSERVATIVE

    @property
    def is_moderate(self) -> bool:
        return self.risk_preference == RiskPreference.MODERATE

    @property
    def is_aggressive(self) -> bool:
        return self.risk_preference == RiskPreference.AGGRESSIVE


@dataclass(frozen=True)
class AssetSnapshot:
    """Point-in-time equity/ETF quote - Immutable"""
    symbol: str
    name: str
    price: float
    change_percent: float
    volume: Optional[int] = None
    high: Optional[float] = None
    low: Optional[float] = None
    prev_close: Optional[float] = None
    asset_type: AssetType = AssetType.EQUITY
    as_of: Optional[datetime] = None

    def __post_init__(self):
        if not self.symbol:
            raise ValueError("Snapshot symbol cannot be empty")
        if self.price is None or self.price <= 0:
            raise ValueError("Snapshot price must be positive")
        if self.volume is not None and self.volume < 0:
            raise ValueError("Snapshot volume cannot be negative")

    @property
    def daily_return(self) -> float:
        """Fractional return; prefers prev close over the quoted change%."""
        if self.prev_close:
            return (self.price - self.prev_close) / self.prev_close
        return self.change_percent / 100.0

    @property
    def change_display(self) -> str:
        return f"{self.change_percent:+.2f}%"


@dataclass(frozen=True)
class MutualFundSnapshot:
    """AMFI NAV record - Immutable"""
    scheme_code: str
    scheme_name: str
    nav: float
    change_percent: float
    nav_date: Optional[date] = None

    def __post_init__(self):
        if not self.scheme_code:
            raise ValueError("Scheme code cannot be empty")
        if self.nav is None or self.nav <= 0:
            raise ValueError("NAV must be positive")

    @property
    def symbol(self) -> str:
        return self.scheme_code

    @property
    def name(self) -> str:
        return self.scheme_name

    @property
    def price(self) -> float:
        return self.nav

    @property
    def daily_return(self) -> float:
        return self.change_percent / 100.0

    @property
    def change_display(self) -> str:
        return f"{self.change_percent:+.2f}%"


@dataclass(frozen=True)
class DataSourceProfile:
    """
    Describes a snapshot source: which fields it fills in and how its
    numbers are scaled. The score engine reads weights and bounds from here
    instead of branching on where the data came from.
    """
    name: str
    momentum_weight: float
    volume_reference: float
    score_floor: float
    score_ceiling: float
    base_confidence: int
    volume_bonus: int
    range_bonus: int
    prev_close_bonus: int
    freshness_bonus: int
    has_range: bool = True
    has_prev_close: bool = True
    reports_freshness: bool = False


# End-of-day equity table (OHLC + prev close, volume in shares)
EOD_TABLE = DataSourceProfile(
    name="NSE/BSE EOD",
    momentum_weight=0.3,
    volume_reference=1_000_000,
    score_floor=0.0,
    score_ceiling=1.0,
    base_confidence=50,
    volume_bonus=20,
    range_bonus=15,
    prev_close_bonus=15,
    freshness_bonus=0,
)

# Live quote feed (price, change%, volume, optional day range; no prev close, freshness-aware)
LIVE_FEED = DataSourceProfile(
    name="NSE Live",
    momentum_weight=0.4,
    volume_reference=10_000_000,
    score_floor=0.2,
    score_ceiling=0.95,
    base_confidence=60,
    volume_bonus=15,
    range_bonus=10,
    prev_close_bonus=0,
    freshness_bonus=5,
    has_prev_close=False,
    reports_freshness=True,
)


@dataclass(frozen=True)
class SnapshotBatch:
    """One refresh cycle of market data as handed over by a provider"""
    equities: Tuple[AssetSnapshot, ...] = ()
    mutual_funds: Tuple[MutualFundSnapshot, ...] = ()
    source: str = "unknown"
    data_profile: DataSourceProfile = EOD_TABLE
    fetched_at: Optional[datetime] = None
    is_fresh: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.equities and not self.mutual_funds

    @property
    def is_usable(self) -> bool:
        return self.is_fresh and not self.is_empty


@dataclass(frozen=True)
class ScoreResult:
    score: float
    confidence: int
    recommendation: Recommendation


@dataclass(frozen=True)
class RankedAsset:
    """One row of a ranking result - Immutable"""
    symbol: str
    name: str
    score: float
    confidence: int
    rank: int
    recommendation: Recommendation
    last_price: float
    change: str
    asset_type: AssetType = AssetType.EQUITY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "score": self.score,
            "confidence": self.confidence,
            "rank": self.rank,
            "recommendation": self.recommendation.value,
            "lastPrice": self.last_price,
            "change": self.change,
            "assetType": self.asset_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankedAsset":
        return cls(
            symbol=data["symbol"],
            name=data["name"],
            score=float(data["score"]),
            confidence=int(data["confidence"]),
            rank=int(data["rank"]),
            recommendation=Recommendation(data["recommendation"]),
            last_price=float(data["lastPrice"]),
            change=data["change"],
            asset_type=AssetType(data.get("assetType", AssetType.EQUITY.value)),
        )


@dataclass(frozen=True)
class RankingMetadata:
    total_assets: int
    displayed_assets: int
    data_source: str
    processing_time_ms: int
    cache_hit: bool = False
    disclaimer: str = DEFAULT_DISCLAIMER
    last_updated: str = ""
    request_params: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAssets": self.total_assets,
            "displayedAssets": self.displayed_assets,
            "dataSource": self.data_source,
            "processingTimeMs": self.processing_time_ms,
            "cacheHit": self.cache_hit,
            "disclaimer": self.disclaimer,
            "lastUpdated": self.last_updated,
            "requestParams": dict(self.request_params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingMetadata":
        if not isinstance(data["dataSource"], str):
            raise TypeError("dataSource must be a string")
        return cls(
            total_assets=int(data["totalAssets"]),
            displayed_assets=int(data["displayedAssets"]),
            data_source=data["dataSource"],
            processing_time_ms=int(data.get("processingTimeMs", 0)),
            cache_hit=bool(data.get("cacheHit", False)),
            disclaimer=data.get("disclaimer") or DEFAULT_DISCLAIMER,
            last_updated=data.get("lastUpdated", ""),
            request_params=dict(data.get("requestParams") or {}),
        )


@dataclass(frozen=True)
class RankingResult:
    """Ranked asset set for one request - rank-ascending"""
    rankings: Tuple[RankedAsset, ...]
    status: ResultStatus
    metadata: RankingMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "rankings": [r.to_dict() for r in self.rankings],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingResult":
        return cls(
            rankings=tuple(RankedAsset.from_dict(r) for r in data["rankings"]),
            status=ResultStatus(data["status"]),
            metadata=RankingMetadata.from_dict(data["metadata"]),
        )


@dataclass(frozen=True)
class ExplanationResponse:
    """Answer to a free-text question about an asset"""
    status: ResultStatus
    answer: str
    citations: Tuple[str, ...]
    confidence: int
    disclaimer: str

    def __post_init__(self):
        if not self.disclaimer or not self.disclaimer.strip():
            raise ValueError("Disclaimer is mandatory")
        if not 0 <= self.confidence <= 100:
            raise ValueError("Confidence must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "answer": self.answer,
            "citations": list(self.citations),
            "confidence": self.confidence,
            "disclaimer": self.disclaimer,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExplanationResponse":
        return cls(
            status=ResultStatus(data["status"]),
            answer=data["answer"],
            citations=tuple(data.get("citations") or ()),
            confidence=int(data["confidence"]),
            disclaimer=data["disclaimer"],
        )


@dataclass(frozen=True)
class UsageStats:
    """Daily language-model spend snapshot"""
    daily_usage: float
    daily_limit: float
    remaining_budget: float
    usage_percent: float
    is_near_limit: bool
    is_over_limit: bool

    @property
    def status(self) -> str:
        if self.is_over_limit:
            return "BUDGET_EXCEEDED"
        if self.is_near_limit:
            return "NEAR_LIMIT"
        return "OK"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dailyUsage": round(self.daily_usage, 4),
            "dailyLimit": self.daily_limit,
            "usagePercent": round(self.usage_percent, 1),
            "remainingBudget": round(self.remaining_budget, 4),
            "isNearLimit": self.is_near_limit,
            "isOverLimit": self.is_over_limit,
            "status": self.status,
            "recommendation": (
                "Using fallback responses" if self.is_over_limit else "Language model active"
            ),
        }
