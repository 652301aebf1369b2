"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    AssetType,
    Recommendation,
    ResultStatus,
    RiskPreference,

    # Entities
    AssetSnapshot,
    DataSourceProfile,
    ExplanationResponse,
    MutualFundSnapshot,
    RankedAsset,
    RankingMetadata,
    RankingResult,
    RequestProfile,
    ScoreResult,
    SnapshotBatch,
    UsageStats,

    # Constants
    DEFAULT_DISCLAIMER,
    EOD_TABLE,
    FALLBACK_NOTICE,
    LIVE_FEED,
)

__all__ = [
    # Enums
    "AssetType",
    "Recommendation",
    "ResultStatus",
    "RiskPreference",

    # Entities
    "AssetSnapshot",
    "DataSourceProfile",
    "ExplanationResponse",
    "MutualFundSnapshot",
    "RankedAsset",
    "RankingMetadata",
    "RankingResult",
    "RequestProfile",
    "ScoreResult",
    "SnapshotBatch",
    "UsageStats",

    # Constants
    "DEFAULT_DISCLAIMER",
    "EOD_TABLE",
    "FALLBACK_NOTICE",
    "LIVE_FEED",
]
