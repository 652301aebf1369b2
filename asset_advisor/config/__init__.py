"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    LOG_LEVEL: str = "INFO"

    # ======================
    # Cache
    # ======================
    CACHE_ENABLED: bool = True
    REDIS_ENABLED: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_PREFIX: str = "advisor:"
    RANKING_CACHE_TTL_SECONDS: int = 1800
    EXPLANATION_CACHE_TTL_SECONDS: int = 43200
    USAGE_TTL_SECONDS: int = 86400

    # ======================
    # Language model
    # ======================
    OPENAI_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://api.openai.com/v1"
    LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_MAX_TOKENS: int = 150
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT_SECONDS: float = 15.0

    # ======================
    # Budget
    # ======================
    BUDGET_DAILY_LIMIT: float = 5.0
    BUDGET_COST_PER_1K_TOKENS: float = 0.002
    BUDGET_COST_PROTECTION: bool = True
    BUDGET_NEAR_LIMIT_PCT: float = 80.0

    # ======================
    # Ranking
    # ======================
    MARKET_DATA_TIMEOUT_SECONDS: float = 5.0
    MARKET_DATA_REFRESH_MINUTES: int = 60
    MARKET_DATA_MAX_AGE_HOURS: int = 2
    MUTUAL_FUND_AMOUNT_THRESHOLD: float = 100000.0

    # ======================
    # Rate limiting
    # ======================
    RATE_LIMIT_MAX_REQUESTS: int = 30
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
