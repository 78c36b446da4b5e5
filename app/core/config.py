from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "FinanceAnalytics"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Month boundaries are computed in this timezone
    TIMEZONE: str = Field(default="UTC")

    # Analytics windows
    TREND_MONTHS: int = 12
    COMPARISON_MONTHS: int = 6
    CATEGORY_LOOKBACK_MONTHS: int = 12
    BUDGET_ALERT_THRESHOLD: float = 80.0
    GOAL_DEADLINE_DAYS: int = 30

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
