from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class IndicatorSettings(BaseModel):
    allowed_periods: List[int] = Field(default_factory=lambda: [7, 14, 21, 30])
    default_period: int = 14
    stoch_period: int = 14
    ema_period: int = 9
    extended: bool = True


class BatchSettings(BaseModel):
    batch_size: int = 10
    batch_delay_seconds: float = 1.0


class HistorySettings(BaseModel):
    fetch_days: int = 120
    display_points: int = 90
    min_extra_points: int = 20


class OpportunitySettings(BaseModel):
    buy_rsi_below: float = 40.0
    buy_min_score: int = 30
    sell_rsi_above: float = 70.0
    limit: int = 15


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MOMENTUMDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    timeout_seconds: float = 10.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MOMENTUMDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cache_ttl_seconds: int = Field(
        default=600,
        validation_alias=AliasChoices("CACHE_TTL_SECONDS", "MOMENTUMDESK_CACHE_TTL_SECONDS"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "MOMENTUMDESK_LOG_LEVEL"),
    )
    log_json: bool = False

    indicators: IndicatorSettings = Field(default_factory=IndicatorSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    opportunities: OpportunitySettings = Field(default_factory=OpportunitySettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)


settings = Settings()
