"""Application configuration modeled with Pydantic for type safety."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: str = Field("development", alias="ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    data_dir: str = Field(".data", alias="DATA_DIR")
    lookback_days: int = Field(30, alias="DEDUPE_LOOKBACK_DAYS")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {','.join(LOG_LEVELS)}")
        return level

    @field_validator("lookback_days")
    @classmethod
    def _positive_lookback(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("DEDUPE_LOOKBACK_DAYS must be positive")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings instance."""
    return Settings()
