"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables.

    Stage defaults here apply whenever a pipeline request omits the
    corresponding configuration block.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000, ge=1, le=65535)
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "pretty", "console"] = Field(default="json")

    # Batch limits
    max_batch_records: int = Field(default=5000, ge=1)

    # Normalization
    title_max_length: int = Field(default=200, ge=1)
    summary_max_length: int = Field(default=500, ge=0)

    # Ranking
    default_top_n: int | None = Field(default=10, ge=1)
    default_half_life_hours: float = Field(default=24.0, gt=0.0)
    weight_relevance: float = Field(default=0.5, ge=0.0)
    weight_recency: float = Field(default=0.3, ge=0.0)
    weight_engagement: float = Field(default=0.2, ge=0.0)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
