# backend/portfolio_dashboard/utils/settings.py
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Process configuration. Every field reads the env var of the same name, upper-cased."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8",
                                      env_ignore_empty=True, extra="ignore")

    app_name: str = "Portfolio Dashboard"
    api_version: str = "v1"
    debug: bool = False

    price_provider: str = "yahoo"
    fundamentals_provider: str = "google"
    fundamentals_table_path: Optional[str] = None
    polygon_api_key: Optional[str] = None

    price_cache_ttl: int = Field(15, gt=0)
    price_cache_check_period: int = Field(5, gt=0)
    fundamentals_cache_ttl: int = Field(3600, gt=0)
    fundamentals_cache_check_period: int = Field(600, gt=0)

    provider_timeout_seconds: float = Field(10.0, gt=0)
    max_concurrent_lookups: int = Field(8, gt=0)
    refresh_interval_seconds: int = Field(15, gt=0)

    # Comma-separated in the environment
    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("price_provider", "fundamentals_provider", mode="before")
    @classmethod
    def lower_case_provider(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


def get_settings() -> Settings:
    return Settings()
