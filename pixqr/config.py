"""Settings for the pixqr service, read from the environment or ``.env``."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="Enable JSON formatted logs")


class Settings(BaseSettings):
    """PIX batch service settings.

    The BR Code fields themselves (currency, country, category code) are fixed
    by the payload format and are not configurable.
    """

    model_config = SettingsConfigDict(env_file=(Path(__file__).resolve().parent.parent / ".env"), env_file_encoding="utf-8")

    app_name: str = Field(default="pixqr")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    api_key: str = Field(default="dev-secret-key", description="Value expected in the X-API-Key header")
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"], description="CORS origins allowed to call the API from the browser form")
    max_payers: int = Field(default=500, ge=1, le=5000, description="Largest number of payers accepted in one batch")
    csv_filename: str = Field(default="pix", min_length=1, description="Download name of the CSV export, without extension")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return memoized application settings."""

    return Settings()


settings = get_settings()
