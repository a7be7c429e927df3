"""
Configuration Management for Trip Ledger

Uses pydantic-settings for type-safe configuration from environment
variables and an optional .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirebaseSettings(BaseSettings):
    """Firebase / Firestore configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: Optional[str] = Field(
        default=None,
        description="Path to the Firebase service account JSON"
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Firebase project id (taken from credentials if unset)"
    )


class RatesSettings(BaseSettings):
    """Exchange-rate source and cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_url: str = Field(
        default="https://api.frankfurter.app",
        description="Base URL of the Frankfurter-compatible rates API"
    )
    ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="How long a fetched rate table stays fresh"
    )
    retry_seconds: int = Field(
        default=60,
        ge=0,
        description="Wait after a failed fetch before trying again"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="HTTP timeout for a rates fetch"
    )


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    reporting_currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="Currency all amounts are normalized into"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON instead of console output"
    )

    @field_validator("reporting_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def firebase(self) -> FirebaseSettings:
        return FirebaseSettings()

    @property
    def rates(self) -> RatesSettings:
        return RatesSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
