"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Only the composition root (expense_tracker.app) reads these
settings. The record store, account directory and ledger take explicit
constructor arguments so they can be used without any environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the record store keeps its collections."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the collection files"
    )
    users_file: str = Field(default="users.json")
    expenses_file: str = Field(default="expenses.json")
    categories_file: str = Field(default="categories.json")

    @field_validator("users_file", "expenses_file", "categories_file")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Collection files must sit directly inside data_dir."""
        if not v or Path(v).name != v:
            raise ValueError(f"Expected a bare file name, got: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (otherwise console format)"
    )

    # Report defaults used by presentation layers
    recent_expenses_limit: int = Field(
        default=20,
        ge=1,
        le=500,
        description="How many expenses a recent-expenses view shows"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="How many months a spending trend covers"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

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
