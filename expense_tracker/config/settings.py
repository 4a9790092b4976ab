"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Everything the tracker needs from its host (where to keep data, how to
display money, how loud to log) is declared and validated in one place.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
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

    # Storage
    storage_backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Key-value store backing the ledger"
    )
    data_file: Path = Field(
        default=Path("expense_tracker_data.json"),
        description="Path of the JSON store when storage_backend is 'file'"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        description="Symbol prefixed to formatted amounts"
    )
    recent_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many transactions the recent activity panel shows"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Standard library logging level name"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept level names in any case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def data_path(self) -> Path:
        """Data file with the user's home directory expanded."""
        return self.data_file.expanduser()


@lru_cache()
def get_settings() -> TrackerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return TrackerSettings()
