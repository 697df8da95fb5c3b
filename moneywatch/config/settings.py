"""
Configuration Management for MoneyWatch

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Aggregation constants that a user might reasonably tune (week start,
top-N cutoffs, reseed thresholds) live here rather than being scattered
through the engine.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYWATCH_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".moneywatch"),
        description="Directory holding one JSON file per ledger key"
    )
    key_prefix: str = Field(
        default="moneywatch",
        min_length=1,
        description="Prefix for the five ledger keys"
    )

    @field_validator('key_prefix')
    @classmethod
    def strip_trailing_separator(cls, v: str) -> str:
        """Keys are built as '<prefix>-<collection>'."""
        return v.rstrip("-")


class LedgerSettings(BaseSettings):
    """Ledger aggregation and seeding configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYWATCH_LEDGER_",
        extra="ignore"
    )

    # Calendar
    week_start_day: int = Field(
        default=0,
        ge=0,
        le=6,
        description="First day of a weekly budget period (0=Monday, 6=Sunday)"
    )

    # Dashboard shaping
    top_category_limit: int = Field(
        default=8,
        ge=1,
        le=50,
        description="Number of categories kept in the spending breakdown"
    )
    upcoming_horizon_days: int = Field(
        default=30,
        ge=0,
        description="How far ahead the upcoming-bills list looks"
    )
    trend_span_months: int = Field(
        default=6,
        description="Default number of months in the spending trend"
    )
    recent_transaction_limit: int = Field(
        default=5,
        ge=0,
        description="Recent transactions shown on the dashboard"
    )
    budget_warning_pct: float = Field(
        default=80.0,
        gt=0.0,
        le=100.0,
        description="Utilization at which a budget is flagged as a warning"
    )

    # Reseed predicate
    min_transaction_count: int = Field(
        default=100,
        ge=0,
        description="Persisted ledgers smaller than this are offered a reset"
    )
    future_date_tolerance_days: int = Field(
        default=31,
        ge=0,
        description="How far past today a persisted transaction may be dated"
    )

    # Synthetic history
    seed_history_months: int = Field(
        default=12,
        ge=1,
        le=24,
        description="Months of synthetic history generated on first run"
    )
    seed_random_seed: Optional[int] = Field(
        default=None,
        description="Fixed seed for the synthetic generator (None = random)"
    )

    @field_validator('trend_span_months')
    @classmethod
    def validate_trend_span(cls, v: int) -> int:
        """Only the spans the dashboard offers are accepted."""
        if v not in (3, 6, 12):
            raise ValueError("trend_span_months must be one of 3, 6, 12")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
