"""
Configuration Management for the Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This includes the per-kind category lists, which the validator reads
instead of hard-coded constants.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.transaction import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    CategoryPolicy,
)


class LedgerSettings(BaseSettings):
    """Ledger file location and display configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default_factory=lambda: Path.home() / "Downloads",
        description="Directory where relative ledger file names are resolved"
    )
    default_filename: str = Field(
        default="transactions.txt",
        description="Ledger file used at startup"
    )
    file_extension: str = Field(
        default=".txt",
        description="Extension appended to file names that lack it"
    )
    create_sample_file: bool = Field(
        default=True,
        description="Create a two-line sample ledger if the default file is missing"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of amounts"
    )
    future_date_tolerance_days: int = Field(
        default=0,
        ge=0,
        description="Warn about entry dates this many days in the future (0 disables)"
    )

    @field_validator("file_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith("."):
            v = "." + v
        return v

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def default_path(self) -> Path:
        return self.data_dir / self.default_filename


class CategorySettings(BaseSettings):
    """
    Allowed categories per transaction kind.

    Lists are read from JSON env vars, e.g.
    CATEGORIES_INCOME='["Salary", "Freelance"]'.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATEGORIES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    income: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCOME_CATEGORIES),
        description="Categories allowed for income entries"
    )
    expense: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES),
        description="Categories allowed for expense entries"
    )

    def category_policy(self) -> CategoryPolicy:
        return CategoryPolicy(income=tuple(self.income), expense=tuple(self.expense))


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator("log_level")
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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def categories(self) -> CategorySettings:
        return CategorySettings()

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

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.categories.category_policy()
        results["categories"] = True
    except Exception as e:
        results["categories"] = False
        results["categories_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
