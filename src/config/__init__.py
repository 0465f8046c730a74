"""Configuration package."""

from src.config.settings import (
    AppSettings,
    CategorySettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CategorySettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
