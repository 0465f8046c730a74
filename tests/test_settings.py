"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.config import (
    AppSettings,
    CategorySettings,
    LedgerSettings,
    get_settings,
    validate_all_settings,
)


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self, tmp_path):
        """Test default values with the test data directory."""
        settings = LedgerSettings()
        assert settings.data_dir == tmp_path
        assert settings.default_filename == "transactions.txt"
        assert settings.file_extension == ".txt"
        assert settings.create_sample_file is True
        assert settings.currency_symbol == "$"
        assert settings.default_path == tmp_path / "transactions.txt"

    def test_environment_override(self, monkeypatch):
        """Test LEDGER_ prefixed variables."""
        monkeypatch.setenv("LEDGER_CURRENCY_SYMBOL", "€")
        monkeypatch.setenv("LEDGER_CREATE_SAMPLE_FILE", "false")
        settings = LedgerSettings()
        assert settings.currency_symbol == "€"
        assert settings.create_sample_file is False

    def test_extension_gets_leading_dot(self):
        """Test that 'csv' is normalized to '.csv'."""
        assert LedgerSettings(file_extension="csv").file_extension == ".csv"

    def test_negative_tolerance_rejected(self):
        """Test that the future-date tolerance can't be negative."""
        with pytest.raises(PydanticValidationError):
            LedgerSettings(future_date_tolerance_days=-1)


class TestCategorySettings:
    """Tests for CategorySettings."""

    def test_default_policy(self):
        """Test the built-in category lists."""
        policy = CategorySettings().category_policy()
        assert "Salary" in policy.income
        assert "Food" in policy.expense

    def test_json_env_lists(self, monkeypatch):
        """Test category lists from JSON env vars."""
        monkeypatch.setenv("CATEGORIES_INCOME", '["Freelance", "Gift"]')
        policy = CategorySettings().category_policy()
        assert policy.income == ("Freelance", "Gift")
        assert "Food" in policy.expense


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_normalized(self):
        """Test that the level is upper-cased."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Test that an unknown level is rejected."""
        with pytest.raises(PydanticValidationError):
            AppSettings(log_level="verbose")


class TestSettingsAccess:
    """Tests for get_settings and validate_all_settings."""

    def test_get_settings_cached(self):
        """Test that the root settings object is cached."""
        assert get_settings() is get_settings()

    def test_validate_all_settings(self):
        """Test startup checks on a clean environment."""
        results = validate_all_settings()
        assert results == {"ledger": True, "categories": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test that a broken section is reported, not raised."""
        monkeypatch.setenv("CATEGORIES_EXPENSE", "[]")
        results = validate_all_settings()
        assert results["categories"] is False
        assert "categories_error" in results
        assert results["ledger"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
