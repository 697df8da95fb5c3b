"""Tests for settings loading."""

import logging

import pytest
from pydantic import ValidationError

from moneywatch.audit import AuditLogger
from moneywatch.config import (
    AppSettings,
    LedgerSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self):
        """Test the documented defaults."""
        settings = LedgerSettings()
        assert settings.week_start_day == 0
        assert settings.top_category_limit == 8
        assert settings.upcoming_horizon_days == 30
        assert settings.trend_span_months == 6
        assert settings.min_transaction_count == 100
        assert settings.future_date_tolerance_days == 31

    def test_environment_override(self, monkeypatch):
        """Test the MONEYWATCH_LEDGER_ prefix."""
        monkeypatch.setenv("MONEYWATCH_LEDGER_WEEK_START_DAY", "6")
        monkeypatch.setenv("MONEYWATCH_LEDGER_TREND_SPAN_MONTHS", "12")
        settings = LedgerSettings()
        assert settings.week_start_day == 6
        assert settings.trend_span_months == 12

    def test_unsupported_trend_span(self):
        """Test that only 3, 6 and 12 month spans are accepted."""
        with pytest.raises(ValidationError):
            LedgerSettings(trend_span_months=5)


class TestOtherSettings:
    """Tests for storage and app settings."""

    def test_key_prefix_separator_stripped(self):
        """Test that a trailing dash does not double up."""
        assert StorageSettings(key_prefix="demo-").key_prefix == "demo"

    def test_log_level_normalized(self):
        """Test case-insensitive log levels."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check reports a bad group."""
        assert validate_all_settings() == {"storage": True, "ledger": True, "app": True}

        monkeypatch.setenv("MONEYWATCH_LEDGER_TREND_SPAN_MONTHS", "5")
        results = validate_all_settings()
        assert results["ledger"] is False
        assert "ledger_error" in results

    def test_debug_mode_lowers_audit_level(self, monkeypatch):
        """Test that debug mode logs audit events at DEBUG."""
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        AuditLogger(name="moneywatch.audit.test")
        assert logging.getLogger("moneywatch.audit.test").level == logging.WARNING

        monkeypatch.setenv("DEBUG_MODE", "true")
        get_settings.cache_clear()
        AuditLogger(name="moneywatch.audit.test")
        assert logging.getLogger("moneywatch.audit.test").level == logging.DEBUG
