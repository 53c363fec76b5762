"""Tests for configuration, tier policy and logging setup."""

from decimal import Decimal

import pytest
import structlog
from pydantic import ValidationError

from cashflow_core.exceptions import ConfigurationError

from cashflow_jobs.config import CashflowConfig, ForecastConfig, JobsConfig
from cashflow_jobs.interfaces import SubscriptionTier, UserSettings
from cashflow_jobs.logging_setup import configure_logging


class TestForecastConfig:
    """Tests for ForecastConfig."""

    def test_defaults(self):
        config = ForecastConfig()

        assert config.default_safety_buffer == Decimal("500")
        assert config.default_timezone == "America/New_York"
        assert config.safe_to_spend_days == 14
        assert config.free_horizon_days == 60
        assert config.pro_horizon_days == 365

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_FORECAST_DEFAULT_SAFETY_BUFFER", "250.50")
        monkeypatch.setenv("CASHFLOW_FORECAST_DEFAULT_TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("CASHFLOW_FORECAST_PRO_HORIZON_DAYS", "180")

        config = ForecastConfig()

        assert config.default_safety_buffer == Decimal("250.50")
        assert config.default_timezone == "Europe/Berlin"
        assert config.pro_horizon_days == 180

    def test_empty_timezone_rejected(self):
        with pytest.raises(ValidationError):
            ForecastConfig(default_timezone="  ")

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            ForecastConfig(default_safety_buffer=Decimal("-1"))

    @pytest.mark.parametrize(
        "tier, expected",
        [
            ("free", 60),
            ("pro", 365),
            ("lifetime", 365),
            ("premium", 365),
            ("gold", 60),
            (None, 60),
            (SubscriptionTier.PRO, 365),
        ],
    )
    def test_horizon_for_tier(self, tier, expected):
        assert ForecastConfig().horizon_for_tier(tier) == expected


class TestJobsConfig:
    """Tests for JobsConfig."""

    def test_defaults(self):
        config = JobsConfig()

        assert config.concurrency == 5
        assert config.alert_window_days == 7
        assert config.alert_cooldown_days == 3
        assert config.digest_days == 7
        assert config.digest_top_bills == 5

    def test_concurrency_bounds(self):
        with pytest.raises(ValidationError):
            JobsConfig(concurrency=0)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_JOBS_CONCURRENCY", "10")

        assert JobsConfig().concurrency == 10


class TestCashflowConfig:
    """Tests for the root configuration."""

    def test_normalizes_env_and_level(self):
        config = CashflowConfig(env=" Production ", log_level="debug")

        assert config.env == "production"
        assert config.is_production is True
        assert config.is_debug is True

    def test_invalid_env(self):
        with pytest.raises(ValidationError):
            CashflowConfig(env="qa")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            CashflowConfig(log_level="LOUD")

    def test_nested_sections(self):
        config = CashflowConfig(jobs=JobsConfig(concurrency=3))

        assert config.jobs.concurrency == 3
        assert config.forecast.free_horizon_days == 60


class TestSubscriptionTier:
    """Tests for tier normalization."""

    @pytest.mark.parametrize(
        "value, status, expected",
        [
            ("pro", None, SubscriptionTier.PRO),
            ("PREMIUM", "active", SubscriptionTier.PRO),
            ("lifetime", "trialing", SubscriptionTier.LIFETIME),
            ("pro", "canceled", SubscriptionTier.FREE),
            ("pro", "past_due", SubscriptionTier.FREE),
            ("", None, SubscriptionTier.FREE),
            (None, None, SubscriptionTier.FREE),
        ],
    )
    def test_normalize(self, value, status, expected):
        assert SubscriptionTier.normalize(value, status) == expected

    def test_user_settings_effective_tier(self):
        settings = UserSettings(user_id="u1", tier="premium", subscription_status="canceled")

        assert settings.tier == SubscriptionTier.PRO
        assert settings.effective_tier == SubscriptionTier.FREE


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging("LOUD")

        assert exc_info.value.details["config_key"] == "CASHFLOW_LOG_LEVEL"

    @pytest.mark.parametrize("json", [False, True])
    def test_valid_level(self, json):
        configure_logging("warning", json=json)

        assert structlog.is_configured()
