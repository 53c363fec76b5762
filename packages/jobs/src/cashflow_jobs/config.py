"""Configuration system for the cash flow jobs.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the forecast callers (dashboard,
weekly digest, low-balance alerts).

Usage:
    from cashflow_jobs.config import CashflowConfig

    # Load from environment variables and .env file
    config = CashflowConfig()

    # Forecast defaults
    print(config.forecast.default_safety_buffer)
    print(config.forecast.horizon_for_tier("pro"))

    # Batch job settings
    print(config.jobs.concurrency)
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cashflow_jobs.interfaces.types import SubscriptionTier


class ForecastConfig(BaseSettings):
    """Forecast defaults and tier horizon policy.

    Environment Variables:
        CASHFLOW_FORECAST_DEFAULT_SAFETY_BUFFER: Buffer used when a user has none
        CASHFLOW_FORECAST_DEFAULT_TIMEZONE: Timezone used when a user has none
        CASHFLOW_FORECAST_DEFAULT_HORIZON_DAYS: Horizon when no tier applies
        CASHFLOW_FORECAST_SAFE_TO_SPEND_DAYS: Near-term window for safe-to-spend
        CASHFLOW_FORECAST_FREE_HORIZON_DAYS: Horizon for the free tier
        CASHFLOW_FORECAST_PRO_HORIZON_DAYS: Horizon for paid tiers
    """

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_safety_buffer: Decimal = Field(
        default=Decimal("500"),
        ge=0,
        description="Safety buffer for users without one configured",
    )
    default_timezone: str = Field(
        default="America/New_York",
        description="IANA timezone for users without one configured",
    )
    default_horizon_days: int = Field(
        default=60,
        gt=0,
        le=3650,
        description="Forecast horizon when no tier policy applies",
    )
    safe_to_spend_days: int = Field(
        default=14,
        gt=0,
        description="Days considered when computing safe-to-spend",
    )
    free_horizon_days: int = Field(
        default=60,
        gt=0,
        le=3650,
        description="Forecast horizon for the free tier",
    )
    pro_horizon_days: int = Field(
        default=365,
        gt=0,
        le=3650,
        description="Forecast horizon for paid tiers",
    )

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone name is not empty."""
        if not v or not v.strip():
            raise ValueError("Default timezone cannot be empty")
        return v.strip()

    def horizon_for_tier(self, tier: Optional[str]) -> int:
        """Return the forecast horizon a subscription tier is entitled to."""
        if SubscriptionTier.normalize(tier) == SubscriptionTier.FREE:
            return self.free_horizon_days
        return self.pro_horizon_days


class JobsConfig(BaseSettings):
    """Batch job settings.

    Environment Variables:
        CASHFLOW_JOBS_CONCURRENCY: Users processed in parallel
        CASHFLOW_JOBS_ALERT_WINDOW_DAYS: Horizon checked by low-balance alerts
        CASHFLOW_JOBS_ALERT_COOLDOWN_DAYS: Minimum days between two alerts
        CASHFLOW_JOBS_DIGEST_DAYS: Days summarized by the weekly digest
        CASHFLOW_JOBS_DIGEST_TOP_BILLS: Largest bills listed in the digest
    """

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_JOBS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    concurrency: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum users processed concurrently",
    )
    alert_window_days: int = Field(
        default=7,
        gt=0,
        description="Forecast horizon for low-balance alert checks",
    )
    alert_cooldown_days: int = Field(
        default=3,
        ge=0,
        description="Minimum days between two low-balance alerts",
    )
    digest_days: int = Field(
        default=7,
        gt=0,
        description="Days summarized by the weekly digest",
    )
    digest_top_bills: int = Field(
        default=5,
        ge=0,
        description="Number of largest upcoming bills listed in the digest",
    )


class CashflowConfig(BaseSettings):
    """Root configuration for the cash flow jobs.

    Environment Variables:
        CASHFLOW_ENV: Environment name (development, staging, production, test)
        CASHFLOW_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = CashflowConfig(jobs=JobsConfig(concurrency=2))
        if config.is_debug:
            configure_logging(config.log_level)
    """

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"
