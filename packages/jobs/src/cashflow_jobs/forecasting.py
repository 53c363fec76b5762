"""Fetch a user's entities and run the forecast engine on them."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import structlog

from cashflow_core import ForecastResult, build_forecast
from cashflow_core.dates import resolve_today

from cashflow_jobs.config import CashflowConfig
from cashflow_jobs.interfaces import ForecastDataSource, UserSettings

logger = structlog.get_logger()


@dataclass(frozen=True)
class UserForecast:
    """A forecast together with the settings it was computed under."""

    settings: UserSettings
    forecast: ForecastResult
    safety_buffer: Decimal
    timezone: str


async def load_user_forecast(
    source: ForecastDataSource,
    user_id: str,
    config: CashflowConfig,
    *,
    horizon_days: Optional[int] = None,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
    settings: Optional[UserSettings] = None,
) -> Optional[UserForecast]:
    """Build the forecast for one user.

    Args:
        source: Data-access collaborator.
        user_id: User to forecast.
        config: Defaults for buffer, timezone and tier horizons.
        horizon_days: Explicit horizon; defaults to the user's tier horizon.
        now: Instant used to resolve today in the user's timezone.
        today: Explicit first forecast day, overriding ``now``.
        settings: Settings the caller already fetched; skips the lookup.

    Returns:
        The forecast, or None when the user is unknown or has no accounts.

    Raises:
        DataSourceError: Propagated from the collaborator.
    """
    if settings is None:
        settings = await source.get_settings(user_id)
    if settings is None:
        return None

    accounts, income, bills, transfers = await asyncio.gather(
        source.list_accounts(user_id),
        source.list_income(user_id),
        source.list_bills(user_id),
        source.list_transfers(user_id),
    )
    if not accounts:
        logger.info("forecast_skipped_no_accounts", user_id=user_id)
        return None

    timezone = settings.timezone or config.forecast.default_timezone
    safety_buffer = (
        settings.safety_buffer
        if settings.safety_buffer is not None
        else config.forecast.default_safety_buffer
    )
    horizon = horizon_days or config.forecast.horizon_for_tier(settings.effective_tier)

    forecast = build_forecast(
        accounts,
        income,
        bills,
        safety_buffer,
        timezone,
        horizon,
        today=today or resolve_today(timezone, now),
        safe_to_spend_days=config.forecast.safe_to_spend_days,
        transfers=transfers,
    )
    return UserForecast(
        settings=settings,
        forecast=forecast,
        safety_buffer=safety_buffer,
        timezone=timezone,
    )


__all__ = ["UserForecast", "load_user_forecast"]
