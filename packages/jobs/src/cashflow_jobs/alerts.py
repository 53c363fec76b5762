"""Low-balance alert job.

Runs a short forecast (seven days by default) for every candidate user and
notifies those whose balance is projected to fall below their safety buffer.
Users alerted recently are skipped until the cooldown expires.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from cashflow_core.dates import resolve_today
from cashflow_core.exceptions import CashflowError
from cashflow_core.models import ForecastResult

from cashflow_jobs.config import CashflowConfig
from cashflow_jobs.forecasting import load_user_forecast
from cashflow_jobs.interfaces import (
    AlertNotifier,
    ForecastDataSource,
    JobResult,
    JobRunSummary,
    JobStatus,
    LowBalanceAlert,
    UserSettings,
)
from cashflow_jobs.runner import map_with_concurrency

logger = structlog.get_logger()


def is_within_cooldown(
    last_sent_at: Optional[datetime],
    now: datetime,
    cooldown_days: int,
) -> bool:
    """Check whether an alert was sent less than ``cooldown_days`` ago."""
    if last_sent_at is None:
        return False
    if last_sent_at.tzinfo is None:
        last_sent_at = last_sent_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - last_sent_at < timedelta(days=cooldown_days)


def find_low_balance_alert(
    forecast: ForecastResult,
    settings: UserSettings,
    safety_buffer: Decimal,
) -> Optional[LowBalanceAlert]:
    """Return an alert for the first day ending below the buffer, if any."""
    low_day = next((d for d in forecast.days if d.ending_balance < safety_buffer), None)
    if low_day is None:
        return None

    return LowBalanceAlert(
        user_id=settings.user_id,
        email=settings.email,
        name=settings.name,
        projected_low_date=low_day.date,
        projected_low_amount=low_day.ending_balance,
        current_balance=forecast.starting_balance,
        safety_buffer=safety_buffer,
        days_until_low=(low_day.date - forecast.window_start).days,
        currency=settings.currency,
    )


async def check_user(
    user_id: str,
    source: ForecastDataSource,
    notifier: AlertNotifier,
    config: CashflowConfig,
    now: datetime,
) -> JobResult:
    """Run the low-balance check for one user and notify if needed.

    Failures are returned as FAILED results instead of being raised, so one
    broken user never aborts a batch.
    """
    try:
        settings = await source.get_settings(user_id)
        if settings is None:
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="Unknown user")
        if not settings.low_balance_alert_enabled:
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="Alerts disabled")
        if not settings.email:
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="No email")
        if is_within_cooldown(settings.last_low_balance_alert_at, now, config.jobs.alert_cooldown_days):
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="Within cooldown period")

        timezone_name = settings.timezone or config.forecast.default_timezone
        loaded = await load_user_forecast(
            source,
            user_id,
            config,
            horizon_days=config.jobs.alert_window_days,
            today=resolve_today(timezone_name, now),
            settings=settings,
        )
        if loaded is None:
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="No accounts")

        alert = find_low_balance_alert(loaded.forecast, loaded.settings, loaded.safety_buffer)
        if alert is None:
            return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="No low balance in window")

        message_id = await notifier.send_low_balance_alert(alert)
        await source.record_alert_sent(user_id, now)

        logger.info(
            "low_balance_alert_sent",
            user_id=user_id,
            projected_low_amount=str(alert.projected_low_amount),
            days_until_low=alert.days_until_low,
            is_overdraft=alert.is_overdraft,
        )
        return JobResult(
            user_id=user_id,
            status=JobStatus.SENT,
            details={
                "message_id": message_id,
                "projected_low_date": alert.projected_low_date.isoformat(),
                "days_until_low": alert.days_until_low,
            },
        )
    except CashflowError as e:
        logger.error("low_balance_alert_failed", user_id=user_id, error=str(e), details=e.details)
        return JobResult(user_id=user_id, status=JobStatus.FAILED, error=e.message, details=e.details)
    except Exception as e:
        logger.exception("low_balance_alert_failed", user_id=user_id)
        return JobResult(user_id=user_id, status=JobStatus.FAILED, error=str(e))


async def run_low_balance_alerts(
    user_ids: Sequence[str],
    source: ForecastDataSource,
    notifier: AlertNotifier,
    config: CashflowConfig,
    *,
    now: Optional[datetime] = None,
) -> JobRunSummary:
    """Check every user with at most ``config.jobs.concurrency`` in flight.

    Duplicate user ids are checked once.
    """
    instant = now or datetime.now(timezone.utc)
    unique_ids = list(dict.fromkeys(user_ids))

    results = await map_with_concurrency(
        unique_ids,
        config.jobs.concurrency,
        lambda user_id: check_user(user_id, source, notifier, config, instant),
    )
    summary = JobRunSummary.from_results(results)
    logger.info(
        "low_balance_alert_run_complete",
        now=instant.isoformat(),
        checked=summary.checked,
        sent=summary.sent,
        skipped=summary.skipped,
        failed=summary.failed,
    )
    return summary


__all__ = [
    "check_user",
    "find_low_balance_alert",
    "is_within_cooldown",
    "run_low_balance_alerts",
]
