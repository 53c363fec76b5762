"""Weekly digest: a one-week summary of the forecast for email delivery.

``build_digest`` is pure and reads only the first week of a forecast plus
its collision findings. ``send_weekly_digests`` fetches data for many users
with bounded concurrency and hands each digest to the notifier.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from cashflow_core.exceptions import CashflowError
from cashflow_core.models import ForecastResult

from cashflow_jobs.config import CashflowConfig
from cashflow_jobs.forecasting import load_user_forecast
from cashflow_jobs.interfaces import (
    AlertNotifier,
    DigestAlerts,
    DigestData,
    DigestLine,
    DigestSummary,
    ForecastDataSource,
    JobResult,
    JobRunSummary,
    JobStatus,
    UserSettings,
)
from cashflow_jobs.runner import map_with_concurrency

logger = structlog.get_logger()


def build_digest(
    forecast: ForecastResult,
    settings: UserSettings,
    safety_buffer: Decimal,
    *,
    days: int = 7,
    top_bills: int = 5,
    timezone: Optional[str] = None,
) -> Optional[DigestData]:
    """Summarize the first ``days`` of a forecast.

    Returns:
        DigestData, or None when the forecast has no days.
    """
    week = forecast.days[:days]
    if not week:
        return None

    income = [o for d in week for o in d.income]
    bills = [o for d in week for o in d.bills]
    total_income = sum((o.amount for o in income), Decimal("0"))
    total_bills = sum((abs(o.amount) for o in bills), Decimal("0"))

    lowest = week[0]
    for day in week:
        if day.ending_balance < lowest.ending_balance:
            lowest = day

    week_start, week_end = week[0].date, week[-1].date
    collisions = [c for c in forecast.risks.collisions if week_start <= c.date <= week_end]

    upcoming_bills = sorted(
        (DigestLine(name=o.source_name, amount=abs(o.amount), date=o.date) for o in bills),
        key=lambda line: line.amount,
        reverse=True,
    )[:top_bills]
    upcoming_income = sorted(
        (DigestLine(name=o.source_name, amount=o.amount, date=o.date) for o in income),
        key=lambda line: line.date,
    )

    return DigestData(
        user_id=settings.user_id,
        email=settings.email,
        name=settings.name,
        week_start=week_start,
        week_end=week_end,
        summary=DigestSummary(
            total_income=total_income,
            total_bills=total_bills,
            net_change=total_income - total_bills,
            starting_balance=forecast.starting_balance,
            lowest_balance=lowest.ending_balance,
            lowest_balance_date=lowest.date,
            ending_balance=week[-1].ending_balance,
        ),
        alerts=DigestAlerts(
            has_low_balance=lowest.ending_balance < safety_buffer,
            has_overdraft_risk=lowest.ending_balance < 0,
            has_bill_collisions=bool(collisions),
            collision_count=len(collisions),
        ),
        upcoming_bills=upcoming_bills,
        upcoming_income=upcoming_income,
        currency=settings.currency,
        timezone=timezone or settings.timezone,
        safety_buffer=safety_buffer,
    )


async def generate_digest(
    source: ForecastDataSource,
    user_id: str,
    config: CashflowConfig,
    *,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> Optional[DigestData]:
    """Fetch a user's data and build their weekly digest."""
    loaded = await load_user_forecast(source, user_id, config, now=now, today=today)
    if loaded is None:
        return None

    return build_digest(
        loaded.forecast,
        loaded.settings,
        loaded.safety_buffer,
        days=config.jobs.digest_days,
        top_bills=config.jobs.digest_top_bills,
        timezone=loaded.timezone,
    )


async def send_weekly_digests(
    user_ids: Sequence[str],
    source: ForecastDataSource,
    notifier: AlertNotifier,
    config: CashflowConfig,
    *,
    now: Optional[datetime] = None,
) -> JobRunSummary:
    """Build and deliver digests for many users with bounded concurrency."""

    async def process(user_id: str) -> JobResult:
        try:
            digest = await generate_digest(source, user_id, config, now=now)
            if digest is None:
                return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="No forecast data")
            if not digest.email:
                return JobResult(user_id=user_id, status=JobStatus.SKIPPED, reason="No email")

            message_id = await notifier.send_digest(digest)
            logger.info("digest_sent", user_id=user_id, message_id=message_id)
            return JobResult(
                user_id=user_id,
                status=JobStatus.SENT,
                details={"message_id": message_id} if message_id else {},
            )
        except CashflowError as e:
            logger.error("digest_failed", user_id=user_id, error=str(e), details=e.details)
            return JobResult(user_id=user_id, status=JobStatus.FAILED, error=e.message, details=e.details)
        except Exception as e:
            logger.exception("digest_failed", user_id=user_id)
            return JobResult(user_id=user_id, status=JobStatus.FAILED, error=str(e))

    results = await map_with_concurrency(list(user_ids), config.jobs.concurrency, process)
    summary = JobRunSummary.from_results(results)
    logger.info(
        "digest_run_complete",
        checked=summary.checked,
        sent=summary.sent,
        skipped=summary.skipped,
        failed=summary.failed,
    )
    return summary


__all__ = ["build_digest", "generate_digest", "send_weekly_digests"]
