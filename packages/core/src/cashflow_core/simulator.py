"""Day-by-day running balance simulation.

Walks an inclusive calendar window one day at a time, applying each day's
occurrences to a running balance. Same-day occurrences are applied most
negative first, so a bill clearing before a paycheck shows up as the day's
low point instead of being hidden by the credit.

Numeric policy: every amount and balance is clamped to +/- 1,000,000,000 and
any non-finite value (NaN, Infinity) is coerced to zero. Malformed input never
propagates NaN into a snapshot.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

import structlog

from .dates import iter_days
from .models import DaySnapshot, Occurrence

logger = structlog.get_logger()

MAX_MAGNITUDE = Decimal("1000000000")
ZERO = Decimal("0")


def clamp_amount(value: Any) -> Decimal:
    """Coerce ``value`` to a finite Decimal within +/- MAX_MAGNITUDE.

    Unparseable and non-finite inputs become zero.
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not amount.is_finite():
        return ZERO
    if amount > MAX_MAGNITUDE:
        return MAX_MAGNITUDE
    if amount < -MAX_MAGNITUDE:
        return -MAX_MAGNITUDE
    return amount


def _applied_order(occurrence: Occurrence) -> Decimal:
    return clamp_amount(occurrence.amount)


def simulate(
    starting_balance: Any,
    occurrences: Iterable[Occurrence],
    window_start: date,
    window_end: date,
) -> list[DaySnapshot]:
    """Project a running balance across every day of the window.

    Args:
        starting_balance: Balance before the first day's occurrences.
        occurrences: Occurrences to apply; those outside the window are ignored.
        window_start: First day (inclusive).
        window_end: Last day (inclusive).

    Returns:
        One DaySnapshot per calendar day. Each day's starting balance equals
        the previous day's ending balance. An inverted window yields an
        empty list.
    """
    if window_end < window_start:
        return []

    by_day: dict[date, list[Occurrence]] = defaultdict(list)
    for occurrence in occurrences:
        if window_start <= occurrence.date <= window_end:
            by_day[occurrence.date].append(occurrence)

    balance = clamp_amount(starting_balance)
    snapshots: list[DaySnapshot] = []

    for day in iter_days(window_start, window_end):
        todays = sorted(by_day.get(day, []), key=_applied_order)
        opening = balance
        day_low = balance

        for occurrence in todays:
            balance = clamp_amount(balance + clamp_amount(occurrence.amount))
            if balance < day_low:
                day_low = balance

        if len(todays) > 1:
            logger.debug(
                "multi_occurrence_day",
                date=day.isoformat(),
                occurrences=len(todays),
                day_low=str(day_low),
            )

        snapshots.append(
            DaySnapshot(
                date=day,
                starting_balance=opening,
                ending_balance=balance,
                # Sum of today's amounts unless the balance hit the clamp
                net_change=balance - opening,
                day_low=day_low,
                occurrences=todays,
            )
        )

    return snapshots


__all__ = ["MAX_MAGNITUDE", "clamp_amount", "simulate"]
