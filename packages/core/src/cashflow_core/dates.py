"""Calendar-date helpers.

Everything inside the engine works on timezone-naive ``datetime.date``
values. The only place a timezone is consulted is ``resolve_today``,
which the forecast assembler calls once at its boundary.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

logger = structlog.get_logger()


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, using the month's last day when ``day`` overflows it."""
    return date(year, month, min(day, last_day_of_month(year, month)))


def shift_months(anchor: date, months: int, day: Optional[int] = None) -> date:
    """Move ``anchor`` by a number of calendar months.

    The day-of-month is taken from ``day`` (default: the anchor's own day)
    and clamped to the target month, so a 31st anchor lands on Feb 28/29,
    Apr 30, and back on the 31st where the month allows it.
    """
    index = anchor.year * 12 + (anchor.month - 1) + months
    year, month_index = divmod(index, 12)
    return clamped_date(year, month_index + 1, day or anchor.day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def resolve_today(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    """Return today's calendar date in an IANA timezone.

    Args:
        tz_name: IANA timezone name such as ``America/New_York``.
        now: Aware or UTC-naive instant to resolve. Defaults to the current time.

    Returns:
        The calendar date the user sees. Unknown or empty timezones fall back
        to UTC.
    """
    instant = now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    if not tz_name:
        return instant.astimezone(timezone.utc).date()

    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("unknown_timezone_defaulted", timezone=tz_name, fallback="UTC")
        return instant.astimezone(timezone.utc).date()

    return instant.astimezone(zone).date()
