"""Recurrence expansion for income and bills.

Turns a recurring item and an inclusive calendar window into the concrete
occurrences that land inside that window. Expansion is a pure function of its
inputs: calling it twice with the same arguments yields the same list.

Anchors in the past are walked forward step by step from the original anchor
(never with modular arithmetic), so month-end clamping is recomputed for
every step. A 31st anchor therefore lands on Jan 31, Feb 28, Mar 31, Apr 30
instead of drifting to the 28th after February.
"""

from datetime import date, timedelta
from typing import Callable, Iterator, Optional

import structlog

from .dates import clamped_date, shift_months
from .models import Frequency, Occurrence, RecurringItem

logger = structlog.get_logger()

DateRule = Callable[[date, date, date, int], Iterator[date]]


def _fixed_step(step_days: int) -> DateRule:
    step = timedelta(days=step_days)

    def rule(anchor: date, start: date, end: date, day: int) -> Iterator[date]:
        current = anchor
        while current < start:
            current += step
        while current <= end:
            yield current
            current += step

    return rule


def _month_step(months: int) -> DateRule:
    def rule(anchor: date, start: date, end: date, day: int) -> Iterator[date]:
        steps = 0
        current = shift_months(anchor, 0, day)
        while current < start:
            steps += 1
            current = shift_months(anchor, steps * months, day)
        while current <= end:
            yield current
            steps += 1
            current = shift_months(anchor, steps * months, day)

    return rule


def _semi_monthly(anchor: date, start: date, end: date, day: int) -> Iterator[date]:
    """Two occurrences a month, fifteen days apart, derived from the anchor day.

    Anchor days 1-15 pair with the day fifteen later (10 -> 10th and 25th);
    anchor days 16-31 pair with the day fifteen earlier (20 -> 5th and 20th).
    The later day is clamped to short months.
    """
    anchor_day = anchor.day
    first_day, second_day = (
        (anchor_day, anchor_day + 15) if anchor_day <= 15 else (anchor_day - 15, anchor_day)
    )

    month_start = date(anchor.year, anchor.month, 1)
    while month_start <= end:
        for target in (first_day, second_day):
            occurrence = clamped_date(month_start.year, month_start.month, target)
            if occurrence < anchor or occurrence < start:
                continue
            if occurrence > end:
                return
            yield occurrence
        month_start = shift_months(month_start, 1)


def _single(anchor: date, start: date, end: date, day: int) -> Iterator[date]:
    if start <= anchor <= end:
        yield anchor


_RULES: dict[Frequency, DateRule] = {
    Frequency.WEEKLY: _fixed_step(7),
    Frequency.BIWEEKLY: _fixed_step(14),
    Frequency.SEMI_MONTHLY: _semi_monthly,
    Frequency.MONTHLY: _month_step(1),
    Frequency.QUARTERLY: _month_step(3),
    Frequency.ANNUALLY: _month_step(12),
    Frequency.ONE_TIME: _single,
    Frequency.IRREGULAR: _single,
}


def recurrence_dates(
    frequency: Frequency,
    anchor: date,
    window_start: date,
    window_end: date,
    *,
    end_date: Optional[date] = None,
    day: Optional[int] = None,
) -> list[date]:
    """Apply a frequency rule to an anchor inside the inclusive window.

    Args:
        frequency: Recurrence rule; unknown values use the monthly rule.
        anchor: First (or next known) occurrence.
        window_start: First day of the window (inclusive).
        window_end: Last day of the window (inclusive).
        end_date: Optional last day on which the rule may fire.
        day: Day-of-month for the monthly, quarterly and annual rules;
            defaults to the anchor's day. Other rules ignore it.

    Returns:
        Dates in ascending order. Empty when the window is inverted, the end
        date falls before the window, or the anchor lies past the window.
    """
    if window_end < window_start:
        return []

    effective_end = window_end
    if end_date is not None and end_date < effective_end:
        effective_end = end_date
    if effective_end < window_start or anchor > effective_end:
        return []

    rule = _RULES.get(frequency, _RULES[Frequency.MONTHLY])
    return list(rule(anchor, window_start, effective_end, day or anchor.day))


def occurrence_dates(item: RecurringItem, window_start: date, window_end: date) -> list[date]:
    """Return the dates on which ``item`` occurs inside the inclusive window.

    An empty list is returned (not an error) when the window is inverted,
    the item is inactive, or the item's end date falls before the window.
    """
    if not item.is_active:
        return []
    return recurrence_dates(
        item.frequency,
        item.anchor_date,
        window_start,
        window_end,
        end_date=item.end_date,
    )


def expand(item: RecurringItem, window_start: date, window_end: date) -> list[Occurrence]:
    """Expand a recurring item into signed occurrences within a window.

    Args:
        item: Income or bill to expand.
        window_start: First day of the window (inclusive).
        window_end: Last day of the window (inclusive).

    Returns:
        Occurrences in ascending date order. Income occurrences carry a
        positive amount and bill occurrences a negative one.
    """
    dates = occurrence_dates(item, window_start, window_end)
    amount = item.signed_amount
    occurrences = [
        Occurrence(
            date=day,
            amount=amount,
            source_item_id=item.id,
            source_name=item.name,
            source_kind=item.kind,
            frequency=item.frequency,
        )
        for day in dates
    ]

    logger.debug(
        "item_expanded",
        item_id=item.id,
        frequency=item.frequency.value,
        window_start=window_start.isoformat(),
        window_end=window_end.isoformat(),
        occurrences=len(occurrences),
    )
    return occurrences


__all__ = ["expand", "occurrence_dates", "recurrence_dates"]
