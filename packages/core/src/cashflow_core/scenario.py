"""What-if overlay of a hypothetical expense onto an existing forecast.

The overlay does not rerun the simulation. Each scenario occurrence reduces
the balance of its own day and every following day, which is equivalent for a
pure debit and keeps the baseline forecast untouched.
"""

import datetime as dt
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .dates import shift_months
from .models import ForecastResult
from .simulator import clamp_amount

DEFAULT_LOW_BALANCE_THRESHOLD = Decimal("100")
PREVIEW_RADIUS = 3


class ScenarioFrequency(str, Enum):
    """Recurrence options offered for a hypothetical expense."""

    ONE_TIME = "one-time"
    MONTHLY = "monthly"


class ScenarioPreviewDay(BaseModel):
    """Baseline vs. scenario balance for one day around the problem point."""

    date: dt.date
    baseline_balance: Decimal
    scenario_balance: Decimal
    delta: Decimal = Field(description="Baseline minus scenario balance")


class ScenarioResult(BaseModel):
    """Impact of a hypothetical expense on the forecast."""

    expense_name: Optional[str] = None
    can_afford: bool
    lowest_balance: Decimal
    previous_lowest: Decimal
    lowest_date: Optional[date] = None
    causes_overdraft: bool = False
    causes_low_balance: bool = False
    first_problem_day: Optional[date] = None
    impact_summary: str = ""
    preview: list[ScenarioPreviewDay] = Field(default_factory=list)


def _label(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def _expense_dates(start: date, end: date, frequency: ScenarioFrequency) -> list[date]:
    if start > end:
        return []
    if frequency == ScenarioFrequency.ONE_TIME:
        return [start]

    dates = []
    steps = 0
    current = start
    while current <= end:
        dates.append(current)
        steps += 1
        current = shift_months(start, steps)
    return dates


def calculate_scenario(
    forecast: ForecastResult,
    amount: Any,
    on: date,
    *,
    frequency: ScenarioFrequency = ScenarioFrequency.ONE_TIME,
    low_balance_threshold: Any = DEFAULT_LOW_BALANCE_THRESHOLD,
    name: Optional[str] = None,
) -> ScenarioResult:
    """Overlay a hypothetical expense and report whether it is affordable.

    Args:
        forecast: Baseline forecast, days in chronological order.
        amount: Positive expense amount.
        on: Date of the (first) expense.
        frequency: One-time, or monthly from ``on`` with month-end clamping.
        low_balance_threshold: Balance below which a day is a problem.
        name: Optional label for the expense, echoed on the result.

    Returns:
        ScenarioResult with a seven-day preview centred on the first problem
        day, or on the lowest day when there is no problem.
    """
    expense = clamp_amount(amount)
    threshold = clamp_amount(low_balance_threshold)
    frequency = ScenarioFrequency(frequency)
    name = (name or "").strip() or None

    if expense <= 0:
        return ScenarioResult(
            expense_name=name,
            can_afford=False,
            lowest_balance=forecast.lowest_balance,
            previous_lowest=forecast.lowest_balance,
            lowest_date=forecast.window_start,
            impact_summary="Please enter a valid amount.",
        )

    days = forecast.days
    if not days:
        return ScenarioResult(
            expense_name=name,
            can_afford=False,
            lowest_balance=Decimal("0"),
            previous_lowest=Decimal("0"),
            impact_summary="No calendar data available to calculate impact.",
        )

    extra_by_day: dict[date, Decimal] = {}
    for day in _expense_dates(on, days[-1].date, frequency):
        extra_by_day[day] = extra_by_day.get(day, Decimal("0")) + expense

    running_extra = Decimal("0")
    scenario_balances: list[Decimal] = []
    lowest_balance: Optional[Decimal] = None
    lowest_date = days[0].date
    first_problem: Optional[date] = None
    causes_overdraft = False
    causes_low_balance = False

    for snapshot in days:
        running_extra += extra_by_day.get(snapshot.date, Decimal("0"))
        balance = snapshot.ending_balance - running_extra
        scenario_balances.append(balance)

        if lowest_balance is None or balance < lowest_balance:
            lowest_balance = balance
            lowest_date = snapshot.date
        if balance < 0:
            causes_overdraft = True
        if balance < threshold:
            causes_low_balance = True
            if first_problem is None:
                first_problem = snapshot.date

    can_afford = first_problem is None
    lowest_balance = lowest_balance if lowest_balance is not None else days[0].ending_balance

    if can_afford:
        summary = f"Lowest balance would be {lowest_balance:.2f} on {_label(lowest_date)}."
    elif causes_overdraft:
        summary = (
            f"This would cause an overdraft risk starting {_label(first_problem)}. "
            f"Lowest balance would be {lowest_balance:.2f} on {_label(lowest_date)}."
        )
    else:
        summary = (
            f"This would push your balance below {threshold:.0f} starting "
            f"{_label(first_problem)}. "
            f"Lowest balance would be {lowest_balance:.2f} on {_label(lowest_date)}."
        )

    anchor = first_problem or lowest_date
    anchor_index = next((i for i, d in enumerate(days) if d.date == anchor), 0)
    start = max(0, anchor_index - PREVIEW_RADIUS)
    end = min(len(days) - 1, anchor_index + PREVIEW_RADIUS)
    preview = [
        ScenarioPreviewDay(
            date=days[i].date,
            baseline_balance=days[i].ending_balance,
            scenario_balance=scenario_balances[i],
            delta=days[i].ending_balance - scenario_balances[i],
        )
        for i in range(start, end + 1)
    ]

    return ScenarioResult(
        expense_name=name,
        can_afford=can_afford,
        lowest_balance=lowest_balance,
        previous_lowest=forecast.lowest_balance,
        lowest_date=lowest_date,
        causes_overdraft=causes_overdraft,
        causes_low_balance=causes_low_balance,
        first_problem_day=first_problem,
        impact_summary=summary,
        preview=preview,
    )


__all__ = [
    "ScenarioFrequency",
    "ScenarioPreviewDay",
    "ScenarioResult",
    "calculate_scenario",
]
