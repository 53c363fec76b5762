"""The "Can I Afford It" calculator.

A single-purchase rendition of the balance simulation: one starting balance,
one purchase, one upcoming paycheck and a handful of bills, all on concrete
dates. No recurrence expansion is involved.
"""

import datetime as dt
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .merger import merge
from .models import DaySnapshot, ItemKind, LowestPoint, Occurrence
from .simulator import clamp_amount, simulate

RUNWAY_DAYS = 7


class PlannedEvent(BaseModel):
    """A known future credit or debit entered by the user."""

    name: Optional[str] = None
    amount: Decimal = Field(allow_inf_nan=True, description="Magnitude of the event")
    date: dt.date


class AffordabilityResult(BaseModel):
    """Outcome of an affordability check."""

    can_afford: bool
    start_date: date
    end_date: date
    current_balance: Decimal
    purchase_amount: Decimal
    lowest_balance: LowestPoint
    timeline: list[DaySnapshot] = Field(default_factory=list)
    overdraft_days: int = Field(
        default=0,
        description="Days whose intraday low dips below zero",
    )


def _debit(event_id: str, name: str, amount: Decimal, on: date) -> Occurrence:
    return Occurrence(
        date=on,
        amount=-abs(clamp_amount(amount)),
        source_item_id=event_id,
        source_name=name,
        source_kind=ItemKind.BILL,
    )


def calculate_affordability(
    current_balance: Decimal,
    purchase_amount: Decimal,
    purchase_date: date,
    next_income: PlannedEvent,
    upcoming_bills: list[PlannedEvent],
    *,
    today: date,
) -> AffordabilityResult:
    """Check whether a purchase keeps the balance above zero.

    Args:
        current_balance: Balance available today.
        purchase_amount: Cost of the purchase.
        purchase_date: When the purchase would be made.
        next_income: The next expected paycheck.
        upcoming_bills: Bills due before or around the purchase.
        today: First day of the simulated window.

    Returns:
        AffordabilityResult. The window runs from ``today`` to a week past
        the latest event, and the lowest point uses intraday lows.
    """
    balance = clamp_amount(current_balance)
    purchase = abs(clamp_amount(purchase_amount))

    bills = [
        _debit(f"bill_{i + 1}", (b.name or "").strip() or f"Bill #{i + 1}", b.amount, b.date)
        for i, b in enumerate(upcoming_bills)
    ]
    income = Occurrence(
        date=next_income.date,
        amount=abs(clamp_amount(next_income.amount)),
        source_item_id="next_income",
        source_name=next_income.name or "Next income",
        source_kind=ItemKind.INCOME,
    )
    events = merge([[_debit("purchase", "Purchase", purchase, purchase_date)], bills, [income]])

    latest = max((e.date for e in events), default=today)
    end_date = max(latest, today) + timedelta(days=RUNWAY_DAYS)
    timeline = simulate(balance, events, today, end_date)

    lowest = LowestPoint(amount=balance, date=today)
    overdraft_days = 0
    for snapshot in timeline:
        if snapshot.day_low < lowest.amount:
            lowest = LowestPoint(amount=snapshot.day_low, date=snapshot.date)
        if snapshot.day_low < 0:
            overdraft_days += 1

    return AffordabilityResult(
        can_afford=lowest.amount >= 0,
        start_date=today,
        end_date=end_date,
        current_balance=balance,
        purchase_amount=purchase,
        lowest_balance=lowest,
        timeline=timeline,
        overdraft_days=overdraft_days,
    )


__all__ = ["AffordabilityResult", "PlannedEvent", "calculate_affordability"]
