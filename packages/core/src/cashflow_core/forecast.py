"""Forecast assembly: from raw entity lists to a complete calendar.

The assembler owns the steps around the engine: netting spendable accounts
into one starting balance, resolving "today" in the user's timezone, and
packaging the simulation and risk findings. It keeps no state between calls;
every forecast is recomputed from its inputs.

Horizon limits by subscription tier are enforced by callers before invoking
``build_forecast``.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

import structlog

from .dates import resolve_today
from .merger import merge
from .models import Account, ForecastResult, ItemKind, RecurringItem, Transfer
from .recurrence import expand
from .risk import detect_risks
from .simulator import clamp_amount, simulate
from .transfers import credit_card_payments, expand_transfer, spendable_map

logger = structlog.get_logger()

SAFE_TO_SPEND_DAYS = 14


def spendable_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum the balances of spendable accounts."""
    return sum(
        (clamp_amount(a.current_balance) for a in accounts if a.is_spendable),
        Decimal("0"),
    )


def _as_kind(items: Iterable[RecurringItem], kind: ItemKind) -> list[RecurringItem]:
    """Tag every item with the kind of the list it was fetched from."""
    return [
        item if item.kind == kind else item.model_copy(update={"kind": kind})
        for item in items
        if item.is_active
    ]


def build_forecast(
    accounts: Sequence[Account],
    income_items: Iterable[RecurringItem],
    bill_items: Iterable[RecurringItem],
    safety_buffer: Any,
    timezone: Optional[str],
    horizon_days: int,
    *,
    today: Optional[date] = None,
    safe_to_spend_days: int = SAFE_TO_SPEND_DAYS,
    transfers: Iterable[Transfer] = (),
) -> ForecastResult:
    """Build a day-by-day cash flow forecast.

    Args:
        accounts: User accounts; only spendable ones form the starting balance.
            Credit cards with a due day and a balance add their next payment.
        income_items: Income sources. Inactive rows are skipped.
        bill_items: Bills. Inactive rows are skipped.
        safety_buffer: Balance below which a day is flagged as low.
        timezone: IANA timezone used to resolve today's date.
        horizon_days: Number of days to forecast, day 0 being today.
        today: Override for today's date (deterministic callers and tests).
        safe_to_spend_days: Near-term window used for the safe-to-spend figure.
        transfers: Scheduled moves between accounts. Only those crossing the
            spendable boundary affect the balance.

    Returns:
        A ForecastResult with exactly ``horizon_days`` snapshots (none when
        the horizon is not positive).
    """
    starting_balance = spendable_balance(accounts)
    buffer = clamp_amount(safety_buffer)

    window_start = today or resolve_today(timezone)
    window_end = window_start + timedelta(days=horizon_days - 1)

    items = _as_kind(income_items, ItemKind.INCOME) + _as_kind(bill_items, ItemKind.BILL)
    spendable_by_id = spendable_map(accounts)
    occurrences = merge(
        [
            *(expand(item, window_start, window_end) for item in items),
            *(expand_transfer(t, window_start, window_end, spendable_by_id) for t in transfers),
            credit_card_payments(accounts, window_start, window_end),
        ]
    )

    days = simulate(starting_balance, occurrences, window_start, window_end)
    risks = detect_risks(days, buffer)

    near_term = days[:safe_to_spend_days]
    lowest_near_term = min((d.ending_balance for d in near_term), default=starting_balance)
    safe_to_spend = max(Decimal("0"), lowest_near_term - buffer)

    logger.info(
        "forecast_built",
        window_start=window_start.isoformat(),
        horizon_days=len(days),
        items=len(items),
        occurrences=len(occurrences),
        low_balance_days=len(risks.low_balance_days),
        overdraft_days=len(risks.overdraft_days),
        collisions=len(risks.collisions),
    )

    return ForecastResult(
        starting_balance=starting_balance,
        window_start=window_start,
        window_end=window_end,
        safety_buffer=buffer,
        days=days,
        risks=risks,
        safe_to_spend=safe_to_spend,
    )


__all__ = ["build_forecast", "spendable_balance"]
