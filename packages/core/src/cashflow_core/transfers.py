"""Transfers between accounts and credit-card payment occurrences.

Both produce ordinary occurrences so they flow through the same merge,
simulation and risk steps as income and bills.

A transfer is only visible to the forecast when it crosses the spendable
boundary. Money leaving a spendable account for a non-spendable one (a
savings deposit, a card payoff) is an outflow; money coming back is an
inflow; moves on either side of the boundary net to zero and are dropped.
Account ids the caller does not know about count as non-spendable.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import structlog

from .dates import clamped_date, shift_months
from .models import Account, Frequency, ItemKind, Occurrence, Transfer
from .recurrence import recurrence_dates

logger = structlog.get_logger()


def spendable_map(accounts: Iterable[Account]) -> dict[str, bool]:
    """Map account id to its spendable flag."""
    return {account.id: account.is_spendable for account in accounts}


def transfer_sign(transfer: Transfer, spendable_by_id: Mapping[str, bool]) -> int:
    """Return -1 for an outflow, 1 for an inflow and 0 when nothing changes."""
    from_spendable = spendable_by_id.get(transfer.from_account_id, False)
    to_spendable = spendable_by_id.get(transfer.to_account_id, False)

    if from_spendable and not to_spendable:
        return -1
    if to_spendable and not from_spendable:
        return 1
    return 0


def expand_transfer(
    transfer: Transfer,
    window_start: date,
    window_end: date,
    spendable_by_id: Mapping[str, bool],
) -> list[Occurrence]:
    """Expand a transfer into signed occurrences within the inclusive window.

    Args:
        transfer: Scheduled move between two accounts.
        window_start: First day of the window (inclusive).
        window_end: Last day of the window (inclusive).
        spendable_by_id: Spendable flag per account id.

    Returns:
        Occurrences in ascending date order, or an empty list when the
        transfer is inactive or stays on one side of the spendable boundary.
    """
    if not transfer.is_active:
        return []

    sign = transfer_sign(transfer, spendable_by_id)
    if sign == 0:
        return []

    dates = recurrence_dates(
        transfer.frequency,
        transfer.anchor_date,
        window_start,
        window_end,
        end_date=transfer.end_date,
        day=transfer.recurrence_day,
    )
    amount = transfer.amount if sign > 0 else -transfer.amount
    occurrences = [
        Occurrence(
            date=day,
            amount=amount,
            source_item_id=transfer.id,
            source_name=transfer.name,
            source_kind=ItemKind.TRANSFER,
            frequency=transfer.frequency,
        )
        for day in dates
    ]

    logger.debug(
        "transfer_expanded",
        transfer_id=transfer.id,
        direction="inflow" if sign > 0 else "outflow",
        occurrences=len(occurrences),
    )
    return occurrences


def next_payment_date(due_day: int, window_start: date) -> date:
    """Next due date on or after ``window_start``, clamped to short months."""
    this_month = clamped_date(window_start.year, window_start.month, due_day)
    if window_start <= this_month:
        return this_month
    return shift_months(this_month, 1, due_day)


def credit_card_payment(
    account: Account, window_start: date, window_end: date
) -> Optional[Occurrence]:
    """Build the next payment occurrence for a credit card, if one is due.

    Only the upcoming payment is produced. Its amount is the card's full
    current balance, debited as a bill.
    """
    if not account.has_payment_due:
        return None

    due = next_payment_date(account.payment_due_day, window_start)
    if due > window_end:
        return None

    return Occurrence(
        date=due,
        amount=-account.current_balance,
        source_item_id=f"cc-payment-{account.id}-{due:%Y-%m}",
        source_name=f"{account.name} Payment",
        source_kind=ItemKind.BILL,
        frequency=Frequency.ONE_TIME,
    )


def credit_card_payments(
    accounts: Iterable[Account], window_start: date, window_end: date
) -> list[Occurrence]:
    """Payment occurrences for every credit card with a balance due in the window."""
    payments = []
    for account in accounts:
        payment = credit_card_payment(account, window_start, window_end)
        if payment is not None:
            payments.append(payment)
    return payments


__all__ = [
    "credit_card_payment",
    "credit_card_payments",
    "expand_transfer",
    "next_payment_date",
    "spendable_map",
    "transfer_sign",
]
