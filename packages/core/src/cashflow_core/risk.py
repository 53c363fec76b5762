"""Risk and bill-collision detection over day snapshots."""

from decimal import Decimal
from typing import Any, Optional, Sequence

from .models import (
    BillCollision,
    CollisionSeverity,
    CollisionSummary,
    DaySnapshot,
    LowestPoint,
    RiskReport,
)
from .simulator import clamp_amount

DEFAULT_MIN_BILLS_FOR_WARNING = 2
DEFAULT_MIN_BILLS_FOR_CRITICAL = 4
DEFAULT_CRITICAL_AMOUNT = Decimal("1000")


def find_collision(
    snapshot: DaySnapshot,
    *,
    min_bills_for_warning: int = DEFAULT_MIN_BILLS_FOR_WARNING,
    min_bills_for_critical: int = DEFAULT_MIN_BILLS_FOR_CRITICAL,
    critical_amount_threshold: Decimal = DEFAULT_CRITICAL_AMOUNT,
) -> Optional[BillCollision]:
    """Return the collision landing on ``snapshot``'s day, if any.

    Zero-amount bills are ignored. A collision is critical when enough bills
    land together or their combined total exceeds the amount threshold.
    """
    bills = [o for o in snapshot.bills if clamp_amount(o.amount) != 0]
    if len(bills) < min_bills_for_warning:
        return None

    total = sum((abs(clamp_amount(o.amount)) for o in bills), Decimal("0"))
    critical = len(bills) >= min_bills_for_critical or total > critical_amount_threshold

    return BillCollision(
        date=snapshot.date,
        occurrence_count=len(bills),
        bills=bills,
        total_amount=total,
        severity=CollisionSeverity.CRITICAL if critical else CollisionSeverity.WARNING,
    )


def summarize_collisions(collisions: Sequence[BillCollision]) -> CollisionSummary:
    """Count collisions by severity and find the largest (first on ties)."""
    summary = CollisionSummary(has_collisions=bool(collisions), count=len(collisions))
    for collision in collisions:
        if collision.severity == CollisionSeverity.CRITICAL:
            summary.critical_count += 1
        else:
            summary.warning_count += 1

        if collision.total_amount > summary.highest_collision_amount:
            summary.highest_collision_amount = collision.total_amount
            summary.highest_collision_date = collision.date

    return summary


def detect_risks(
    snapshots: Sequence[DaySnapshot],
    safety_buffer: Any,
    **collision_options: Any,
) -> RiskReport:
    """Flag low-balance, overdraft and multi-bill days.

    Args:
        snapshots: Day snapshots in chronological order.
        safety_buffer: Balance below which a day counts as low.
        **collision_options: Thresholds forwarded to ``find_collision``.

    Returns:
        A RiskReport. The lowest point is the minimum end-of-day balance,
        reported on the first day that reaches it. Empty input yields an
        empty report with no lowest point.
    """
    buffer = clamp_amount(safety_buffer)
    report = RiskReport()

    for snapshot in snapshots:
        ending = snapshot.ending_balance
        if ending < buffer:
            report.low_balance_days.append(snapshot.date)
        if ending < 0:
            report.overdraft_days.append(snapshot.date)

        collision = find_collision(snapshot, **collision_options)
        if collision is not None:
            report.collisions.append(collision)

        if report.lowest_point is None or ending < report.lowest_point.amount:
            report.lowest_point = LowestPoint(amount=ending, date=snapshot.date)

    report.collision_summary = summarize_collisions(report.collisions)
    return report


__all__ = ["detect_risks", "find_collision", "summarize_collisions"]
