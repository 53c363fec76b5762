"""Data models for cashflow-core.

This package provides the engine's data structures:
- Recurring income/bill items, accounts and transfers (items.py)
- Occurrences, day snapshots, risk reports and forecast results (forecast.py)
"""

from cashflow_core.models.items import (
    Account,
    Frequency,
    ItemKind,
    RecurringItem,
    Transfer,
)
from cashflow_core.models.forecast import (
    BillCollision,
    CollisionSeverity,
    CollisionSummary,
    DaySnapshot,
    ForecastResult,
    LowestPoint,
    Occurrence,
    RiskReport,
)

__all__ = [
    # Inputs
    "Account",
    "Frequency",
    "ItemKind",
    "RecurringItem",
    "Transfer",
    # Outputs
    "BillCollision",
    "CollisionSeverity",
    "CollisionSummary",
    "DaySnapshot",
    "ForecastResult",
    "LowestPoint",
    "Occurrence",
    "RiskReport",
]
