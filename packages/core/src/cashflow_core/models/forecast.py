"""Output models produced by the forecasting engine.

Occurrences are ephemeral and regenerated on every forecast request.
Day snapshots carry the running balance, and the risk report annotates
them with low-balance, overdraft and bill-collision findings.
"""

import datetime as dt
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cashflow_core.models.items import Frequency, ItemKind


class Occurrence(BaseModel):
    """A concrete dated credit or debit expanded from a recurring item."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(description="Calendar date the money moves")
    amount: Decimal = Field(
        allow_inf_nan=True,
        description="Signed amount. Positive for income and inflows, negative for bills and outflows",
    )
    source_item_id: str = Field(description="Identifier of the originating item")
    source_name: str = Field(description="Display name of the originating item")
    source_kind: ItemKind = Field(description="Kind of the originating item")
    frequency: Optional[Frequency] = Field(
        default=None,
        description="Recurrence rule of the originating item, for display",
    )

    @property
    def is_bill(self) -> bool:
        return self.source_kind == ItemKind.BILL


class DaySnapshot(BaseModel):
    """Balance state for a single forecast day."""

    date: dt.date = Field(description="The forecast day")
    starting_balance: Decimal = Field(description="Balance before today's occurrences")
    ending_balance: Decimal = Field(description="Balance after today's occurrences")
    net_change: Decimal = Field(description="Sum of today's occurrence amounts")
    day_low: Decimal = Field(description="Lowest balance reached during the day")
    occurrences: list[Occurrence] = Field(
        default_factory=list,
        description="Today's occurrences in the order they were applied",
    )

    @property
    def income(self) -> list[Occurrence]:
        """Income occurrences landing today."""
        return [o for o in self.occurrences if o.source_kind == ItemKind.INCOME]

    @property
    def bills(self) -> list[Occurrence]:
        """Bill occurrences landing today."""
        return [o for o in self.occurrences if o.source_kind == ItemKind.BILL]

    @property
    def transfers(self) -> list[Occurrence]:
        return [o for o in self.occurrences if o.source_kind == ItemKind.TRANSFER]


class CollisionSeverity(str, Enum):
    """How alarming a multi-bill day is."""

    WARNING = "warning"
    CRITICAL = "critical"


class BillCollision(BaseModel):
    """A day on which several bills land together."""

    date: dt.date = Field(description="Day of the collision")
    occurrence_count: int = Field(ge=0, description="Number of colliding bills")
    bills: list[Occurrence] = Field(default_factory=list)
    total_amount: Decimal = Field(
        default=Decimal("0"),
        description="Combined magnitude of the colliding bills",
    )
    severity: CollisionSeverity = Field(default=CollisionSeverity.WARNING)


class CollisionSummary(BaseModel):
    """Aggregate view over all collisions in a forecast window."""

    has_collisions: bool = False
    count: int = 0
    critical_count: int = 0
    warning_count: int = 0
    highest_collision_amount: Decimal = Decimal("0")
    highest_collision_date: Optional[date] = None


class LowestPoint(BaseModel):
    """The lowest end-of-day balance in a window and the first day it occurs."""

    amount: Decimal
    date: dt.date


class RiskReport(BaseModel):
    """Risk findings for a sequence of day snapshots."""

    low_balance_days: list[date] = Field(
        default_factory=list,
        description="Days ending strictly below the safety buffer",
    )
    overdraft_days: list[date] = Field(
        default_factory=list,
        description="Days ending strictly below zero",
    )
    collisions: list[BillCollision] = Field(default_factory=list)
    lowest_point: Optional[LowestPoint] = None
    collision_summary: CollisionSummary = Field(default_factory=CollisionSummary)

    @property
    def collision_count(self) -> int:
        return len(self.collisions)

    @property
    def collision_dates(self) -> list[date]:
        return [c.date for c in self.collisions]


class ForecastResult(BaseModel):
    """Complete calendar forecast consumed by the dashboard, digest and alerts."""

    starting_balance: Decimal = Field(description="Sum of spendable account balances")
    window_start: date = Field(description="First forecast day (today)")
    window_end: date = Field(description="Last forecast day, inclusive")
    safety_buffer: Decimal = Field(default=Decimal("0"))
    days: list[DaySnapshot] = Field(default_factory=list)
    risks: RiskReport = Field(default_factory=RiskReport)
    safe_to_spend: Decimal = Field(
        default=Decimal("0"),
        description="Headroom above the safety buffer over the near-term window",
    )

    @property
    def horizon_days(self) -> int:
        return len(self.days)

    @property
    def lowest_balance(self) -> Decimal:
        """Lowest end-of-day balance, or the starting balance for an empty window."""
        if self.risks.lowest_point is None:
            return self.starting_balance
        return self.risks.lowest_point.amount

    @property
    def lowest_balance_date(self) -> date:
        if self.risks.lowest_point is None:
            return self.window_start
        return self.risks.lowest_point.date
