"""Data types exchanged between the forecast jobs and their collaborators.

These types describe what the data-access layer hands to the jobs (user
profile and settings) and what the jobs hand to delivery collaborators
(low-balance alerts and weekly digest summaries). Rendering, email delivery
and currency formatting happen elsewhere.
"""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMERATIONS
# =============================================================================


class SubscriptionTier(str, Enum):
    """Subscription tiers that determine the forecast horizon."""

    FREE = "free"
    PRO = "pro"
    LIFETIME = "lifetime"

    @classmethod
    def normalize(cls, value: Any, status: Optional[str] = None) -> "SubscriptionTier":
        """Map a stored tier (and optional billing status) to an entitlement.

        Legacy ``premium`` rows are treated as pro. When a status is given,
        anything other than ``active`` or ``trialing`` means free.
        """
        if status is not None and status.strip().lower() not in {"active", "trialing"}:
            return cls.FREE

        raw = str(value.value if isinstance(value, cls) else value or "").strip().lower()
        if raw == "premium":
            return cls.PRO
        try:
            return cls(raw)
        except ValueError:
            return cls.FREE


class JobStatus(str, Enum):
    """Outcome of processing one user in a batch job."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


# =============================================================================
# COLLABORATOR INPUTS
# =============================================================================


class UserSettings(BaseModel):
    """Per-user settings read by the forecast jobs.

    Missing values are filled from configuration defaults by the jobs.
    """

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    timezone: Optional[str] = None
    safety_buffer: Optional[Decimal] = Field(default=None, ge=0)
    currency: str = "USD"
    tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_status: Optional[str] = None
    low_balance_alert_enabled: bool = True
    last_low_balance_alert_at: Optional[datetime] = None

    @field_validator("low_balance_alert_enabled", mode="before")
    @classmethod
    def default_enabled(cls, v: Any) -> Any:
        """Alerts are on unless explicitly disabled."""
        return True if v is None else v

    @field_validator("tier", mode="before")
    @classmethod
    def normalize_tier(cls, v: Any) -> SubscriptionTier:
        return SubscriptionTier.normalize(v)

    @field_validator("currency", mode="before")
    @classmethod
    def default_currency(cls, v: Any) -> Any:
        return (v or "").strip() or "USD"

    @property
    def effective_tier(self) -> SubscriptionTier:
        return SubscriptionTier.normalize(self.tier, self.subscription_status)


# =============================================================================
# JOB OUTPUTS
# =============================================================================


class LowBalanceAlert(BaseModel):
    """A projected low balance worth notifying the user about."""

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    projected_low_date: date
    projected_low_amount: Decimal
    current_balance: Decimal
    safety_buffer: Decimal
    days_until_low: int = Field(ge=0)
    currency: str = "USD"

    @property
    def is_overdraft(self) -> bool:
        return self.projected_low_amount < 0


class JobResult(BaseModel):
    """Per-user result of a batch job run."""

    user_id: str
    status: JobStatus
    reason: Optional[str] = None
    error: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status != JobStatus.FAILED


class JobRunSummary(BaseModel):
    """Aggregate outcome of a batch job run."""

    checked: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[JobResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[JobResult]) -> "JobRunSummary":
        return cls(
            checked=len(results),
            sent=sum(1 for r in results if r.status == JobStatus.SENT),
            skipped=sum(1 for r in results if r.status == JobStatus.SKIPPED),
            failed=sum(1 for r in results if r.status == JobStatus.FAILED),
            results=results,
        )


class DigestLine(BaseModel):
    """One income or bill line in the weekly digest."""

    name: str
    amount: Decimal = Field(description="Positive magnitude")
    date: dt.date


class DigestSummary(BaseModel):
    """Totals for the digest week."""

    total_income: Decimal
    total_bills: Decimal
    net_change: Decimal
    starting_balance: Decimal
    lowest_balance: Decimal
    lowest_balance_date: date
    ending_balance: Decimal


class DigestAlerts(BaseModel):
    """Warning flags shown at the top of the digest."""

    has_low_balance: bool = False
    has_overdraft_risk: bool = False
    has_bill_collisions: bool = False
    collision_count: int = 0


class DigestData(BaseModel):
    """Everything the weekly digest email template needs."""

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    week_start: date
    week_end: date
    summary: DigestSummary
    alerts: DigestAlerts
    upcoming_bills: list[DigestLine] = Field(default_factory=list)
    upcoming_income: list[DigestLine] = Field(default_factory=list)
    currency: str = "USD"
    timezone: Optional[str] = None
    safety_buffer: Decimal = Decimal("0")


__all__ = [
    "SubscriptionTier",
    "JobStatus",
    "UserSettings",
    "LowBalanceAlert",
    "JobResult",
    "JobRunSummary",
    "DigestLine",
    "DigestSummary",
    "DigestAlerts",
    "DigestData",
]
