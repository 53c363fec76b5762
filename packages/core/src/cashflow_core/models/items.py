"""Input models for the forecasting engine.

This module provides the entities the engine reads but never mutates:
- Recurring income and bill items (a single record tagged by kind)
- Accounts contributing to the spendable starting balance, including
  credit cards with a payment due day
- Transfers between accounts
- The closed set of recurrence frequencies

Rows arrive from an external data-access layer. Validation here is lenient
where stored data may be messy (unknown frequencies, missing active flags) and
strict parsing is offered separately for data entry.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cashflow_core.exceptions import ValidationError

logger = structlog.get_logger()

CREDIT_CARD = "credit_card"


class ItemKind(str, Enum):
    """Whether an item adds money (income), removes it (bill) or moves it (transfer)."""

    INCOME = "income"
    BILL = "bill"
    TRANSFER = "transfer"


class Frequency(str, Enum):
    """Supported recurrence rules for income and bills."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"
    ONE_TIME = "one-time"
    IRREGULAR = "irregular"

    @property
    def is_recurring(self) -> bool:
        """One-time and irregular items are never advanced."""
        return self not in (Frequency.ONE_TIME, Frequency.IRREGULAR)

    @classmethod
    def parse(cls, value: Any, *, strict: bool = False) -> "Frequency":
        """Normalize a stored or user-entered frequency string.

        Case, surrounding whitespace and underscores are ignored, and the
        ``semimonthly`` spelling is accepted as an alias.

        Args:
            value: Raw frequency value (string or Frequency).
            strict: Raise instead of falling back when the value is unknown.

        Returns:
            The matching Frequency. Unknown values fall back to MONTHLY
            when ``strict`` is False.

        Raises:
            ValidationError: If ``strict`` is True and the value is unknown.
        """
        if isinstance(value, cls):
            return value

        normalized = str(value or "").strip().lower().replace("_", "-")
        if normalized == "semimonthly":
            normalized = cls.SEMI_MONTHLY.value

        try:
            return cls(normalized)
        except ValueError:
            if strict:
                raise ValidationError(
                    f"Unsupported frequency: {value!r}",
                    field="frequency",
                    value=value,
                    constraint=f"Must be one of: {', '.join(f.value for f in cls)}",
                ) from None

        logger.warning("unknown_frequency_defaulted", frequency=value, fallback="monthly")
        return cls.MONTHLY


class RecurringItem(BaseModel):
    """An income source or a bill with a recurrence rule.

    The amount is stored as a positive magnitude; the sign is applied when
    occurrences are expanded (income credits, bills debit).
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "bill_rent",
                    "name": "Rent",
                    "kind": "bill",
                    "amount": "1200.00",
                    "frequency": "monthly",
                    "anchor_date": "2025-01-01",
                }
            ]
        },
    )

    id: str = Field(description="Opaque identifier of the income or bill row")
    name: str = Field(description="Display label")
    kind: ItemKind = Field(description="Income (credit) or bill (debit)")
    amount: Decimal = Field(
        allow_inf_nan=True,
        description="Magnitude of each occurrence; the sign comes from kind",
    )
    frequency: Frequency = Field(
        default=Frequency.MONTHLY,
        description="Recurrence rule",
    )
    anchor_date: date = Field(
        description="Next known occurrence, or the historical first occurrence",
    )
    is_active: bool = Field(
        default=True,
        description="Inactive items never produce occurrences",
    )
    end_date: Optional[date] = Field(
        default=None,
        description="Optional last date on which a recurring item may occur",
    )

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v: Any) -> Frequency:
        """Accept loose spellings and default unknown values to monthly."""
        return Frequency.parse(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v: Any) -> Any:
        """A missing flag from storage means active."""
        return True if v is None else v

    @field_validator("amount")
    @classmethod
    def magnitude(cls, v: Decimal) -> Decimal:
        """Store the absolute value; non-finite amounts are left for clamping."""
        return abs(v) if v.is_finite() else v

    @property
    def is_income(self) -> bool:
        return self.kind == ItemKind.INCOME

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign the simulator applies."""
        return self.amount if self.is_income else -self.amount


class Account(BaseModel):
    """A bank, cash or credit card account.

    Spendable accounts form the starting balance. Credit cards with a
    payment due day and a positive balance produce a payment occurrence.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Opaque account identifier")
    name: str = Field(default="", description="Display name")
    current_balance: Decimal = Field(
        default=Decimal("0"),
        allow_inf_nan=True,
        description="Signed balance; negative for overdrawn accounts",
    )
    is_spendable: bool = Field(
        default=True,
        description="Non-spendable accounts are excluded from safe-to-spend math",
    )
    account_type: Optional[str] = Field(
        default=None,
        description="Account category such as checking, savings or credit_card",
    )
    payment_due_day: Optional[int] = Field(
        default=None,
        description="Day of month a credit card payment is due (1-31)",
    )

    @field_validator("is_spendable", mode="before")
    @classmethod
    def default_spendable(cls, v: Any) -> Any:
        """A missing flag from storage means spendable."""
        return True if v is None else v

    @field_validator("account_type", mode="before")
    @classmethod
    def normalize_account_type(cls, v: Any) -> Any:
        if v is None:
            return None
        return str(v).strip().lower().replace("-", "_") or None

    @property
    def is_credit_card(self) -> bool:
        return self.account_type == CREDIT_CARD

    @property
    def has_payment_due(self) -> bool:
        """A credit card with a valid due day and an outstanding balance."""
        return (
            self.is_credit_card
            and self.payment_due_day is not None
            and 1 <= self.payment_due_day <= 31
            and self.current_balance.is_finite()
            and self.current_balance > 0
        )


class Transfer(BaseModel):
    """Money moved between two of the user's accounts on a schedule.

    A transfer only changes the spendable balance when it crosses the
    spendable boundary: spendable to non-spendable is an outflow (for example
    paying down a credit card from checking) and the reverse is an inflow.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque identifier of the transfer row")
    name: str = Field(default="Transfer", description="Display label")
    amount: Decimal = Field(
        allow_inf_nan=True,
        description="Magnitude moved on each occurrence",
    )
    frequency: Frequency = Field(default=Frequency.ONE_TIME)
    anchor_date: date = Field(description="First (or only) transfer date")
    recurrence_day: Optional[int] = Field(
        default=None,
        description="Day of month overriding the anchor's day for monthly-style rules",
    )
    from_account_id: str
    to_account_id: str
    is_active: bool = True
    end_date: Optional[date] = None

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> Any:
        return (v or "").strip() or "Transfer"

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v: Any) -> Frequency:
        return Frequency.parse(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("recurrence_day", mode="before")
    @classmethod
    def valid_day_or_none(cls, v: Any) -> Any:
        """Out-of-range or zero days fall back to the anchor's day."""
        if v is None or not 1 <= int(v) <= 31:
            return None
        return int(v)

    @field_validator("amount")
    @classmethod
    def magnitude(cls, v: Decimal) -> Decimal:
        return abs(v) if v.is_finite() else v
