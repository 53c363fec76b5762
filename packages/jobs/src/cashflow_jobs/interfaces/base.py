"""Collaborator protocols for the forecast jobs.

The jobs never talk to a database or an email provider directly. They depend
on the structural contracts below, so any class with matching async methods
(a database repository, an HTTP client, an in-memory fake in tests) can be
plugged in without inheriting from anything.

Example Usage:
    ```python
    class PostgresForecastSource:
        async def list_accounts(self, user_id: str) -> list[Account]:
            rows = await self._pool.fetch(ACCOUNTS_SQL, user_id)
            return [Account(**dict(row)) for row in rows]
        ...

    source: ForecastDataSource = PostgresForecastSource(pool)
    ```
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from cashflow_core.models import Account, RecurringItem, Transfer

from cashflow_jobs.interfaces.types import DigestData, LowBalanceAlert, UserSettings


# =============================================================================
# DATA ACCESS
# =============================================================================


@runtime_checkable
class ForecastDataSource(Protocol):
    """Fetches the entities a forecast is built from, scoped to one user.

    Implementations should raise ``cashflow_core.exceptions.DataSourceError``
    when the backing store fails; the jobs record such failures per user and
    move on to the next one.
    """

    async def get_settings(self, user_id: str) -> Optional[UserSettings]:
        """Return the user's settings, or None if the user does not exist."""
        ...

    async def list_accounts(self, user_id: str) -> list[Account]:
        """Return all of the user's accounts, spendable or not."""
        ...

    async def list_income(self, user_id: str) -> list[RecurringItem]:
        """Return the user's income sources, active or not."""
        ...

    async def list_bills(self, user_id: str) -> list[RecurringItem]:
        """Return the user's bills, active or not."""
        ...

    async def list_transfers(self, user_id: str) -> list[Transfer]:
        """Return the user's scheduled transfers between accounts."""
        ...

    async def record_alert_sent(self, user_id: str, sent_at: datetime) -> None:
        """Persist when the last low-balance alert went out (for cooldown)."""
        ...


# =============================================================================
# DELIVERY
# =============================================================================


@runtime_checkable
class AlertNotifier(Protocol):
    """Delivers low-balance alerts and weekly digests to users."""

    async def send_low_balance_alert(self, alert: LowBalanceAlert) -> Optional[str]:
        """Deliver an alert and return a provider message id, if any."""
        ...

    async def send_digest(self, digest: DigestData) -> Optional[str]:
        """Deliver a weekly digest and return a provider message id, if any."""
        ...


__all__ = ["ForecastDataSource", "AlertNotifier"]
