"""In-memory collaborators shared by the jobs tests."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest

from cashflow_core.exceptions import DataSourceError
from cashflow_core.models import Account, RecurringItem, Transfer

from cashflow_jobs.config import CashflowConfig, ForecastConfig, JobsConfig
from cashflow_jobs.interfaces import DigestData, LowBalanceAlert, UserSettings


class InMemorySource:
    """ForecastDataSource backed by dictionaries."""

    def __init__(self) -> None:
        self.settings: dict[str, UserSettings] = {}
        self.accounts: dict[str, list[Account]] = {}
        self.income: dict[str, list[RecurringItem]] = {}
        self.bills: dict[str, list[RecurringItem]] = {}
        self.transfers: dict[str, list[Transfer]] = {}
        self.broken: set[str] = set()
        self.alerts_recorded: dict[str, datetime] = {}
        self.account_calls: list[str] = []
        self.settings_calls: list[str] = []

    def add_user(
        self,
        user_id: str,
        *,
        balance: str = "1000",
        income: Optional[list[RecurringItem]] = None,
        bills: Optional[list[RecurringItem]] = None,
        **settings,
    ) -> None:
        settings.setdefault("email", f"{user_id}@example.com")
        settings.setdefault("timezone", "UTC")
        self.settings[user_id] = UserSettings(user_id=user_id, **settings)
        self.accounts[user_id] = [
            Account(id=f"{user_id}_checking", name="Checking", current_balance=Decimal(balance))
        ]
        self.income[user_id] = income or []
        self.bills[user_id] = bills or []

    async def get_settings(self, user_id: str) -> Optional[UserSettings]:
        self.settings_calls.append(user_id)
        return self.settings.get(user_id)

    async def list_accounts(self, user_id: str) -> list[Account]:
        self.account_calls.append(user_id)
        if user_id in self.broken:
            raise DataSourceError("Database unavailable", user_id=user_id, operation="list_accounts")
        return self.accounts.get(user_id, [])

    async def list_income(self, user_id: str) -> list[RecurringItem]:
        return self.income.get(user_id, [])

    async def list_bills(self, user_id: str) -> list[RecurringItem]:
        return self.bills.get(user_id, [])

    async def list_transfers(self, user_id: str) -> list[Transfer]:
        return self.transfers.get(user_id, [])

    async def record_alert_sent(self, user_id: str, sent_at: datetime) -> None:
        self.alerts_recorded[user_id] = sent_at


class RecordingNotifier:
    """AlertNotifier that keeps everything it was asked to deliver."""

    def __init__(self) -> None:
        self.alerts: list[LowBalanceAlert] = []
        self.digests: list[DigestData] = []

    async def send_low_balance_alert(self, alert: LowBalanceAlert) -> Optional[str]:
        self.alerts.append(alert)
        return f"alert-{len(self.alerts)}"

    async def send_digest(self, digest: DigestData) -> Optional[str]:
        self.digests.append(digest)
        return f"digest-{len(self.digests)}"


@pytest.fixture
def source() -> InMemorySource:
    return InMemorySource()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def config() -> CashflowConfig:
    """Configuration independent of the host environment."""
    return CashflowConfig(
        env="test",
        forecast=ForecastConfig(),
        jobs=JobsConfig(concurrency=2),
    )
