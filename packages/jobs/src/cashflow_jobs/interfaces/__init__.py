"""Collaborator interfaces for the forecast jobs.

Available Interfaces:
    ForecastDataSource: Fetches accounts, income, bills and settings per user
    AlertNotifier: Delivers low-balance alerts and weekly digests

Data Types:
    UserSettings: Per-user settings read by the jobs
    LowBalanceAlert: Alert payload handed to the notifier
    DigestData: Weekly digest payload handed to the notifier
    JobResult / JobRunSummary: Batch job outcomes
"""

from cashflow_jobs.interfaces.base import (
    AlertNotifier,
    ForecastDataSource,
)

from cashflow_jobs.interfaces.types import (
    # Enums
    JobStatus,
    SubscriptionTier,
    # Inputs
    UserSettings,
    # Outputs
    DigestAlerts,
    DigestData,
    DigestLine,
    DigestSummary,
    JobResult,
    JobRunSummary,
    LowBalanceAlert,
)

__all__ = [
    # Protocols
    "AlertNotifier",
    "ForecastDataSource",
    # Enums
    "JobStatus",
    "SubscriptionTier",
    # Inputs
    "UserSettings",
    # Outputs
    "DigestAlerts",
    "DigestData",
    "DigestLine",
    "DigestSummary",
    "JobResult",
    "JobRunSummary",
    "LowBalanceAlert",
]
