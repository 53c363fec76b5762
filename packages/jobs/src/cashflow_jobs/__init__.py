"""Cashflow Jobs - Batch callers and configuration around the forecast engine."""

from cashflow_jobs.config import (
    CashflowConfig,
    ForecastConfig,
    JobsConfig,
)

__version__ = "0.1.0"

__all__ = [
    "CashflowConfig",
    "ForecastConfig",
    "JobsConfig",
]
