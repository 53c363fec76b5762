"""Cashflow Core - Day-by-day cash flow forecasting engine."""

__version__ = "0.1.0"

from .affordability import calculate_affordability
from .forecast import build_forecast
from .merger import merge
from .models import Account, Frequency, ForecastResult, ItemKind, RecurringItem, Transfer
from .recurrence import expand
from .risk import detect_risks
from .scenario import calculate_scenario
from .simulator import simulate
from .transfers import credit_card_payments, expand_transfer

__all__ = [
    "Account",
    "Frequency",
    "ForecastResult",
    "ItemKind",
    "RecurringItem",
    "Transfer",
    "build_forecast",
    "calculate_affordability",
    "calculate_scenario",
    "credit_card_payments",
    "detect_risks",
    "expand",
    "expand_transfer",
    "merge",
    "simulate",
]
