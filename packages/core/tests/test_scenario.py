"""Tests for the what-if scenario overlay."""

from datetime import date
from decimal import Decimal

import pytest

from cashflow_core import Account, build_forecast, calculate_scenario
from cashflow_core.scenario import ScenarioFrequency


@pytest.fixture
def flat_forecast():
    """Ten flat days at 1000 starting Mar 1."""
    return build_forecast(
        [Account(current_balance=Decimal("1000"))],
        [],
        [],
        Decimal("0"),
        "UTC",
        10,
        today=date(2025, 3, 1),
    )


class TestCalculateScenario:
    """Tests for calculate_scenario."""

    def test_affordable_expense(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("100"), date(2025, 3, 3))

        assert result.can_afford is True
        assert result.lowest_balance == Decimal("900")
        assert result.lowest_date == date(2025, 3, 3)
        assert result.previous_lowest == Decimal("1000")
        assert result.first_problem_day is None
        assert result.impact_summary == "Lowest balance would be 900.00 on Mar 3."

    def test_preview_is_centred_on_lowest_day(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("100"), date(2025, 3, 3))

        assert [p.date.day for p in result.preview] == [1, 2, 3, 4, 5, 6]
        assert result.preview[0].delta == Decimal("0")
        assert result.preview[2].delta == Decimal("100")

    def test_below_threshold(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("950"), date(2025, 3, 3))

        assert result.can_afford is False
        assert result.causes_low_balance is True
        assert result.causes_overdraft is False
        assert result.first_problem_day == date(2025, 3, 3)
        assert result.impact_summary.startswith("This would push your balance below 100 starting Mar 3.")

    def test_overdraft(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("1200"), date(2025, 3, 5))

        assert result.causes_overdraft is True
        assert result.lowest_balance == Decimal("-200")
        assert "overdraft risk starting Mar 5" in result.impact_summary

    def test_baseline_is_untouched(self, flat_forecast):
        calculate_scenario(flat_forecast, Decimal("1200"), date(2025, 3, 5))

        assert all(d.ending_balance == Decimal("1000") for d in flat_forecast.days)

    def test_monthly_expense_clamps_to_month_end(self):
        forecast = build_forecast(
            [Account(current_balance=Decimal("1000"))],
            [],
            [],
            Decimal("0"),
            "UTC",
            60,
            today=date(2025, 1, 31),
        )

        result = calculate_scenario(
            forecast,
            Decimal("100"),
            date(2025, 1, 31),
            frequency=ScenarioFrequency.MONTHLY,
        )

        by_day = {p.date: p.scenario_balance for p in result.preview}
        assert result.lowest_balance == Decimal("700")
        assert result.lowest_date == date(2025, 3, 31)
        assert by_day[date(2025, 3, 28)] == Decimal("800")

    def test_monthly_accepts_string_frequency(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("10"), date(2025, 3, 2), frequency="monthly")

        assert result.lowest_balance == Decimal("990")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), "abc"])
    def test_invalid_amount(self, flat_forecast, amount):
        result = calculate_scenario(flat_forecast, amount, date(2025, 3, 3))

        assert result.can_afford is False
        assert result.impact_summary == "Please enter a valid amount."

    def test_empty_forecast(self):
        forecast = build_forecast([], [], [], Decimal("0"), "UTC", 0, today=date(2025, 3, 1))

        result = calculate_scenario(forecast, Decimal("50"), date(2025, 3, 3))

        assert result.can_afford is False
        assert result.impact_summary == "No calendar data available to calculate impact."

    def test_custom_threshold(self, flat_forecast):
        result = calculate_scenario(
            flat_forecast,
            Decimal("100"),
            date(2025, 3, 3),
            low_balance_threshold=Decimal("950"),
        )

        assert result.can_afford is False
        assert result.first_problem_day == date(2025, 3, 3)

    def test_name_is_carried_to_result(self, flat_forecast):
        result = calculate_scenario(
            flat_forecast, Decimal("100"), date(2025, 3, 3), name="  New laptop "
        )

        assert result.expense_name == "New laptop"
        assert result.impact_summary == "Lowest balance would be 900.00 on Mar 3."

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_name(self, flat_forecast, name):
        result = calculate_scenario(flat_forecast, Decimal("100"), date(2025, 3, 3), name=name)

        assert result.expense_name is None

    def test_name_on_rejected_amount(self, flat_forecast):
        result = calculate_scenario(flat_forecast, Decimal("0"), date(2025, 3, 3), name="Gift")

        assert result.can_afford is False
        assert result.expense_name == "Gift"
