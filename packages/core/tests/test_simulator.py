"""Tests for the occurrence merger and the balance simulator."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from cashflow_core.merger import merge
from cashflow_core.models import ItemKind, Occurrence
from cashflow_core.simulator import MAX_MAGNITUDE, clamp_amount, simulate


def occ(day: date, amount: str, name: str = "item") -> Occurrence:
    """Create an occurrence whose kind follows the amount's sign."""
    value = Decimal(amount)
    return Occurrence(
        date=day,
        amount=value,
        source_item_id=name,
        source_name=name,
        source_kind=ItemKind.INCOME if value > 0 else ItemKind.BILL,
    )


START = date(2025, 3, 1)
END = date(2025, 3, 10)


class TestMerge:
    """Tests for merge."""

    def test_sorted_by_date(self):
        a = [occ(date(2025, 3, 5), "-10", "a"), occ(date(2025, 3, 9), "-10", "a")]
        b = [occ(date(2025, 3, 1), "20", "b"), occ(date(2025, 3, 7), "20", "b")]

        merged = merge([a, b])

        assert [o.date.day for o in merged] == [1, 5, 7, 9]

    def test_same_date_keeps_input_order_and_duplicates(self):
        first = occ(date(2025, 3, 5), "-10", "first")
        second = occ(date(2025, 3, 5), "-10", "second")

        merged = merge([[first], [second], [first]])

        assert [o.source_name for o in merged] == ["first", "second", "first"]

    def test_empty_sequences(self):
        assert merge([[], []]) == []


class TestClampAmount:
    """Tests for numeric coercion."""

    @pytest.mark.parametrize(
        "value",
        [Decimal("NaN"), Decimal("Infinity"), float("nan"), float("-inf"), "abc", None],
    )
    def test_non_finite_or_invalid_becomes_zero(self, value):
        assert clamp_amount(value) == Decimal("0")

    def test_clamps_large_magnitudes(self):
        assert clamp_amount(Decimal("5e12")) == MAX_MAGNITUDE
        assert clamp_amount(Decimal("-5e12")) == -MAX_MAGNITUDE

    def test_passes_normal_values_through(self):
        assert clamp_amount("12.34") == Decimal("12.34")
        assert clamp_amount(7) == Decimal("7")


class TestSimulate:
    """Tests for simulate."""

    def test_one_snapshot_per_day(self):
        days = simulate(Decimal("100"), [], START, END)

        assert len(days) == 10
        assert days[0].date == START
        assert days[-1].date == END
        assert all(d.ending_balance == Decimal("100") for d in days)

    def test_balance_continuity(self):
        """Each day starts where the previous one ended."""
        occurrences = merge(
            [
                [occ(date(2025, 3, 2), "-40"), occ(date(2025, 3, 6), "-300")],
                [occ(date(2025, 3, 4), "250"), occ(date(2025, 3, 6), "120")],
            ]
        )

        days = simulate(Decimal("100"), occurrences, START, END)

        assert days[0].starting_balance == Decimal("100")
        for previous, current in zip(days, days[1:]):
            assert current.starting_balance == previous.ending_balance
        for day in days:
            assert day.ending_balance == day.starting_balance + day.net_change
            assert day.net_change == sum((o.amount for o in day.occurrences), Decimal("0"))
        assert days[-1].ending_balance == Decimal("130")

    def test_worst_case_ordering_within_a_day(self):
        """A bill and a paycheck on the same day: the bill is applied first."""
        paycheck = occ(date(2025, 3, 3), "1000", "paycheck")
        bill = occ(date(2025, 3, 3), "-500", "bill")

        days = simulate(Decimal("100"), [paycheck, bill], START, END)

        day = days[2]
        assert [o.source_name for o in day.occurrences] == ["bill", "paycheck"]
        assert day.day_low == Decimal("-400")
        assert day.ending_balance == Decimal("600")

    def test_day_low_without_occurrences_is_balance(self):
        days = simulate(Decimal("-25"), [], START, START)

        assert days[0].day_low == Decimal("-25")

    def test_ignores_occurrences_outside_window(self):
        occurrences = [
            occ(START - timedelta(days=1), "-50"),
            occ(END + timedelta(days=1), "-50"),
        ]

        days = simulate(Decimal("100"), occurrences, START, END)

        assert all(not d.occurrences for d in days)
        assert days[-1].ending_balance == Decimal("100")

    def test_inverted_window_is_empty(self):
        assert simulate(Decimal("100"), [], END, START) == []

    def test_single_day_window(self):
        days = simulate(Decimal("10"), [occ(START, "-15")], START, START)

        assert len(days) == 1
        assert days[0].ending_balance == Decimal("-5")

    def test_non_finite_amount_treated_as_zero(self):
        bad = Occurrence(
            date=START,
            amount=Decimal("NaN"),
            source_item_id="bad",
            source_name="bad",
            source_kind=ItemKind.BILL,
        )

        days = simulate(Decimal("100"), [bad], START, END)

        assert days[0].ending_balance == Decimal("100")
        assert days[0].net_change == Decimal("0")
        assert days[0].ending_balance.is_finite()

    def test_balance_is_clamped(self):
        days = simulate(Decimal("900000000"), [occ(START, "500000000")], START, START)

        assert days[0].ending_balance == MAX_MAGNITUDE
        assert days[0].ending_balance == days[0].starting_balance + days[0].net_change

    def test_non_finite_starting_balance(self):
        days = simulate(Decimal("Infinity"), [], START, START)

        assert days[0].starting_balance == Decimal("0")
