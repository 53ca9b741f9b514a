"""Tests for finflex.domain.aggregation pure functions."""

from datetime import date, datetime

import pytest

from finflex.dates import to_timestamp
from finflex.domain.aggregation import (
    category_shares,
    current_month_split,
    daily_spending,
    monthly_totals,
    summarize_months,
    year_to_date_savings,
)
from finflex.domain.models import Amount, BillLabel, SpendCategory, Transaction

NOW = datetime(2025, 6, 15, 12, 0)


def txn(
    txn_id: int,
    amount: float,
    when: datetime,
    category: SpendCategory | str = SpendCategory.OTHER,
    is_fixed: bool = False,
) -> Transaction:
    if not isinstance(category, SpendCategory):
        category = BillLabel(category)
    return Transaction(
        id=txn_id,
        amount=Amount(amount),
        category=category,
        is_fixed=is_fixed,
        timestamp=to_timestamp(when),
    )


class TestMonthlyTotals:
    """Tests for monthly_totals."""

    def test_groups_by_year_and_month(self) -> None:
        """Should sum every entry, fixed or not, into its (year, month) bucket."""
        transactions = [
            txn(1, 100, datetime(2025, 6, 1, 9, 0)),
            txn(2, 250, datetime(2025, 6, 14, 9, 0), "Room Rent", is_fixed=True),
            txn(3, 40, datetime(2025, 5, 31, 23, 0)),
        ]

        totals = monthly_totals(transactions)

        assert totals == {(2025, 6): 350, (2025, 5): 40}

    def test_same_month_different_years(self) -> None:
        """Should keep the same month of different years apart."""
        transactions = [
            txn(1, 100, datetime(2024, 6, 10)),
            txn(2, 200, datetime(2025, 6, 10)),
        ]

        assert monthly_totals(transactions) == {(2024, 6): 100, (2025, 6): 200}

    def test_empty(self) -> None:
        """Should return no buckets for an empty log."""
        assert monthly_totals([]) == {}


class TestSummarizeMonths:
    """Tests for summarize_months."""

    def test_most_recent_first(self) -> None:
        """Should sort by year then month, newest first."""
        totals = {(2024, 12): Amount(10), (2025, 2): Amount(20), (2025, 1): Amount(30)}

        history = summarize_months(totals, Amount(1000))

        assert [(m.year, m.month_index) for m in history] == [(2025, 2), (2025, 1), (2024, 12)]
        assert [m.label for m in history] == ["Feb", "Jan", "Dec"]

    def test_savings_is_income_minus_spent(self) -> None:
        """Should allow negative savings for an overspent month."""
        history = summarize_months({(2025, 3): Amount(1500)}, Amount(1000))

        assert history[0].total_spent == 1500
        assert history[0].savings_achieved == -500


class TestYearToDateSavings:
    """Tests for year_to_date_savings."""

    def test_only_current_year(self) -> None:
        """Should sum only buckets of the requested year."""
        history = summarize_months(
            {(2024, 12): Amount(100), (2025, 1): Amount(200), (2025, 2): Amount(300)},
            Amount(1000),
        )

        assert year_to_date_savings(history, 2025) == 1500
        assert year_to_date_savings(history, 2024) == 900
        assert year_to_date_savings(history, 2023) == 0


class TestCurrentMonthSplit:
    """Tests for current_month_split."""

    def test_separates_variable_from_total(self) -> None:
        """Should count fixed bills in the total only."""
        transactions = [
            txn(1, 500, datetime(2025, 6, 2), SpendCategory.FOOD_AND_DRINKS),
            txn(2, 12000, datetime(2025, 6, 1), "Room Rent", is_fixed=True),
            txn(3, 999, datetime(2025, 5, 20), SpendCategory.SHOPPING),
        ]

        split = current_month_split(transactions, NOW)

        assert split.total_spent == 12500
        assert split.variable_spent == 500

    def test_future_month_ignored(self) -> None:
        """Should ignore entries from other months."""
        transactions = [txn(1, 500, datetime(2025, 7, 1))]

        split = current_month_split(transactions, NOW)

        assert split.total_spent == 0
        assert split.variable_spent == 0


class TestCategoryShares:
    """Tests for category_shares."""

    def test_shares_sum_to_100(self) -> None:
        """Should give each category its percent of the month total."""
        transactions = [
            txn(1, 300, datetime(2025, 6, 2), SpendCategory.FOOD_AND_DRINKS),
            txn(2, 100, datetime(2025, 6, 3), SpendCategory.TRANSPORT),
            txn(3, 600, datetime(2025, 6, 1), "Room Rent", is_fixed=True),
        ]

        shares = category_shares(transactions, NOW)

        assert [s.category for s in shares] == ["Room Rent", "Food & Drinks", "Transport"]
        assert [s.percent for s in shares] == pytest.approx([60.0, 30.0, 10.0])
        assert sum(s.percent for s in shares) == pytest.approx(100.0)

    def test_merges_same_category(self) -> None:
        """Should add up entries of the same category."""
        transactions = [
            txn(1, 100, datetime(2025, 6, 2), SpendCategory.TRANSPORT),
            txn(2, 150, datetime(2025, 6, 5), SpendCategory.TRANSPORT),
        ]

        shares = category_shares(transactions, NOW)

        assert len(shares) == 1
        assert shares[0].amount == 250
        assert shares[0].percent == 100.0

    def test_ties_ordered_by_label(self) -> None:
        """Should order equal amounts alphabetically."""
        transactions = [
            txn(1, 100, datetime(2025, 6, 2), SpendCategory.TRANSPORT),
            txn(2, 100, datetime(2025, 6, 2), SpendCategory.HEALTH),
        ]

        assert [s.category for s in category_shares(transactions, NOW)] == ["Health", "Transport"]

    def test_no_spending_this_month(self) -> None:
        """Should return nothing when the month has no entries."""
        transactions = [txn(1, 100, datetime(2025, 5, 2))]

        assert category_shares(transactions, NOW) == []


class TestDailySpending:
    """Tests for daily_spending."""

    def test_seven_days_with_zeros(self) -> None:
        """Should return 7 days ending today, zero-filled."""
        transactions = [
            txn(1, 120, datetime(2025, 6, 15, 8, 0)),
            txn(2, 30, datetime(2025, 6, 15, 11, 0)),
            txn(3, 75, datetime(2025, 6, 10, 19, 0), "Electricity", is_fixed=True),
            txn(4, 500, datetime(2025, 6, 8, 19, 0)),
        ]

        days = daily_spending(transactions, NOW)

        assert len(days) == 7
        assert days[0].day == date(2025, 6, 9)
        assert days[-1].label == "Today"
        assert days[-1].amount == 150
        assert days[1].amount == 75
        assert sum(d.amount for d in days) == 225

    def test_empty_log(self) -> None:
        """Should still return 7 days, all zero."""
        days = daily_spending([], NOW)

        assert len(days) == 7
        assert all(d.amount == 0 for d in days)
