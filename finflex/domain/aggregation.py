"""Pure functions for grouping spending by month, category and day.

This module contains the aggregation core of the metrics engine:
- No I/O operations (no database, no console, no files)
- No side effects
- One pass over the transaction log per function

All amounts are in major currency units (Amount type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from finflex.dates import last_seven_days, local_datetime, month_key, month_label
from finflex.domain.models import Amount, Transaction


@dataclass(frozen=True)
class MonthlySummary:
    """Immutable aggregate of one calendar month."""

    label: str
    month_index: int
    year: int
    total_spent: Amount
    savings_achieved: Amount


@dataclass(frozen=True)
class MonthSplit:
    """Immutable current-month totals, all spending vs variable only."""

    total_spent: Amount
    variable_spent: Amount


@dataclass(frozen=True)
class CategoryShare:
    """Immutable share of one category in the current month."""

    category: str
    amount: Amount
    percent: float


@dataclass(frozen=True)
class DailySpend:
    """Immutable spending total for one local day."""

    day: date
    label: str
    amount: Amount


def _in_month(transaction: Transaction, now: datetime) -> bool:
    return month_key(transaction.timestamp, now.tzinfo) == (now.year, now.month)


def monthly_totals(transactions: Iterable[Transaction], tz: tzinfo | None = None) -> dict[tuple[int, int], Amount]:
    """Sum transaction amounts per (year, month_index), fixed and variable alike.

    Args:
        transactions: Transaction log.
        tz: Zone used to resolve local dates. None means system local.

    Returns:
        Dictionary keyed by (year, month_index) for every month present in the log.
    """
    totals: dict[tuple[int, int], Amount] = {}
    for txn in transactions:
        key = month_key(txn.timestamp, tz)
        totals[key] = Amount(totals.get(key, 0.0) + txn.amount)
    return totals


def summarize_months(totals: dict[tuple[int, int], Amount], monthly_income: Amount) -> list[MonthlySummary]:
    """Build monthly summaries, most recent month first.

    Income is treated as constant across months, so savings achieved for a
    month is simply ``monthly_income - total_spent``.

    Args:
        totals: Output of monthly_totals.
        monthly_income: Declared monthly income.

    Returns:
        MonthlySummary list sorted by descending (year, month_index).
    """
    return [
        MonthlySummary(
            label=month_label(month_index),
            month_index=month_index,
            year=year,
            total_spent=total,
            savings_achieved=Amount(monthly_income - total),
        )
        for (year, month_index), total in sorted(totals.items(), reverse=True)
    ]


def year_to_date_savings(history: Iterable[MonthlySummary], year: int) -> Amount:
    """Sum savings achieved over the months of ``year`` present in history."""
    return Amount(sum(month.savings_achieved for month in history if month.year == year))


def current_month_split(transactions: Iterable[Transaction], now: datetime) -> MonthSplit:
    """Total spent this month, and the part of it that is not fixed.

    Args:
        transactions: Transaction log.
        now: Current instant; its month is the period selected.

    Returns:
        MonthSplit for the month containing ``now``.
    """
    total = 0.0
    variable = 0.0
    for txn in transactions:
        if not _in_month(txn, now):
            continue
        total += txn.amount
        if not txn.is_fixed:
            variable += txn.amount
    return MonthSplit(total_spent=Amount(total), variable_spent=Amount(variable))


def category_shares(transactions: Iterable[Transaction], now: datetime) -> list[CategoryShare]:
    """Current-month spending per category with its share of the month total.

    Categories without a transaction this month are left out entirely.

    Args:
        transactions: Transaction log.
        now: Current instant; its month is the period selected.

    Returns:
        CategoryShare list ordered by descending amount, ties by label.
    """
    totals: dict[str, float] = {}
    for txn in transactions:
        if _in_month(txn, now):
            totals[txn.label] = totals.get(txn.label, 0.0) + txn.amount

    month_total = sum(totals.values())
    shares = [
        CategoryShare(
            category=label,
            amount=Amount(amount),
            percent=(amount / month_total) * 100 if month_total > 0 else 0.0,
        )
        for label, amount in totals.items()
    ]
    return sorted(shares, key=lambda share: (-share.amount, share.category))


def daily_spending(transactions: Iterable[Transaction], now: datetime) -> list[DailySpend]:
    """Spending per day over the last 7 local days, oldest first.

    Args:
        transactions: Transaction log.
        now: Current instant; the window ends today.

    Returns:
        Exactly seven DailySpend entries; days without entries are 0.
    """
    days = last_seven_days(now)
    wanted = {day.day for day in days}
    by_day: dict[date, float] = {}
    for txn in transactions:
        day = local_datetime(txn.timestamp, now.tzinfo).date()
        if day in wanted:
            by_day[day] = by_day.get(day, 0.0) + txn.amount

    return [DailySpend(day=bin_.day, label=bin_.label, amount=Amount(by_day.get(bin_.day, 0.0))) for bin_ in days]
