"""Metrics snapshot: the single entry point of the metrics engine.

compute_snapshot maps (profile, transactions, now) to one immutable
MetricsSnapshot. It is recomputed from scratch on every call, performs no
I/O and never mutates its inputs, so identical inputs give identical output.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from finflex.dates import MonthWindow, YearWindow, month_window, year_window
from finflex.domain.aggregation import (
    CategoryShare,
    DailySpend,
    MonthlySummary,
    category_shares,
    current_month_split,
    daily_spending,
    monthly_totals,
    summarize_months,
    year_to_date_savings,
)
from finflex.domain.budget import BudgetStatus, compute_budget_status
from finflex.domain.goals import compute_goal_progress
from finflex.domain.models import Amount, Profile, Transaction


@dataclass(frozen=True)
class MetricsSnapshot:
    """Immutable metrics for one instant."""

    daily_safe_spend: Amount
    days_of_runway: int
    discipline_score: float
    total_spent_this_month: Amount
    remaining_variable_budget: Amount
    yearly_goal_progress: float
    total_yearly_savings: Amount
    remaining_to_yearly_goal: Amount
    monthly_history: tuple[MonthlySummary, ...]
    monthly_contribution_progress: float
    category_shares: tuple[CategoryShare, ...]
    daily_spending: tuple[DailySpend, ...]
    budget: BudgetStatus
    month: MonthWindow
    year: YearWindow


def compute_snapshot(profile: Profile, transactions: Sequence[Transaction], now: datetime) -> MetricsSnapshot:
    """Derive the full metrics snapshot.

    Args:
        profile: User profile (read only).
        transactions: Transaction log (read only).
        now: Current instant; naive means system local time.

    Returns:
        MetricsSnapshot for ``now``.
    """
    month = month_window(now)
    year = year_window(now)

    history = summarize_months(monthly_totals(transactions, now.tzinfo), profile.monthly_income)
    split = current_month_split(transactions, now)
    budget = compute_budget_status(profile, split, month)
    goals = compute_goal_progress(
        profile,
        year_to_date_savings(history, now.year),
        budget.projected_monthly_savings,
    )

    return MetricsSnapshot(
        daily_safe_spend=budget.daily_safe_spend,
        days_of_runway=budget.days_of_runway,
        discipline_score=budget.discipline_score,
        total_spent_this_month=split.total_spent,
        remaining_variable_budget=budget.remaining_variable_budget,
        yearly_goal_progress=goals.yearly_goal_progress,
        total_yearly_savings=goals.year_to_date_savings,
        remaining_to_yearly_goal=goals.remaining_to_yearly_goal,
        monthly_history=tuple(history),
        monthly_contribution_progress=goals.monthly_contribution_progress,
        category_shares=tuple(category_shares(transactions, now)),
        daily_spending=tuple(daily_spending(transactions, now)),
        budget=budget,
        month=month,
        year=year,
    )
