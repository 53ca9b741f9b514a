"""Pure functions for budget, safe-spend and discipline calculations.

This module contains the functional core for budget metrics:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in major currency units (Amount type) and are
never rounded here; rounding is a display concern.
"""

import math
from dataclasses import dataclass

from finflex.dates import MonthWindow
from finflex.domain.aggregation import MonthSplit
from finflex.domain.models import Amount, Profile

DEFAULT_SAVINGS_RATIO = 0.20

# Reported when nothing has been spent yet this month
UNBOUNDED_RUNWAY_DAYS = 999


@dataclass(frozen=True)
class BudgetStatus:
    """Immutable budget and discipline figures for the current month."""

    ideal_monthly_savings: Amount
    monthly_variable_budget: Amount
    remaining_variable_budget: Amount
    daily_safe_spend: Amount
    avg_daily_burn: Amount
    current_liquidity: Amount
    days_of_runway: int
    projected_monthly_savings: Amount
    discipline_score: float


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return min(100.0, max(0.0, value))


def calculate_ideal_monthly_savings(monthly_income: Amount, savings_ratio: float) -> Amount:
    """Calculate the savings the profile aims for each month.

    Args:
        monthly_income: Declared monthly income.
        savings_ratio: Desired share of income saved; 0 falls back to 20%.

    Returns:
        Ideal monthly savings.
    """
    return Amount(monthly_income * (savings_ratio or DEFAULT_SAVINGS_RATIO))


def calculate_variable_budget(monthly_income: Amount, fixed_costs: Amount, ideal_savings: Amount) -> Amount:
    """Calculate the discretionary budget for the month.

    Returns:
        Income minus fixed costs minus ideal savings (can be negative).
    """
    return Amount(monthly_income - fixed_costs - ideal_savings)


def calculate_remaining_variable_budget(variable_budget: Amount, variable_spent: Amount) -> Amount:
    """Calculate what is left of the discretionary budget, never below 0."""
    return Amount(max(0.0, variable_budget - variable_spent))


def calculate_daily_safe_spend(remaining_budget: Amount, days_remaining: int) -> Amount:
    """Spread the remaining budget over the days left, today included.

    Args:
        remaining_budget: Remaining variable budget.
        days_remaining: Inclusive day count left in the month.

    Returns:
        Safe spend per day; the whole remaining budget when no days are left.
    """
    if days_remaining <= 0:
        return remaining_budget
    return Amount(remaining_budget / days_remaining)


def calculate_avg_daily_burn(total_spent: Amount, day_of_month: int) -> Amount:
    """Average spend per elapsed day of the month (today included)."""
    if day_of_month <= 0:
        return Amount(1.0)
    return Amount(total_spent / day_of_month)


def calculate_runway(liquidity: Amount, avg_daily_burn: Amount) -> int:
    """Days the current liquidity lasts at the observed burn rate.

    Returns:
        Whole days (floored), or UNBOUNDED_RUNWAY_DAYS when burn is 0.
    """
    if avg_daily_burn > 0:
        return math.floor(liquidity / avg_daily_burn)
    return UNBOUNDED_RUNWAY_DAYS


def calculate_discipline_score(projected_savings: Amount, ideal_savings: Amount) -> float:
    """Score (0-100) of projected savings against the ideal target.

    With an ideal target of 0 the ratio is undefined: any positive
    projected savings scores 100, anything else scores 0.

    Args:
        projected_savings: Income minus everything spent this month.
        ideal_savings: Ideal monthly savings.

    Returns:
        Discipline score clamped to [0, 100].
    """
    if ideal_savings == 0:
        return 100.0 if projected_savings > 0 else 0.0
    return clamp_percent((projected_savings / ideal_savings) * 100)


def compute_budget_status(profile: Profile, split: MonthSplit, month: MonthWindow) -> BudgetStatus:
    """Compute all budget and discipline figures for the current month.

    Args:
        profile: User profile.
        split: Current-month spending split.
        month: Current month window.

    Returns:
        BudgetStatus with full-precision values.
    """
    ideal = calculate_ideal_monthly_savings(profile.monthly_income, profile.savings_ratio)
    variable_budget = calculate_variable_budget(profile.monthly_income, profile.fixed_costs, ideal)
    remaining = calculate_remaining_variable_budget(variable_budget, split.variable_spent)
    burn = calculate_avg_daily_burn(split.total_spent, month.day_of_month)
    liquidity = Amount(profile.monthly_income - split.total_spent)
    projected = Amount(profile.monthly_income - split.total_spent)

    return BudgetStatus(
        ideal_monthly_savings=ideal,
        monthly_variable_budget=variable_budget,
        remaining_variable_budget=remaining,
        daily_safe_spend=calculate_daily_safe_spend(remaining, month.days_remaining),
        avg_daily_burn=burn,
        current_liquidity=liquidity,
        days_of_runway=calculate_runway(liquidity, burn),
        projected_monthly_savings=projected,
        discipline_score=calculate_discipline_score(projected, ideal),
    )
