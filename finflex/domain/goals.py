"""Pure functions for yearly and monthly savings goal progress."""

from dataclasses import dataclass

from finflex.domain.budget import clamp_percent
from finflex.domain.models import Amount, Profile


@dataclass(frozen=True)
class GoalProgress:
    """Immutable progress towards the yearly goal and the monthly target."""

    yearly_goal_progress: float
    year_to_date_savings: Amount
    remaining_to_yearly_goal: Amount
    monthly_contribution_progress: float


def calculate_yearly_goal_progress(year_to_date_savings: Amount, yearly_goal: Amount) -> float:
    """Percent of the yearly goal reached, 0 when no goal is set."""
    if yearly_goal <= 0:
        return 0.0
    return clamp_percent((year_to_date_savings / yearly_goal) * 100)


def calculate_remaining_to_goal(yearly_goal: Amount, year_to_date_savings: Amount) -> Amount:
    """Capital still missing to reach the yearly goal.

    An unset goal (0) counts as already satisfied.
    """
    if yearly_goal <= 0:
        return Amount(0.0)
    return Amount(max(0.0, yearly_goal - year_to_date_savings))


def calculate_monthly_contribution_progress(projected_savings: Amount, target: Amount) -> float:
    """Percent of the monthly contribution target covered by projected savings."""
    if target <= 0:
        return 0.0
    return clamp_percent((projected_savings / target) * 100)


def compute_goal_progress(
    profile: Profile,
    year_to_date_savings: Amount,
    projected_monthly_savings: Amount,
) -> GoalProgress:
    """Compute yearly and monthly goal progress.

    Args:
        profile: User profile.
        year_to_date_savings: Savings summed over this year's recorded months.
        projected_monthly_savings: Income minus everything spent this month.

    Returns:
        GoalProgress with percentages clamped to [0, 100].
    """
    return GoalProgress(
        yearly_goal_progress=calculate_yearly_goal_progress(year_to_date_savings, profile.yearly_savings_goal),
        year_to_date_savings=year_to_date_savings,
        remaining_to_yearly_goal=calculate_remaining_to_goal(profile.yearly_savings_goal, year_to_date_savings),
        monthly_contribution_progress=calculate_monthly_contribution_progress(
            projected_monthly_savings, profile.target_monthly_contribution
        ),
    )
