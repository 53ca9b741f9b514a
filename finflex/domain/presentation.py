"""Pure helpers that turn metrics into display values and messages.

Nothing here feeds back into the metrics; these are read-only views over
a MetricsSnapshot used by the dashboard commands.
"""

import math

from finflex.domain.models import Amount
from finflex.domain.snapshot import MetricsSnapshot


def format_amount(amount: Amount, currency: str = "₹", decimals: int = 0) -> str:
    """Format an amount for display.

    Args:
        amount: Amount in major units.
        currency: Currency symbol prefix.
        decimals: Digits after the decimal point.

    Returns:
        Formatted string (e.g. "₹1,562" or "-₹20.50").
    """
    formatted = f"{currency}{abs(amount):,.{decimals}f}"
    return f"-{formatted}" if amount < 0 else formatted


def calculate_histogram_bar_length(amount: Amount, max_amount: Amount, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def is_over_safe_spend(amount: Amount, daily_safe_spend: Amount) -> bool:
    """Whether a day's spending exceeded the current safe daily allowance."""
    return amount > daily_safe_spend


def yearly_goal_message(progress: float) -> str:
    """Milestone message for the yearly goal progress."""
    if progress >= 100:
        return "Goal secured. This year's savings target is reached."
    if progress >= 75:
        return "Final stretch. The finish line is in sight."
    if progress >= 50:
        return "Past halfway. Keep the structure standing."
    if progress >= 25:
        return "Building height. A quarter of the way there."
    if progress > 0:
        return "Foundation laid. Every rupee counts."
    return "Your blueprint is ready. Time to build."


def pace_analysis(yearly_goal_progress: float, discipline_score: float) -> str:
    """One-line assessment of savings pace."""
    if yearly_goal_progress >= 100:
        return "Reserve met. You are ahead of the year."
    if discipline_score > 90:
        return "Exceptional pace. You are ahead of schedule."
    if discipline_score > 60:
        return "Stable trajectory. Hold discipline to close the remaining gap."
    return "Pace below target. A bigger contribution is needed to stay on plan."


def encouragement(snapshot: MetricsSnapshot, currency: str = "₹") -> str:
    """Short nudge shown under the safe-spend figure.

    Spreads the remaining yearly gap over the days left in the year and asks
    for 5% of that daily amount.
    """
    if snapshot.yearly_goal_progress >= 100:
        return "Yearly goal complete."
    if snapshot.discipline_score > 80:
        return "Elite discipline. Keep the momentum."
    daily_target = snapshot.remaining_to_yearly_goal / max(1, snapshot.year.days_remaining)
    extra = math.floor(daily_target * 0.05)
    return f"Save {format_amount(Amount(extra), currency)} more today to reach your target."
