"""Opportunity cost of spending instead of investing."""

import math
from typing import Any

OPPORTUNITY_COST_RATE = 0.12
OPPORTUNITY_COST_YEARS = 10


def estimate_opportunity_cost(
    amount: Any,
    rate: float = OPPORTUNITY_COST_RATE,
    years: int = OPPORTUNITY_COST_YEARS,
) -> int:
    """Estimate the future value foregone by spending ``amount`` today.

    Compounds annually: ``floor(amount * (1 + rate) ** years)``. This is an
    advisory figure, so unusable input yields 0 instead of an error.

    Args:
        amount: Amount about to be spent (number or numeric string).
        rate: Annual growth rate.
        years: Investment horizon in years.

    Returns:
        Foregone value, or 0 for non-numeric, non-finite or non-positive amounts.
    """
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0

    if not math.isfinite(value) or value <= 0:
        return 0
    return math.floor(value * (1 + rate) ** years)
