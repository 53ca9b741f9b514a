"""Domain models and the metrics engine for finflex.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure

The engine's entry points are finflex.domain.snapshot.compute_snapshot and
finflex.domain.opportunity.estimate_opportunity_cost.
"""

from finflex.domain.models import (
    Amount,
    BillLabel,
    FixedBill,
    Profile,
    RiskAppetite,
    SpendCategory,
    Timestamp,
    Transaction,
)

__all__ = [
    "Amount",
    "BillLabel",
    "FixedBill",
    "Profile",
    "RiskAppetite",
    "SpendCategory",
    "Timestamp",
    "Transaction",
]
