"""Domain type definitions for finflex.

These types describe the data the metrics engine reads:
- Amount: Currency amount in major units (e.g. rupees), full precision
- Timestamp: Point in time as epoch milliseconds
- BillLabel: Free-form label of a fixed/recurring bill
- Profile: The user's declared financial baseline
- Transaction: One logged spending event
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType

# Amounts stay floats end to end; rounding happens only when displayed
Amount = NewType("Amount", float)

# Epoch milliseconds, same resolution the entry workflow records
Timestamp = NewType("Timestamp", int)

# Fixed bills carry an open set of labels (e.g. "Room Rent", "Gym")
BillLabel = NewType("BillLabel", str)


class SpendCategory(str, Enum):
    """Closed set of categories for variable (discretionary) spending."""

    FOOD_AND_DRINKS = "Food & Drinks"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    OTHER = "Other"


class FixedBill(str, Enum):
    """Preset labels offered for fixed bills. Any other label is allowed too."""

    ROOM_RENT = "Room Rent"
    ELECTRICITY = "Electricity"
    INTERNET = "Internet/WiFi"
    WATER_GAS = "Water/Gas"
    STREAMING = "Streaming/Subs"
    INSURANCE = "Insurance/EMI"
    OTHER_FIXED = "Other Fixed"


class RiskAppetite(str, Enum):
    """Risk appetite chosen at onboarding, mapped to a savings ratio preset."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RISK_SAVINGS_RATIOS: dict[RiskAppetite, float] = {
    RiskAppetite.LOW: 0.15,
    RiskAppetite.MEDIUM: 0.25,
    RiskAppetite.HIGH: 0.40,
}

Category = SpendCategory | BillLabel


def category_label(category: Category) -> str:
    """Return the display/grouping label of a category.

    Enum members and plain strings hash differently, so grouping always
    keys on this label rather than on the category object itself.
    """
    if isinstance(category, Enum):
        return str(category.value)
    return str(category)


@dataclass(frozen=True)
class Profile:
    """Immutable financial baseline of the user."""

    monthly_income: Amount
    fixed_costs: Amount
    yearly_savings_goal: Amount
    target_monthly_contribution: Amount
    savings_ratio: float
    name: str = ""
    risk_appetite: RiskAppetite = RiskAppetite.MEDIUM
    has_onboarded: bool = False


@dataclass(frozen=True)
class Transaction:
    """Immutable spending entry."""

    id: int
    amount: Amount
    category: Category
    is_fixed: bool
    timestamp: Timestamp
    note: str | None = None

    @property
    def label(self) -> str:
        return category_label(self.category)
