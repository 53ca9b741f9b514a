"""Pure functions for validating and parsing spending entries.

This module contains the functional core of the entry workflow:
- No I/O operations (no database, no console, no files)
- No side effects
- Validators return an error message (or None) instead of raising
- Easy to test

The metrics engine trusts its inputs; these checks run before anything is
stored.
"""

import math
from datetime import date
from typing import Any, TypedDict

from finflex.domain.models import BillLabel, Category, FixedBill, Profile, SpendCategory


class CsvMapping(TypedDict):
    """CSV column mapping configuration."""

    date_column: str
    amount_column: str
    category_column: str
    note_column: str


class ParsedEntry(TypedDict):
    """Parsed CSV entry ready for validation and insertion."""

    date: str
    amount: float
    category: str
    note: str | None


def validate_amount(amount: Any) -> str | None:
    """Check that an entry amount is a finite, positive number.

    Args:
        amount: Candidate amount.

    Returns:
        Error message, or None if valid.
    """
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return f"Amount '{amount}' is not a number"

    if not math.isfinite(value):
        return "Amount must be a finite number"
    if value <= 0:
        return "Amount must be positive"
    return None


def validate_entry_date(day: date, today: date) -> str | None:
    """Reject entries dated after today. Backdating is allowed.

    Args:
        day: Date the entry is logged against.
        today: Current local date.

    Returns:
        Error message, or None if valid.
    """
    if day > today:
        return f"Date {day.isoformat()} is in the future"
    return None


def _match_enum(text: str, options: type[SpendCategory] | type[FixedBill]) -> Any:
    wanted = " ".join(text.split()).casefold()
    for option in options:
        if option.value.casefold() == wanted or option.name.casefold() == wanted:
            return option
    return None


def resolve_category(text: str, is_fixed: bool) -> tuple[Category | None, str | None]:
    """Resolve user input to a category.

    Variable spending must use one of the SpendCategory labels. Fixed bills
    accept any non-empty label; preset labels are returned with their
    canonical spelling.

    Args:
        text: Category as typed by the user (case-insensitive).
        is_fixed: Whether the entry is a fixed bill.

    Returns:
        Tuple of (category, error). Exactly one of the two is None.
    """
    label = " ".join(text.split())
    if not label:
        return None, "Category must not be empty"

    if is_fixed:
        preset = _match_enum(label, FixedBill)
        return BillLabel(preset.value if preset else label), None

    category = _match_enum(label, SpendCategory)
    if category is None:
        choices = ", ".join(c.value for c in SpendCategory)
        return None, f"Unknown category '{label}'. Choose one of: {choices}"
    return category, None


def parse_stored_category(label: str, is_fixed: bool) -> Category:
    """Rebuild a category from its stored label without validation."""
    if not is_fixed:
        category = _match_enum(label, SpendCategory)
        if category is not None:
            return category
    return BillLabel(label)


def parse_bill_assignment(text: str) -> tuple[str, float] | None:
    """Parse a "Label=amount" pair used for bulk fixed-bill entry.

    Args:
        text: Assignment such as "Room Rent=12000".

    Returns:
        Tuple of (label, amount), or None if the text is malformed.
    """
    label, sep, raw_amount = text.rpartition("=")
    label = label.strip()
    if not sep or not label:
        return None

    try:
        amount = float(raw_amount.strip().replace(",", ""))
    except ValueError:
        return None
    return label, amount


def validate_profile(profile: Profile) -> list[str]:
    """Check the numeric constraints the metrics engine relies on.

    Args:
        profile: Candidate profile.

    Returns:
        List of error messages (empty if valid).
    """
    errors: list[str] = []
    amounts = {
        "Monthly income": profile.monthly_income,
        "Fixed costs": profile.fixed_costs,
        "Yearly savings goal": profile.yearly_savings_goal,
        "Target monthly contribution": profile.target_monthly_contribution,
    }
    for name, value in amounts.items():
        if not math.isfinite(value) or value < 0:
            errors.append(f"{name} must be a non-negative number")

    if not math.isfinite(profile.savings_ratio) or not 0 <= profile.savings_ratio <= 1:
        errors.append("Savings ratio must be between 0 and 1")
    return errors


def analyze_csv_columns(headers: list[str]) -> dict[str, str]:
    """Analyze CSV headers and suggest column mappings.

    Args:
        headers: List of CSV column names.

    Returns:
        Dictionary with suggested mappings for date, amount, category and
        note (empty string if not detected).
    """
    mappings: dict[str, str] = {
        "date": "",
        "amount": "",
        "category": "",
        "note": "",
    }

    headers_lower = [h.lower() for h in headers]

    for i, header in enumerate(headers_lower):
        if not mappings["date"] and "date" in header:
            mappings["date"] = headers[i]

        if not mappings["amount"] and "amount" in header and "currency" not in header:
            mappings["amount"] = headers[i]

        if not mappings["category"] and "category" in header:
            mappings["category"] = headers[i]

        if not mappings["note"] and any(word in header for word in ("note", "description", "memo")):
            mappings["note"] = headers[i]

    return mappings


def parse_csv_entry(row: dict[str, str], mapping: CsvMapping) -> ParsedEntry | None:
    """Parse a CSV row into an entry using the provided mapping.

    Args:
        row: CSV row as dictionary.
        mapping: Column mapping configuration.

    Returns:
        ParsedEntry if valid, None if row should be skipped.
    """
    raw_date = (row.get(mapping["date_column"]) or "").strip()
    if not raw_date:
        return None

    raw_amount = (row.get(mapping["amount_column"]) or "").strip().replace(",", "")
    for symbol in ("₹", "$", "£", "€"):
        raw_amount = raw_amount.replace(symbol, "")
    if not raw_amount:
        return None

    try:
        amount = abs(float(raw_amount))
    except ValueError:
        return None

    category = (row.get(mapping["category_column"]) or "").strip() or SpendCategory.OTHER.value
    note = (row.get(mapping["note_column"]) or "").strip() or None

    return ParsedEntry(date=raw_date, amount=amount, category=category, note=note)
