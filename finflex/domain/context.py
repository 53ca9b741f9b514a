"""Plain-text context for an external advisory assistant.

The assistant receives the profile and the raw log rather than the metrics
snapshot, so this builds its summary straight from those two inputs.
"""

from collections.abc import Sequence
from datetime import tzinfo

from finflex.dates import local_datetime
from finflex.domain.models import Profile, Transaction
from finflex.domain.presentation import format_amount


def describe_transaction(transaction: Transaction, currency: str = "₹", tz: tzinfo | None = None) -> str:
    """One line per entry, e.g. "2026-10-18: ₹250 for Transport (Variable)"."""
    day = local_datetime(transaction.timestamp, tz).date().isoformat()
    kind = "Fixed" if transaction.is_fixed else "Variable"
    line = f"{day}: {format_amount(transaction.amount, currency, 2)} for {transaction.label} ({kind})"
    if transaction.note:
        line += f" - {transaction.note}"
    return line


def build_assistant_context(
    profile: Profile,
    transactions: Sequence[Transaction],
    currency: str = "₹",
    tz: tzinfo | None = None,
    limit: int = 15,
) -> str:
    """Summarize profile and most recent entries for an assistant prompt.

    Args:
        profile: User profile.
        transactions: Transaction log in any order.
        currency: Currency symbol.
        tz: Zone used to show entry dates. None means system local.
        limit: Maximum number of recent entries to include.

    Returns:
        Multi-line plain-text summary.
    """
    recent = sorted(transactions, key=lambda t: t.timestamp, reverse=True)[:limit]

    lines = [
        "User profile:",
        f"  Name: {profile.name or '-'}",
        f"  Monthly income: {format_amount(profile.monthly_income, currency)}",
        f"  Fixed costs: {format_amount(profile.fixed_costs, currency)}",
        f"  Target savings/month: {format_amount(profile.target_monthly_contribution, currency)}",
        f"  Yearly goal: {format_amount(profile.yearly_savings_goal, currency)}",
        f"  Savings ratio: {profile.savings_ratio:.0%}",
        f"  Risk appetite: {profile.risk_appetite.value}",
        "",
        f"Recent entries ({len(recent)} of {len(transactions)}):",
    ]
    if recent:
        lines.extend(f"  {describe_transaction(txn, currency, tz)}" for txn in recent)
    else:
        lines.append("  (none)")
    return "\n".join(lines)
