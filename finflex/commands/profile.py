"""Onboarding and profile display commands."""

import logging
import sqlite3
import sys

import typer
from rich.table import Table

from finflex.commands.common import console, load_settings_or_exit, require_database, require_profile
from finflex.domain.budget import calculate_ideal_monthly_savings
from finflex.domain.entry import validate_profile
from finflex.domain.models import RISK_SAVINGS_RATIOS, Amount, Profile, RiskAppetite
from finflex.domain.presentation import format_amount
from finflex.store.queries import load_profile, save_profile
from finflex.store.schema import get_db_path

logger = logging.getLogger(__name__)


def prompt_amount(prompt: str, default: float | None) -> float:
    """Prompt for a non-negative amount, re-asking on bad input."""
    while True:
        value: float = typer.prompt(prompt, default=default, type=float)
        if value >= 0:
            return value
        console.print("[red]Amount must not be negative[/red]")


def prompt_risk_appetite(default: RiskAppetite) -> RiskAppetite:
    """Prompt for a risk appetite and show the savings ratio it implies."""
    console.print("\n[cyan]Risk appetite presets:[/cyan]")
    for risk, ratio in RISK_SAVINGS_RATIOS.items():
        console.print(f"  {risk.value:<7} saves {ratio:.0%} of income")

    while True:
        choice: str = typer.prompt("Risk appetite (low/medium/high)", default=default.value)
        try:
            return RiskAppetite(choice.strip().lower())
        except ValueError:
            console.print(f"[red]Unknown risk appetite '{choice}'[/red]")


def build_profile(
    existing: Profile | None,
    name: str | None,
    income: float | None,
    fixed_costs: float | None,
    yearly_goal: float | None,
    monthly_target: float | None,
    risk: RiskAppetite | None,
    savings_ratio: float | None,
) -> Profile:
    """Fill in every field from flags, prompting only for the missing ones."""
    if name is None:
        name = typer.prompt("Your name", default=existing.name if existing else "")
    if income is None:
        income = prompt_amount("Monthly income", existing.monthly_income if existing else None)
    if yearly_goal is None:
        yearly_goal = prompt_amount("Yearly savings goal", existing.yearly_savings_goal if existing else None)
    if monthly_target is None:
        monthly_target = prompt_amount(
            "Target monthly contribution", existing.target_monthly_contribution if existing else None
        )
    if risk is None and savings_ratio is None:
        risk = prompt_risk_appetite(existing.risk_appetite if existing else RiskAppetite.MEDIUM)
    if risk is None:
        risk = existing.risk_appetite if existing else RiskAppetite.MEDIUM
    if savings_ratio is None:
        savings_ratio = RISK_SAVINGS_RATIOS[risk]

    console.print(
        f"[dim]Ideal monthly savings: {format_amount(calculate_ideal_monthly_savings(Amount(income), savings_ratio))}[/dim]"
    )
    if fixed_costs is None:
        fixed_costs = prompt_amount("Monthly fixed costs (rent, bills, EMIs)", existing.fixed_costs if existing else 0.0)

    return Profile(
        monthly_income=Amount(income),
        fixed_costs=Amount(fixed_costs),
        yearly_savings_goal=Amount(yearly_goal),
        target_monthly_contribution=Amount(monthly_target),
        savings_ratio=savings_ratio,
        name=name,
        risk_appetite=risk,
        has_onboarded=True,
    )


def onboard_command(
    name: str | None = None,
    income: float | None = None,
    fixed_costs: float | None = None,
    yearly_goal: float | None = None,
    monthly_target: float | None = None,
    risk: str | None = None,
    savings_ratio: float | None = None,
) -> None:
    """Create or update the profile."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        existing = load_profile(db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    try:
        risk_appetite = RiskAppetite(risk.lower()) if risk else None
    except ValueError:
        console.print(f"[red]Unknown risk appetite '{risk}'. Use low, medium or high.[/red]")
        sys.exit(1)

    profile = build_profile(existing, name, income, fixed_costs, yearly_goal, monthly_target, risk_appetite, savings_ratio)

    errors = validate_profile(profile)
    if errors:
        for error in errors:
            console.print(f"[red]{error}[/red]")
        sys.exit(1)

    try:
        save_profile(profile, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    logger.info("Profile saved (risk=%s, ratio=%.2f)", profile.risk_appetite.value, profile.savings_ratio)
    console.print("\n[green]✓[/green] Profile saved")
    profile_command()


def profile_command() -> None:
    """Show the stored profile."""
    profile = require_profile(get_db_path())
    settings, _ = load_settings_or_exit()
    currency = settings.currency

    table = Table(title=f"Profile: {profile.name or '-'}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    ideal = calculate_ideal_monthly_savings(profile.monthly_income, profile.savings_ratio)
    table.add_row("Monthly income", format_amount(profile.monthly_income, currency))
    table.add_row("Fixed costs", format_amount(profile.fixed_costs, currency))
    table.add_row("Savings ratio", f"{profile.savings_ratio:.0%} ({profile.risk_appetite.value})")
    table.add_row("Ideal monthly savings", format_amount(ideal, currency))
    table.add_row("Target monthly contribution", format_amount(profile.target_monthly_contribution, currency))
    table.add_row("Yearly savings goal", format_amount(profile.yearly_savings_goal, currency))

    console.print(table)
