"""Dashboard commands for viewing metrics (status, history, categories, timeline, context)."""

import sqlite3
import sys
from datetime import tzinfo

from rich.table import Table

from finflex.commands.common import console, current_time, load_settings_or_exit, require_profile
from finflex.config import Settings
from finflex.domain.budget import UNBOUNDED_RUNWAY_DAYS
from finflex.domain.context import build_assistant_context
from finflex.domain.models import Amount, Profile, Transaction
from finflex.domain.presentation import (
    calculate_histogram_bar_length,
    encouragement,
    format_amount,
    is_over_safe_spend,
    pace_analysis,
    yearly_goal_message,
)
from finflex.domain.snapshot import MetricsSnapshot, compute_snapshot
from finflex.store.queries import load_transactions
from finflex.store.schema import get_db_path


def load_dashboard_inputs() -> tuple[Profile, list[Transaction], Settings, tzinfo | None]:
    """Load everything a dashboard view needs, exiting on failure."""
    db_path = get_db_path()
    profile = require_profile(db_path)
    settings, tz = load_settings_or_exit()

    try:
        transactions = load_transactions(db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    return profile, transactions, settings, tz


def load_snapshot() -> tuple[MetricsSnapshot, Profile, Settings]:
    profile, transactions, settings, tz = load_dashboard_inputs()
    now = current_time(tz)
    return compute_snapshot(profile, transactions, now), profile, settings


def format_score_with_color(score: float) -> str:
    """Color a 0-100 score: green when strong, yellow when middling, red when weak.

    Args:
        score: Percentage score.

    Returns:
        Colored string for the score.
    """
    text = f"{score:.0f}%"
    if score > 80:
        return f"[green]{text}[/green]"
    elif score > 50:
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[red]{text}[/red]"


def format_runway(days: int) -> str:
    if days >= UNBOUNDED_RUNWAY_DAYS:
        return "[green]999+ days[/green]"
    if days < 7:
        return f"[red]{days} days[/red]"
    return f"{days} days"


def render_progress_bar(percent: float, width: int = 30) -> str:
    """Text progress bar for a 0-100 percentage."""
    filled = calculate_histogram_bar_length(Amount(min(percent, 100.0)), Amount(100.0), width)
    return "█" * filled + "░" * (width - filled)


def format_countdown(seconds: int) -> str:
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours:02d}h {minutes:02d}m {secs:02d}s"


def status_command() -> None:
    """Show the main dashboard: safe spend, runway, discipline and goals."""
    snapshot, profile, settings = load_snapshot()
    currency = settings.currency
    budget = snapshot.budget

    greeting = f"Hi {profile.name}" if profile.name else "Dashboard"
    console.print(f"\n[bold]{greeting}[/bold] [dim]({snapshot.month.day_of_month}/{snapshot.month.days_in_month})[/dim]")

    console.print(f"\n[bold cyan]Safe to spend today:[/bold cyan] [bold]{format_amount(snapshot.daily_safe_spend, currency)}[/bold]")
    console.print(f"[dim]{encouragement(snapshot, currency)}[/dim]\n")

    table = Table(show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Spent this month", format_amount(snapshot.total_spent_this_month, currency))
    table.add_row("Variable budget", format_amount(budget.monthly_variable_budget, currency))
    table.add_row("Remaining variable budget", format_amount(snapshot.remaining_variable_budget, currency))
    table.add_row("Average daily burn", format_amount(budget.avg_daily_burn, currency))
    table.add_row("Liquidity", format_amount(budget.current_liquidity, currency))
    table.add_row("Runway", format_runway(snapshot.days_of_runway))
    table.add_row("Projected savings", format_amount(budget.projected_monthly_savings, currency))
    table.add_row("Ideal savings", format_amount(budget.ideal_monthly_savings, currency))
    table.add_row("Discipline", format_score_with_color(snapshot.discipline_score))
    table.add_row("Monthly target", format_score_with_color(snapshot.monthly_contribution_progress))
    console.print(table)

    console.print("\n[bold]Yearly goal[/bold]")
    console.print(f"  {render_progress_bar(snapshot.yearly_goal_progress)} {snapshot.yearly_goal_progress:.0f}%")
    console.print(
        f"  Saved {format_amount(snapshot.total_yearly_savings, currency)} of "
        f"{format_amount(profile.yearly_savings_goal, currency)}, "
        f"{format_amount(snapshot.remaining_to_yearly_goal, currency)} to go"
    )
    console.print(f"  [dim]{yearly_goal_message(snapshot.yearly_goal_progress)}[/dim]")
    console.print(f"  [dim]{pace_analysis(snapshot.yearly_goal_progress, snapshot.discipline_score)}[/dim]")

    year = snapshot.year
    console.print(f"\n[bold]{year.year}[/bold]")
    console.print(f"  {render_progress_bar(year.progress_percent)} {year.progress_percent:.0f}% elapsed")
    console.print(f"  {year.days_remaining} days left [dim]({format_countdown(year.seconds_remaining)})[/dim]")


def history_command() -> None:
    """Show spending and savings per month, most recent first."""
    snapshot, _, settings = load_snapshot()
    currency = settings.currency

    if not snapshot.monthly_history:
        console.print("[yellow]No transactions found[/yellow]")
        return

    table = Table(title="Monthly history")
    table.add_column("Month", style="cyan")
    table.add_column("Spent", justify="right")
    table.add_column("Saved", justify="right")

    for month in snapshot.monthly_history:
        saved = format_amount(month.savings_achieved, currency)
        saved_display = f"[red]{saved}[/red]" if month.savings_achieved < 0 else f"[green]{saved}[/green]"
        table.add_row(f"{month.label} {month.year}", format_amount(month.total_spent, currency), saved_display)

    console.print(table)
    console.print(f"\n[bold]Saved this year:[/bold] {format_amount(snapshot.total_yearly_savings, currency)}")


def categories_command(histogram: bool = True) -> None:
    """Show this month's spending split by category."""
    snapshot, _, settings = load_snapshot()
    currency = settings.currency

    if not snapshot.category_shares:
        console.print("[yellow]No spending logged this month[/yellow]")
        return

    bar_width = 30
    max_amount = snapshot.category_shares[0].amount

    console.print(f"\n[bold]Spending by category[/bold] [dim]({snapshot.month.year}-{snapshot.month.month_index:02d})[/dim]")
    for share in snapshot.category_shares:
        amount_display = format_amount(share.amount, currency)
        percent_display = f"{share.percent:.0f}%"
        if histogram:
            bar = "█" * calculate_histogram_bar_length(share.amount, max_amount, bar_width)
            console.print(f"  {share.category:20} {amount_display:>12} {percent_display:>5} {bar}")
        else:
            console.print(f"  {share.category}: {amount_display} ({percent_display})")

    console.print(f"\n[bold]Total:[/bold] {format_amount(snapshot.total_spent_this_month, currency)}")


def timeline_command() -> None:
    """Show spending for each of the last 7 days against today's safe spend."""
    snapshot, _, settings = load_snapshot()
    currency = settings.currency

    bar_width = 30
    max_amount = max((day.amount for day in snapshot.daily_spending), default=0.0)
    max_amount = max(max_amount, snapshot.daily_safe_spend)

    console.print(f"\n[bold]Last 7 days[/bold] [dim](safe spend {format_amount(snapshot.daily_safe_spend, currency)}/day)[/dim]")
    for day in snapshot.daily_spending:
        bar = "█" * calculate_histogram_bar_length(day.amount, Amount(max_amount), bar_width)
        color = "red" if is_over_safe_spend(day.amount, snapshot.daily_safe_spend) else "green"
        amount_display = format_amount(day.amount, currency)
        console.print(f"  {day.label:6} {amount_display:>10} [{color}]{bar}[/{color}]")


def context_command(limit: int = 15) -> None:
    """Print a plain-text summary for pasting into an advisory assistant."""
    profile, transactions, settings, tz = load_dashboard_inputs()
    context = build_assistant_context(profile, transactions, settings.currency, tz, limit)
    console.print(context, markup=False, highlight=False, soft_wrap=True)
