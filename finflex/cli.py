"""CLI entry point for finflex."""

import typer

from finflex.commands.admin import backup_command, init_command, list_command, purge_command
from finflex.commands.profile import onboard_command, profile_command
from finflex.commands.report import (
    categories_command,
    context_command,
    history_command,
    status_command,
    timeline_command,
)
from finflex.commands.transactions import add_command, add_fixed_command, edit_command, import_command
from finflex.log import setup_logging

app = typer.Typer(
    name="finflex",
    help="FinFlex - daily safe spend, runway and savings goals from your spending log",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """FinFlex - daily safe spend, runway and savings goals from your spending log."""
    setup_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Update the database schema only"),
) -> None:
    """Initialize finflex database and configuration."""
    init_command(force, migrate)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.finflex/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="purge")
def purge(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Erase your profile and every logged transaction."""
    purge_command(yes)


@app.command()
def onboard(
    name: str = typer.Option(None, "--name", help="Your name"),
    income: float = typer.Option(None, "--income", help="Monthly income"),
    fixed_costs: float = typer.Option(None, "--fixed-costs", help="Monthly fixed costs"),
    yearly_goal: float = typer.Option(None, "--yearly-goal", help="Yearly savings goal"),
    monthly_target: float = typer.Option(None, "--monthly-target", help="Target monthly contribution"),
    risk: str = typer.Option(None, "--risk", help="Risk appetite: low, medium or high"),
    savings_ratio: float = typer.Option(None, "--savings-ratio", help="Custom savings ratio (0-1), overrides --risk"),
) -> None:
    """Set up or update your profile. Missing values are prompted for."""
    onboard_command(name, income, fixed_costs, yearly_goal, monthly_target, risk, savings_ratio)


@app.command()
def profile() -> None:
    """Show your profile."""
    profile_command()


@app.command()
def add(
    amount: float,
    category: str = typer.Option("Other", "--category", "-c", help="Spend category (e.g. 'Food & Drinks')"),
    date: str = typer.Option(None, "--date", "-d", help="Date of the spend (default: today)"),
    note: str = typer.Option(None, "--note", "-n", help="Optional note"),
) -> None:
    """Log variable spending."""
    add_command(amount, category, date, note)


@app.command(name="add-fixed")
def add_fixed(
    bills: list[str] = typer.Argument(..., help="Bills as LABEL=AMOUNT, e.g. \"Room Rent=12000\""),
    date: str = typer.Option(None, "--date", "-d", help="Date of the bills (default: today)"),
) -> None:
    """Log several fixed bills at once."""
    add_fixed_command(bills, date)


@app.command()
def edit(
    transaction_id: int,
    amount: float = typer.Option(None, "--amount", "-a", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category or bill label"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
    note: str = typer.Option(None, "--note", "-n", help="New note (empty string clears it)"),
    fixed: bool = typer.Option(None, "--fixed/--variable", help="Switch between fixed bill and variable spending"),
) -> None:
    """Edit a transaction, keeping its ID."""
    edit_command(transaction_id, amount, category, date, note, fixed)


@app.command(name="import")
def import_csv(
    csv_file: str,
    fixed: bool = typer.Option(False, "--fixed", help="Import every row as a fixed bill"),
) -> None:
    """Import spending entries from a CSV file."""
    import_command(csv_file, fixed)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(limit, all)


@app.command()
def status() -> None:
    """Show today's safe spend, runway, discipline and goal progress."""
    status_command()


@app.command()
def history() -> None:
    """Show your spending and savings per month."""
    history_command()


@app.command()
def categories(
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
) -> None:
    """Show this month's spending by category."""
    categories_command(histogram)


@app.command()
def timeline() -> None:
    """Show your spending over the last 7 days."""
    timeline_command()


@app.command()
def context(
    limit: int = typer.Option(15, help="Number of recent entries to include"),
) -> None:
    """Print a summary of your profile and recent entries for an assistant."""
    context_command(limit)


if __name__ == "__main__":
    app()
