"""Housekeeping commands: set up, back up, erase and list the local data."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import typer
from rich.table import Table

from finflex.commands.common import console, load_settings_or_exit, require_database
from finflex.config import create_default_config, get_config_path
from finflex.dates import local_datetime
from finflex.domain.presentation import format_amount
from finflex.store.queries import load_transactions, purge_all
from finflex.store.schema import get_db_path, init_database

DEFAULT_BACKUP_DIR = Path.home() / ".finflex" / "backups"


def backup_targets(backup_dir: Path, stamp: str) -> list[tuple[str, Path, Path]]:
    """List (what, source, destination) for every file a backup copies."""
    return [
        ("Spending log", get_db_path(), backup_dir / f"finflex_{stamp}.db"),
        ("Settings", get_config_path(), backup_dir / f"config_{stamp}.toml"),
    ]


def backup_command(output_dir: str | None = None) -> None:
    """Copy the database, and the config file if there is one, into a timestamped backup."""
    backup_dir = Path(output_dir).expanduser() if output_dir else DEFAULT_BACKUP_DIR
    targets = backup_targets(backup_dir, datetime.now().strftime("%Y%m%d_%H%M%S"))

    _, db_source, _ = targets[0]
    if not db_source.exists():
        console.print(f"[red]Nothing to back up at {db_source}[/red]", style="bold")
        console.print("[dim]Run 'finflex init' to create it.[/dim]")
        sys.exit(1)

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        for what, source, destination in targets:
            if not source.exists():
                console.print(f"[yellow]{what} not found at {source}, skipped[/yellow]")
                continue
            shutil.copy2(source, destination)
            console.print(f"[green]✓[/green] {what} saved as {destination.name}")
    except OSError as e:
        console.print(f"[red]Could not write backup: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"\n[green]Backup written to {backup_dir}[/green]")


def migrate_existing(db_path: Path) -> None:
    """Bring an existing database up to the current schema."""
    if not db_path.exists():
        console.print(f"[red]There is no database at {db_path} to migrate[/red]", style="bold")
        sys.exit(1)

    init_database(db_path)
    console.print(f"[green]✓[/green] Schema of {db_path} is current")


def create_fresh(db_path: Path, config_path: Path) -> None:
    """Create an empty database and a default config, replacing any old ones."""
    if db_path.exists():
        db_path.unlink()
    init_database(db_path)
    console.print(f"[green]✓[/green] Created database {db_path}")

    create_default_config(config_path)
    console.print(f"[green]✓[/green] Wrote settings to {config_path} [dim](mode 600)[/dim]")

    console.print("\n[cyan]All set. Run 'finflex onboard' to enter your income and goals.[/cyan]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Create the finflex database and config, or migrate an existing database."""
    db_path = get_db_path()
    config_path = get_config_path()

    try:
        if migrate:
            migrate_existing(db_path)
            return

        existing = [path for path in (db_path, config_path) if path.exists()]
        if existing and not force:
            console.print("[red]finflex is already set up:[/red]", style="bold")
            for path in existing:
                console.print(f"  {path}")
            console.print("\n[yellow]'finflex init --force' starts over with empty data[/yellow]")
            console.print("[yellow]'finflex init --migrate' only upgrades the database schema[/yellow]")
            sys.exit(1)

        create_fresh(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def purge_command(yes: bool = False) -> None:
    """Erase the profile and every logged transaction."""
    db_path = get_db_path()
    require_database(db_path)

    if not yes:
        confirmed = typer.confirm(
            "Erase your profile and all logged transactions? This cannot be undone.",
            default=False,
        )
        if not confirmed:
            console.print("[dim]Nothing was deleted[/dim]")
            return

    try:
        purge_all(db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Profile and transactions erased")
    console.print("[dim]Run 'finflex onboard' to start again[/dim]")


def list_command(limit: int = 50, all: bool = False) -> None:
    """Show logged transactions, newest first."""
    db_path = get_db_path()
    require_database(db_path)
    settings, tz = load_settings_or_exit()

    try:
        transactions = load_transactions(db_path, None if all else limit)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not transactions:
        console.print("[yellow]Nothing logged yet[/yellow]")
        return

    table = Table(title=f"{len(transactions)} most recent entries" if not all else f"All {len(transactions)} entries")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("When", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Type", justify="center")
    table.add_column("Note")

    for txn in transactions:
        table.add_row(
            str(txn.id),
            local_datetime(txn.timestamp, tz).strftime("%Y-%m-%d %H:%M"),
            f"[red]{format_amount(txn.amount, settings.currency, 2)}[/red]",
            txn.label,
            "[blue]fixed[/blue]" if txn.is_fixed else "variable",
            txn.note or "[dim]-[/dim]",
        )

    console.print(table)
