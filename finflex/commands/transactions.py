"""Transaction entry commands (add, add-fixed, edit, import)."""

import csv
import dataclasses
import logging
import sqlite3
import sys
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from finflex.commands.common import (
    console,
    current_time,
    entry_timestamp,
    load_settings_or_exit,
    parse_entry_date,
    require_profile,
)
from finflex.config import Settings
from finflex.dates import local_datetime
from finflex.domain.entry import (
    CsvMapping,
    analyze_csv_columns,
    parse_bill_assignment,
    parse_csv_entry,
    resolve_category,
    validate_amount,
    validate_entry_date,
)
from finflex.domain.models import Amount, Transaction
from finflex.domain.opportunity import estimate_opportunity_cost
from finflex.domain.presentation import format_amount
from finflex.store.queries import get_transaction, insert_transaction, insert_transactions, replace_transaction
from finflex.store.schema import get_db_path

logger = logging.getLogger(__name__)


@dataclass
class ImportStats:
    """Statistics from importing entries."""

    inserted: int
    skipped: int
    errors: list[str]


def resolve_entry_day(raw_date: str | None, now: datetime) -> date | None:
    """Parse and check an optional --date value, exiting on bad input."""
    if raw_date is None:
        return None

    try:
        day = parse_entry_date(raw_date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    error = validate_entry_date(day, now.date())
    if error:
        console.print(f"[red]{error}. Entries can be backdated but not future-dated.[/red]")
        sys.exit(1)
    return day


def show_opportunity_cost(amount: float, settings: Settings) -> None:
    """Print what the amount would grow to if invested instead."""
    cost = estimate_opportunity_cost(
        amount,
        rate=settings.opportunity_cost_rate,
        years=settings.opportunity_cost_years,
    )
    if cost > 0:
        console.print(
            f"  [yellow]{settings.opportunity_cost_years}yr growth cost: "
            f"{format_amount(Amount(cost), settings.currency)}[/yellow] "
            f"[dim](at {settings.opportunity_cost_rate:.0%} a year)[/dim]"
        )


def add_command(
    amount: float,
    category: str,
    raw_date: str | None = None,
    note: str | None = None,
) -> None:
    """Log a variable (discretionary) spending entry.

    Args:
        amount: Amount spent.
        category: Spend category name.
        raw_date: Optional date (YYYY-MM-DD, DD/MM/YYYY, or other formats); defaults to now.
        note: Optional note.
    """
    db_path = get_db_path()
    require_profile(db_path)
    settings, tz = load_settings_or_exit()
    now = current_time(tz)

    error = validate_amount(amount)
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    resolved, error = resolve_category(category, is_fixed=False)
    if resolved is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    day = resolve_entry_day(raw_date, now)

    try:
        txn = insert_transaction(
            Amount(amount),
            resolved,
            False,
            entry_timestamp(day, now),
            note,
            db_path,
        )
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Logged {format_amount(txn.amount, settings.currency, 2)} for {txn.label}")
    console.print(f"  [dim]ID {txn.id} on {local_datetime(txn.timestamp, tz).date().isoformat()}[/dim]")
    show_opportunity_cost(amount, settings)


def add_fixed_command(
    assignments: list[str],
    raw_date: str | None = None,
) -> None:
    """Log several fixed bills at once from "Label=amount" pairs.

    Pairs with an amount of 0 are skipped, so a full bill list can be passed
    with only the bills due this month filled in. Any other amount must be
    finite and positive, and nothing is stored unless every pair is valid.

    Args:
        assignments: Pairs such as "Room Rent=12000".
        raw_date: Optional date for all bills; defaults to now.
    """
    db_path = get_db_path()
    require_profile(db_path)
    settings, tz = load_settings_or_exit()
    now = current_time(tz)

    timestamp = entry_timestamp(resolve_entry_day(raw_date, now), now)

    bills: list[Transaction] = []
    for text in assignments:
        parsed = parse_bill_assignment(text)
        if parsed is None:
            console.print(f"[red]Could not read '{text}'. Use LABEL=AMOUNT, e.g. \"Room Rent=12000\".[/red]")
            sys.exit(1)
        label, amount = parsed
        if amount == 0:
            continue

        error = validate_amount(amount)
        if error:
            console.print(f"[red]{label}: {error}[/red]")
            sys.exit(1)
        category, error = resolve_category(label, is_fixed=True)
        if category is None:
            console.print(f"[red]{error}[/red]")
            sys.exit(1)
        bills.append(Transaction(id=0, amount=Amount(amount), category=category, is_fixed=True, timestamp=timestamp))

    if not bills:
        console.print("[yellow]No bill with a positive amount to log[/yellow]")
        sys.exit(1)

    try:
        stored = insert_transactions(bills, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        console.print("[dim]None of the bills were stored[/dim]")
        sys.exit(1)

    for txn in stored:
        console.print(f"[green]✓[/green] {txn.label}: {format_amount(txn.amount, settings.currency, 2)}")
    total = Amount(sum(txn.amount for txn in stored))
    console.print(
        f"\n[green]Logged {len(stored)} fixed bill(s), {format_amount(total, settings.currency, 2)} total[/green]"
    )


def edit_command(
    transaction_id: int,
    amount: float | None = None,
    category: str | None = None,
    raw_date: str | None = None,
    note: str | None = None,
    is_fixed: bool | None = None,
) -> None:
    """Replace a transaction in full, keeping its ID.

    Fields not given keep their current value.

    Args:
        transaction_id: Transaction ID (from 'finflex list').
        amount: New amount.
        category: New category or bill label.
        raw_date: New date.
        note: New note ("" clears it).
        is_fixed: Switch between fixed bill and variable spending.
    """
    db_path = get_db_path()
    require_profile(db_path)
    settings, tz = load_settings_or_exit()
    now = current_time(tz)

    try:
        existing = get_transaction(transaction_id, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if existing is None:
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    new_amount = existing.amount if amount is None else amount
    error = validate_amount(new_amount)
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    fixed = existing.is_fixed if is_fixed is None else is_fixed
    resolved, error = resolve_category(category if category is not None else existing.label, is_fixed=fixed)
    if resolved is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    day = resolve_entry_day(raw_date, now)
    timestamp = existing.timestamp if day is None else entry_timestamp(day, now)

    updated = dataclasses.replace(
        existing,
        amount=Amount(new_amount),
        category=resolved,
        is_fixed=fixed,
        timestamp=timestamp,
        note=existing.note if note is None else (note or None),
    )

    try:
        replace_transaction(updated, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    logger.debug("Replaced transaction %s", updated.id)
    console.print(f"[green]✓[/green] Updated transaction {updated.id}:")
    render_change("Amount", format_amount(existing.amount, settings.currency, 2), format_amount(updated.amount, settings.currency, 2))
    render_change("Category", existing.label, updated.label)
    render_change("Type", kind_of(existing), kind_of(updated))
    render_change(
        "Date",
        local_datetime(existing.timestamp, tz).date().isoformat(),
        local_datetime(updated.timestamp, tz).date().isoformat(),
    )
    render_change("Note", existing.note or "-", updated.note or "-")


def kind_of(transaction: Transaction) -> str:
    return "fixed" if transaction.is_fixed else "variable"


def render_change(field: str, old: str, new: str) -> None:
    """Print one field of an edit, highlighting it when it changed."""
    if old == new:
        console.print(f"  {field}: {new}")
    else:
        console.print(f"  {field}: [dim]{old}[/dim] → [yellow]{new}[/yellow]")


def detect_csv_mapping(headers: list[str]) -> CsvMapping:
    """Detect the CSV column mapping, exiting if required columns are missing."""
    suggested = analyze_csv_columns(headers)
    missing = [name for name in ("date", "amount") if not suggested[name]]
    if missing:
        console.print(f"[red]Could not find column(s): {', '.join(missing)}[/red]")
        console.print(f"[dim]Columns in file: {', '.join(headers)}[/dim]")
        sys.exit(1)

    return CsvMapping(
        date_column=suggested["date"],
        amount_column=suggested["amount"],
        category_column=suggested["category"],
        note_column=suggested["note"],
    )


def import_csv_entries(csv_path: Path, is_fixed: bool, now: datetime, db_path: Path) -> ImportStats:
    """Validate and insert every usable row of a CSV file.

    Rows that cannot be parsed, or that fail validation, are skipped and
    reported rather than aborting the import. The usable rows are stored in
    one commit, so a database error leaves the log unchanged.
    """
    stats = ImportStats(inserted=0, skipped=0, errors=[])
    pending: list[Transaction] = []

    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        mapping = detect_csv_mapping(list(reader.fieldnames or []))

        for line_no, row in enumerate(reader, start=2):
            parsed = parse_csv_entry(row, mapping)
            if parsed is None:
                stats.skipped += 1
                continue

            try:
                day = parse_entry_date(parsed["date"])
            except ValueError as e:
                stats.skipped += 1
                stats.errors.append(f"line {line_no}: {e}")
                continue

            error = validate_entry_date(day, now.date()) or validate_amount(parsed["amount"])
            category, category_error = resolve_category(parsed["category"], is_fixed)
            if error or category is None:
                stats.skipped += 1
                stats.errors.append(f"line {line_no}: {error or category_error}")
                continue

            pending.append(
                Transaction(
                    id=0,
                    amount=Amount(parsed["amount"]),
                    category=category,
                    is_fixed=is_fixed,
                    timestamp=entry_timestamp(day, now),
                    note=parsed["note"],
                )
            )

    stats.inserted = len(insert_transactions(pending, db_path))
    logger.info("Imported %d entries from %s (%d skipped)", stats.inserted, csv_path, stats.skipped)
    return stats


def import_command(csv_file: str, is_fixed: bool = False) -> None:
    """Import spending entries from a CSV file.

    Args:
        csv_file: Path to a CSV with at least date and amount columns.
        is_fixed: Import every row as a fixed bill.
    """
    db_path = get_db_path()
    require_profile(db_path)
    _, tz = load_settings_or_exit()
    now = current_time(tz)

    csv_path = Path(csv_file).expanduser()
    if not csv_path.exists():
        console.print(f"[red]File not found: {csv_path}[/red]")
        sys.exit(1)

    try:
        stats = import_csv_entries(csv_path, is_fixed, now, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        console.print("[dim]No entries from this file were stored[/dim]")
        sys.exit(1)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        console.print(f"[red]Could not read {csv_path}: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Imported {stats.inserted} entr{'y' if stats.inserted == 1 else 'ies'}")
    if stats.skipped:
        console.print(f"[yellow]Skipped {stats.skipped} row(s)[/yellow]")
        for error in stats.errors:
            console.print(f"  [dim]{error}[/dim]")
