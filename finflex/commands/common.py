"""Helpers shared by the finflex commands."""

import re
import sqlite3
import sys
from datetime import date, datetime, time, tzinfo
from pathlib import Path

import pandas as pd
from rich.console import Console

from finflex.config import Settings, load_settings, resolve_timezone
from finflex.dates import to_timestamp
from finflex.domain.models import Profile, Timestamp
from finflex.store.queries import load_profile
from finflex.store.schema import database_exists

console = Console()

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def load_settings_or_exit() -> tuple[Settings, tzinfo | None]:
    """Load settings and resolve the configured timezone, exiting on bad config."""
    try:
        settings = load_settings()
        return settings, resolve_timezone(settings)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]", style="bold")
        sys.exit(1)


def current_time(tz: tzinfo | None) -> datetime:
    """Read the wall clock once, in the configured zone (None = system local)."""
    return datetime.now(tz)


def require_database(db_path: Path) -> None:
    """Exit with a hint if the database has not been initialized."""
    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'finflex init' first.[/red]", style="bold")
        sys.exit(1)


def require_profile(db_path: Path) -> Profile:
    """Load the profile or exit with a hint to run onboarding."""
    require_database(db_path)
    try:
        profile = load_profile(db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if profile is None or not profile.has_onboarded:
        console.print("[yellow]No profile yet. Run 'finflex onboard' first.[/yellow]")
        sys.exit(1)
    return profile


def parse_entry_date(raw_date: str) -> date:
    """Normalize a user-supplied date string.

    Uses pandas.to_datetime so ISO, European and other common formats are
    accepted. ISO dates (YYYY-MM-DD...) are read as ISO; anything else that
    is ambiguous is read day first.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    text = raw_date.strip()
    try:
        if ISO_DATE.match(text):
            parsed = pd.to_datetime(text, format="ISO8601")
        else:
            parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e
    if pd.isna(parsed):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed.date()


def entry_timestamp(day: date | None, now: datetime) -> Timestamp:
    """Timestamp for an entry logged against ``day``.

    Today (or no date) records the current instant; earlier days are logged
    at their local midnight.
    """
    if day is None or day == now.date():
        return to_timestamp(now)
    return to_timestamp(datetime.combine(day, time(), tzinfo=now.tzinfo))
