"""Date utilities for finflex.

Pure functions for calendar windows and date binning. Every calculation
works on local calendar dates (midnight to midnight in the zone of ``now``):
a naive ``now`` means system local time, an aware one means its own zone.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from finflex.domain.models import Timestamp

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class MonthWindow:
    """Immutable view of the current month relative to today."""

    year: int
    month_index: int
    days_in_month: int
    day_of_month: int

    @property
    def days_remaining(self) -> int:
        """Days left in the month, today included."""
        return self.days_in_month - self.day_of_month + 1


@dataclass(frozen=True)
class YearWindow:
    """Immutable view of the current calendar year relative to now."""

    year: int
    start: datetime
    end: datetime
    total_days: int
    days_elapsed: int
    days_remaining: int
    seconds_remaining: int
    progress_percent: float


@dataclass(frozen=True)
class DayBin:
    """One local calendar day used for short-term timelines."""

    day: date
    label: str

    @property
    def key(self) -> str:
        return self.day.isoformat()


def local_datetime(timestamp: Timestamp, tz: tzinfo | None = None) -> datetime:
    """Convert epoch milliseconds to a local datetime.

    Args:
        timestamp: Point in time as epoch milliseconds.
        tz: Target zone. None means system local time (naive result).

    Returns:
        Datetime in the requested zone.
    """
    return datetime.fromtimestamp(timestamp / 1000, tz=tz)


def to_timestamp(moment: datetime) -> Timestamp:
    """Convert a datetime to epoch milliseconds (naive = system local)."""
    return Timestamp(int(moment.timestamp() * 1000))


def start_of_day(moment: datetime) -> datetime:
    """Return local midnight of the day containing ``moment``."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def month_key(timestamp: Timestamp, tz: tzinfo | None = None) -> tuple[int, int]:
    """Stable grouping key (year, month_index) for a timestamp.

    month_index is 1-12.
    """
    local = local_datetime(timestamp, tz)
    return local.year, local.month


def month_label(month_index: int) -> str:
    """Short month name for a 1-12 month index (e.g. "Jan")."""
    return calendar.month_abbr[month_index]


def month_window(now: datetime) -> MonthWindow:
    """Resolve the current month's day count and day of month.

    Args:
        now: Current instant.

    Returns:
        MonthWindow for the month containing ``now``.
    """
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    return MonthWindow(
        year=now.year,
        month_index=now.month,
        days_in_month=days_in_month,
        day_of_month=now.day,
    )


def year_window(now: datetime) -> YearWindow:
    """Resolve boundaries and progress of the current calendar year.

    Days elapsed is the whole-day floor of ``now - Jan 1 00:00``, so Jan 1
    itself counts as 0 elapsed and the full year as remaining.

    Args:
        now: Current instant.

    Returns:
        YearWindow for the year containing ``now``.
    """
    start = start_of_day(now.replace(month=1, day=1))
    end = now.replace(month=12, day=31, hour=23, minute=59, second=59, microsecond=0)
    total_days = 366 if calendar.isleap(now.year) else 365
    days_elapsed = (now - start) // ONE_DAY
    seconds_remaining = max(0, int((end - now).total_seconds()))

    return YearWindow(
        year=now.year,
        start=start,
        end=end,
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_remaining=total_days - days_elapsed,
        seconds_remaining=seconds_remaining,
        progress_percent=days_elapsed / total_days * 100,
    )


def last_seven_days(now: datetime) -> list[DayBin]:
    """Return the last 7 consecutive local days, oldest first, today last.

    Args:
        now: Current instant.

    Returns:
        Seven DayBin entries; today is labelled "Today", the others by
        their short weekday name.
    """
    today = now.date()
    days: list[DayBin] = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        label = "Today" if offset == 0 else day.strftime("%a")
        days.append(DayBin(day=day, label=label))
    return days
