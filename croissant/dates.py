"""Date utilities for croissant.

Pure functions for custom month windows. A custom month starts on a
configurable day of the month instead of the 1st, so reporting periods can
follow a pay cycle.

When the start day does not exist in a month (e.g. day 31 in April), the
start clamps to the last day of that month rather than rolling over.
"""

import calendar
from dataclasses import dataclass
from datetime import date

MIN_MONTH_START_DAY = 1
MAX_MONTH_START_DAY = 28


@dataclass(frozen=True)
class MonthWindow:
    """Half-open date range [start, end) covering one custom month."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by a number of months.

    Args:
        year: Year.
        month: Month number (1-12).
        delta: Months to move (negative moves back).

    Returns:
        Tuple of (year, month).
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_start(year: int, month: int, start_day: int) -> date:
    """Calculate the first day of the custom month anchored in (year, month).

    Args:
        year: Year.
        month: Month number (1-12).
        start_day: Day of month the custom month begins on.

    Returns:
        Start date, clamped to the last day of the month if needed.

    Raises:
        ValueError: If start_day is less than 1 or month is invalid.
    """
    if start_day < 1:
        raise ValueError(f"start_day must be at least 1, got {start_day}")
    days_in_month = calendar.monthrange(year, month)[1]
    return date(year, month, min(start_day, days_in_month))


def month_window(reference: date, start_day: int) -> MonthWindow:
    """Find the custom month window containing a date.

    Args:
        reference: Date to locate.
        start_day: Day of month the custom month begins on.

    Returns:
        MonthWindow whose range contains reference.
    """
    year, month = reference.year, reference.month
    if reference < month_start(year, month, start_day):
        year, month = shift_month(year, month, -1)

    next_year, next_month = shift_month(year, month, 1)
    return MonthWindow(
        start=month_start(year, month, start_day),
        end=month_start(next_year, next_month, start_day),
    )


def month_windows(reference: date, start_day: int, count: int) -> list[MonthWindow]:
    """Calculate consecutive custom month windows ending at the current one.

    Args:
        reference: Date inside the newest window.
        start_day: Day of month the custom month begins on.
        count: Number of windows to produce.

    Returns:
        List of windows ordered oldest first. Each window ends where the
        next one starts.
    """
    if count < 1:
        return []

    current = month_window(reference, start_day)
    windows = []
    for offset in range(count - 1, -1, -1):
        year, month = shift_month(current.start.year, current.start.month, -offset)
        next_year, next_month = shift_month(year, month, 1)
        windows.append(
            MonthWindow(
                start=month_start(year, month, start_day),
                end=month_start(next_year, next_month, start_day),
            )
        )
    return windows


def window_label(window: MonthWindow) -> str:
    """Format a short label for a window, e.g. "Mar 1"."""
    return f"{window.start:%b} {window.start.day}"
