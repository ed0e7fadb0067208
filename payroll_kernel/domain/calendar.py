"""
Calendar -- weekend detection and working-day enumeration.

A working day is a non-weekend calendar date.  Saturday and Sunday are
weekends; public holidays are not modelled.
"""

from datetime import date, timedelta

# date.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS = frozenset({5, 6})


def is_weekend(day: date) -> bool:
    """Return True for Saturday and Sunday."""
    return day.weekday() in WEEKEND_DAYS


def working_days(start: date, end: date) -> tuple[date, ...]:
    """
    All non-weekend dates in ``[start, end]`` (inclusive), ascending.

    Returns an empty tuple when ``end < start``.
    """
    days = []
    current = start
    while current <= end:
        if not is_weekend(current):
            days.append(current)
        current += timedelta(days=1)
    return tuple(days)


def count_working_days(start: date, end: date) -> int:
    """Number of working days in ``[start, end]`` without building the list."""
    if end < start:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if not is_weekend(start + timedelta(days=full_weeks * 7 + offset)):
            count += 1
    return count
