"""Pure time arithmetic shared by the ledgers."""

from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_hhmm(value: str | time | None) -> time | None:
    """Parse a 24-hour ``HH:MM`` string into a time (seconds dropped)."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    v = value.strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, TIME_FORMAT).time()
    except ValueError:
        raise ValidationError(f"Invalid time of day {value!r} (expected HH:MM)")


def format_hhmm(value: time | None) -> str | None:
    return value.strftime(TIME_FORMAT) if value is not None else None


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def elapsed_hours(check_in: time, check_out: time) -> float:
    """Hours between two times of day, rounded to 2 decimals.

    A check-out earlier than the check-in yields a negative value.
    """
    minutes = minutes_of_day(check_out) - minutes_of_day(check_in)
    return round(minutes / 60, 2)


def inclusive_day_count(start: date, end: date) -> int:
    """Number of calendar days from start to end, both included."""
    return abs((end - start).days) + 1
