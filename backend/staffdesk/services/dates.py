"""Calendar arithmetic shared by the timesheet, calendar and performance actions.

All stored datetimes are naive server-local wall time.
"""

from datetime import date, datetime, time, timedelta

# Inclusive upper bound of a day, millisecond precision
_END_OF_DAY = timedelta(days=1, milliseconds=-1)


def naive(value: datetime) -> datetime:
    """Drop tzinfo after converting to server-local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def day_bounds(d: date | datetime) -> tuple[datetime, datetime]:
    day = d.date() if isinstance(d, datetime) else d
    start = datetime.combine(day, time.min)
    return start, start + _END_OF_DAY


def week_bounds(d: date | datetime) -> tuple[datetime, datetime]:
    """Monday 00:00:00.000 .. Sunday 23:59:59.999 of the week containing `d`.

    Sunday belongs to the week that started six days earlier.
    """
    day = d.date() if isinstance(d, datetime) else d
    monday = day - timedelta(days=day.weekday())
    start = datetime.combine(monday, time.min)
    return start, start + timedelta(days=6) + _END_OF_DAY


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    if month == 12:
        nxt = datetime(year + 1, 1, 1)
    else:
        nxt = datetime(year, month + 1, 1)
    return start, nxt - timedelta(milliseconds=1)


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1
