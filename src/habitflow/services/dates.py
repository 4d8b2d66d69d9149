"""Local calendar-date helpers shared by the analytics.

Every value here is a naive local calendar date. Nothing is routed through
UTC or epoch arithmetic, so a completion logged at 23:59 stays on its day.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]

# Index matches the JavaScript-style day-of-week numbering (0 = Sunday).
DAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

CALENDAR_GRID_DAYS = 42


def parse_date(value: DateLike) -> date:
    """Coerce ``value`` into a :class:`date`.

    Strings must be ``YYYY-MM-DD``; anything else raises ``ValueError``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    raise ValueError(f"Unsupported date value: {value!r}")


def format_date(value: DateLike) -> str:
    """Return ``YYYY-MM-DD`` built from the local year, month and day."""

    day = parse_date(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def local_today() -> date:
    """Current local calendar date."""

    return datetime.now().date()


def today() -> str:
    return format_date(local_today())


def is_today(value: DateLike, *, today: date | None = None) -> bool:
    return parse_date(value) == (today or local_today())


def week_start(value: DateLike) -> date:
    """Monday on or before ``value``; a Sunday maps six days back."""

    day = parse_date(value)
    return day - timedelta(days=day.weekday())


def month_start(value: DateLike) -> date:
    day = parse_date(value)
    return day.replace(day=1)


def date_range(start: DateLike, end: DateLike) -> list[str]:
    """Every date from ``start`` through ``end`` inclusive, ascending."""

    cursor = parse_date(start)
    last = parse_date(end)
    dates: list[str] = []
    while cursor <= last:
        dates.append(format_date(cursor))
        cursor += timedelta(days=1)
    return dates


def day_name(value: DateLike) -> str:
    """Lowercase weekday name, ``sunday`` through ``saturday``."""

    day = parse_date(value)
    # date.weekday() is Monday=0; shift to Sunday=0.
    return DAY_NAMES[(day.weekday() + 1) % 7]


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (1-12) of ``year``."""

    return monthrange(year, month)[1]


def calendar_days(year: int, month: int) -> list[date]:
    """Six full weeks of dates covering ``month``, starting on a Monday."""

    first = week_start(date(year, month, 1))
    return [first + timedelta(days=offset) for offset in range(CALENDAR_GRID_DAYS)]


def is_same_month(first: DateLike, second: DateLike) -> bool:
    a, b = parse_date(first), parse_date(second)
    return (a.year, a.month) == (b.year, b.month)


def is_same_day(first: DateLike, second: DateLike) -> bool:
    return parse_date(first) == parse_date(second)


def month_name(month: int) -> str:
    """English month name for a 1-based month number."""

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return MONTH_NAMES[month - 1]


def elapsed_days_in_week(*, today: date | None = None) -> int:
    """Days from this week's Monday through today, inclusive."""

    current = today or local_today()
    return len(date_range(week_start(current), current))


def elapsed_days_in_month(*, today: date | None = None) -> int:
    """Days from the 1st of this month through today, inclusive."""

    current = today or local_today()
    return len(date_range(month_start(current), current))


__all__ = [
    "DAY_NAMES",
    "DateLike",
    "MONTH_NAMES",
    "calendar_days",
    "date_range",
    "day_name",
    "days_in_month",
    "elapsed_days_in_month",
    "elapsed_days_in_week",
    "format_date",
    "is_same_day",
    "is_same_month",
    "is_today",
    "local_today",
    "month_name",
    "month_start",
    "parse_date",
    "today",
    "week_start",
]
