"""Weekly schedule handling.

``is_scheduled`` is the one place that decides whether a habit is due on a
date. Streaks, completion rates, the "due today" list and calendar consumers
all go through it.
"""

from __future__ import annotations

import json
from typing import Iterable, Optional

from ..logging_config import get_logger
from .dates import DAY_NAMES, DateLike, date_range, day_name

logger = get_logger(__name__)

# Display/storage order, Monday first.
WEEK_ORDER = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

ALL_DAYS: tuple[str, ...] = WEEK_ORDER
LEGACY_WEEKLY_DAYS: tuple[str, ...] = ("monday", "wednesday", "friday")


def is_scheduled(day: DateLike, selected_days: Optional[Iterable[str]]) -> bool:
    """Return True when ``day`` is a scheduled day for ``selected_days``.

    An empty or missing selection is the legacy "every day" habit.
    """

    days = set(selected_days or ())
    if not days:
        return True
    return day_name(day) in days


def scheduled_dates(
    start: DateLike, end: DateLike, selected_days: Optional[Iterable[str]]
) -> list[str]:
    """``date_range`` restricted to scheduled days."""

    days = tuple(selected_days or ())
    return [value for value in date_range(start, end) if is_scheduled(value, days)]


def normalize_selected_days(days: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Lowercase, de-duplicate and order weekday names Monday..Sunday.

    Raises:
        ValueError: if a name is not a weekday
    """

    cleaned: set[str] = set()
    for raw in days or ():
        name = str(raw).strip().lower()
        if name not in DAY_NAMES:
            raise ValueError(f"Unknown weekday: {raw!r}")
        cleaned.add(name)
    return tuple(name for name in WEEK_ORDER if name in cleaned)


def encode_selected_days(days: Optional[Iterable[str]]) -> str:
    return json.dumps(list(normalize_selected_days(days)))


def decode_selected_days(
    raw: Optional[str], target_frequency: Optional[str] = None
) -> tuple[str, ...]:
    """Decode a stored schedule, substituting the daily default on bad data.

    Rows written before schedules existed (no stored value, or an empty string)
    only carry ``target_frequency``: ``daily`` means every day, anything else,
    including no frequency at all, Monday/Wednesday/Friday.
    """

    if not raw:
        if target_frequency == "daily":
            return ALL_DAYS
        return LEGACY_WEEKLY_DAYS

    try:
        payload = json.loads(raw)
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
        return normalize_selected_days(payload)
    except (TypeError, ValueError) as exc:
        logger.warning(
            "Unreadable stored schedule, falling back to every day",
            extra={"raw_schedule": raw, "error": str(exc)},
        )
        return ALL_DAYS


__all__ = [
    "ALL_DAYS",
    "LEGACY_WEEKLY_DAYS",
    "WEEK_ORDER",
    "decode_selected_days",
    "encode_selected_days",
    "is_scheduled",
    "normalize_selected_days",
    "scheduled_dates",
]
