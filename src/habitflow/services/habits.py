"""Habit streak calculations."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional

from ..domain.habit import HabitSnapshot
from ..logging_config import get_logger
from .dates import DateLike, local_today, parse_date
from .schedule import is_scheduled

logger = get_logger(__name__)

# The backward walk never inspects a day this many days before the anchor.
MAX_LOOKBACK_DAYS = 365


def completion_dates(completions: Iterable[DateLike]) -> set[date]:
    """Parse completion values into a set of dates, skipping unreadable ones."""

    parsed: set[date] = set()
    for raw in completions:
        try:
            parsed.add(parse_date(raw))
        except ValueError:
            logger.warning("Skipping malformed completion date", extra={"value": raw})
    return parsed


def _next_scheduled_day(after: date, selected_days: tuple[str, ...]) -> Optional[date]:
    for offset in range(1, 8):
        candidate = after + timedelta(days=offset)
        if is_scheduled(candidate, selected_days):
            return candidate
    return None


def current_streak(
    completions: Iterable[DateLike],
    selected_days: Optional[Iterable[str]] = None,
    as_of: Optional[DateLike] = None,
) -> int:
    """Count consecutive completed scheduled days ending at ``as_of``.

    An unfinished ``as_of`` day is not held against the streak: it only
    counts once it is completed (and scheduled), otherwise the walk starts the
    day before. Unscheduled days are stepped over.
    """

    done = completion_dates(completions)
    if not done:
        return 0

    days = tuple(selected_days or ())
    anchor = parse_date(as_of) if as_of is not None else local_today()

    streak = 0
    if anchor in done and is_scheduled(anchor, days):
        streak = 1

    cursor = anchor - timedelta(days=1)
    limit = anchor - timedelta(days=MAX_LOOKBACK_DAYS)
    while cursor > limit:
        if is_scheduled(cursor, days):
            if cursor not in done:
                break
            streak += 1
        cursor -= timedelta(days=1)

    return streak


def best_streak(
    completions: Iterable[DateLike],
    selected_days: Optional[Iterable[str]] = None,
) -> int:
    """Longest run of completions on consecutive scheduled days."""

    days = tuple(selected_days or ())
    ordered = sorted(day for day in completion_dates(completions) if is_scheduled(day, days))

    best = 0
    run = 0
    previous: Optional[date] = None
    for day in ordered:
        if previous is not None and day == _next_scheduled_day(previous, days):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day

    return best


def compute_streaks(
    completions: Iterable[DateLike],
    selected_days: Optional[Iterable[str]] = None,
    *,
    today: Optional[date] = None,
) -> tuple[int, int]:
    """Return (current_streak, best_streak); best never trails current."""

    values = tuple(completions)
    days = tuple(selected_days or ())
    current = current_streak(values, days, as_of=today)
    best = max(best_streak(values, days), current)
    return current, best


def refresh_streaks(habit: HabitSnapshot, *, today: Optional[date] = None) -> HabitSnapshot:
    """Copy of ``habit`` with both cached streak fields recomputed."""

    current, best = compute_streaks(habit.completions, habit.selected_days, today=today)
    logger.debug(
        "Recomputed streaks",
        extra={"habit_id": habit.id, "current_streak": current, "best_streak": best},
    )
    return replace(habit, current_streak=current, best_streak=best)


def is_completed_today(habit: HabitSnapshot, *, today: Optional[date] = None) -> bool:
    return (today or local_today()) in completion_dates(habit.completions)


def habits_due_on(habits: Iterable[HabitSnapshot], day: DateLike) -> list[HabitSnapshot]:
    """Habits whose schedule includes ``day``."""

    return [habit for habit in habits if is_scheduled(day, habit.selected_days)]


__all__ = [
    "MAX_LOOKBACK_DAYS",
    "best_streak",
    "completion_dates",
    "compute_streaks",
    "current_streak",
    "habits_due_on",
    "is_completed_today",
    "refresh_streaks",
]
