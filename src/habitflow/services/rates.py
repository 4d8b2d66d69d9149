"""Completion-rate calculations over week, month or rolling windows."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Union

from ..domain.habit import HabitSnapshot
from ..logging_config import get_logger
from .dates import format_date, local_today, month_start, week_start
from .habits import completion_dates
from .schedule import scheduled_dates

logger = get_logger(__name__)

Period = Union[str, int]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (12.5 -> 13)."""

    return int(math.floor(value + 0.5))


def period_start(period: Period, *, today: date) -> date:
    """First day of the window selected by ``period``.

    ``"week"`` starts on this week's Monday, ``"month"`` on the 1st, and an
    integer ``n`` covers the last ``n`` days including today.
    """

    if isinstance(period, bool):
        raise ValueError(f"Unsupported period: {period!r}")
    if period == "week":
        return week_start(today)
    if period == "month":
        return month_start(today)
    if isinstance(period, int):
        # Huge windows stop at the earliest representable date.
        return today - timedelta(days=min(period - 1, (today - date.min).days))
    raise ValueError(f"Unsupported period: {period!r}")


def completion_rate(
    habit: HabitSnapshot,
    period: Period,
    *,
    today: Optional[date] = None,
) -> int:
    """Percentage (0-100) of scheduled, elapsed days in ``period`` completed.

    Days before the habit existed are never counted. Today only enters the
    window once it is completed.
    """

    current = today or local_today()
    start = max(period_start(period, today=current), habit.created_date)

    done = completion_dates(habit.completions)
    today_done = current in done
    end = current if today_done else current - timedelta(days=1)

    elapsed = scheduled_dates(start, end, habit.selected_days)
    if not elapsed:
        return 0

    completed = sum(1 for value in elapsed if date.fromisoformat(value) in done)

    # First scheduled day of a brand new habit, already done.
    if len(elapsed) == 1 and elapsed[0] == format_date(current) and completed == 1:
        return 100

    rate = round_half_up(100 * completed / len(elapsed))
    logger.debug(
        "Completion rate",
        extra={
            "habit_id": habit.id,
            "period": period,
            "window_start": format_date(start),
            "window_end": format_date(end),
            "scheduled_days": len(elapsed),
            "completed_days": completed,
            "rate": rate,
        },
    )
    return rate


__all__ = ["Period", "completion_rate", "period_start", "round_half_up"]
