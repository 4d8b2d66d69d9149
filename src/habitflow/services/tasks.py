"""Task status and display helpers."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..domain.task import Task, TaskStatus
from .dates import local_today

ALL_DAY_TIME = "00:00"


def is_overdue(task: Task, *, today: Optional[date] = None) -> bool:
    """True when an unfinished task's due date has passed."""

    if task.is_completed:
        return False
    return task.due_date < (today or local_today())


def effective_status(task: Task, *, today: Optional[date] = None) -> TaskStatus:
    """Status recomputed from the due date; a stored ``overdue`` is ignored."""

    if task.is_completed:
        return "completed"
    if is_overdue(task, today=today):
        return "overdue"
    return "pending"


def is_all_day(task: Task) -> bool:
    return task.due_time == ALL_DAY_TIME


def format_time(value: str) -> str:
    """Render ``HH:MM`` (24-hour) as a 12-hour label such as ``9:05 AM``."""

    try:
        hours_text, minutes_text = value.split(":")
        hours, minutes = int(hours_text), int(minutes_text)
    except ValueError as exc:
        raise ValueError(f"Expected HH:MM, got {value!r}") from exc
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Expected HH:MM, got {value!r}")

    hour12 = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    suffix = "AM" if hours < 12 else "PM"
    return f"{hour12}:{minutes:02d} {suffix}"


def format_event_time_range(task: Task) -> str:
    if is_all_day(task):
        return "All day"

    start = format_time(task.due_time)
    if task.kind == "event" and task.end_time and task.end_time != task.due_time:
        return f"{start} - {format_time(task.end_time)}"
    return start


__all__ = [
    "effective_status",
    "format_event_time_range",
    "format_time",
    "is_all_day",
    "is_overdue",
]
