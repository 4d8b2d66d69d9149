"""Service module exports."""

from . import dates, habits, maintenance, rates, schedule, stats, tasks

__all__ = [
    "dates",
    "habits",
    "maintenance",
    "rates",
    "schedule",
    "stats",
    "tasks",
]
