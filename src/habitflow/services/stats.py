"""Dashboard statistics folded from per-habit and per-task results."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..domain.habit import HabitSnapshot
from ..domain.task import Task
from .dates import local_today
from .rates import completion_rate, round_half_up
from .tasks import effective_status


@dataclass(frozen=True)
class HabitStats:
    """Aggregate habit numbers shown on the statistics dashboard."""

    total_habits: int = 0
    total_completions: int = 0
    average_completion_rate: int = 0
    longest_streak: int = 0
    current_active_streaks: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "totalHabits": self.total_habits,
            "totalCompletions": self.total_completions,
            "averageCompletionRate": self.average_completion_rate,
            "longestStreak": self.longest_streak,
            "currentActiveStreaks": self.current_active_streaks,
        }


@dataclass(frozen=True)
class TaskStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    pending_tasks: int = 0
    completion_rate: int = 0
    tasks_by_category: dict[str, int] = field(default_factory=dict)


def aggregate_stats(
    habits: Iterable[HabitSnapshot], *, today: Optional[date] = None
) -> HabitStats:
    """Fold habits into dashboard totals.

    Streak figures come from each habit's cached ``current_streak`` and
    ``best_streak``; the average uses each habit's monthly completion rate.
    """

    items = list(habits)
    if not items:
        return HabitStats()

    current = today or local_today()
    rates = [completion_rate(habit, "month", today=current) for habit in items]

    return HabitStats(
        total_habits=len(items),
        total_completions=sum(len(habit.completions) for habit in items),
        average_completion_rate=round_half_up(sum(rates) / len(items)),
        longest_streak=max((habit.best_streak for habit in items), default=0),
        current_active_streaks=sum(1 for habit in items if habit.current_streak > 0),
    )


def task_stats(tasks: Iterable[Task], *, today: Optional[date] = None) -> TaskStats:
    """Task totals by derived status, plus a per-category count."""

    items = list(tasks)
    if not items:
        return TaskStats()

    current = today or local_today()
    statuses = Counter(effective_status(task, today=current) for task in items)
    completed = statuses["completed"]

    return TaskStats(
        total_tasks=len(items),
        completed_tasks=completed,
        overdue_tasks=statuses["overdue"],
        pending_tasks=statuses["pending"],
        completion_rate=round_half_up(100 * completed / len(items)),
        tasks_by_category=dict(Counter(task.category for task in items)),
    )


__all__ = ["HabitStats", "TaskStats", "aggregate_stats", "task_stats"]
