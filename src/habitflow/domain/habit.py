"""Habit value object consumed by the analytics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class HabitSnapshot:
    """A habit with its schedule and completion dates, detached from storage.

    ``current_streak`` and ``best_streak`` are a cache of
    :func:`habitflow.services.habits.compute_streaks`; refresh them with
    :func:`habitflow.services.habits.refresh_streaks` after any change.
    """

    id: Optional[int]
    name: str
    created_date: date
    selected_days: tuple[str, ...] = ()
    completions: tuple[str, ...] = ()
    description: str = ""
    category: str = "personal"
    color: str = ""
    current_streak: int = 0
    best_streak: int = 0

    @property
    def is_daily(self) -> bool:
        return not self.selected_days
