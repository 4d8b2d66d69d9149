"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ...models.habit import Habit
from ..habit import HabitSnapshot


class HabitRepository(Protocol):
    """Storage collaborator for habits and their completion dates.

    Methods that change or load one habit raise ``LookupError`` when the owner
    has no habit with that id. ``get_by_id`` returns ``None`` instead and
    ``list_completion_dates`` returns an empty list.
    """

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List the owner's habits, newest first."""
        ...

    def create(
        self,
        habit: Habit,
        *,
        user_id: int,
        selected_days: Optional[Iterable[str]] = None,
    ) -> Habit:
        """Create a new habit."""
        ...

    def update(
        self,
        habit: Habit,
        *,
        user_id: int,
        selected_days: Optional[Iterable[str]] = None,
    ) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and its completions."""
        ...

    # Completion operations
    def list_completion_dates(self, habit_id: int, *, user_id: int) -> list[str]:
        """All completion dates for a habit as ``YYYY-MM-DD`` strings."""
        ...

    def add_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Record a completion; returns False when it already existed."""
        ...

    def remove_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Remove a completion; returns False when there was none."""
        ...

    def toggle_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Flip the completion for ``day``; returns the new state."""
        ...

    def delete_completions_before(self, habit_id: int, cutoff: date, *, user_id: int) -> int:
        """Delete completions dated strictly before ``cutoff``."""
        ...

    def load_snapshot(self, habit_id: int, *, user_id: int) -> HabitSnapshot:
        """Habit with decoded schedule, completions and fresh streaks."""
        ...

    def list_snapshots(self, *, user_id: int) -> list[HabitSnapshot]:
        """Snapshots for every habit the owner has."""
        ...
