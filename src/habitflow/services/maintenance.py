"""Data-integrity pass for completions recorded before a habit existed.

The analytics trust their input, so invalid completions are removed here
rather than filtered on every calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..domain.habit import HabitSnapshot
from ..domain.repositories import HabitRepository
from ..logging_config import get_logger
from .dates import format_date
from .habits import completion_dates

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationReport:
    """Per-habit summary of completion data health."""

    habit_id: int | None
    name: str
    created_date: str
    total_completions: int
    invalid_dates: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return not self.invalid_dates


def find_invalid_completions(habit: HabitSnapshot) -> list[str]:
    """Completion dates earlier than the habit's creation date, ascending."""

    return [
        format_date(day)
        for day in sorted(completion_dates(habit.completions))
        if day < habit.created_date
    ]


def validate_habits(habits: Iterable[HabitSnapshot]) -> list[ValidationReport]:
    reports = []
    for habit in habits:
        invalid = find_invalid_completions(habit)
        report = ValidationReport(
            habit_id=habit.id,
            name=habit.name,
            created_date=format_date(habit.created_date),
            total_completions=len(habit.completions),
            invalid_dates=tuple(invalid),
        )
        if invalid:
            logger.warning(
                "Habit has completions before its creation date",
                extra={"habit_id": habit.id, "invalid_dates": invalid},
            )
        reports.append(report)
    return reports


def cleanup_invalid_completions(repository: HabitRepository, *, user_id: int) -> int:
    """Delete every completion dated before its habit's creation date.

    A storage failure on one habit is logged and the pass moves on to the
    next habit. Returns the number of deleted completions.
    """

    total = 0
    for habit in repository.list_all(user_id=user_id):
        try:
            removed = repository.delete_completions_before(
                habit.id, habit.created_date, user_id=user_id
            )
        except SQLAlchemyError:
            logger.error(
                "Failed to clean completions",
                extra={"habit_id": habit.id},
                exc_info=True,
            )
            continue
        if removed:
            logger.info(
                "Removed invalid completions",
                extra={"habit_id": habit.id, "removed": removed},
            )
        total += removed

    logger.info("Completion cleanup finished", extra={"user_id": user_id, "removed": total})
    return total


__all__ = [
    "ValidationReport",
    "cleanup_invalid_completions",
    "find_invalid_completions",
    "validate_habits",
]
