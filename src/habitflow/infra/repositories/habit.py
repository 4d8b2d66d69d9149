"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Callable, Iterable, Optional

from sqlmodel import Session, select

from ...domain.habit import HabitSnapshot
from ...logging_config import get_logger
from ...models.habit import Completion, Habit
from ...services.dates import DateLike, format_date, parse_date
from ...services.habits import refresh_streaks
from ...services.schedule import decode_selected_days, encode_selected_days

logger = get_logger(__name__)

_EDITABLE_FIELDS = ("name", "description", "category", "color", "target_frequency")


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _owned(session: Session, habit_id: int, user_id: int) -> Habit:
        habit = session.exec(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
        ).first()
        if habit is None:
            raise LookupError(f"Habit {habit_id} not found")
        return habit

    @staticmethod
    def _completion(session: Session, habit_id: int, day: date, user_id: int) -> Optional[Completion]:
        return session.exec(
            select(Completion)
            .where(Completion.user_id == user_id)
            .where(Completion.habit_id == habit_id)
            .where(Completion.completion_date == day)
        ).first()

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List the owner's habits, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_date.desc(), Habit.id.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(
        self,
        habit: Habit,
        *,
        user_id: int,
        selected_days: Optional[Iterable[str]] = None,
    ) -> Habit:
        """Create a new habit; an empty schedule means every day."""
        with self.session_factory() as session:
            habit.user_id = user_id
            if selected_days is not None or habit.selected_days is None:
                habit.selected_days = encode_selected_days(selected_days)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info("Habit created", extra={"habit_id": habit.id, "user_id": user_id})
            return habit

    def update(
        self,
        habit: Habit,
        *,
        user_id: int,
        selected_days: Optional[Iterable[str]] = None,
    ) -> Habit:
        """Update display fields and, when given, the schedule.

        ``created_date`` is fixed at creation and is not copied.
        """
        with self.session_factory() as session:
            existing = self._owned(session, habit.id, user_id)
            for name in _EDITABLE_FIELDS:
                setattr(existing, name, getattr(habit, name))
            if selected_days is not None:
                existing.selected_days = encode_selected_days(selected_days)
            elif habit.selected_days is not None:
                existing.selected_days = habit.selected_days
            session.add(existing)
            session.commit()
            session.refresh(existing)
            session.expunge(existing)
            return existing

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and every completion recorded for it.

        Raises:
            LookupError: unknown habit
        """
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            completions = session.exec(
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
            ).all()
            for completion in completions:
                session.delete(completion)
            session.delete(habit)
            session.commit()
            logger.info(
                "Habit deleted",
                extra={"habit_id": habit_id, "completions_removed": len(completions)},
            )

    # Completion operations
    def list_completion_dates(self, habit_id: int, *, user_id: int) -> list[str]:
        """All completion dates for a habit, ascending, as ``YYYY-MM-DD``."""
        with self.session_factory() as session:
            days = session.exec(
                select(Completion.completion_date)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
                .order_by(Completion.completion_date)  # type: ignore
            ).all()
            return [format_date(day) for day in days]

    def add_completion(self, habit_id: int, day: DateLike, *, user_id: int) -> bool:
        """Record a completion; returns False when it already existed.

        Raises:
            LookupError: unknown habit
            ValueError: ``day`` is before the habit's creation date
        """
        target = parse_date(day)
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if target < habit.created_date:
                raise ValueError(
                    f"Cannot complete habit {habit.name!r} on {format_date(target)}: "
                    f"it was created on {format_date(habit.created_date)}"
                )
            if self._completion(session, habit_id, target, user_id) is not None:
                return False
            session.add(Completion(user_id=user_id, habit_id=habit_id, completion_date=target))
            session.commit()
            return True

    def remove_completion(self, habit_id: int, day: DateLike, *, user_id: int) -> bool:
        """Remove a completion; returns False when there was none."""
        target = parse_date(day)
        with self.session_factory() as session:
            self._owned(session, habit_id, user_id)
            existing = self._completion(session, habit_id, target, user_id)
            if existing is None:
                return False
            session.delete(existing)
            session.commit()
            return True

    def toggle_completion(self, habit_id: int, day: DateLike, *, user_id: int) -> bool:
        """Flip the completion for ``day`` and return the new state."""
        if self.remove_completion(habit_id, day, user_id=user_id):
            completed = False
        else:
            completed = self.add_completion(habit_id, day, user_id=user_id)
        logger.info(
            "Completion toggled",
            extra={"habit_id": habit_id, "date": format_date(day), "completed": completed},
        )
        return completed

    def delete_completions_before(self, habit_id: int, cutoff: DateLike, *, user_id: int) -> int:
        """Delete completions dated strictly before ``cutoff``; returns the count."""
        limit = parse_date(cutoff)
        with self.session_factory() as session:
            self._owned(session, habit_id, user_id)
            stale = session.exec(
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
                .where(Completion.completion_date < limit)
            ).all()
            for completion in stale:
                session.delete(completion)
            session.commit()
            return len(stale)

    # Snapshots for the analytics
    @staticmethod
    def _to_snapshot(habit: Habit, completions: list[str], today: Optional[date]) -> HabitSnapshot:
        snapshot = HabitSnapshot(
            id=habit.id,
            name=habit.name,
            created_date=habit.created_date,
            selected_days=decode_selected_days(habit.selected_days, habit.target_frequency),
            completions=tuple(completions),
            description=habit.description,
            category=habit.category,
            color=habit.color,
        )
        return refresh_streaks(snapshot, today=today)

    def load_snapshot(
        self, habit_id: int, *, user_id: int, today: Optional[date] = None
    ) -> HabitSnapshot:
        """Habit with decoded schedule, completions and fresh streaks."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            session.expunge(habit)
        completions = self.list_completion_dates(habit_id, user_id=user_id)
        return self._to_snapshot(habit, completions, today)

    def list_snapshots(self, *, user_id: int, today: Optional[date] = None) -> list[HabitSnapshot]:
        """Snapshots for every habit the owner has, newest first."""
        habits = self.list_all(user_id=user_id)
        with self.session_factory() as session:
            rows = session.exec(
                select(Completion)
                .where(Completion.user_id == user_id)
                .order_by(Completion.completion_date)  # type: ignore
            ).all()
            by_habit: dict[int, list[str]] = defaultdict(list)
            for row in rows:
                by_habit[row.habit_id].append(format_date(row.completion_date))
        return [self._to_snapshot(habit, by_habit.get(habit.id, []), today) for habit in habits]
