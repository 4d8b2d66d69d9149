"""Pytest configuration and shared fixtures for HabitFlow tests.

Provides a throwaway SQLite database, a repository bound to it, factories for
stored habits and in-memory snapshots, and a fixed reference date so streak
and rate expectations never depend on the wall clock.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitflow.domain.habit import HabitSnapshot
from habitflow.infra.database import create_session_factory
from habitflow.infra.repositories import SQLModelHabitRepository
from habitflow.models import Habit

# Wednesday. The surrounding week runs Monday 2024-06-10 .. Sunday 2024-06-16.
TODAY = date(2024, 6, 12)
USER_ID = 1


def days_ago(n: int, *, today: date = TODAY) -> str:
    """ISO string for ``n`` days before ``today``."""
    return (today - timedelta(days=n)).isoformat()


@pytest.fixture(autouse=True)
def _reset_habitflow_logger():
    """Drop handlers installed by setup_logging so tests don't share streams."""
    yield
    logger = logging.getLogger("habitflow")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging rows directly, bypassing the repository."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the application wires into repositories."""
    return create_session_factory(db_engine)


@pytest.fixture
def repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(repo):
    """Factory for persisted habits.

    Returns:
        Callable: Function that creates and persists Habit rows via the repository
    """

    def _create_habit(
        name: str = "Test Habit",
        selected_days: tuple[str, ...] | list[str] = (),
        created_date: date = TODAY - timedelta(days=60),
        category: str = "health",
        user_id: int = USER_ID,
    ) -> Habit:
        habit = Habit(
            user_id=user_id,
            name=name,
            category=category,
            created_date=created_date,
        )
        return repo.create(habit, user_id=user_id, selected_days=selected_days)

    return _create_habit


@pytest.fixture
def snapshot_factory():
    """Factory for in-memory habits handed straight to the analytics."""

    def _create_snapshot(
        completions=(),
        selected_days=(),
        created_date: date = TODAY - timedelta(days=60),
        name: str = "Snapshot",
        habit_id: int | None = 1,
        current_streak: int = 0,
        best_streak: int = 0,
    ) -> HabitSnapshot:
        return HabitSnapshot(
            id=habit_id,
            name=name,
            created_date=created_date,
            selected_days=tuple(selected_days),
            completions=tuple(completions),
            current_streak=current_streak,
            best_streak=best_streak,
        )

    return _create_snapshot
