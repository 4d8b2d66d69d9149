"""Habit tracking tables."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Habit(SQLModel, table=True):
    """A user-defined habit with a weekly schedule."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    category: str = Field(default="personal", max_length=40)
    color: str = Field(default="", max_length=16)
    # JSON array of weekday names; NULL on rows that predate schedules.
    selected_days: Optional[str] = Field(default=None)
    target_frequency: Optional[str] = Field(default=None, max_length=16)
    created_date: date = Field(default_factory=date.today, nullable=False, index=True)


class Completion(SQLModel, table=True):
    """A habit marked done on one local calendar day."""

    __tablename__: ClassVar[str] = "completion"

    user_id: int = Field(nullable=False, index=True)
    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    completion_date: date = Field(primary_key=True, index=True)
