"""SQLModel table exports."""

from .habit import Completion, Habit

__all__ = ["Completion", "Habit"]
