"""Plain value types passed between storage and the analytics."""

from .habit import HabitSnapshot
from .task import Task

__all__ = ["HabitSnapshot", "Task"]
