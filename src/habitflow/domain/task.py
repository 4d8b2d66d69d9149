"""Task/event boundary type."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

TaskStatus = Literal["pending", "completed", "overdue"]
TaskKind = Literal["task", "event"]


@dataclass(slots=True)
class Task:
    """A one-off task or calendar event.

    ``status`` may hold a stale ``overdue`` written by an earlier session; only
    ``completed`` is authoritative. Lateness is derived by
    :func:`habitflow.services.tasks.is_overdue`.
    """

    id: Optional[int]
    name: str
    due_date: date
    due_time: str = "09:00"
    end_time: Optional[str] = None
    kind: TaskKind = "task"
    status: TaskStatus = "pending"
    category: str = "personal"
    description: str = ""
    location: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"
