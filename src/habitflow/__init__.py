"""HabitFlow habit tracker: schedule-aware streak and completion-rate analytics."""

from __future__ import annotations

from .config import BaseConfig
from .context import create_app_context

__all__ = ["BaseConfig", "create_app_context"]
