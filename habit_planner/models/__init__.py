"""SQLModel exports for Habit Planner."""

from .planner_models import HabitLog, HabitRecord, RoutineItemRecord, RoutineLog, RoutineRecord

__all__ = [
    "HabitRecord",
    "HabitLog",
    "RoutineRecord",
    "RoutineItemRecord",
    "RoutineLog",
]
