"""Recurrence & completion engine exports."""

from .frequency import (
    CustomFrequencyConfig,
    Frequency,
    FrequencyKind,
    IntervalUnit,
    frequency_kind,
    frequency_matches,
)
from .habit import Habit, new_identity
from .ledger import HabitLedger, RoutineLedger
from .recurrence import RecurrenceConfig, as_calendar_day, is_due
from .routine import DEFAULT_COLOR_NAME, Routine, RoutineItem

__all__ = [
    "FrequencyKind",
    "IntervalUnit",
    "CustomFrequencyConfig",
    "Frequency",
    "frequency_kind",
    "frequency_matches",
    "RecurrenceConfig",
    "as_calendar_day",
    "is_due",
    "HabitLedger",
    "RoutineLedger",
    "Habit",
    "new_identity",
    "Routine",
    "RoutineItem",
    "DEFAULT_COLOR_NAME",
]
