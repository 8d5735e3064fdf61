"""Recurrence configuration and the single "is due on date" predicate."""

from __future__ import annotations

import copy
import datetime
from dataclasses import dataclass

from habit_planner.engine.frequency import (
    CustomFrequencyConfig,
    Frequency,
    FrequencyKind,
    frequency_kind,
    frequency_matches,
)


def as_calendar_day(value: datetime.date | datetime.datetime) -> datetime.date:
    # 日本語: 時刻部分を捨てて暦日に揃える / English: Drop time-of-day, keep the calendar day
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raise TypeError(f"expected a date or datetime, got {type(value).__name__}")


@dataclass
class RecurrenceConfig:
    anchor_date: datetime.date
    frequency: Frequency = FrequencyKind.DAILY
    # 日本語: None=終了なし, 日付=その日を含めて終了 / English: None=never ends, a date=last due day (inclusive)
    end_repeat: datetime.date | None = None

    def __post_init__(self) -> None:
        self.anchor_date = as_calendar_day(self.anchor_date)
        if not isinstance(self.frequency, CustomFrequencyConfig):
            self.frequency = FrequencyKind(self.frequency)
        if self.end_repeat is not None:
            self.end_repeat = as_calendar_day(self.end_repeat)

    @property
    def kind(self) -> FrequencyKind:
        return frequency_kind(self.frequency)

    def is_due(self, on: datetime.date | datetime.datetime) -> bool:
        return is_due(self, on)

    def copy(self) -> "RecurrenceConfig":
        return copy.deepcopy(self)


def is_due(config: RecurrenceConfig, query_date: datetime.date | datetime.datetime) -> bool:
    """Kind decision first, then the end-repeat cutoff applied unconditionally."""
    day = as_calendar_day(query_date)
    if not frequency_matches(config.frequency, config.anchor_date, day):
        return False
    if config.end_repeat is not None and day > config.end_repeat:
        return False
    return True


__all__ = ["RecurrenceConfig", "as_calendar_day", "is_due"]
