"""Frequency rules: which calendar days a recurrence falls on."""

from __future__ import annotations

import calendar
import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Union

from dateutil.relativedelta import relativedelta


class FrequencyKind(str, Enum):
    NEVER = "Never"
    DAILY = "Every Day"
    WEEKLY = "Every Week"
    BIWEEKLY = "Every 2 Weeks"
    MONTHLY = "Every Month"
    YEARLY = "Every Year"
    # 日本語: 設定無しの Custom は常に対象外 / English: Bare CUSTOM (no configuration) is never due
    CUSTOM = "Custom"


class IntervalUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def _frozen_ints(values: Iterable[int] | None) -> FrozenSet[int]:
    return frozenset(int(value) for value in (values or ()))


@dataclass(frozen=True)
class CustomFrequencyConfig:
    """Every N days/weeks/months/years, optionally restricted to explicit selections.

    ``weekdays`` (0=Mon ... 6=Sun) is only legal for the week unit and replaces
    interval counting entirely: every matching weekday, every week.
    ``month_days`` (1-31) and ``months`` (1-12) narrow the month and year units.
    """

    unit: IntervalUnit = IntervalUnit.DAY
    interval: int = 1
    weekdays: FrozenSet[int] = field(default_factory=frozenset)
    month_days: FrozenSet[int] = field(default_factory=frozenset)
    months: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit", IntervalUnit(self.unit))
        object.__setattr__(self, "weekdays", _frozen_ints(self.weekdays))
        object.__setattr__(self, "month_days", _frozen_ints(self.month_days))
        object.__setattr__(self, "months", _frozen_ints(self.months))

        if isinstance(self.interval, bool) or not isinstance(self.interval, int) or self.interval < 1:
            raise ValueError("interval must be an integer >= 1")
        if self.weekdays and self.unit is not IntervalUnit.WEEK:
            raise ValueError("weekdays can only be selected for the week unit")
        if self.month_days and self.unit is not IntervalUnit.MONTH:
            raise ValueError("month_days can only be selected for the month unit")
        if self.months and self.unit is not IntervalUnit.YEAR:
            raise ValueError("months can only be selected for the year unit")
        if any(day < 0 or day > 6 for day in self.weekdays):
            raise ValueError("weekdays must be within 0 (Mon) .. 6 (Sun)")
        if any(day < 1 or day > 31 for day in self.month_days):
            raise ValueError("month_days must be within 1 .. 31")
        if any(month < 1 or month > 12 for month in self.months):
            raise ValueError("months must be within 1 .. 12")


# 日本語: 組み込み種別 or Custom 設定そのもの / English: Either a payload-free kind or the custom payload itself
Frequency = Union[FrequencyKind, CustomFrequencyConfig]


def frequency_kind(frequency: Frequency) -> FrequencyKind:
    if isinstance(frequency, CustomFrequencyConfig):
        return FrequencyKind.CUSTOM
    return FrequencyKind(frequency)


def _months_between(anchor: datetime.date, day: datetime.date) -> int:
    return (day.year - anchor.year) * 12 + (day.month - anchor.month)


def _same_day_in_month(anchor: datetime.date, day: datetime.date) -> bool:
    # 日本語: 月末を超える基準日は対象月の末日へ丸める / English: Anchor days past month end clamp to the month's last day
    return anchor + relativedelta(months=_months_between(anchor, day)) == day


def _same_day_in_year(anchor: datetime.date, day: datetime.date) -> bool:
    return anchor + relativedelta(years=day.year - anchor.year) == day


def _clamped_month_day(selected: int, day: datetime.date) -> int:
    return min(selected, calendar.monthrange(day.year, day.month)[1])


def _custom_matches(config: CustomFrequencyConfig, anchor: datetime.date, day: datetime.date) -> bool:
    if config.unit is IntervalUnit.DAY:
        return (day - anchor).days % config.interval == 0

    if config.unit is IntervalUnit.WEEK:
        if config.weekdays:
            return day.weekday() in config.weekdays
        if day.weekday() != anchor.weekday():
            return False
        return ((day - anchor).days // 7) % config.interval == 0

    if config.unit is IntervalUnit.MONTH:
        if _months_between(anchor, day) % config.interval != 0:
            return False
        if config.month_days:
            return day.day in {_clamped_month_day(selected, day) for selected in config.month_days}
        return _same_day_in_month(anchor, day)

    if (day.year - anchor.year) % config.interval != 0:
        return False
    if config.months:
        if day.month not in config.months:
            return False
        return day.day == _clamped_month_day(anchor.day, day)
    return _same_day_in_year(anchor, day)


def frequency_matches(frequency: Frequency, anchor: datetime.date, day: datetime.date) -> bool:
    """Kind-specific decision for calendar days ``anchor`` and ``day`` (no end-repeat)."""
    if frequency is FrequencyKind.NEVER:
        return day == anchor
    if day < anchor:
        return False

    if isinstance(frequency, CustomFrequencyConfig):
        return _custom_matches(frequency, anchor, day)
    if frequency is FrequencyKind.DAILY:
        return True
    if frequency is FrequencyKind.WEEKLY:
        return day.weekday() == anchor.weekday()
    if frequency is FrequencyKind.BIWEEKLY:
        if day.weekday() != anchor.weekday():
            return False
        return ((day - anchor).days // 7) % 2 == 0
    if frequency is FrequencyKind.MONTHLY:
        return _same_day_in_month(anchor, day)
    if frequency is FrequencyKind.YEARLY:
        return _same_day_in_year(anchor, day)
    return False


__all__ = [
    "FrequencyKind",
    "IntervalUnit",
    "CustomFrequencyConfig",
    "Frequency",
    "frequency_kind",
    "frequency_matches",
]
