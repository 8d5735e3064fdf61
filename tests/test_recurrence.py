import datetime

import pytest

from habit_planner.engine import (
    CustomFrequencyConfig,
    FrequencyKind,
    IntervalUnit,
    RecurrenceConfig,
    as_calendar_day,
    is_due,
)


def test_end_repeat_is_inclusive():
    config = RecurrenceConfig(
        anchor_date=datetime.date(2025, 1, 1),
        frequency=FrequencyKind.DAILY,
        end_repeat=datetime.date(2025, 1, 10),
    )
    assert is_due(config, datetime.date(2025, 1, 10))
    assert not is_due(config, datetime.date(2025, 1, 11))


def test_end_repeat_applies_to_every_kind():
    config = RecurrenceConfig(
        anchor_date=datetime.date(2025, 1, 5),
        frequency=FrequencyKind.NEVER,
        end_repeat=datetime.date(2025, 1, 1),
    )
    assert not is_due(config, datetime.date(2025, 1, 5))

    custom = RecurrenceConfig(
        anchor_date=datetime.date(2025, 1, 1),
        frequency=CustomFrequencyConfig(unit=IntervalUnit.WEEK, weekdays={1, 3}),
        end_repeat=datetime.date(2025, 1, 8),
    )
    assert is_due(custom, datetime.date(2025, 1, 7))
    assert not is_due(custom, datetime.date(2025, 1, 9))


def test_time_of_day_is_ignored():
    config = RecurrenceConfig(
        anchor_date=datetime.datetime(2025, 1, 1, 22, 30),
        frequency=FrequencyKind.WEEKLY,
    )
    assert config.anchor_date == datetime.date(2025, 1, 1)
    assert config.is_due(datetime.datetime(2025, 1, 8, 0, 1))
    assert config.is_due(datetime.datetime(2025, 1, 8, 23, 59))


def test_frequency_strings_are_normalized_to_kinds():
    config = RecurrenceConfig(anchor_date=datetime.date(2025, 1, 1), frequency="Every Month")
    assert config.frequency is FrequencyKind.MONTHLY
    assert config.kind is FrequencyKind.MONTHLY


def test_custom_config_reports_custom_kind():
    config = RecurrenceConfig(
        anchor_date=datetime.date(2025, 1, 1),
        frequency=CustomFrequencyConfig(unit=IntervalUnit.DAY, interval=2),
    )
    assert config.kind is FrequencyKind.CUSTOM


def test_copy_is_independent():
    config = RecurrenceConfig(anchor_date=datetime.date(2025, 1, 1))
    duplicate = config.copy()
    duplicate.end_repeat = datetime.date(2025, 2, 1)
    assert config.end_repeat is None
    assert duplicate == RecurrenceConfig(
        anchor_date=datetime.date(2025, 1, 1), end_repeat=datetime.date(2025, 2, 1)
    )


def test_as_calendar_day_rejects_strings():
    with pytest.raises(TypeError):
        as_calendar_day("2025-01-01")


EVERY_KIND = [
    FrequencyKind.NEVER,
    FrequencyKind.DAILY,
    FrequencyKind.WEEKLY,
    FrequencyKind.BIWEEKLY,
    FrequencyKind.MONTHLY,
    FrequencyKind.YEARLY,
    CustomFrequencyConfig(unit=IntervalUnit.DAY, interval=2),
    CustomFrequencyConfig(unit=IntervalUnit.WEEK, weekdays={2}),
    CustomFrequencyConfig(unit=IntervalUnit.MONTH, month_days={15}),
    CustomFrequencyConfig(unit=IntervalUnit.YEAR, months={1}),
]


@pytest.mark.parametrize("frequency", EVERY_KIND)
def test_never_due_before_anchor(frequency):
    anchor = datetime.date(2025, 1, 15)
    config = RecurrenceConfig(anchor_date=anchor, frequency=frequency)
    for offset in (1, 7, 14, 31, 365, 366):
        assert not config.is_due(anchor - datetime.timedelta(days=offset))
    assert not config.is_due(datetime.date(2024, 1, 15))


@pytest.mark.parametrize("frequency", EVERY_KIND)
def test_end_repeat_cutoff_for_every_kind(frequency):
    # 日本語: 2025-01-15 は水曜日で全種別の該当日 / English: 2025-01-15 is a Wednesday that every rule above falls on
    anchor = datetime.date(2025, 1, 15)
    config = RecurrenceConfig(anchor_date=anchor, frequency=frequency, end_repeat=anchor)
    assert config.is_due(anchor)
    assert not config.is_due(anchor + datetime.timedelta(days=1))

    unbounded = RecurrenceConfig(anchor_date=anchor, frequency=frequency)
    later_due = [day for day in range(1, 400) if unbounded.is_due(anchor + datetime.timedelta(days=day))]
    assert all(not config.is_due(anchor + datetime.timedelta(days=day)) for day in later_due)
