import datetime

import pytest

from habit_planner.engine import CustomFrequencyConfig, FrequencyKind, IntervalUnit
from habit_planner.services.codec_service import (
    DecodeError,
    decode_collection,
    decode_habit,
    decode_recurrence,
    decode_routine,
    encode_habit,
    encode_routine,
    parse_date,
)


def _routine_payload():
    return {
        "id": "r1",
        "name": "Morning",
        "icon": "sun.max",
        "colorName": "Color3",
        "createdDate": "2025-02-20",
        "startDate": "2025-03-01",
        "frequency": "Every 2 Weeks",
        "endRepeatOption": "Never",
        "routineItems": [
            {"id": "i1", "name": "A", "recurrence": None},
            {
                "id": "i2",
                "name": "B",
                "recurrence": {
                    "startDate": "2025-01-01",
                    "frequency": "Custom",
                    "customFrequencyConfig": {"unit": "week", "interval": 1, "weekdays": [1, 3]},
                },
            },
        ],
        "completedItemsByDate": {"2025-03-15": ["A", "B"], "2025-03-16": []},
    }


def test_parse_date_accepts_common_shapes():
    assert parse_date("2025-01-08") == datetime.date(2025, 1, 8)
    assert parse_date("2025-01-08T09:30:00Z") == datetime.date(2025, 1, 8)
    assert parse_date(datetime.datetime(2025, 1, 8, 23, 0)) == datetime.date(2025, 1, 8)
    # 日本語: 2001-01-11 12:00 UTC / English: Noon UTC keeps the same calendar day in any common offset
    assert parse_date(10 * 86400 + 43200) == datetime.date(2001, 1, 11)


@pytest.mark.parametrize("value", ["", "not a date", None, True, [2025, 1, 1]])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(DecodeError):
        parse_date(value)


def test_decode_recurrence_with_end_date():
    config = decode_recurrence(
        {
            "startDate": "2025-01-01",
            "frequency": "Every Week",
            "endRepeatOption": "On Date",
            "endRepeatDate": "2025-02-01",
        }
    )
    assert config.frequency is FrequencyKind.WEEKLY
    assert config.end_repeat == datetime.date(2025, 2, 1)


def test_decode_recurrence_without_custom_config_is_bare_custom():
    config = decode_recurrence({"startDate": "2025-01-01", "frequency": "Custom"})
    assert config.frequency is FrequencyKind.CUSTOM
    assert not config.is_due(datetime.date(2025, 1, 1))


@pytest.mark.parametrize(
    "payload",
    [
        {"frequency": "Every Day"},
        {"startDate": "2025-01-01", "frequency": "Every Fortnight"},
        {"startDate": "2025-01-01", "endRepeatOption": "On Date"},
        {"startDate": "2025-01-01", "endRepeatOption": "After 3 times"},
        {
            "startDate": "2025-01-01",
            "frequency": "Custom",
            "customFrequencyConfig": {"unit": "day", "weekdays": [1]},
        },
        {
            "startDate": "2025-01-01",
            "frequency": "Custom",
            "customFrequencyConfig": {"unit": "week", "weekdays": ["Tue"]},
        },
    ],
)
def test_decode_recurrence_rejects_invalid_payloads(payload):
    with pytest.raises(DecodeError):
        decode_recurrence(payload)


def test_habit_round_trip_preserves_ledger_and_custom_config():
    habit = decode_habit(
        {
            "id": "h1",
            "name": "Run",
            "startDate": "2025-01-01",
            "frequency": "Custom",
            "customFrequencyConfig": {"unit": "month", "interval": 2, "monthDays": [31, 15]},
            "endRepeatOption": "On Date",
            "endRepeatDate": "2025-12-31",
            "completion": {"2025-01-15": True, "2025-01-31": False},
        }
    )
    assert habit.recurrence.frequency == CustomFrequencyConfig(
        unit=IntervalUnit.MONTH, interval=2, month_days={15, 31}
    )

    encoded = encode_habit(habit)
    assert encoded["customFrequencyConfig"]["monthDays"] == [15, 31]
    assert encoded["completion"] == {"2025-01-15": True, "2025-01-31": False}
    assert decode_habit(encoded) == habit


def test_habit_without_id_gets_one():
    habit = decode_habit({"name": "Read", "startDate": "2025-01-01"})
    assert habit.id
    assert habit.recurrence.frequency is FrequencyKind.DAILY


def test_routine_round_trip_keeps_overrides_and_order():
    routine = decode_routine(_routine_payload())
    assert [item.name for item in routine.items] == ["A", "B"]
    assert routine.items[0].recurrence is None
    assert routine.items[1].recurrence.kind is FrequencyKind.CUSTOM
    assert routine.created_date == datetime.date(2025, 2, 20)

    encoded = encode_routine(routine)
    assert encoded["routineItems"][0]["recurrence"] is None
    assert encoded["completedItemsByDate"] == {"2025-03-15": ["A", "B"]}
    assert decode_routine(encoded) == routine


def test_routine_defaults_color_name():
    payload = _routine_payload()
    del payload["colorName"]
    assert decode_routine(payload).color_name == "Color1"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda payload: payload.pop("icon"),
        lambda payload: payload.update(routineItems={"name": "A"}),
        lambda payload: payload.update(completedItemsByDate={"2025-03-15": "A"}),
        lambda payload: payload["routineItems"].append({"name": "C", "recurrence": "daily"}),
    ],
)
def test_decode_routine_rejects_malformed_payloads(mutate):
    payload = _routine_payload()
    mutate(payload)
    with pytest.raises(DecodeError):
        decode_routine(payload)


def test_decode_collection():
    habits, routines = decode_collection(
        {"habits": [{"name": "Read", "startDate": "2025-01-01"}], "routines": [_routine_payload()]}
    )
    assert [habit.name for habit in habits] == ["Read"]
    assert [routine.name for routine in routines] == ["Morning"]

    with pytest.raises(DecodeError):
        decode_collection({"habits": "Read"})


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "x" * 101, "startDate": "2025-01-01"},
        {"id": "x" * 65, "name": "Read", "startDate": "2025-01-01"},
    ],
)
def test_decode_habit_rejects_text_wider_than_its_column(payload):
    with pytest.raises(DecodeError):
        decode_habit(payload)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda payload: payload.update(name="x" * 101),
        lambda payload: payload.update(icon="x" * 101),
        lambda payload: payload.update(colorName="x" * 51),
        lambda payload: payload["routineItems"].append({"name": "x" * 101}),
        lambda payload: payload.update(completedItemsByDate={"2025-03-15": ["x" * 101]}),
    ],
)
def test_decode_routine_rejects_text_wider_than_its_column(mutate):
    payload = _routine_payload()
    mutate(payload)
    with pytest.raises(DecodeError):
        decode_routine(payload)


def test_names_at_the_column_width_are_accepted():
    assert decode_habit({"name": "x" * 100, "startDate": "2025-01-01"}).name == "x" * 100
