"""JSON payload codec for habits and routines."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Mapping

from dateutil import parser as date_parser

from habit_planner.engine import (
    DEFAULT_COLOR_NAME,
    CustomFrequencyConfig,
    FrequencyKind,
    Habit,
    HabitLedger,
    IntervalUnit,
    RecurrenceConfig,
    Routine,
    RoutineItem,
    RoutineLedger,
    new_identity,
)
from habit_planner.models.planner_models import (
    COLOR_NAME_MAX_LENGTH,
    ICON_MAX_LENGTH,
    ID_MAX_LENGTH,
    NAME_MAX_LENGTH,
)

END_REPEAT_NEVER = "Never"
END_REPEAT_ON_DATE = "On Date"

# 日本語: Apple 基準日 (2001-01-01 UTC) の UNIX 秒 / English: Apple reference date (2001-01-01 UTC) as a UNIX timestamp
APPLE_REFERENCE_EPOCH = 978307200


class DecodeError(ValueError):
    """Persisted or imported data could not be turned into aggregates."""


def parse_date(value: Any, *, field_name: str = "date") -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # 日本語: Swift JSONEncoder 既定の日付表現 / English: Default Swift JSONEncoder date representation
        try:
            return datetime.datetime.fromtimestamp(APPLE_REFERENCE_EPOCH + value).date()
        except (OverflowError, OSError, ValueError) as exc:
            raise DecodeError(f"{field_name}: timestamp out of range") from exc
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            try:
                return date_parser.parse(text).date()
            except (ValueError, TypeError, OverflowError) as exc:
                raise DecodeError(f"{field_name}: unparsable date {text!r}") from exc
    raise DecodeError(f"{field_name}: expected a date, got {value!r}")


def format_date(value: datetime.date) -> str:
    return value.isoformat()


def _require(payload: Mapping[str, Any], key: str, context: str) -> Any:
    if not isinstance(payload, Mapping):
        raise DecodeError(f"{context}: expected an object")
    if key not in payload or payload[key] is None:
        raise DecodeError(f"{context}: missing '{key}'")
    return payload[key]


def check_length(value: str, max_length: int, field_name: str) -> str:
    # 日本語: 列幅を超える文字列は保存前に拒否 / English: Reject text wider than its column before it reaches the database
    if len(value) > max_length:
        raise DecodeError(f"{field_name}: longer than {max_length} characters")
    return value


def _require_text(payload: Mapping[str, Any], key: str, context: str, max_length: int = NAME_MAX_LENGTH) -> str:
    value = _require(payload, key, context)
    if not isinstance(value, str):
        raise DecodeError(f"{context}: '{key}' must be a string")
    return check_length(value, max_length, f"{context}.{key}")


def _identity(payload: Mapping[str, Any], context: str) -> str:
    return check_length(str(payload.get("id") or new_identity()), ID_MAX_LENGTH, f"{context}.id")


def _int_set(values: Any, field_name: str) -> List[int]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set, frozenset)):
        raise DecodeError(f"{field_name}: expected a list of integers")
    result = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"{field_name}: expected a list of integers")
        result.append(value)
    return result


def encode_custom_config(config: CustomFrequencyConfig) -> Dict[str, Any]:
    return {
        "unit": config.unit.value,
        "interval": config.interval,
        "weekdays": sorted(config.weekdays),
        "monthDays": sorted(config.month_days),
        "months": sorted(config.months),
    }


def decode_custom_config(payload: Mapping[str, Any]) -> CustomFrequencyConfig:
    context = "customFrequencyConfig"
    unit_value = _require(payload, "unit", context)
    try:
        unit = IntervalUnit(unit_value)
    except ValueError as exc:
        raise DecodeError(f"{context}: unknown unit {unit_value!r}") from exc
    try:
        return CustomFrequencyConfig(
            unit=unit,
            interval=payload.get("interval", 1),
            weekdays=_int_set(payload.get("weekdays"), f"{context}.weekdays"),
            month_days=_int_set(payload.get("monthDays"), f"{context}.monthDays"),
            months=_int_set(payload.get("months"), f"{context}.months"),
        )
    except ValueError as exc:
        if isinstance(exc, DecodeError):
            raise
        raise DecodeError(f"{context}: {exc}") from exc


def encode_recurrence(config: RecurrenceConfig) -> Dict[str, Any]:
    custom = config.frequency if isinstance(config.frequency, CustomFrequencyConfig) else None
    return {
        "startDate": format_date(config.anchor_date),
        "frequency": config.kind.value,
        "customFrequencyConfig": encode_custom_config(custom) if custom else None,
        "endRepeatOption": END_REPEAT_ON_DATE if config.end_repeat else END_REPEAT_NEVER,
        "endRepeatDate": format_date(config.end_repeat) if config.end_repeat else None,
    }


def decode_frequency(kind_value: Any, custom_payload: Any):
    try:
        kind = FrequencyKind(kind_value if kind_value is not None else FrequencyKind.DAILY.value)
    except ValueError as exc:
        raise DecodeError(f"frequency: unknown value {kind_value!r}") from exc
    if kind is not FrequencyKind.CUSTOM:
        return kind
    # 日本語: 設定欠落の Custom は「常に対象外」として読み込む / English: Custom without configuration loads as the never-due bare kind
    if custom_payload is None:
        return FrequencyKind.CUSTOM
    return decode_custom_config(custom_payload)


def decode_recurrence(payload: Mapping[str, Any]) -> RecurrenceConfig:
    context = "recurrence"
    anchor = parse_date(_require(payload, "startDate", context), field_name="startDate")
    frequency = decode_frequency(payload.get("frequency"), payload.get("customFrequencyConfig"))

    option = payload.get("endRepeatOption") or END_REPEAT_NEVER
    if option == END_REPEAT_NEVER:
        end_repeat = None
    elif option == END_REPEAT_ON_DATE:
        end_repeat = parse_date(_require(payload, "endRepeatDate", context), field_name="endRepeatDate")
    else:
        raise DecodeError(f"endRepeatOption: unknown value {option!r}")
    return RecurrenceConfig(anchor_date=anchor, frequency=frequency, end_repeat=end_repeat)


def encode_habit(habit: Habit) -> Dict[str, Any]:
    return {
        "id": habit.id,
        "name": habit.name,
        **encode_recurrence(habit.recurrence),
        "completion": {
            format_date(day): done for day, done in sorted(habit.ledger.entries().items())
        },
    }


def decode_habit(payload: Mapping[str, Any]) -> Habit:
    name = _require_text(payload, "name", "habit")
    completion = payload.get("completion") or {}
    if not isinstance(completion, Mapping):
        raise DecodeError("habit: 'completion' must be an object")
    entries = {}
    for key, done in completion.items():
        if not isinstance(done, bool):
            raise DecodeError(f"habit.completion[{key}]: expected a boolean")
        entries[parse_date(key, field_name="completion")] = done
    return Habit(
        id=_identity(payload, "habit"),
        name=name,
        recurrence=decode_recurrence(payload),
        ledger=HabitLedger(entries),
    )


def encode_routine_item(item: RoutineItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "recurrence": encode_recurrence(item.recurrence) if item.recurrence else None,
    }


def decode_routine_item(payload: Mapping[str, Any]) -> RoutineItem:
    name = _require_text(payload, "name", "routineItem")
    override = payload.get("recurrence")
    if override is not None and not isinstance(override, Mapping):
        raise DecodeError("routineItem: 'recurrence' must be an object or null")
    return RoutineItem(
        id=_identity(payload, "routineItem"),
        name=name,
        recurrence=decode_recurrence(override) if override is not None else None,
    )


def encode_routine(routine: Routine) -> Dict[str, Any]:
    return {
        "id": routine.id,
        "name": routine.name,
        "icon": routine.icon,
        "colorName": routine.color_name,
        "createdDate": format_date(routine.created_date),
        **encode_recurrence(routine.recurrence),
        "routineItems": [encode_routine_item(item) for item in routine.items],
        "completedItemsByDate": {
            format_date(day): sorted(names)
            for day, names in sorted(routine.ledger.entries().items())
            if names
        },
    }


def decode_routine(payload: Mapping[str, Any]) -> Routine:
    name = _require_text(payload, "name", "routine")
    icon = _require_text(payload, "icon", "routine", max_length=ICON_MAX_LENGTH)

    raw_items = payload.get("routineItems") or []
    if not isinstance(raw_items, list):
        raise DecodeError("routine: 'routineItems' must be a list")

    raw_ledger = payload.get("completedItemsByDate") or {}
    if not isinstance(raw_ledger, Mapping):
        raise DecodeError("routine: 'completedItemsByDate' must be an object")
    entries = {}
    for key, names in raw_ledger.items():
        if not isinstance(names, list) or not all(isinstance(value, str) for value in names):
            raise DecodeError(f"routine.completedItemsByDate[{key}]: expected a list of names")
        for value in names:
            check_length(value, NAME_MAX_LENGTH, f"routine.completedItemsByDate[{key}]")
        entries[parse_date(key, field_name="completedItemsByDate")] = names

    created_raw = payload.get("createdDate")
    return Routine(
        id=_identity(payload, "routine"),
        name=name,
        icon=icon,
        color_name=check_length(
            str(payload.get("colorName") or DEFAULT_COLOR_NAME), COLOR_NAME_MAX_LENGTH, "routine.colorName"
        ),
        created_date=(
            parse_date(created_raw, field_name="createdDate") if created_raw is not None else datetime.date.today()
        ),
        recurrence=decode_recurrence(payload),
        items=[decode_routine_item(item) for item in raw_items],
        ledger=RoutineLedger(entries),
    )


def encode_collection(habits: List[Habit], routines: List[Routine]) -> Dict[str, Any]:
    return {
        "habits": [encode_habit(habit) for habit in habits],
        "routines": [encode_routine(routine) for routine in routines],
    }


def decode_collection(payload: Mapping[str, Any]):
    if not isinstance(payload, Mapping):
        raise DecodeError("collection: expected an object")
    raw_habits = payload.get("habits") or []
    raw_routines = payload.get("routines") or []
    if not isinstance(raw_habits, list) or not isinstance(raw_routines, list):
        raise DecodeError("collection: 'habits' and 'routines' must be lists")
    return (
        [decode_habit(item) for item in raw_habits],
        [decode_routine(item) for item in raw_routines],
    )


__all__ = [
    "DecodeError",
    "END_REPEAT_NEVER",
    "END_REPEAT_ON_DATE",
    "parse_date",
    "format_date",
    "check_length",
    "encode_custom_config",
    "decode_custom_config",
    "decode_frequency",
    "encode_recurrence",
    "decode_recurrence",
    "encode_habit",
    "decode_habit",
    "encode_routine_item",
    "decode_routine_item",
    "encode_routine",
    "decode_routine",
    "encode_collection",
    "decode_collection",
]
