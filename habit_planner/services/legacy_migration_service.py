"""Upgrade legacy JSON exports to the current payload shape.

Older exports differ from the current format in a few ways:

- routines stored a flat ``items`` list of names instead of ``routineItems``;
- routine items carried their own ``frequency`` fields inline, always
  evaluated against the routine's start date;
- custom configurations used ``type`` / ``selectedWeekdays`` (1=Sun ... 7=Sat)
  / ``selectedMonthDays`` / ``selectedMonths``;
- routines could be stored without ``colorName``;
- ``endRepeatDate`` was always written, even for ``Never``;
- dates were Apple reference-date numbers.

The functions here only reshape dicts; decoding is left to ``codec_service``.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Dict, Mapping

from habit_planner.core.config import get_default_color_name
from habit_planner.services.codec_service import (
    END_REPEAT_NEVER,
    DecodeError,
    format_date,
    parse_date,
)

logger = logging.getLogger(__name__)

_LEGACY_CUSTOM_UNITS = {
    "Daily": "day",
    "Weekly": "week",
    "Monthly": "month",
    "Yearly": "year",
}

_RECURRENCE_KEYS = ("frequency", "customFrequencyConfig", "endRepeatOption", "endRepeatDate")


def _legacy_weekday(value: int) -> int:
    # 日本語: 1=日 ... 7=土 を 0=月 ... 6=日 へ / English: 1=Sun ... 7=Sat to 0=Mon ... 6=Sun
    return (value + 5) % 7


def is_legacy_custom_config(payload: Any) -> bool:
    return isinstance(payload, Mapping) and "type" in payload and "unit" not in payload


def upgrade_custom_config(payload: Mapping[str, Any]) -> Dict[str, Any] | None:
    """Convert a legacy custom config; ``None`` when its selection is empty (never due)."""
    legacy_type = payload.get("type", "Daily")
    unit = _LEGACY_CUSTOM_UNITS.get(legacy_type)
    if unit is None:
        raise DecodeError(f"customFrequencyConfig: unknown legacy type {legacy_type!r}")

    upgraded: Dict[str, Any] = {"unit": unit, "interval": payload.get("interval", 1)}
    # 日本語: 単位に合わない選択は旧形式では無視されていた / English: Selections for other units were ignored by the old format
    if unit == "week":
        upgraded["weekdays"] = sorted(
            {_legacy_weekday(value) for value in payload.get("selectedWeekdays") or [] if isinstance(value, int)}
        )
    elif unit == "month":
        upgraded["monthDays"] = list(payload.get("selectedMonthDays") or [])
    elif unit == "year":
        upgraded["months"] = list(payload.get("selectedMonths") or [])

    # 日本語: 旧形式では選択が空の週/月/年指定は一度も該当しない / English: An empty legacy selection never matched any day
    if unit != "day" and not (upgraded.get("weekdays") or upgraded.get("monthDays") or upgraded.get("months")):
        return None
    return upgraded


def _upgrade_recurrence_fields(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    for key in ("startDate", "endRepeatDate", "createdDate"):
        if source.get(key) is not None:
            target[key] = format_date(parse_date(source[key], field_name=key))

    custom = source.get("customFrequencyConfig")
    if is_legacy_custom_config(custom):
        target["customFrequencyConfig"] = upgrade_custom_config(custom)

    if (source.get("endRepeatOption") or END_REPEAT_NEVER) == END_REPEAT_NEVER:
        target["endRepeatDate"] = None


def upgrade_habit_payload(payload: Mapping[str, Any], *, today: datetime.date | None = None) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError("habit: expected an object")
    today = today or datetime.date.today()
    upgraded = dict(payload)
    if upgraded.get("startDate") is None:
        upgraded["startDate"] = format_date(today)
    _upgrade_recurrence_fields(upgraded, upgraded)
    return upgraded


def _upgrade_item(item: Any, routine_start: str) -> Dict[str, Any]:
    if isinstance(item, str):
        # 日本語: 名前だけの旧項目は毎日の上書き設定を持つ / English: Name-only legacy items become explicit daily overrides
        return {"name": item, "recurrence": {"startDate": routine_start, "frequency": "Every Day"}}
    if not isinstance(item, Mapping):
        raise DecodeError("routineItem: expected an object or a name")

    upgraded = {key: value for key, value in item.items() if key not in _RECURRENCE_KEYS}
    if "recurrence" in item:
        if isinstance(item["recurrence"], Mapping):
            recurrence = dict(item["recurrence"])
            _upgrade_recurrence_fields(recurrence, item["recurrence"])
            upgraded["recurrence"] = recurrence
        return upgraded

    recurrence = {key: item[key] for key in _RECURRENCE_KEYS if key in item}
    recurrence.setdefault("frequency", "Every Day")
    recurrence["startDate"] = routine_start
    _upgrade_recurrence_fields(recurrence, recurrence)
    upgraded["recurrence"] = recurrence
    return upgraded


def upgrade_routine_payload(
    payload: Mapping[str, Any],
    *,
    today: datetime.date | None = None,
    default_color_name: str | None = None,
) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError("routine: expected an object")
    today = today or datetime.date.today()
    upgraded = {key: value for key, value in payload.items() if key != "items"}
    if upgraded.get("startDate") is None:
        upgraded["startDate"] = format_date(today)
    _upgrade_recurrence_fields(upgraded, upgraded)

    if not upgraded.get("colorName"):
        upgraded["colorName"] = default_color_name or get_default_color_name()

    raw_items = payload.get("routineItems") or []
    if not raw_items and payload.get("items"):
        raw_items = payload["items"]
        if not isinstance(raw_items, list):
            raise DecodeError("routine: legacy 'items' must be a list of names")
        logger.info("Upgrading %d flat legacy items for routine %r", len(raw_items), payload.get("name"))
    if not isinstance(raw_items, list):
        raise DecodeError("routine: 'routineItems' must be a list")
    upgraded["routineItems"] = [_upgrade_item(item, upgraded["startDate"]) for item in raw_items]
    return upgraded


def upgrade_collection_payload(payload: Mapping[str, Any], *, today: datetime.date | None = None) -> Dict[str, Any]:
    """Accept current, legacy ``SavedHabits``/``SavedRoutines`` or mixed payloads."""
    if not isinstance(payload, Mapping):
        raise DecodeError("collection: expected an object")
    raw_habits = payload.get("habits", payload.get("SavedHabits")) or []
    raw_routines = payload.get("routines", payload.get("SavedRoutines")) or []
    if not isinstance(raw_habits, list) or not isinstance(raw_routines, list):
        raise DecodeError("collection: 'habits' and 'routines' must be lists")
    return {
        "habits": [upgrade_habit_payload(habit, today=today) for habit in raw_habits],
        "routines": [upgrade_routine_payload(routine, today=today) for routine in raw_routines],
    }


__all__ = [
    "is_legacy_custom_config",
    "upgrade_custom_config",
    "upgrade_habit_payload",
    "upgrade_routine_payload",
    "upgrade_collection_payload",
]
