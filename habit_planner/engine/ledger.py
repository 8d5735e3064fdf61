"""Per-date completion ledgers for habits and routines."""

from __future__ import annotations

import datetime
from typing import Dict, Iterable, Mapping, Set

from habit_planner.engine.recurrence import as_calendar_day


class HabitLedger:
    """Calendar day -> completed flag. A missing day means "not completed"."""

    def __init__(self, entries: Mapping[datetime.date, bool] | None = None):
        self._entries: Dict[datetime.date, bool] = {}
        for day, done in (entries or {}).items():
            self._entries[as_calendar_day(day)] = bool(done)

    def is_completed(self, on: datetime.date | datetime.datetime) -> bool:
        return self._entries.get(as_calendar_day(on), False)

    def toggle(self, on: datetime.date | datetime.datetime) -> bool:
        day = as_calendar_day(on)
        self._entries[day] = not self._entries.get(day, False)
        return self._entries[day]

    def set_completed(self, on: datetime.date | datetime.datetime, done: bool) -> None:
        self._entries[as_calendar_day(on)] = bool(done)

    def entries(self) -> Dict[datetime.date, bool]:
        return dict(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HabitLedger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"HabitLedger({len(self._entries)} days)"


class RoutineLedger:
    """Calendar day -> names of the routine items completed on that day.

    Entries are keyed by item name, so a renamed or removed item keeps its
    old entries under the old name; they are never purged.
    """

    def __init__(self, entries: Mapping[datetime.date, Iterable[str]] | None = None):
        self._entries: Dict[datetime.date, Set[str]] = {}
        for day, names in (entries or {}).items():
            self._entries[as_calendar_day(day)] = set(names)

    def completed_items(self, on: datetime.date | datetime.datetime) -> Set[str]:
        return set(self._entries.get(as_calendar_day(on), ()))

    def is_item_completed(self, item_name: str, on: datetime.date | datetime.datetime) -> bool:
        return item_name in self._entries.get(as_calendar_day(on), ())

    def toggle_item(self, item_name: str, on: datetime.date | datetime.datetime) -> bool:
        completed = self._entries.setdefault(as_calendar_day(on), set())
        if item_name in completed:
            completed.discard(item_name)
            return False
        completed.add(item_name)
        return True

    def set_item_completed(self, item_name: str, on: datetime.date | datetime.datetime, done: bool) -> None:
        completed = self._entries.setdefault(as_calendar_day(on), set())
        if done:
            completed.add(item_name)
        else:
            completed.discard(item_name)

    def entries(self) -> Dict[datetime.date, Set[str]]:
        return {day: set(names) for day, names in self._entries.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoutineLedger):
            return NotImplemented
        # 日本語: 空集合の日付は未登録と同じ扱い / English: A day with an empty set equals an absent day
        return _non_empty(self._entries) == _non_empty(other._entries)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"RoutineLedger({len(self._entries)} days)"


def _non_empty(entries: Dict[datetime.date, Set[str]]) -> Dict[datetime.date, Set[str]]:
    return {day: names for day, names in entries.items() if names}


__all__ = ["HabitLedger", "RoutineLedger"]
