"""Standalone habit aggregate."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field

from habit_planner.engine.ledger import HabitLedger
from habit_planner.engine.recurrence import RecurrenceConfig, is_due


def new_identity() -> str:
    return uuid.uuid4().hex


@dataclass
class Habit:
    name: str
    recurrence: RecurrenceConfig
    ledger: HabitLedger = field(default_factory=HabitLedger)
    id: str = field(default_factory=new_identity)

    def should_appear(self, on: datetime.date | datetime.datetime) -> bool:
        return is_due(self.recurrence, on)

    def is_completed(self, on: datetime.date | datetime.datetime) -> bool:
        return self.ledger.is_completed(on)

    def toggle(self, on: datetime.date | datetime.datetime) -> bool:
        return self.ledger.toggle(on)

    def set_completed(self, on: datetime.date | datetime.datetime, done: bool) -> None:
        self.ledger.set_completed(on, done)

    def rename(self, name: str) -> None:
        self.name = name

    def set_recurrence(self, recurrence: RecurrenceConfig) -> None:
        # 日本語: 過去の完了記録は再計算しない / English: Ledger history is left untouched
        self.recurrence = recurrence


__all__ = ["Habit", "new_identity"]
