"""Routine aggregate: ordered items, per-item frequency overrides, and progress."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import List, Set

from habit_planner.engine.habit import new_identity
from habit_planner.engine.ledger import RoutineLedger
from habit_planner.engine.recurrence import RecurrenceConfig, is_due

DEFAULT_COLOR_NAME = "Color1"


@dataclass
class RoutineItem:
    name: str
    # 日本語: None なら親ルーチンの設定をそのまま使う / English: None inherits the routine's configuration verbatim
    recurrence: RecurrenceConfig | None = None
    id: str = field(default_factory=new_identity)

    @property
    def has_override(self) -> bool:
        return self.recurrence is not None


@dataclass
class Routine:
    name: str
    icon: str
    recurrence: RecurrenceConfig
    items: List[RoutineItem] = field(default_factory=list)
    ledger: RoutineLedger = field(default_factory=RoutineLedger)
    color_name: str = DEFAULT_COLOR_NAME
    created_date: datetime.date = field(default_factory=datetime.date.today)
    id: str = field(default_factory=new_identity)

    def should_appear(self, on: datetime.date | datetime.datetime) -> bool:
        """Whether the routine itself is shown on ``on``, independent of its items."""
        return is_due(self.recurrence, on)

    def effective_config(self, item: RoutineItem) -> RecurrenceConfig:
        if item.recurrence is not None:
            return item.recurrence
        return self.recurrence.copy()

    def visible_items(self, on: datetime.date | datetime.datetime) -> List[RoutineItem]:
        return [item for item in self.items if is_due(self.effective_config(item), on)]

    def find_item(self, item_id: str) -> RoutineItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def has_item_named(self, item_name: str) -> bool:
        return any(item.name == item_name for item in self.items)

    def completed_items(self, on: datetime.date | datetime.datetime) -> Set[str]:
        return self.ledger.completed_items(on)

    def is_item_completed(self, item_name: str, on: datetime.date | datetime.datetime) -> bool:
        return self.ledger.is_item_completed(item_name, on)

    def toggle_item(self, item_name: str, on: datetime.date | datetime.datetime) -> bool | None:
        """Flip completion for ``item_name``; unknown names are ignored and return None."""
        if not self.has_item_named(item_name):
            return None
        return self.ledger.toggle_item(item_name, on)

    def set_item_completed(self, item_name: str, on: datetime.date | datetime.datetime, done: bool) -> bool:
        if not self.has_item_named(item_name):
            return False
        self.ledger.set_item_completed(item_name, on, done)
        return True

    def progress(self, on: datetime.date | datetime.datetime) -> float:
        visible = self.visible_items(on)
        if not visible:
            return 0.0
        completed = self.completed_items(on)
        done_count = sum(1 for item in visible if item.name in completed)
        return done_count / len(visible)

    def add_item(self, item: RoutineItem, index: int | None = None) -> None:
        if index is None:
            self.items.append(item)
        else:
            self.items.insert(index, item)

    def remove_item(self, item_id: str) -> RoutineItem | None:
        # 日本語: 履歴は消さない(孤立しても無害) / English: Ledger entries stay behind as harmless orphans
        item = self.find_item(item_id)
        if item is not None:
            self.items.remove(item)
        return item

    def move_item(self, from_index: int, to_index: int) -> None:
        if not 0 <= from_index < len(self.items):
            raise IndexError(f"item index {from_index} out of range")
        item = self.items.pop(from_index)
        to_index = max(0, min(to_index, len(self.items)))
        self.items.insert(to_index, item)

    def rename_item(self, item_id: str, name: str) -> RoutineItem | None:
        item = self.find_item(item_id)
        if item is not None:
            item.name = name
        return item

    def set_recurrence(self, recurrence: RecurrenceConfig) -> None:
        self.recurrence = recurrence

    def update_metadata(
        self,
        *,
        name: str | None = None,
        icon: str | None = None,
        color_name: str | None = None,
    ) -> None:
        if name is not None:
            self.name = name
        if icon is not None:
            self.icon = icon
        if color_name is not None:
            self.color_name = color_name


__all__ = ["Routine", "RoutineItem", "DEFAULT_COLOR_NAME"]
