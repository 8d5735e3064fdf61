"""Explicit store that loads and persists habit/routine aggregates through a SQLModel session."""

from __future__ import annotations

import json
import logging
from typing import Dict, List, Tuple

from sqlmodel import Session, select

from habit_planner.engine import (
    CustomFrequencyConfig,
    Habit,
    HabitLedger,
    RecurrenceConfig,
    Routine,
    RoutineItem,
    RoutineLedger,
)
from habit_planner.models import HabitLog, HabitRecord, RoutineItemRecord, RoutineLog, RoutineRecord
from habit_planner.services.codec_service import (
    DecodeError,
    decode_frequency,
    encode_custom_config,
)

logger = logging.getLogger(__name__)


def _dump_custom_config(config: RecurrenceConfig) -> str | None:
    if isinstance(config.frequency, CustomFrequencyConfig):
        return json.dumps(encode_custom_config(config.frequency), sort_keys=True)
    return None


def _load_recurrence(start_date, frequency, custom_config, end_repeat_date, *, context: str) -> RecurrenceConfig:
    if start_date is None:
        raise DecodeError(f"{context}: missing start_date")
    custom_payload = None
    if custom_config:
        try:
            custom_payload = json.loads(custom_config)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"{context}: custom_config is not valid JSON") from exc
    return RecurrenceConfig(
        anchor_date=start_date,
        frequency=decode_frequency(frequency, custom_payload),
        end_repeat=end_repeat_date,
    )


def habit_from_record(record: HabitRecord) -> Habit:
    context = f"habit {record.id}"
    return Habit(
        id=record.id,
        name=record.name,
        recurrence=_load_recurrence(
            record.start_date, record.frequency, record.custom_config, record.end_repeat_date, context=context
        ),
        ledger=HabitLedger({log.date: log.done for log in record.logs}),
    )


def routine_from_record(record: RoutineRecord) -> Routine:
    context = f"routine {record.id}"
    items = []
    for item_record in sorted(record.items, key=lambda item: item.position):
        override = None
        # 日本語: frequency が NULL の項目は親設定を継承 / English: Items with NULL frequency inherit the routine's rule
        if item_record.frequency is not None:
            override = _load_recurrence(
                item_record.start_date,
                item_record.frequency,
                item_record.custom_config,
                item_record.end_repeat_date,
                context=f"{context} item {item_record.id}",
            )
        items.append(RoutineItem(id=item_record.id, name=item_record.name, recurrence=override))

    entries: Dict = {}
    for log in record.logs:
        entries.setdefault(log.date, set()).add(log.item_name)

    return Routine(
        id=record.id,
        name=record.name,
        icon=record.icon,
        color_name=record.color_name,
        created_date=record.created_date,
        recurrence=_load_recurrence(
            record.start_date, record.frequency, record.custom_config, record.end_repeat_date, context=context
        ),
        items=items,
        ledger=RoutineLedger(entries),
    )


class PlannerStore:
    """Load/persist collaborator for one session; holds no state beyond the session."""

    def __init__(self, db: Session):
        self.db = db

    # ---- habits -------------------------------------------------------

    def list_habits(self) -> List[Habit]:
        records = self.db.exec(select(HabitRecord).order_by(HabitRecord.position)).all()
        return [habit_from_record(record) for record in records]

    def get_habit(self, habit_id: str) -> Habit | None:
        record = self.db.get(HabitRecord, habit_id)
        return habit_from_record(record) if record else None

    def _stage_habit(self, habit: Habit, position: int | None = None) -> HabitRecord:
        record = self.db.get(HabitRecord, habit.id)
        if record is None:
            record = HabitRecord(id=habit.id, name=habit.name, start_date=habit.recurrence.anchor_date)
            record.position = position if position is not None else self._next_position(HabitRecord)
            self.db.add(record)
        elif position is not None:
            record.position = position

        config = habit.recurrence
        record.name = habit.name
        record.start_date = config.anchor_date
        record.frequency = config.kind.value
        record.custom_config = _dump_custom_config(config)
        record.end_repeat_date = config.end_repeat

        existing = {log.date: log for log in record.logs}
        logs = []
        for day, done in habit.ledger.entries().items():
            log = existing.pop(day, None) or HabitLog(habit_id=habit.id, date=day)
            log.done = done
            logs.append(log)
        # 日本語: 残りは delete-orphan で削除される / English: Leftover rows are removed by delete-orphan cascade
        record.logs = logs
        return record

    def save_habit(self, habit: Habit) -> None:
        self._stage_habit(habit)
        self.db.commit()
        logger.debug("Saved habit %s (%s)", habit.id, habit.name)

    def delete_habit(self, habit_id: str) -> bool:
        record = self.db.get(HabitRecord, habit_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.commit()
        logger.debug("Deleted habit %s", habit_id)
        return True

    # ---- routines -----------------------------------------------------

    def list_routines(self) -> List[Routine]:
        records = self.db.exec(select(RoutineRecord).order_by(RoutineRecord.position)).all()
        return [routine_from_record(record) for record in records]

    def get_routine(self, routine_id: str) -> Routine | None:
        record = self.db.get(RoutineRecord, routine_id)
        return routine_from_record(record) if record else None

    def _stage_routine(self, routine: Routine, position: int | None = None) -> RoutineRecord:
        record = self.db.get(RoutineRecord, routine.id)
        if record is None:
            record = RoutineRecord(
                id=routine.id,
                name=routine.name,
                icon=routine.icon,
                start_date=routine.recurrence.anchor_date,
            )
            record.position = position if position is not None else self._next_position(RoutineRecord)
            self.db.add(record)
        elif position is not None:
            record.position = position

        config = routine.recurrence
        record.name = routine.name
        record.icon = routine.icon
        record.color_name = routine.color_name
        record.created_date = routine.created_date
        record.start_date = config.anchor_date
        record.frequency = config.kind.value
        record.custom_config = _dump_custom_config(config)
        record.end_repeat_date = config.end_repeat

        existing_items = {item.id: item for item in record.items}
        item_records = []
        for index, item in enumerate(routine.items):
            item_record = existing_items.pop(item.id, None) or RoutineItemRecord(
                id=item.id, routine_id=routine.id, name=item.name
            )
            item_record.position = index
            item_record.name = item.name
            override = item.recurrence
            item_record.start_date = override.anchor_date if override else None
            item_record.frequency = override.kind.value if override else None
            item_record.custom_config = _dump_custom_config(override) if override else None
            item_record.end_repeat_date = override.end_repeat if override else None
            item_records.append(item_record)
        record.items = item_records

        existing_logs = {(log.date, log.item_name): log for log in record.logs}
        logs = []
        for day, names in routine.ledger.entries().items():
            for name in sorted(names):
                logs.append(
                    existing_logs.pop((day, name), None)
                    or RoutineLog(routine_id=routine.id, date=day, item_name=name)
                )
        record.logs = logs
        return record

    def save_routine(self, routine: Routine) -> None:
        self._stage_routine(routine)
        self.db.commit()
        logger.debug("Saved routine %s (%s, %d items)", routine.id, routine.name, len(routine.items))

    def delete_routine(self, routine_id: str) -> bool:
        record = self.db.get(RoutineRecord, routine_id)
        if record is None:
            return False
        # 日本語: ルーチン削除時は完了履歴も一緒に破棄 / English: Deleting a routine discards its ledger too
        self.db.delete(record)
        self.db.commit()
        logger.debug("Deleted routine %s", routine_id)
        return True

    # ---- whole collection ---------------------------------------------

    def load_collection(self) -> Tuple[List[Habit], List[Routine]]:
        return self.list_habits(), self.list_routines()

    def replace_collection(self, habits: List[Habit], routines: List[Routine]) -> None:
        """Make the stored collection exactly ``habits`` + ``routines``."""
        keep_habits = {habit.id for habit in habits}
        keep_routines = {routine.id for routine in routines}
        for record in self.db.exec(select(HabitRecord)).all():
            if record.id not in keep_habits:
                self.db.delete(record)
        for record in self.db.exec(select(RoutineRecord)).all():
            if record.id not in keep_routines:
                self.db.delete(record)
        for index, habit in enumerate(habits):
            self._stage_habit(habit, position=index)
        for index, routine in enumerate(routines):
            self._stage_routine(routine, position=index)
        self.db.commit()
        logger.info("Replaced collection with %d habits and %d routines", len(habits), len(routines))

    def merge_collection(self, habits: List[Habit], routines: List[Routine]) -> None:
        """Incoming aggregates win by id; stored aggregates absent from the input are kept."""
        for habit in habits:
            self._stage_habit(habit)
            self.db.flush()
        for routine in routines:
            self._stage_routine(routine)
            self.db.flush()
        self.db.commit()
        logger.info("Merged %d habits and %d routines into the collection", len(habits), len(routines))

    def _next_position(self, model) -> int:
        positions = self.db.exec(select(model.position)).all()
        return max(positions, default=-1) + 1


__all__ = ["PlannerStore", "habit_from_record", "routine_from_record"]
