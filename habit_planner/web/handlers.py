"""HTTP handler implementations used by the routers."""

from __future__ import annotations

import datetime
import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from habit_planner.core.config import get_default_icon
from habit_planner.engine import RoutineItem
from habit_planner.models.planner_models import COLOR_NAME_MAX_LENGTH, ICON_MAX_LENGTH, NAME_MAX_LENGTH
from habit_planner.services.codec_service import (
    DecodeError,
    check_length,
    decode_collection,
    decode_habit,
    decode_recurrence,
    decode_routine,
    encode_collection,
    encode_habit,
    encode_recurrence,
    encode_routine,
    encode_routine_item,
)
from habit_planner.services.legacy_migration_service import upgrade_collection_payload
from habit_planner.services.store_service import PlannerStore

logger = logging.getLogger(__name__)

RECURRENCE_KEYS = ("startDate", "frequency", "customFrequencyConfig", "endRepeatOption", "endRepeatDate")


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="request body must be a JSON object")
    return payload


def _parse_day(date_str: Any) -> datetime.date:
    if not isinstance(date_str, str):
        raise HTTPException(status_code=400, detail="Invalid date format")
    try:
        return datetime.datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


def _bad_payload(exc: DecodeError) -> HTTPException:
    logger.warning("Rejected payload: %s", exc)
    return HTTPException(status_code=400, detail=str(exc))


def _commit(db: Session, write_fn) -> None:
    try:
        write_fn()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database write failed")
        raise HTTPException(status_code=500, detail=str(exc))


def _checked_text(value: str, max_length: int, field_name: str) -> str:
    try:
        return check_length(value, max_length, field_name)
    except DecodeError as exc:
        raise _bad_payload(exc)


def _merged_recurrence(current, payload: Dict[str, Any]):
    # 日本語: 指定されたキーだけ既存設定に上書き / English: Overlay only the keys present in the payload
    overrides = {key: payload[key] for key in RECURRENCE_KEYS if key in payload}
    if not overrides:
        return None
    return decode_recurrence({**encode_recurrence(current), **overrides})


# ---- habits -----------------------------------------------------------------


def api_habits(db: Session, *, store_cls=PlannerStore):
    return {"habits": [encode_habit(habit) for habit in store_cls(db).list_habits()]}


async def create_habit(request: Request, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    payload.setdefault("startDate", datetime.date.today().isoformat())
    try:
        habit = decode_habit({**payload, "id": None, "completion": {}})
    except DecodeError as exc:
        raise _bad_payload(exc)
    store = store_cls(db)
    _commit(db, lambda: store.save_habit(habit))
    return {"status": "ok", "habit": encode_habit(habit)}


async def update_habit(request: Request, habit_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    store = store_cls(db)
    habit = store.get_habit(habit_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")

    try:
        recurrence = _merged_recurrence(habit.recurrence, payload)
    except DecodeError as exc:
        raise _bad_payload(exc)
    if isinstance(payload.get("name"), str) and payload["name"].strip():
        habit.rename(_checked_text(payload["name"].strip(), NAME_MAX_LENGTH, "habit.name"))
    if recurrence is not None:
        habit.set_recurrence(recurrence)

    _commit(db, lambda: store.save_habit(habit))
    return {"status": "ok", "habit": encode_habit(habit)}


def delete_habit(habit_id: str, db: Session, *, store_cls=PlannerStore):
    store = store_cls(db)
    if not store.get_habit(habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    _commit(db, lambda: store.delete_habit(habit_id))
    return {"status": "deleted"}


async def toggle_habit(request: Request, habit_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    date_obj = _parse_day(payload.get("date"))
    store = store_cls(db)
    habit = store.get_habit(habit_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")

    if isinstance(payload.get("done"), bool):
        habit.set_completed(date_obj, payload["done"])
    else:
        habit.toggle(date_obj)
    _commit(db, lambda: store.save_habit(habit))
    return {"id": habit.id, "date": date_obj.isoformat(), "completed": habit.is_completed(date_obj)}


# ---- routines ---------------------------------------------------------------


def _get_routine_or_404(store: PlannerStore, routine_id: str):
    routine = store.get_routine(routine_id)
    if not routine:
        raise HTTPException(status_code=404, detail="Routine not found")
    return routine


def api_routines(db: Session, *, store_cls=PlannerStore):
    return {"routines": [encode_routine(routine) for routine in store_cls(db).list_routines()]}


async def create_routine(request: Request, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    payload = {**payload, "id": None, "completedItemsByDate": {}, "createdDate": None}
    payload.setdefault("icon", get_default_icon())
    payload.setdefault("startDate", datetime.date.today().isoformat())
    try:
        routine = decode_routine(payload)
    except DecodeError as exc:
        raise _bad_payload(exc)
    store = store_cls(db)
    _commit(db, lambda: store.save_routine(routine))
    return {"status": "ok", "routine": encode_routine(routine)}


async def update_routine(request: Request, routine_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)

    try:
        recurrence = _merged_recurrence(routine.recurrence, payload)
    except DecodeError as exc:
        raise _bad_payload(exc)

    name = payload.get("name")
    icon = payload.get("icon")
    color_name = payload.get("colorName")
    if isinstance(name, str) and name.strip():
        name = _checked_text(name.strip(), NAME_MAX_LENGTH, "routine.name")
    else:
        name = None
    routine.update_metadata(
        name=name,
        icon=_checked_text(icon, ICON_MAX_LENGTH, "routine.icon") if isinstance(icon, str) else None,
        color_name=(
            _checked_text(color_name, COLOR_NAME_MAX_LENGTH, "routine.colorName")
            if isinstance(color_name, str)
            else None
        ),
    )
    if recurrence is not None:
        # 日本語: 上書き設定を持つ項目には影響しない / English: Items with their own override are unaffected
        routine.set_recurrence(recurrence)

    _commit(db, lambda: store.save_routine(routine))
    return {"status": "ok", "routine": encode_routine(routine)}


def delete_routine(routine_id: str, db: Session, *, store_cls=PlannerStore):
    store = store_cls(db)
    _get_routine_or_404(store, routine_id)
    _commit(db, lambda: store.delete_routine(routine_id))
    return {"status": "deleted"}


def _decode_override(payload: Dict[str, Any]):
    override = payload.get("recurrence")
    if override is None:
        return None
    if not isinstance(override, dict):
        raise DecodeError("recurrence must be an object or null")
    return decode_recurrence(override)


async def add_routine_item(request: Request, routine_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise HTTPException(status_code=400, detail="name is required")
    name = _checked_text(name.strip(), NAME_MAX_LENGTH, "routineItem.name")
    index = payload.get("index")
    if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
        raise HTTPException(status_code=400, detail="index must be an integer")

    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)
    try:
        item = RoutineItem(name=name, recurrence=_decode_override(payload))
    except DecodeError as exc:
        raise _bad_payload(exc)
    routine.add_item(item, index)

    _commit(db, lambda: store.save_routine(routine))
    return {"status": "ok", "item": encode_routine_item(item)}


async def update_routine_item(
    request: Request, routine_id: str, item_id: str, db: Session, *, store_cls=PlannerStore
):
    payload = await _read_json(request)
    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)
    item = routine.find_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Routine item not found")

    if "recurrence" in payload:
        try:
            item.recurrence = _decode_override(payload)
        except DecodeError as exc:
            raise _bad_payload(exc)
    name = payload.get("name")
    if isinstance(name, str) and name.strip():
        # 日本語: 名前で記録しているため改名すると過去の完了記録は切り離される / English: Ledger is name-keyed, so renaming detaches past completions
        routine.rename_item(item_id, _checked_text(name.strip(), NAME_MAX_LENGTH, "routineItem.name"))

    _commit(db, lambda: store.save_routine(routine))
    return {"status": "ok", "item": encode_routine_item(item)}


def delete_routine_item(routine_id: str, item_id: str, db: Session, *, store_cls=PlannerStore):
    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)
    if routine.remove_item(item_id) is None:
        raise HTTPException(status_code=404, detail="Routine item not found")
    _commit(db, lambda: store.save_routine(routine))
    return {"status": "deleted"}


async def move_routine_item(request: Request, routine_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    from_index = payload.get("from")
    to_index = payload.get("to")
    if any(isinstance(value, bool) or not isinstance(value, int) for value in (from_index, to_index)):
        raise HTTPException(status_code=400, detail="from and to must be integers")

    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)
    try:
        routine.move_item(from_index, to_index)
    except IndexError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    _commit(db, lambda: store.save_routine(routine))
    return {"status": "ok", "routineItems": [encode_routine_item(item) for item in routine.items]}


async def toggle_routine_item(request: Request, routine_id: str, db: Session, *, store_cls=PlannerStore):
    payload = await _read_json(request)
    date_obj = _parse_day(payload.get("date"))
    item_name = payload.get("item_name")
    if not isinstance(item_name, str):
        raise HTTPException(status_code=400, detail="item_name is required")

    store = store_cls(db)
    routine = _get_routine_or_404(store, routine_id)
    if not routine.has_item_named(item_name):
        # 日本語: 存在しない項目名は無視(エラーにしない) / English: Unknown item names are a no-op, not an error
        return {"status": "ignored", "item_name": item_name, "date": date_obj.isoformat()}

    if isinstance(payload.get("done"), bool):
        routine.set_item_completed(item_name, date_obj, payload["done"])
    else:
        routine.toggle_item(item_name, date_obj)
    _commit(db, lambda: store.save_routine(routine))
    return {
        "status": "ok",
        "item_name": item_name,
        "date": date_obj.isoformat(),
        "completed": routine.is_item_completed(item_name, date_obj),
        "progress": routine.progress(date_obj),
    }


# ---- day / calendar ---------------------------------------------------------


def api_day_view(date_str: str, db: Session, *, build_day_summary_fn, store_cls=PlannerStore):
    date_obj = _parse_day(date_str)
    habits, routines = store_cls(db).load_collection()
    return build_day_summary_fn(habits, routines, date_obj)


def api_calendar(request: Request, db: Session, *, build_month_calendar_fn, store_cls=PlannerStore):
    today = datetime.date.today()
    try:
        year = int(request.query_params.get("year", today.year))
        month = int(request.query_params.get("month", today.month))
    except ValueError:
        raise HTTPException(status_code=400, detail="year and month must be integers")

    if month > 12:
        month = 1
        year += 1
    elif month < 1:
        month = 12
        year -= 1

    habits, routines = store_cls(db).load_collection()
    return {
        "calendar_data": build_month_calendar_fn(habits, routines, year, month),
        "year": year,
        "month": month,
        "today": today.isoformat(),
    }


# ---- import / export --------------------------------------------------------


def api_export(db: Session, *, store_cls=PlannerStore):
    habits, routines = store_cls(db).load_collection()
    return encode_collection(habits, routines)


async def api_import(request: Request, db: Session, *, store_cls=PlannerStore):
    mode = request.query_params.get("mode", "replace")
    if mode not in {"replace", "merge"}:
        raise HTTPException(status_code=400, detail="mode must be 'replace' or 'merge'")
    payload = await _read_json(request)
    try:
        habits, routines = decode_collection(upgrade_collection_payload(payload))
    except DecodeError as exc:
        raise _bad_payload(exc)

    store = store_cls(db)
    if mode == "merge":
        _commit(db, lambda: store.merge_collection(habits, routines))
    else:
        _commit(db, lambda: store.replace_collection(habits, routines))
    logger.info("Imported %d habits and %d routines (mode=%s)", len(habits), len(routines), mode)
    return {"status": "ok", "mode": mode, "habits": len(habits), "routines": len(routines)}
