"""Routine CRUD, item ordering and completion routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from habit_planner.core.db import get_db
from habit_planner.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/routines", name="api_routines")
def api_routines(db: Session = Depends(get_db)):
    return web_handlers.api_routines(db)


@router.post("/api/routines", name="create_routine")
async def create_routine(request: Request, db: Session = Depends(get_db)):
    return await web_handlers.create_routine(request, db)


@router.put("/api/routines/{routine_id}", name="update_routine")
async def update_routine(request: Request, routine_id: str, db: Session = Depends(get_db)):
    return await web_handlers.update_routine(request, routine_id, db)


@router.delete("/api/routines/{routine_id}", name="delete_routine")
def delete_routine(routine_id: str, db: Session = Depends(get_db)):
    return web_handlers.delete_routine(routine_id, db)


@router.post("/api/routines/{routine_id}/items", name="add_routine_item")
async def add_routine_item(request: Request, routine_id: str, db: Session = Depends(get_db)):
    return await web_handlers.add_routine_item(request, routine_id, db)


@router.post("/api/routines/{routine_id}/items/move", name="move_routine_item")
async def move_routine_item(request: Request, routine_id: str, db: Session = Depends(get_db)):
    # 日本語: 並び順は手動指定のみ / English: Order is only ever changed by explicit moves
    return await web_handlers.move_routine_item(request, routine_id, db)


@router.put("/api/routines/{routine_id}/items/{item_id}", name="update_routine_item")
async def update_routine_item(request: Request, routine_id: str, item_id: str, db: Session = Depends(get_db)):
    return await web_handlers.update_routine_item(request, routine_id, item_id, db)


@router.delete("/api/routines/{routine_id}/items/{item_id}", name="delete_routine_item")
def delete_routine_item(routine_id: str, item_id: str, db: Session = Depends(get_db)):
    return web_handlers.delete_routine_item(routine_id, item_id, db)


@router.post("/api/routines/{routine_id}/toggle", name="toggle_routine_item")
async def toggle_routine_item(request: Request, routine_id: str, db: Session = Depends(get_db)):
    return await web_handlers.toggle_routine_item(request, routine_id, db)
