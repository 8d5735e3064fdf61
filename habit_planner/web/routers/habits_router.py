"""Habit CRUD and completion routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from habit_planner.core.db import get_db
from habit_planner.web import handlers as web_handlers

# 日本語: 習慣API群 / English: Habit API router
router = APIRouter()


@router.get("/api/habits", name="api_habits")
def api_habits(db: Session = Depends(get_db)):
    return web_handlers.api_habits(db)


@router.post("/api/habits", name="create_habit")
async def create_habit(request: Request, db: Session = Depends(get_db)):
    return await web_handlers.create_habit(request, db)


@router.put("/api/habits/{habit_id}", name="update_habit")
async def update_habit(request: Request, habit_id: str, db: Session = Depends(get_db)):
    # 日本語: 名前と繰り返し設定の変更 / English: Rename and/or change the recurrence rule
    return await web_handlers.update_habit(request, habit_id, db)


@router.delete("/api/habits/{habit_id}", name="delete_habit")
def delete_habit(habit_id: str, db: Session = Depends(get_db)):
    return web_handlers.delete_habit(habit_id, db)


@router.post("/api/habits/{habit_id}/toggle", name="toggle_habit")
async def toggle_habit(request: Request, habit_id: str, db: Session = Depends(get_db)):
    # 日本語: 指定日の完了状態を反転(done 指定時は固定) / English: Flip completion for a day (or set it when "done" is given)
    return await web_handlers.toggle_habit(request, habit_id, db)
