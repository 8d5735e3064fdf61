"""Day detail API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from habit_planner.core.db import get_db
from habit_planner.services.timeline_service import build_day_summary
from habit_planner.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/day/{date_str}", name="api_day_view")
def api_day_view(date_str: str, db: Session = Depends(get_db)):
    return web_handlers.api_day_view(date_str, db, build_day_summary_fn=build_day_summary)
