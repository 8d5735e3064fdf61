"""Collection import/export routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from habit_planner.core.db import get_db
from habit_planner.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/export", name="api_export")
def api_export(db: Session = Depends(get_db)):
    return web_handlers.api_export(db)


@router.post("/api/import", name="api_import")
async def api_import(request: Request, db: Session = Depends(get_db)):
    # 日本語: 旧形式のデータは取り込み時に変換 / English: Legacy payloads are upgraded on the way in
    return await web_handlers.api_import(request, db)
