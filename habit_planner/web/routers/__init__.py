"""Router exports."""

# 日本語: 各機能ルーターを集約して application.py から一括 import 可能にする / English: Re-export feature routers for centralized app wiring
from .calendar_router import router as calendar_router
from .data_router import router as data_router
from .day_router import router as day_router
from .habits_router import router as habits_router
from .routines_router import router as routines_router

__all__ = [
    "calendar_router",
    "data_router",
    "day_router",
    "habits_router",
    "routines_router",
]
