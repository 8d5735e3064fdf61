"""Core package exports."""

from .config import (
    BASE_DIR,
    DATABASE_URL,
    PROXY_PREFIX,
    get_default_color_name,
    get_default_icon,
    get_log_level,
)
from .db import Session, create_session, engine, get_db

__all__ = [
    "BASE_DIR",
    "DATABASE_URL",
    "PROXY_PREFIX",
    "get_default_color_name",
    "get_default_icon",
    "get_log_level",
    "engine",
    "Session",
    "create_session",
    "get_db",
]
