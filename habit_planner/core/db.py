"""Database engine and session helpers."""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict, Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine
from sqlmodel.pool import StaticPool

from habit_planner.core.config import DATABASE_URL
from habit_planner.core.migrations import upgrade_to_head

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("postgresql", "sqlite")
IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def normalize_database_url(database_url: str) -> str:
    # 日本語: 旧 postgres:// を SQLAlchemy 推奨形式へ正規化 / English: Normalize legacy postgres:// URL to SQLAlchemy-friendly form
    normalized_url = (database_url or "").strip()
    if normalized_url.startswith("postgres://"):
        normalized_url = normalized_url.replace("postgres://", "postgresql+psycopg2://", 1)
    if not normalized_url.startswith(SUPPORTED_SCHEMES):
        raise ValueError("DATABASE_URL must be PostgreSQL (postgresql+psycopg2://...) or SQLite (sqlite:///...).")
    return normalized_url


def _engine_options(database_url: str) -> Dict[str, Any]:
    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    # 日本語: インメモリ DB は単一接続を共有しないとスキーマが消える / English: In-memory SQLite keeps its schema only on one shared connection
    if database_url in IN_MEMORY_SQLITE_URLS:
        options["poolclass"] = StaticPool
    return options


def _build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **_engine_options(database_url))


def _database_url_from_env() -> str:
    # 日本語: 実行時環境変数を優先 / English: Prefer runtime environment override
    return normalize_database_url(os.getenv("DATABASE_URL") or DATABASE_URL)


_current_database_url = _database_url_from_env()
engine = _build_engine(_current_database_url)
_db_initialized = False
_db_init_lock = threading.Lock()


def refresh_engine_from_env() -> bool:
    """Rebuild the engine when DATABASE_URL changed after import; returns whether it did."""
    global engine, _db_initialized, _current_database_url

    latest_database_url = _database_url_from_env()
    if latest_database_url == _current_database_url:
        return False

    engine = _build_engine(latest_database_url)
    _current_database_url = latest_database_url
    _db_initialized = False
    logger.info("Database engine rebuilt for %s", engine.url.render_as_string(hide_password=True))
    return True


def _ensure_db_initialized() -> None:
    global _db_initialized
    if _db_initialized:
        return
    # 日本語: マイグレーションはプロセス内で一度だけ実行 / English: Run migrations once per process with lock protection
    with _db_init_lock:
        if _db_initialized:
            return
        logger.info("Applying migrations to %s", engine.url.render_as_string(hide_password=True))
        upgrade_to_head(_current_database_url)
        _db_initialized = True


def _init_db() -> None:
    _ensure_db_initialized()


def create_session() -> Session:
    # 日本語: 明示的セッション生成（取り込み CLI 用） / English: Explicit session factory for the import CLI
    _ensure_db_initialized()
    return Session(engine)


def get_db() -> Iterator[Session]:
    # 日本語: FastAPI Depends 用のセッション供給器 / English: Dependency provider for FastAPI routes
    _ensure_db_initialized()
    with Session(engine) as db:
        yield db
