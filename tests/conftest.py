import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# 日本語: DB モジュール読み込み前にインメモリ SQLite を指定 / English: Point at in-memory SQLite before the DB module is imported
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import habit_planner.core.db as db_module  # noqa: E402
from habit_planner import models  # noqa: E402,F401
from habit_planner.application import create_app  # noqa: E402


@pytest.fixture()
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as db:
        yield db
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def client(session, monkeypatch):
    # 日本語: テストではマイグレーションを実行しない / English: Tests build the schema with create_all instead of Alembic
    monkeypatch.setattr(db_module, "_ensure_db_initialized", lambda: None)

    app = create_app()

    def _override_get_db():
        yield session

    app.dependency_overrides[db_module.get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
