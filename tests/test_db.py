import pytest

import habit_planner.core.db as db_module


def test_normalize_database_url():
    assert db_module.normalize_database_url("postgres://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"
    assert db_module.normalize_database_url(" sqlite:///planner.db ") == "sqlite:///planner.db"
    with pytest.raises(ValueError):
        db_module.normalize_database_url("mysql://h/db")


def test_refresh_engine_from_env_rebuilds_only_on_change(monkeypatch, tmp_path):
    monkeypatch.setattr(db_module, "engine", db_module.engine)
    monkeypatch.setattr(db_module, "_current_database_url", db_module._current_database_url)
    monkeypatch.setattr(db_module, "_db_initialized", True)

    assert db_module.refresh_engine_from_env() is False
    assert db_module._db_initialized is True

    url = f"sqlite:///{tmp_path / 'planner.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    assert db_module.refresh_engine_from_env() is True
    assert db_module.engine.url.database == str(tmp_path / "planner.db")
    assert db_module._db_initialized is False


def test_migrations_run_once_per_process(monkeypatch):
    calls = []
    monkeypatch.setattr(db_module, "_db_initialized", False)
    monkeypatch.setattr(db_module, "upgrade_to_head", lambda url: calls.append(url))

    db_module._ensure_db_initialized()
    db_module._ensure_db_initialized()

    assert calls == [db_module._current_database_url]
