import datetime
import importlib.util
import json
from pathlib import Path

import pytest

from habit_planner.models import HabitRecord
from habit_planner.services.store_service import PlannerStore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "import_legacy_json.py"


@pytest.fixture()
def cli(session, monkeypatch):
    module_spec = importlib.util.spec_from_file_location("import_legacy_json", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    monkeypatch.setattr(module.db_module, "create_session", lambda: session)
    monkeypatch.setattr(session, "close", lambda: None)
    return module


def _write(tmp_path, payload):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


LEGACY = {
    "SavedHabits": [{"name": "Stretch", "startDate": "2025-01-01"}],
    "SavedRoutines": [{"name": "Night", "icon": "moon", "startDate": "2025-01-01", "items": ["Floss"]}],
}


def test_import_into_empty_database(cli, session, tmp_path, capsys):
    assert cli.main([_write(tmp_path, LEGACY)]) == 0
    habits, routines = PlannerStore(session).load_collection()
    assert [habit.name for habit in habits] == ["Stretch"]
    assert [item.name for item in routines[0].items] == ["Floss"]
    assert "Import completed" in capsys.readouterr().out


def test_import_refuses_to_overwrite_without_flag(cli, tmp_path, capsys):
    path = _write(tmp_path, LEGACY)
    assert cli.main([path]) == 0
    assert cli.main([path]) == 1
    assert "--merge or --force" in capsys.readouterr().err
    assert cli.main([path, "--force"]) == 0


def test_import_reports_bad_files(cli, tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.json")]) == 1

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    assert cli.main([str(broken)]) == 1

    assert cli.main([_write(tmp_path, {"habits": [{"startDate": "2025-01-01"}]})]) == 1
    assert "Could not decode export" in capsys.readouterr().err


def test_non_empty_check_does_not_decode_stored_rows(cli, session, tmp_path, capsys):
    session.add(
        HabitRecord(
            id="broken",
            name="Broken",
            start_date=datetime.date(2025, 1, 1),
            frequency="Custom",
            custom_config="{not json",
        )
    )
    session.commit()
    path = _write(tmp_path, LEGACY)

    assert cli.main([path]) == 1
    assert "--merge or --force" in capsys.readouterr().err

    assert cli.main([path, "--force"]) == 0
    assert [habit.name for habit in PlannerStore(session).list_habits()] == ["Stretch"]
