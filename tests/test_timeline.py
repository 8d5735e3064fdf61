import datetime

from habit_planner.engine import FrequencyKind, Habit, RecurrenceConfig, Routine, RoutineItem
from habit_planner.services.timeline_service import build_day_summary, build_month_calendar

ANCHOR = datetime.date(2025, 3, 1)


def _fixtures():
    habit = Habit(
        id="h1",
        name="Read",
        recurrence=RecurrenceConfig(anchor_date=ANCHOR, frequency=FrequencyKind.WEEKLY),
    )
    routine = Routine(
        id="r1",
        name="Morning",
        icon="sun.max",
        recurrence=RecurrenceConfig(anchor_date=ANCHOR, frequency=FrequencyKind.BIWEEKLY),
        items=[
            RoutineItem(id="a", name="A"),
            RoutineItem(id="b", name="B", recurrence=RecurrenceConfig(anchor_date=ANCHOR)),
        ],
    )
    return habit, routine


def test_day_summary_on_due_day():
    habit, routine = _fixtures()
    day = datetime.date(2025, 3, 15)
    habit.toggle(day)
    routine.toggle_item("A", day)

    summary = build_day_summary([habit], [routine], day)
    assert summary["date"] == "2025-03-15"
    assert summary["day_name"] == "Saturday"
    assert [item["id"] for item in summary["habits"]] == ["h1"]
    assert summary["habits"][0]["completed"] is True

    routine_view = summary["routines"][0]
    assert routine_view["progress"] == 0.5
    assert [(item["name"], item["completed"], item["inherits"]) for item in routine_view["items"]] == [
        ("A", True, True),
        ("B", False, False),
    ]
    assert (summary["total_items"], summary["completed_items"], summary["completion_rate"]) == (3, 2, 66)


def test_day_summary_skips_routines_that_are_not_due():
    habit, routine = _fixtures()
    summary = build_day_summary([habit], [routine], datetime.date(2025, 3, 8))
    assert summary["routines"] == []
    assert summary["total_items"] == 1
    assert summary["completion_rate"] == 0


def test_month_calendar_counts():
    habit, routine = _fixtures()
    weeks = build_month_calendar([habit], [routine], 2025, 3)
    days = {cell["date"]: cell for week in weeks for cell in week}

    assert all(len(week) == 7 for week in weeks)
    assert days["2025-02-24"]["is_current_month"] is False
    assert days["2025-02-28"]["habit_count"] == 0
    assert days["2025-03-15"]["habit_count"] == 1
    assert days["2025-03-15"]["routine_count"] == 1
    assert days["2025-03-15"]["total_items"] == 3
    assert days["2025-03-10"]["total_items"] == 0
