"""Day summary and month calendar built from the recurrence engine."""

from __future__ import annotations

import calendar
import datetime
from typing import Any, Dict, List, Tuple

from habit_planner.engine import Habit, Routine


def get_due_habits(habits: List[Habit], date_obj: datetime.date) -> List[Habit]:
    return [habit for habit in habits if habit.should_appear(date_obj)]


def get_visible_routines(routines: List[Routine], date_obj: datetime.date) -> List[Routine]:
    return [routine for routine in routines if routine.should_appear(date_obj)]


def _completion_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return int((completed / total) * 100)


def _count_day(habits: List[Habit], routines: List[Routine], date_obj: datetime.date) -> Tuple[int, int]:
    total_items = 0
    completed_items = 0
    for habit in habits:
        total_items += 1
        if habit.is_completed(date_obj):
            completed_items += 1
    for routine in routines:
        completed = routine.completed_items(date_obj)
        for item in routine.visible_items(date_obj):
            total_items += 1
            if item.name in completed:
                completed_items += 1
    return total_items, completed_items


def build_day_summary(habits: List[Habit], routines: List[Routine], date_obj: datetime.date) -> Dict[str, Any]:
    due_habits = get_due_habits(habits, date_obj)
    visible_routines = get_visible_routines(routines, date_obj)

    serialized_habits = [
        {
            "id": habit.id,
            "name": habit.name,
            "frequency": habit.recurrence.kind.value,
            "completed": habit.is_completed(date_obj),
        }
        for habit in due_habits
    ]

    serialized_routines = []
    for routine in visible_routines:
        completed = routine.completed_items(date_obj)
        serialized_routines.append(
            {
                "id": routine.id,
                "name": routine.name,
                "icon": routine.icon,
                "colorName": routine.color_name,
                "progress": routine.progress(date_obj),
                "items": [
                    {
                        "id": item.id,
                        "name": item.name,
                        "completed": item.name in completed,
                        "inherits": not item.has_override,
                    }
                    for item in routine.visible_items(date_obj)
                ],
            }
        )

    total_items, completed_items = _count_day(due_habits, visible_routines, date_obj)
    return {
        "date": date_obj.isoformat(),
        "weekday": date_obj.weekday(),
        "day_name": date_obj.strftime("%A"),
        "habits": serialized_habits,
        "routines": serialized_routines,
        "total_items": total_items,
        "completed_items": completed_items,
        "completion_rate": _completion_rate(completed_items, total_items),
    }


def build_month_calendar(
    habits: List[Habit], routines: List[Routine], year: int, month: int
) -> List[List[Dict[str, Any]]]:
    cal = calendar.Calendar(firstweekday=0)
    calendar_data = []
    for week in cal.monthdatescalendar(year, month):
        week_data = []
        for day in week:
            due_habits = get_due_habits(habits, day)
            visible_routines = get_visible_routines(routines, day)
            total_items, completed_items = _count_day(due_habits, visible_routines, day)
            week_data.append(
                {
                    "date": day.isoformat(),
                    "day_num": day.day,
                    "is_current_month": day.month == month,
                    "habit_count": len(due_habits),
                    "routine_count": len(visible_routines),
                    "total_items": total_items,
                    "completed_items": completed_items,
                    "completion_rate": _completion_rate(completed_items, total_items),
                }
            )
        calendar_data.append(week_data)
    return calendar_data


__all__ = [
    "get_due_habits",
    "get_visible_routines",
    "build_day_summary",
    "build_month_calendar",
]
