"""Habit and routine SQLModel tables."""

import datetime

from sqlalchemy import Column, Text
from sqlmodel import Field, Relationship, SQLModel

# 日本語: Swift の UUID 文字列 (36 文字) も格納できる幅 / English: Wide enough for 36-character Swift UUID strings from legacy exports
ID_MAX_LENGTH = 64
NAME_MAX_LENGTH = 100
ICON_MAX_LENGTH = 100
COLOR_NAME_MAX_LENGTH = 50


# 日本語: 単独で繰り返す習慣 / English: Standalone recurring habit
class HabitRecord(SQLModel, table=True):
    __tablename__ = "habit"

    id: str = Field(primary_key=True, max_length=ID_MAX_LENGTH)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    # 日本語: 一覧での並び順 / English: Order within the stored collection
    position: int = Field(default=0)
    start_date: datetime.date
    frequency: str = Field(default="Every Day", max_length=20)
    # 日本語: Custom 設定の JSON / English: JSON-encoded custom frequency configuration
    custom_config: str | None = Field(default=None, sa_column=Column(Text))
    end_repeat_date: datetime.date | None = Field(default=None)
    logs: list["HabitLog"] = Relationship(
        back_populates="habit", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


# 日本語: 日付単位の習慣完了ログ / English: Per-day completion flag for a habit
class HabitLog(SQLModel, table=True):
    __tablename__ = "habit_log"

    id: int | None = Field(default=None, primary_key=True)
    habit_id: str = Field(foreign_key="habit.id", max_length=ID_MAX_LENGTH)
    date: datetime.date
    done: bool = Field(default=False)

    habit: HabitRecord | None = Relationship(back_populates="logs")


# 日本語: 並び順付きの項目を持つルーチン / English: Routine owning an ordered list of items
class RoutineRecord(SQLModel, table=True):
    __tablename__ = "routine"

    id: str = Field(primary_key=True, max_length=ID_MAX_LENGTH)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    icon: str = Field(max_length=ICON_MAX_LENGTH)
    color_name: str = Field(default="Color1", max_length=COLOR_NAME_MAX_LENGTH)
    position: int = Field(default=0)
    start_date: datetime.date
    frequency: str = Field(default="Every Day", max_length=20)
    custom_config: str | None = Field(default=None, sa_column=Column(Text))
    end_repeat_date: datetime.date | None = Field(default=None)
    created_date: datetime.date = Field(default_factory=datetime.date.today)
    items: list["RoutineItemRecord"] = Relationship(
        back_populates="routine", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    logs: list["RoutineLog"] = Relationship(
        back_populates="routine", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


# 日本語: ルーチン内の項目。frequency が NULL なら親の設定を継承 / English: Routine item; NULL frequency inherits the routine's rule
class RoutineItemRecord(SQLModel, table=True):
    __tablename__ = "routine_item"

    id: str = Field(primary_key=True, max_length=ID_MAX_LENGTH)
    routine_id: str = Field(foreign_key="routine.id", max_length=ID_MAX_LENGTH)
    position: int = Field(default=0)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    start_date: datetime.date | None = Field(default=None)
    frequency: str | None = Field(default=None, max_length=20)
    custom_config: str | None = Field(default=None, sa_column=Column(Text))
    end_repeat_date: datetime.date | None = Field(default=None)

    routine: RoutineRecord | None = Relationship(back_populates="items")


# 日本語: 日付ごとの完了済み項目名 / English: Item name completed on a given day
class RoutineLog(SQLModel, table=True):
    __tablename__ = "routine_log"

    id: int | None = Field(default=None, primary_key=True)
    routine_id: str = Field(foreign_key="routine.id", max_length=ID_MAX_LENGTH)
    date: datetime.date
    item_name: str = Field(max_length=NAME_MAX_LENGTH)

    routine: RoutineRecord | None = Relationship(back_populates="logs")
