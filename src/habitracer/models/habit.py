"""Habit tracking tables: habits, their entries and cached streaks."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, Index, text
from sqlmodel import Field, SQLModel

from ..domain.habit import Frequency, HabitProfile, build_profile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A user-defined habit, either yes/no or measured."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    emoji: str = Field(default="", max_length=16)
    color: Optional[str] = Field(default=None, max_length=16)
    type: str = Field(default="boolean", max_length=16)
    direction: str = Field(default="maximize", max_length=16)
    metric_type: Optional[str] = Field(default=None, max_length=16)
    goal_value: Optional[float] = Field(default=None)
    unit: Optional[str] = Field(default=None, max_length=32)
    auto_track: Optional[str] = Field(default=None, max_length=16)
    frequency: str = Field(default=Frequency.DAILY.value, max_length=16)
    specific_days: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    archived: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    @property
    def profile(self) -> HabitProfile:
        """Boolean or quantifiable view of this habit."""
        return build_profile(
            self.type,
            self.direction,
            metric_type=self.metric_type,
            goal_value=self.goal_value,
            unit=self.unit,
        )


class HabitEntry(SQLModel, table=True):
    """One recorded value for a habit on a calendar day.

    Non-attempt entries are unique per (habit, day); attempt entries (timed,
    repeatable) are not.
    """

    __tablename__: ClassVar[str] = "habit_entry"
    __table_args__ = (
        Index(
            "ux_habit_entry_day",
            "habit_id",
            "occurred_on",
            unique=True,
            sqlite_where=text("is_attempt = 0"),
            postgresql_where=text("is_attempt = false"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    value: float = Field(default=1, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=255)
    is_attempt: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)


class Streak(SQLModel, table=True):
    """Cached run of completed days. At most one active row per habit."""

    __tablename__: ClassVar[str] = "streak"
    __table_args__ = (Index("ix_streak_habit_active", "habit_id", "is_active"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    start_date: date = Field(nullable=False)
    end_date: Optional[date] = Field(default=None)
    length: int = Field(default=0, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    is_personal_record: bool = Field(default=False, nullable=False)
