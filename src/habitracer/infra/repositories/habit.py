"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional, cast

from sqlalchemy import delete
from sqlmodel import select

from ...models.habit import Habit, HabitEntry, Streak
from ...models.timer import ActiveTimer
from ..database import SessionFactory

HABIT_UPDATED_COLUMN = cast(Any, Habit.updated_at)
ENTRY_DATE_COLUMN = cast(Any, HabitEntry.occurred_on)
ENTRY_CREATED_COLUMN = cast(Any, HabitEntry.created_at)
ENTRY_ID_COLUMN = cast(Any, HabitEntry.id)
STREAK_ID_COLUMN = cast(Any, Streak.id)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, include_archived: bool = False) -> list[Habit]:
        """List habits, most recently updated first."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(HABIT_UPDATED_COLUMN.desc())
            if not include_archived:
                statement = statement.where(Habit.archived == False)  # noqa: E712
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit, stamping updated_at."""
        with self.session_factory() as session:
            habit.updated_at = datetime.now(timezone.utc)
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int) -> None:
        """Delete a habit and everything that hangs off it."""
        with self.session_factory() as session:
            session.execute(delete(HabitEntry).where(HabitEntry.habit_id == habit_id))
            session.execute(delete(Streak).where(Streak.habit_id == habit_id))
            session.execute(delete(ActiveTimer).where(ActiveTimer.habit_id == habit_id))
            session.execute(delete(Habit).where(Habit.id == habit_id))
            session.commit()

    # Habit entry operations
    def get_entry(self, habit_id: int, occurred_on: date) -> Optional[HabitEntry]:
        """Get the non-attempt entry for a day."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.occurred_on == occurred_on)
                .where(HabitEntry.is_attempt == False)  # noqa: E712
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_entries_for_habit(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[HabitEntry]:
        """Get entries for a habit in chronological order."""
        with self.session_factory() as session:
            statement = select(HabitEntry).where(HabitEntry.habit_id == habit_id)
            if start_date is not None:
                statement = statement.where(HabitEntry.occurred_on >= start_date)
            if end_date is not None:
                statement = statement.where(HabitEntry.occurred_on <= end_date)
            statement = statement.order_by(
                ENTRY_DATE_COLUMN, ENTRY_CREATED_COLUMN, ENTRY_ID_COLUMN
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert an entry without looking for an existing one."""
        with self.session_factory() as session:
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def upsert_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert or update the non-attempt entry for the entry's day."""
        with self.session_factory() as session:
            existing = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == entry.habit_id)
                .where(HabitEntry.occurred_on == entry.occurred_on)
                .where(HabitEntry.is_attempt == False)  # noqa: E712
            ).first()

            if existing:
                existing.value = entry.value
                existing.notes = entry.notes
                existing.updated_at = datetime.now(timezone.utc)
                target = existing
            else:
                entry.is_attempt = False
                target = entry
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target

    def delete_entry(self, habit_id: int, occurred_on: date) -> bool:
        """Delete the non-attempt entry for a day."""
        with self.session_factory() as session:
            entry = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.occurred_on == occurred_on)
                .where(HabitEntry.is_attempt == False)  # noqa: E712
            ).first()

            if entry is None:
                return False
            session.delete(entry)
            session.commit()
            return True

    # Streak operations
    def get_active_streak(self, habit_id: int) -> Optional[Streak]:
        """Return the habit's active streak record, if any."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Streak)
                .where(Streak.habit_id == habit_id)
                .where(Streak.is_active == True)  # noqa: E712
                .order_by(STREAK_ID_COLUMN.desc())
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_streaks(self, habit_id: int) -> list[Streak]:
        """Return every streak record for a habit, oldest first."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Streak).where(Streak.habit_id == habit_id).order_by(STREAK_ID_COLUMN)
                ).all()
            )
            session.expunge_all()
            return rows

    def upsert_streak(self, streak: Streak) -> Streak:
        """Insert or update a streak record."""
        with self.session_factory() as session:
            merged = session.merge(streak)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged
