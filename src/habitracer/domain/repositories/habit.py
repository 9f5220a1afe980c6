"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitEntry, Streak


class HabitRepository(Protocol):
    """Store for habits, their entries and cached streak records."""

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, include_archived: bool = False) -> list[Habit]:
        """List habits, optionally including archived ones."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit together with its entries, streaks and timer."""
        ...

    # Habit entry operations
    def get_entry(self, habit_id: int, occurred_on: date) -> Optional[HabitEntry]:
        """Get the non-attempt entry for a day."""
        ...

    def get_entries_for_habit(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[HabitEntry]:
        """Get entries for a habit, ordered by date, optionally bounded."""
        ...

    def add_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert an entry unconditionally (used for attempts)."""
        ...

    def upsert_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert a non-attempt entry or update the one already on that day."""
        ...

    def delete_entry(self, habit_id: int, occurred_on: date) -> bool:
        """Delete the non-attempt entry for a day; return whether one existed."""
        ...

    # Streak operations
    def get_active_streak(self, habit_id: int) -> Optional[Streak]:
        """Return the habit's active streak record, if any."""
        ...

    def list_streaks(self, habit_id: int) -> list[Streak]:
        """Return every streak record for a habit."""
        ...

    def upsert_streak(self, streak: Streak) -> Streak:
        """Insert or update a streak record."""
        ...
