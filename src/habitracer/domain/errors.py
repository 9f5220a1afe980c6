"""Domain errors surfaced to callers."""

from __future__ import annotations


class HabitNotFoundError(LookupError):
    """Raised when an operation targets a habit id that does not exist."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit not found: {habit_id}")
        self.habit_id = habit_id
