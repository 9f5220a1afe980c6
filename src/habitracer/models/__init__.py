"""SQLModel table exports."""

from .habit import Habit, HabitEntry, Streak
from .timer import ActiveTimer

__all__ = [
    "ActiveTimer",
    "Habit",
    "HabitEntry",
    "Streak",
]
