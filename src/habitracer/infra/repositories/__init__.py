"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .timer import SQLModelTimerRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelTimerRepository",
]
