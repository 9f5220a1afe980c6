"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .timer import TimerRepository

__all__ = [
    "HabitRepository",
    "TimerRepository",
]
