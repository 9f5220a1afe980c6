"""Service module exports."""

from . import (
    habits,
    race,
    schedule,
    stats,
    streaks,
    timers,
    trophies,
)

__all__ = [
    "habits",
    "race",
    "schedule",
    "stats",
    "streaks",
    "timers",
    "trophies",
]
