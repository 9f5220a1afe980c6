"""
Starter habits offered when a new user sets up the app.
Each preset carries the fields needed to create a Habit row directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PresetHabit:
    name: str
    emoji: str
    type: str
    direction: str = "maximize"
    frequency: str = "daily"
    metric_type: Optional[str] = None
    goal_value: Optional[float] = None
    unit: Optional[str] = None


PRESET_HABITS: tuple[PresetHabit, ...] = (
    PresetHabit(name="Brush teeth", emoji="🦷", type="boolean"),
    PresetHabit(name="Gym", emoji="🏋️", type="boolean"),
    PresetHabit(
        name="Running", emoji="🏃", type="quantifiable",
        metric_type="distance", goal_value=5, unit="km",
    ),
    PresetHabit(
        name="Reading", emoji="📚", type="quantifiable",
        metric_type="duration", goal_value=30, unit="minutes",
    ),
    PresetHabit(name="Phone away", emoji="📵", type="boolean"),
    PresetHabit(
        name="Meditation", emoji="🧘", type="quantifiable",
        metric_type="duration", goal_value=10, unit="minutes",
    ),
    PresetHabit(
        name="Drink water", emoji="💧", type="quantifiable",
        metric_type="count", goal_value=8, unit="glasses",
    ),
    PresetHabit(
        name="Sleep", emoji="😴", type="quantifiable",
        metric_type="duration", goal_value=8, unit="hours",
    ),
    PresetHabit(name="Eat healthy", emoji="🥗", type="boolean"),
    PresetHabit(name="Journaling", emoji="✍️", type="boolean"),
)


def find_preset(name: str) -> Optional[PresetHabit]:
    """Case-insensitive lookup by preset name."""
    wanted = name.strip().lower()
    return next((p for p in PRESET_HABITS if p.name.lower() == wanted), None)
