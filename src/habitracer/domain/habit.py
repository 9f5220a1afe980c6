"""Habit vocabulary and the tagged boolean/quantifiable profile.

Every rule that depends on what kind of habit is being tracked (what counts as
a completed day, which values rank higher in a race) hangs off a profile
object instead of string comparisons spread over the services.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union


class HabitType(str, Enum):
    BOOLEAN = "boolean"
    QUANTIFIABLE = "quantifiable"


class Direction(str, Enum):
    MAXIMIZE = "maximize"
    MINIMIZE = "minimize"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    SPECIFIC_DAYS = "specific_days"


class MetricType(str, Enum):
    COUNT = "count"
    DURATION = "duration"
    DISTANCE = "distance"
    WEIGHT = "weight"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"


class AutoTrack(str, Enum):
    MANUAL = "manual"
    GPS = "gps"
    SCREENTIME = "screentime"
    STEPS = "steps"


# Index matches date.weekday(): Monday == 0
WEEKDAY_TOKENS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def ties_or_beats(direction: Direction, candidate: float, reference: float) -> bool:
    """Return True when ``candidate`` is at least as good as ``reference``."""

    if direction is Direction.MAXIMIZE:
        return candidate >= reference
    return candidate <= reference


def value_rank_key(direction: Direction) -> Callable[[float], float]:
    """Sort key placing the best value first for the given direction."""

    if direction is Direction.MAXIMIZE:
        return lambda value: -value
    return lambda value: value


@dataclass(frozen=True)
class BooleanProfile:
    """Yes/no habit. A day counts only when its value is exactly 1.

    Boolean habits race on streak lengths, where longer is always better.
    """

    @property
    def direction(self) -> Direction:
        return Direction.MAXIMIZE

    def is_completed(self, value: float) -> bool:
        return value == 1


@dataclass(frozen=True)
class QuantifiableProfile:
    """Measured habit. Any positive value counts as a completed day."""

    direction: Direction = Direction.MAXIMIZE
    metric_type: Optional[MetricType] = None
    goal_value: Optional[float] = None
    unit: Optional[str] = None

    def is_completed(self, value: float) -> bool:
        return value > 0


HabitProfile = Union[BooleanProfile, QuantifiableProfile]


def build_profile(
    habit_type: str,
    direction: str = Direction.MAXIMIZE.value,
    *,
    metric_type: Optional[str] = None,
    goal_value: Optional[float] = None,
    unit: Optional[str] = None,
) -> HabitProfile:
    """Build the profile for raw stored habit fields.

    Raises:
        ValueError: if ``habit_type``, ``direction`` or ``metric_type`` is not
            a known value.
    """
    kind = HabitType(habit_type)
    if kind is HabitType.BOOLEAN:
        return BooleanProfile()
    return QuantifiableProfile(
        direction=Direction(direction),
        metric_type=MetricType(metric_type) if metric_type else None,
        goal_value=goal_value,
        unit=unit,
    )
