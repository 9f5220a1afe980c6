"""Per-habit summary statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..domain.habit import Direction
from ..models.habit import Habit, HabitEntry
from .schedule import chronological

TREND_WINDOW = 14
TREND_MIN_ENTRIES = 7
TREND_THRESHOLD_PCT = 5.0


@dataclass(frozen=True)
class HabitStats:
    habit_id: int
    total_entries: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    average_value: float = 0.0
    total_value: float = 0.0
    completion_rate: float = 0.0
    best_value: float = 0.0
    worst_value: float = 0.0
    trend: str = "stable"
    trend_percentage: float = 0.0


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def compute_trend(
    entries: Iterable[HabitEntry], direction: Direction
) -> tuple[str, float]:
    """Compare the last 14 entries with the 14 before them.

    Returns ``(trend, percentage)`` where the percentage is absolute. Both
    windows need at least seven entries and the older mean must be positive,
    otherwise the trend is reported as stable.
    """

    ordered = [e.value for e in chronological(entries)]
    recent = ordered[-TREND_WINDOW:]
    previous = ordered[-2 * TREND_WINDOW:-TREND_WINDOW]
    if len(recent) < TREND_MIN_ENTRIES or len(previous) < TREND_MIN_ENTRIES:
        return "stable", 0.0

    previous_avg = _mean(previous)
    if previous_avg <= 0:
        return "stable", 0.0

    change = (_mean(recent) - previous_avg) / previous_avg * 100
    if direction is Direction.MINIMIZE:
        change_for_better = -change
    else:
        change_for_better = change

    if change_for_better > TREND_THRESHOLD_PCT:
        trend = "improving"
    elif change_for_better < -TREND_THRESHOLD_PCT:
        trend = "declining"
    else:
        trend = "stable"
    return trend, abs(change)


def compute_stats(
    habit: Habit,
    entries: Iterable[HabitEntry],
    *,
    current_streak: int = 0,
    longest_streak: int = 0,
) -> HabitStats:
    """Summarise a habit's history; streak figures come from the cached records."""

    entries = list(entries)
    if not entries:
        return HabitStats(habit_id=habit.id)

    profile = habit.profile
    values = [e.value for e in entries]
    total = sum(values)

    if profile.direction is Direction.MAXIMIZE:
        best, worst = max(values), min(values)
    else:
        best, worst = min(values), max(values)

    completed = sum(1 for v in values if profile.is_completed(v))
    trend, trend_pct = compute_trend(entries, profile.direction)

    return HabitStats(
        habit_id=habit.id,
        total_entries=len(entries),
        current_streak=current_streak,
        longest_streak=longest_streak,
        average_value=total / len(values),
        total_value=total,
        completion_rate=completed / len(values) * 100,
        best_value=best,
        worst_value=worst,
        trend=trend,
        trend_percentage=trend_pct,
    )
