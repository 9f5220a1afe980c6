"""Race leaderboards: the current attempt against the habit's own history.

Boolean habits race on streak lengths. Quantifiable habits race entry against
entry on a curated field that mixes the best results with the most recent
ones, and get a trend-based estimate of when the next position falls.

Race positions are numbered densely within the displayed field, not by their
rank in the full history. With more than ten entries, "position 3" means third
among the entries shown.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..domain.errors import HabitNotFoundError
from ..domain.habit import (
    BooleanProfile,
    Direction,
    QuantifiableProfile,
    ties_or_beats,
    value_rank_key,
)
from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry
from .schedule import by_recency, chronological, chronological_key
from .streaks import streak_lengths

logger = get_logger(__name__)

RACE_SLOTS = 10
BEST_SHARE = 0.75

FORECAST_MIN_ENTRIES = 7
FORECAST_WINDOW_DAYS = 30
FORECAST_HORIZON_DAYS = 180


@dataclass(frozen=True)
class RacePosition:
    value: float
    date: Optional[date]
    position: int
    is_personal_record: bool = False
    is_current: bool = False


@dataclass(frozen=True)
class NextTarget:
    value: float
    position: int
    estimated_date: Optional[date] = None


@dataclass(frozen=True)
class PreviousRecord:
    value: float
    date: Optional[date]


@dataclass
class RaceData:
    """Snapshot of a habit's race. Never persisted."""

    habit_id: int
    current_value: float = 0
    current_position: int = 0
    total_positions: int = 0
    positions: list[RacePosition] = field(default_factory=list)
    next_target: Optional[NextTarget] = None
    previous_record: Optional[PreviousRecord] = None


def trend_slope(values: Sequence[float]) -> float:
    """Least-squares slope of ``values`` against their index 0..n-1."""

    n = len(values)
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for x, y in enumerate(values):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def estimate_reach_date(
    entries: Iterable[HabitEntry],
    current_value: float,
    target_value: float,
    direction: Direction | str,
    *,
    today: date | None = None,
) -> Optional[date]:
    """Project the day the trend of the last 30 days reaches ``target_value``.

    Returns None when there are fewer than seven entries overall or in the
    window, when the trend is flat or heading the wrong way, or when the
    projection lies more than 180 days out.
    """

    today = today or date.today()
    direction = Direction(direction)
    entries = list(entries)
    if len(entries) < FORECAST_MIN_ENTRIES:
        return None

    window_start = today - timedelta(days=FORECAST_WINDOW_DAYS)
    recent = chronological(e for e in entries if e.occurred_on > window_start)
    if len(recent) < FORECAST_MIN_ENTRIES:
        return None

    slope = trend_slope([e.value for e in recent])
    if direction is Direction.MAXIMIZE and slope <= 0:
        return None
    if direction is Direction.MINIMIZE and slope >= 0:
        return None

    daily_improvement = abs(slope)
    if daily_improvement == 0:
        return None

    days_to_target = math.ceil(abs(target_value - current_value) / daily_improvement)
    if days_to_target > FORECAST_HORIZON_DAYS:
        return None
    return today + timedelta(days=days_to_target)


def _streak_field(
    habit: Habit, entries: Sequence[HabitEntry], current_streak: int
) -> list[RacePosition]:
    lengths = sorted(streak_lengths(habit, entries), reverse=True)[:RACE_SLOTS]
    return [
        RacePosition(
            value=length,
            date=None,
            position=index + 1,
            is_personal_record=index == 0,
            is_current=length == current_streak,
        )
        for index, length in enumerate(lengths)
    ]


def _value_field(
    direction: Direction, entries: Sequence[HabitEntry]
) -> tuple[float, list[RacePosition]]:
    if not entries:
        return 0, []

    rank = value_rank_key(direction)
    full_ranking = sorted(chronological(entries), key=lambda e: rank(e.value))
    recent_first = by_recency(entries)
    latest = recent_first[0]
    record = full_ranking[0]

    total_slots = min(len(entries), RACE_SLOTS)
    best_slots = math.ceil(total_slots * BEST_SHARE)
    recent_slots = total_slots - best_slots

    best = full_ranking[:best_slots]
    picked = {id(e) for e in best}
    recent = [e for e in recent_first if id(e) not in picked][:recent_slots]

    field_entries = sorted(best + recent, key=lambda e: (rank(e.value), chronological_key(e)))
    positions = [
        RacePosition(
            value=entry.value,
            date=entry.occurred_on,
            position=index + 1,
            is_personal_record=entry is record,
            is_current=entry is latest,
        )
        for index, entry in enumerate(field_entries)
    ]
    return latest.value, positions


def _resolve_position(
    positions: Sequence[RacePosition], current_value: float, direction: Direction
) -> int:
    if not positions:
        return 0
    for pos in positions:
        if pos.is_current:
            return pos.position
    for pos in positions:
        if ties_or_beats(direction, current_value, pos.value):
            return pos.position
    return len(positions) + 1


def build_race(
    habit: Habit,
    entries: Iterable[HabitEntry],
    *,
    current_streak: int = 0,
    today: date | None = None,
) -> RaceData:
    """Rank the habit's history and place the current value in it.

    ``current_streak`` is the cached active streak length and is only used for
    boolean habits.
    """

    today = today or date.today()
    entries = list(entries)
    profile = habit.profile
    direction = profile.direction

    if isinstance(profile, BooleanProfile):
        current_value: float = current_streak
        positions = _streak_field(habit, entries, current_streak)
    else:
        current_value, positions = _value_field(direction, entries)

    current_position = _resolve_position(positions, current_value, direction)

    next_target = None
    if current_position > 1:
        ahead = next((p for p in positions if p.position == current_position - 1), None)
        if ahead is not None:
            estimated = None
            if isinstance(profile, QuantifiableProfile):
                estimated = estimate_reach_date(
                    entries, current_value, ahead.value, direction, today=today
                )
            next_target = NextTarget(
                value=ahead.value, position=ahead.position, estimated_date=estimated
            )

    total_positions = len(positions)
    if total_positions:
        current_position = max(1, min(current_position, total_positions))
    else:
        current_position = 0

    record = next((p for p in positions if p.is_personal_record), None)
    return RaceData(
        habit_id=habit.id,
        current_value=current_value,
        current_position=current_position,
        total_positions=total_positions,
        positions=positions[:RACE_SLOTS],
        next_target=next_target,
        previous_record=PreviousRecord(value=record.value, date=record.date) if record else None,
    )


def calculate_race_data(
    repo: HabitRepository, habit_id: int, *, today: date | None = None
) -> RaceData:
    """Build the race for a stored habit.

    Raises:
        HabitNotFoundError: if the habit does not exist.
    """

    habit = repo.get_by_id(habit_id)
    if habit is None:
        raise HabitNotFoundError(habit_id)

    entries = repo.get_entries_for_habit(habit_id)
    active = repo.get_active_streak(habit_id)
    race = build_race(
        habit,
        entries,
        current_streak=active.length if active is not None else 0,
        today=today,
    )
    logger.debug(
        "Race computed",
        extra={
            "habit_id": habit_id,
            "current_position": race.current_position,
            "total_positions": race.total_positions,
        },
    )
    return race
