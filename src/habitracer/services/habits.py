"""Habit write path: CRUD, check-ins and the streak recompute that follows.

Every mutation of a habit's entries runs together with the streak recompute
under that habit's lock, so readers never observe an entry change without the
matching active streak.
"""

from __future__ import annotations

import threading
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Optional

from ..constants.presets import PresetHabit
from ..domain.errors import HabitNotFoundError
from ..domain.habit import (
    WEEKDAY_TOKENS,
    AutoTrack,
    Direction,
    Frequency,
    HabitType,
    build_profile,
)
from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry, Streak
from .race import RaceData, calculate_race_data
from .schedule import parse_day
from .stats import HabitStats, compute_stats
from .streaks import update_streaks

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name", "emoji", "color", "type", "direction", "metric_type", "goal_value",
        "unit", "auto_track", "frequency", "specific_days", "archived",
    }
)
# Changing any of these can change which days complete a streak
_SCHEDULE_FIELDS = frozenset({"type", "frequency", "specific_days"})


def _validate_habit(habit: Habit) -> None:
    """Raise ValueError for unknown type/direction/frequency/weekday values."""

    build_profile(habit.type, habit.direction, metric_type=habit.metric_type)
    if habit.type == HabitType.BOOLEAN.value and Direction(habit.direction) is not Direction.MAXIMIZE:
        raise ValueError("Boolean habits can only be maximized.")
    Frequency(habit.frequency)
    if habit.auto_track:
        AutoTrack(habit.auto_track)
    unknown = [d for d in habit.specific_days or () if d not in WEEKDAY_TOKENS]
    if unknown:
        raise ValueError(f"Unknown weekday tokens: {', '.join(unknown)}")
    if not habit.name or not habit.name.strip():
        raise ValueError("Habit name is required.")


class HabitService:
    """Coordinates habit storage with streak, race and stats computations."""

    def __init__(self, repo: HabitRepository, *, clock: Callable[[], date] = date.today):
        self.repo = repo
        self._clock = clock
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def today(self) -> date:
        return self._clock()

    def _lock_for(self, habit_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(habit_id, threading.Lock())

    # Habits
    def get_habit(self, habit_id: int) -> Habit:
        habit = self.repo.get_by_id(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def list_active_habits(self) -> list[Habit]:
        """Non-archived habits, most recently updated first."""
        return self.repo.list_all(include_archived=False)

    def create_habit(
        self,
        *,
        name: str,
        type: str = "boolean",
        direction: str = "maximize",
        frequency: str = "daily",
        specific_days: Optional[Iterable[str]] = None,
        emoji: str = "",
        metric_type: Optional[str] = None,
        goal_value: Optional[float] = None,
        unit: Optional[str] = None,
        color: Optional[str] = None,
        auto_track: Optional[str] = None,
    ) -> Habit:
        habit = Habit(
            name=name.strip(),
            type=type,
            direction=direction,
            frequency=frequency,
            specific_days=[d.strip().lower() for d in specific_days or ()],
            emoji=emoji,
            metric_type=metric_type,
            goal_value=goal_value,
            unit=unit,
            color=color,
            auto_track=auto_track,
        )
        _validate_habit(habit)
        created = self.repo.create(habit)
        logger.info("Habit created", extra={"habit_id": created.id, "type": created.type})
        return created

    def create_habit_from_preset(self, preset: PresetHabit) -> Habit:
        return self.create_habit(
            name=preset.name,
            emoji=preset.emoji,
            type=preset.type,
            direction=preset.direction,
            frequency=preset.frequency,
            metric_type=preset.metric_type,
            goal_value=preset.goal_value,
            unit=preset.unit,
        )

    def update_habit(self, habit_id: int, **changes: Any) -> Habit:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id)
            for key, value in changes.items():
                setattr(habit, key, value)
            _validate_habit(habit)
            updated = self.repo.update(habit)
            if _SCHEDULE_FIELDS & set(changes):
                self._recompute(updated)
        return updated

    def archive_habit(self, habit_id: int) -> Habit:
        return self.update_habit(habit_id, archived=True)

    def delete_habit(self, habit_id: int) -> None:
        """Hard delete; entries, streaks and any running timer go with it."""
        with self._lock_for(habit_id):
            self.get_habit(habit_id)
            self.repo.delete(habit_id)
        with self._locks_guard:
            self._locks.pop(habit_id, None)
        logger.info("Habit deleted", extra={"habit_id": habit_id})

    # Entries
    def entries(
        self, habit_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[HabitEntry]:
        return self.repo.get_entries_for_habit(habit_id, start, end)

    def create_entry(
        self,
        habit_id: int,
        day: date | str,
        value: float,
        notes: Optional[str] = None,
        is_attempt: bool = False,
    ) -> HabitEntry:
        """Record a value for a day and refresh the habit's streak.

        Attempts always add a new entry. Otherwise the day's existing
        non-attempt entry is updated in place, or one is created.
        """

        occurred_on = parse_day(day)
        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id)
            return self._write_entry(habit, occurred_on, value, notes, is_attempt)

    def quick_check_in(self, habit_id: int) -> HabitEntry:
        """Toggle today's boolean check-in between done (1) and not done (0)."""
        today = self.today()
        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id)
            existing = self.repo.get_entry(habit_id, today)
            new_value = 0 if existing is not None and existing.value == 1 else 1
            return self._write_entry(habit, today, new_value)

    def check_in_with_value(
        self,
        habit_id: int,
        value: float,
        notes: Optional[str] = None,
        day: date | str | None = None,
        is_attempt: bool = False,
    ) -> HabitEntry:
        return self.create_entry(habit_id, day or self.today(), value, notes, is_attempt)

    def delete_entry(self, habit_id: int, day: date | str) -> bool:
        """Remove the day's non-attempt entry; returns False when there was none."""
        occurred_on = parse_day(day)
        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id)
            removed = self.repo.delete_entry(habit_id, occurred_on)
            if removed:
                self._recompute(habit)
        return removed

    def _write_entry(
        self,
        habit: Habit,
        occurred_on: date,
        value: float,
        notes: Optional[str] = None,
        is_attempt: bool = False,
    ) -> HabitEntry:
        # Caller holds the habit's lock
        now = datetime.now(timezone.utc)
        entry = HabitEntry(
            habit_id=habit.id,
            occurred_on=occurred_on,
            value=value,
            notes=notes,
            is_attempt=is_attempt,
            created_at=now,
            updated_at=now,
        )
        if is_attempt:
            saved = self.repo.add_entry(entry)
        else:
            saved = self.repo.upsert_entry(entry)
        self._recompute(habit)
        logger.info(
            "Entry recorded",
            extra={
                "habit_id": habit.id,
                "occurred_on": occurred_on,
                "value": value,
                "is_attempt": is_attempt,
            },
        )
        return saved

    # Streaks
    def _recompute(self, habit: Habit) -> Optional[Streak]:
        entries = self.repo.get_entries_for_habit(habit.id)
        return update_streaks(self.repo, habit, entries, today=self.today())

    def recompute_streaks(self, habit_id: int) -> Optional[Streak]:
        with self._lock_for(habit_id):
            return self._recompute(self.get_habit(habit_id))

    def get_current_streak(self, habit_id: int) -> int:
        active = self.repo.get_active_streak(habit_id)
        return active.length if active is not None else 0

    def get_longest_streak(self, habit_id: int) -> int:
        return max((s.length for s in self.repo.list_streaks(habit_id)), default=0)

    # Read models
    def race(self, habit_id: int) -> RaceData:
        return calculate_race_data(self.repo, habit_id, today=self.today())

    def stats(self, habit_id: int) -> HabitStats:
        habit = self.get_habit(habit_id)
        return compute_stats(
            habit,
            self.repo.get_entries_for_habit(habit_id),
            current_streak=self.get_current_streak(habit_id),
            longest_streak=self.get_longest_streak(habit_id),
        )
