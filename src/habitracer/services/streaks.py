"""Streak calculations for habits.

The computations are pure functions of a habit, its entries and "today";
:func:`update_streaks` is the thin layer that writes the result back to the
repository as the habit's cached active streak.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry, Streak
from .schedule import chronological, missed_scheduled_day, should_have_entry

logger = get_logger(__name__)

# Days examined by the backward walk before giving up
STREAK_WALK_LIMIT = 1000

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakResult:
    """Current run length and the day it started (None when there is no run)."""

    length: int
    start_date: Optional[date]


def compute_current_streak(
    habit: Habit, entries: Iterable[HabitEntry], *, today: date | None = None
) -> StreakResult:
    """Walk backwards from ``today`` counting consecutive completed days.

    Days the schedule does not expect are stepped over without counting or
    breaking the run. Today may still be open: a missing or incomplete entry
    for today does not break yesterday's streak.
    """

    today = today or date.today()
    profile = habit.profile
    completed_days = {e.occurred_on for e in entries if profile.is_completed(e.value)}

    length = 0
    start_date: Optional[date] = None
    cursor = today
    for _ in range(STREAK_WALK_LIMIT):
        if cursor > today or not should_have_entry(habit, cursor):
            cursor -= _ONE_DAY
            continue

        if cursor in completed_days:
            length += 1
            start_date = cursor
        elif cursor != today:
            break
        cursor -= _ONE_DAY
    else:
        logger.debug(
            "Streak walk stopped at the day limit",
            extra={"habit_id": habit.id, "limit": STREAK_WALK_LIMIT},
        )

    return StreakResult(length=length, start_date=start_date)


def streak_lengths(habit: Habit, entries: Iterable[HabitEntry]) -> set[int]:
    """Every run length reached while sweeping the history oldest to newest.

    A run resets on an entry that does not complete the day, and when a day
    the schedule expected was skipped between two completions. A five day run
    therefore contributes 1, 2, 3, 4 and 5.
    """

    profile = habit.profile
    lengths: set[int] = set()
    run = 0
    last_day: Optional[date] = None

    for entry in chronological(entries):
        if not profile.is_completed(entry.value):
            run = 0
            last_day = None
            continue
        if last_day is not None:
            if entry.occurred_on == last_day:
                continue
            if missed_scheduled_day(habit, last_day, entry.occurred_on):
                run = 0
        run += 1
        last_day = entry.occurred_on
        lengths.add(run)

    return lengths


def longest_streak(habit: Habit, entries: Iterable[HabitEntry]) -> int:
    return max(streak_lengths(habit, entries), default=0)


def _last_counted_day(habit: Habit, streak: Streak) -> date:
    """The day on which a stored run reached its recorded length."""

    cursor = streak.start_date
    counted = 0
    for _ in range(STREAK_WALK_LIMIT):
        if should_have_entry(habit, cursor):
            counted += 1
            if counted >= streak.length:
                break
        cursor += _ONE_DAY
    return cursor


def _close_streak(repo: HabitRepository, habit: Habit, streak: Streak, today: date) -> Streak:
    streak.is_active = False
    streak.end_date = today
    closed = repo.upsert_streak(streak)
    logger.info(
        "Streak ended",
        extra={"habit_id": habit.id, "length": closed.length, "end_date": today},
    )
    return closed


def update_streaks(
    repo: HabitRepository,
    habit: Habit,
    entries: Sequence[HabitEntry],
    *,
    today: date | None = None,
) -> Optional[Streak]:
    """Recompute the habit's current streak and persist it.

    Returns the active streak record, the record that was just closed, or
    ``None`` when there was nothing to write. A habit without entries is left
    untouched.

    A run that starts after the active record's last counted day is a new
    run: the active record is closed and a fresh one is created.
    """

    if not entries:
        return None

    today = today or date.today()
    result = compute_current_streak(habit, entries, today=today)
    active = repo.get_active_streak(habit.id)

    if result.length > 0:
        if (
            active is not None
            and result.start_date is not None
            and result.start_date > _last_counted_day(habit, active)
        ):
            _close_streak(repo, habit, active, today)
            active = None

        active_id = active.id if active is not None else None
        previous_best = max(
            (s.length for s in repo.list_streaks(habit.id) if s.id != active_id),
            default=0,
        )
        streak = active or Streak(habit_id=habit.id, start_date=today, is_active=True)
        streak.start_date = result.start_date or today
        streak.length = result.length
        streak.is_personal_record = result.length > previous_best
        saved = repo.upsert_streak(streak)
        logger.info(
            "Active streak updated",
            extra={
                "habit_id": habit.id,
                "length": saved.length,
                "start_date": saved.start_date,
                "is_personal_record": saved.is_personal_record,
            },
        )
        return saved

    if active is not None:
        return _close_streak(repo, habit, active, today)

    return None
