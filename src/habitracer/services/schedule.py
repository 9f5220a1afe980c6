"""Calendar helpers shared by the streak and race computations.

Days are ``datetime.date`` values; their ordering is the same as the
lexicographic ordering of the ``YYYY-MM-DD`` strings they print as, so either
form can be compared and sorted interchangeably.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from ..domain.habit import WEEKDAY_TOKENS, Frequency
from ..models.habit import Habit, HabitEntry

DAY_FORMAT = "%Y-%m-%d"

# Any 7-day span contains every weekday once
_WEEK = 7


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_day(value: str | date) -> date:
    """Parse ``YYYY-MM-DD``; dates pass through unchanged."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), DAY_FORMAT).date()


def weekday_token(day: date) -> str:
    return WEEKDAY_TOKENS[day.weekday()]


def dates_between(start: date, end: date) -> list[date]:
    """Every day from ``start`` to ``end`` inclusive; empty when reversed."""

    span = (end - start).days
    return [start + timedelta(days=offset) for offset in range(span + 1)]


def should_have_entry(habit: Habit, day: date) -> bool:
    """Whether the habit's schedule expects an entry on ``day``.

    Weekly habits are not restricted to a particular weekday, so every day
    counts for them just as for daily habits.
    """

    if habit.frequency == Frequency.SPECIFIC_DAYS.value:
        return weekday_token(day) in set(habit.specific_days or ())
    return True


def missed_scheduled_day(habit: Habit, after: date, before: date) -> bool:
    """Whether a day strictly between ``after`` and ``before`` was scheduled."""

    gap = (before - after).days - 1
    for offset in range(1, min(gap, _WEEK) + 1):
        if should_have_entry(habit, after + timedelta(days=offset)):
            return True
    return False


def recency_key(entry: HabitEntry) -> tuple:
    """Sort key for "most recent first" (use with ``reverse=True``).

    Entries are ordered by ``created_at`` and then by ``id``, so two entries
    saved within the same timestamp still have a stable winner.
    """

    return (entry.created_at, entry.id or 0)


def chronological_key(entry: HabitEntry) -> tuple:
    """Sort key for calendar order, oldest first."""

    return (entry.occurred_on, entry.created_at, entry.id or 0)


def most_recent(entries: Iterable[HabitEntry]) -> HabitEntry | None:
    return max(entries, key=recency_key, default=None)


def by_recency(entries: Iterable[HabitEntry]) -> list[HabitEntry]:
    return sorted(entries, key=recency_key, reverse=True)


def chronological(entries: Iterable[HabitEntry]) -> list[HabitEntry]:
    return sorted(entries, key=chronological_key)
