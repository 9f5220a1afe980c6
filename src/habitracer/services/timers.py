"""Stopwatch timers that turn elapsed time into attempt entries.

Timers live in the database so they keep running while the app is closed. The
elapsed time is always derived from stored timestamps, so nothing here needs
a ticking loop.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..domain.repositories.timer import TimerRepository
from ..logging_config import get_logger
from ..models.habit import HabitEntry
from ..models.timer import ActiveTimer
from .habits import HabitService

logger = get_logger(__name__)


@dataclass(frozen=True)
class ElapsedDisplay:
    display: str  # MM:SS
    centis: str  # .CC
    minutes: int
    seconds: int


def format_elapsed(ms: int) -> ElapsedDisplay:
    total_seconds = ms // 1000
    minutes, seconds = divmod(total_seconds, 60)
    centis = (ms % 1000) // 10
    return ElapsedDisplay(
        display=f"{minutes:02d}:{seconds:02d}",
        centis=f".{centis:02d}",
        minutes=minutes,
        seconds=seconds,
    )


def ms_to_minutes(ms: int) -> float:
    """Minutes rounded to one decimal, the unit timed habits record in."""
    return round(ms / 1000 / 60, 1)


class TimerService:
    """Start, pause and stop per-habit timers and save them as attempts."""

    def __init__(
        self,
        repo: TimerRepository,
        habits: HabitService,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.repo = repo
        self.habits = habits
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def list_active(self) -> list[ActiveTimer]:
        return self.repo.list_all()

    def list_running(self) -> list[ActiveTimer]:
        return self.repo.list_running()

    def get(self, habit_id: int) -> Optional[ActiveTimer]:
        return self.repo.get_for_habit(habit_id)

    def start(self, habit_id: int) -> ActiveTimer:
        """Start a timer, or resume the habit's paused one."""

        self.habits.get_habit(habit_id)
        now = self._clock()
        timer = self.repo.get_for_habit(habit_id)
        if timer is not None:
            if timer.is_running:
                return timer
            timer.started_at = now
            timer.paused_at = None
            timer.is_running = True
            return self.repo.save(timer)

        timer = self.repo.save(ActiveTimer(habit_id=habit_id, started_at=now, is_running=True))
        logger.info("Timer started", extra={"habit_id": habit_id})
        return timer

    def pause(self, habit_id: int) -> Optional[ActiveTimer]:
        timer = self.repo.get_for_habit(habit_id)
        if timer is None or not timer.is_running:
            return timer

        now = self._clock()
        timer.accumulated_ms += int(round((now - timer.started_at) * 1000))
        timer.paused_at = now
        timer.is_running = False
        return self.repo.save(timer)

    def elapsed_ms(self, timer: ActiveTimer) -> int:
        total = timer.accumulated_ms
        if timer.is_running:
            total += self._now_ms() - int(timer.started_at * 1000)
        return max(total, 0)

    def stop(self, habit_id: int) -> int:
        """Remove the habit's timer and return its total elapsed milliseconds."""

        timer = self.repo.get_for_habit(habit_id)
        if timer is None:
            return 0
        total = self.elapsed_ms(timer)
        self.repo.delete(habit_id)
        return total

    def discard(self, habit_id: int) -> None:
        """Drop a timer without recording anything."""
        self.repo.delete(habit_id)

    def stop_and_record(
        self, habit_id: int, *, auto_restart: bool = True
    ) -> tuple[HabitEntry, Optional[ActiveTimer]]:
        """Save the elapsed time as an attempt entry for today.

        Returns the new entry and, when ``auto_restart`` is set, the fresh
        timer started for the next attempt.
        """

        elapsed = self.stop(habit_id)
        entry = self.habits.check_in_with_value(
            habit_id, ms_to_minutes(elapsed), is_attempt=True
        )
        logger.info(
            "Timed attempt recorded",
            extra={"habit_id": habit_id, "elapsed_ms": elapsed, "value": entry.value},
        )
        restarted = self.start(habit_id) if auto_restart else None
        return entry, restarted
