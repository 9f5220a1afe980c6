"""Tests for persistent stopwatch timers and timed attempts."""

from __future__ import annotations

import pytest

from habitracer.domain.errors import HabitNotFoundError
from habitracer.services.timers import TimerService, format_elapsed, ms_to_minutes


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer_service(timer_repo, habit_service, clock) -> TimerService:
    return TimerService(timer_repo, habit_service, clock=clock)


@pytest.fixture
def timed_habit(habit_factory):
    return habit_factory(name="5k", type="quantifiable", direction="minimize")


class TestFormatting:
    def test_format_elapsed(self):
        shown = format_elapsed(61_234)
        assert shown.display == "01:01"
        assert shown.centis == ".23"
        assert (shown.minutes, shown.seconds) == (1, 1)

    def test_format_zero(self):
        assert format_elapsed(0).display == "00:00"

    def test_minutes_round_to_one_decimal(self):
        assert ms_to_minutes(90_000) == 1.5
        assert ms_to_minutes(100_000) == 1.7
        assert ms_to_minutes(0) == 0


class TestTimerLifecycle:
    def test_start_creates_running_timer(self, timer_service, timed_habit, clock):
        timer = timer_service.start(timed_habit.id)

        assert timer.is_running
        assert timer.started_at == clock.now
        assert [t.id for t in timer_service.list_running()] == [timer.id]

    def test_start_unknown_habit(self, timer_service):
        with pytest.raises(HabitNotFoundError):
            timer_service.start(404)

    def test_start_twice_keeps_first_timer(self, timer_service, timed_habit, clock):
        first = timer_service.start(timed_habit.id)
        clock.advance(10)
        second = timer_service.start(timed_habit.id)

        assert second.id == first.id
        assert second.started_at == first.started_at

    def test_pause_banks_elapsed_time(self, timer_service, timed_habit, clock):
        timer_service.start(timed_habit.id)
        clock.advance(90.5)

        paused = timer_service.pause(timed_habit.id)

        assert not paused.is_running
        assert paused.accumulated_ms == 90_500
        clock.advance(100)
        assert timer_service.elapsed_ms(paused) == 90_500
        assert timer_service.list_running() == []
        assert len(timer_service.list_active()) == 1

    def test_resume_continues_from_banked_time(self, timer_service, timed_habit, clock):
        timer_service.start(timed_habit.id)
        clock.advance(90.5)
        timer_service.pause(timed_habit.id)
        clock.advance(600)

        resumed = timer_service.start(timed_habit.id)
        clock.advance(30)

        assert resumed.is_running
        assert resumed.paused_at is None
        assert timer_service.elapsed_ms(resumed) == 120_500

    def test_pause_without_timer(self, timer_service, timed_habit):
        assert timer_service.pause(timed_habit.id) is None

    def test_stop_returns_elapsed_and_removes(self, timer_service, timed_habit, clock):
        timer_service.start(timed_habit.id)
        clock.advance(42)

        assert timer_service.stop(timed_habit.id) == 42_000
        assert timer_service.get(timed_habit.id) is None
        assert timer_service.stop(timed_habit.id) == 0

    def test_discard(self, timer_service, timed_habit, habit_service):
        timer_service.start(timed_habit.id)

        timer_service.discard(timed_habit.id)

        assert timer_service.get(timed_habit.id) is None
        assert habit_service.entries(timed_habit.id) == []


class TestStopAndRecord:
    def test_records_attempt_in_minutes(self, timer_service, timed_habit, habit_service, clock, today):
        timer_service.start(timed_habit.id)
        clock.advance(150)

        entry, restarted = timer_service.stop_and_record(timed_habit.id)

        assert entry.value == 2.5
        assert entry.is_attempt
        assert entry.occurred_on == today
        assert restarted is not None
        assert restarted.is_running
        assert restarted.accumulated_ms == 0

    def test_without_restart(self, timer_service, timed_habit, clock):
        timer_service.start(timed_habit.id)
        clock.advance(60)

        _, restarted = timer_service.stop_and_record(timed_habit.id, auto_restart=False)

        assert restarted is None
        assert timer_service.get(timed_habit.id) is None

    def test_attempts_build_a_race(self, timer_service, timed_habit, habit_service, clock):
        for seconds in (1500, 1380, 1440):
            timer_service.start(timed_habit.id)
            clock.advance(seconds)
            timer_service.stop_and_record(timed_habit.id, auto_restart=False)

        race = habit_service.race(timed_habit.id)

        assert [p.value for p in race.positions] == [23.0, 24.0, 25.0]
        assert race.current_value == 24.0
        assert race.current_position == 2
        assert habit_service.get_current_streak(timed_habit.id) == 1
