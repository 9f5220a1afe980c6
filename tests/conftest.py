"""Pytest configuration and shared fixtures for HabitRacer tests.

This module provides database fixtures and test data factories for exercising
the streak, race and service logic without touching a real app database.
"""

from __future__ import annotations

import itertools
import logging
import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlmodel import create_engine

from habitracer.infra.database import create_session_factory, init_database
from habitracer.infra.repositories import SQLModelHabitRepository, SQLModelTimerRepository
from habitracer.logging_config import ROOT_LOGGER_NAME
from habitracer.models import Habit, HabitEntry
from habitracer.services.habits import HabitService

# Wednesday
TODAY = date(2024, 1, 10)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point configuration at a scratch data directory for every test."""
    monkeypatch.setenv("HABITRACER_DATA_DIR", str(tmp_path / "data"))
    for name in ("HABITRACER_DATABASE_URL", "HABITRACER_DEV_MODE", "HABITRACER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def timer_repo(session_factory) -> SQLModelTimerRepository:
    return SQLModelTimerRepository(session_factory)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def habit_service(habit_repo, today) -> HabitService:
    """Habit service pinned to the fixed test day."""
    return HabitService(habit_repo, clock=lambda: today)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_habit():
    """Factory for unsaved Habit objects used by the pure computations.

    Returns:
        Callable: Function building a Habit with sensible defaults
    """
    ids = itertools.count(1)

    def _make_habit(
        type: str = "boolean",
        direction: str = "maximize",
        frequency: str = "daily",
        specific_days: list[str] | None = None,
        name: str = "Test Habit",
    ) -> Habit:
        return Habit(
            id=next(ids),
            name=name,
            type=type,
            direction=direction,
            frequency=frequency,
            specific_days=specific_days or [],
        )

    return _make_habit


@pytest.fixture
def make_entry():
    """Factory for unsaved HabitEntry objects.

    Each call gets a fresh id and a creation time one minute after the
    previous call, so creation order equals call order unless overridden.
    """
    ids = itertools.count(1)
    base = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)

    def _make_entry(
        occurred_on: date,
        value: float = 1,
        *,
        habit_id: int = 1,
        created_at: datetime | None = None,
        is_attempt: bool = False,
    ) -> HabitEntry:
        entry_id = next(ids)
        stamp = created_at or base + timedelta(minutes=entry_id)
        return HabitEntry(
            id=entry_id,
            habit_id=habit_id,
            occurred_on=occurred_on,
            value=value,
            is_attempt=is_attempt,
            created_at=stamp,
            updated_at=stamp,
        )

    return _make_entry


@pytest.fixture
def daily_run(make_entry):
    """Build ``length`` consecutive daily entries ending on ``end``."""

    def _daily_run(end: date, length: int, value: float = 1, habit_id: int = 1) -> list[HabitEntry]:
        return [
            make_entry(end - timedelta(days=offset), value, habit_id=habit_id)
            for offset in reversed(range(length))
        ]

    return _daily_run


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for persisted habits.

    Returns:
        Callable: Function that creates and stores Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        type: str = "boolean",
        direction: str = "maximize",
        frequency: str = "daily",
        specific_days: list[str] | None = None,
    ) -> Habit:
        habit = Habit(
            name=name,
            type=type,
            direction=direction,
            frequency=frequency,
            specific_days=specific_days or [],
        )
        return habit_repo.create(habit)

    return _create_habit


@pytest.fixture
def entry_factory(habit_repo):
    """Factory for persisted entries with increasing creation times."""
    counter = itertools.count(1)
    base = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)

    def _create_entry(
        habit: Habit, occurred_on: date, value: float = 1, *, is_attempt: bool = False
    ) -> HabitEntry:
        stamp = base + timedelta(minutes=next(counter))
        entry = HabitEntry(
            habit_id=habit.id,
            occurred_on=occurred_on,
            value=value,
            is_attempt=is_attempt,
            created_at=stamp,
            updated_at=stamp,
        )
        return habit_repo.add_entry(entry)

    return _create_entry
