"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelTimerRepository
from .services.habits import HabitService
from .services.timers import TimerService


@dataclass
class AppContext:
    """Configuration, storage and services wired together once at startup."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    habit_repo: SQLModelHabitRepository
    timer_repo: SQLModelTimerRepository

    habit_service: HabitService
    timer_service: TimerService


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Callable[[], date] = date.today,
) -> AppContext:
    """Create the engine, schema, repositories and services."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    timer_repo = SQLModelTimerRepository(session_factory)
    habit_service = HabitService(habit_repo, clock=clock)
    timer_service = TimerService(timer_repo, habit_service)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        timer_repo=timer_repo,
        habit_service=habit_service,
        timer_service=timer_service,
    )
