"""Persistent stopwatch state for timed attempt habits."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class ActiveTimer(SQLModel, table=True):
    """Running or paused timer. Survives restarts; one per habit.

    Times are epoch seconds; ``accumulated_ms`` holds the time banked by
    earlier run segments before the current one started.
    """

    __tablename__: ClassVar[str] = "active_timer"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, unique=True, index=True)
    started_at: float = Field(nullable=False)
    paused_at: Optional[float] = Field(default=None)
    accumulated_ms: int = Field(default=0, nullable=False)
    is_running: bool = Field(default=True, nullable=False, index=True)
