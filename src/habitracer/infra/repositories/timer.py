"""SQLModel implementation of the active timer repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete
from sqlmodel import select

from ...models.timer import ActiveTimer
from ..database import SessionFactory


class SQLModelTimerRepository:
    """Persists one stopwatch per habit."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_for_habit(self, habit_id: int) -> Optional[ActiveTimer]:
        with self.session_factory() as session:
            obj = session.exec(select(ActiveTimer).where(ActiveTimer.habit_id == habit_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[ActiveTimer]:
        with self.session_factory() as session:
            rows = list(session.exec(select(ActiveTimer)).all())
            session.expunge_all()
            return rows

    def list_running(self) -> list[ActiveTimer]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(ActiveTimer).where(ActiveTimer.is_running == True)  # noqa: E712
                ).all()
            )
            session.expunge_all()
            return rows

    def save(self, timer: ActiveTimer) -> ActiveTimer:
        """Insert or update a timer."""
        with self.session_factory() as session:
            merged = session.merge(timer)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int) -> None:
        with self.session_factory() as session:
            session.execute(delete(ActiveTimer).where(ActiveTimer.habit_id == habit_id))
            session.commit()
