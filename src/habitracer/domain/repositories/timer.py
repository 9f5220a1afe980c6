"""Active timer repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.timer import ActiveTimer


class TimerRepository(Protocol):
    """Store for persistent habit timers."""

    def get_for_habit(self, habit_id: int) -> Optional[ActiveTimer]:
        ...

    def list_all(self) -> list[ActiveTimer]:
        ...

    def list_running(self) -> list[ActiveTimer]:
        ...

    def save(self, timer: ActiveTimer) -> ActiveTimer:
        ...

    def delete(self, habit_id: int) -> None:
        ...
