"""
Streak milestone ladder. Ordered from the lowest requirement up.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Trophy:
    level: str
    name: str
    required_days: int
    emoji: str


TROPHIES: tuple[Trophy, ...] = (
    Trophy(level="bronze", name="Bronze", required_days=3, emoji="🥉"),
    Trophy(level="silver", name="Silver", required_days=7, emoji="🥈"),
    Trophy(level="gold", name="Gold", required_days=14, emoji="🥇"),
    Trophy(level="diamond", name="Diamond", required_days=30, emoji="💎"),
)
