"""Trophy lookups for streak lengths."""

from __future__ import annotations

from typing import Optional

from ..constants.trophies import TROPHIES, Trophy


def trophy_for_streak(days: int) -> Optional[Trophy]:
    """Highest trophy a streak of ``days`` has earned."""

    earned = [t for t in TROPHIES if days >= t.required_days]
    return earned[-1] if earned else None


def next_trophy(days: int) -> Optional[tuple[Trophy, int]]:
    """The next trophy to earn and how many more days it needs."""

    for trophy in TROPHIES:
        if days < trophy.required_days:
            return trophy, trophy.required_days - days
    return None
