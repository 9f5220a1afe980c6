"""Tests for the trophy ladder and the preset habit catalogue."""

from __future__ import annotations

import pytest

from habitracer.constants.presets import PRESET_HABITS, find_preset
from habitracer.constants.trophies import TROPHIES
from habitracer.services.trophies import next_trophy, trophy_for_streak


class TestTrophies:
    def test_ladder_is_ordered(self):
        required = [t.required_days for t in TROPHIES]
        assert required == sorted(required) == [3, 7, 14, 30]

    @pytest.mark.parametrize(
        "days, level",
        [(0, None), (2, None), (3, "bronze"), (13, "silver"), (14, "gold"), (30, "diamond"), (365, "diamond")],
    )
    def test_trophy_for_streak(self, days, level):
        trophy = trophy_for_streak(days)
        assert (trophy.level if trophy else None) == level

    def test_next_trophy(self):
        trophy, remaining = next_trophy(0)
        assert trophy.level == "bronze"
        assert remaining == 3

        trophy, remaining = next_trophy(7)
        assert trophy.level == "gold"
        assert remaining == 7

    def test_nothing_left_after_diamond(self):
        assert next_trophy(30) is None


class TestPresets:
    def test_names_are_unique(self):
        names = [p.name.lower() for p in PRESET_HABITS]
        assert len(names) == len(set(names))

    def test_find_is_case_insensitive(self):
        assert find_preset("  READING ") is find_preset("Reading")
        assert find_preset("Juggling") is None

    def test_every_preset_creates_a_valid_habit(self, habit_service):
        for preset in PRESET_HABITS:
            habit = habit_service.create_habit_from_preset(preset)
            assert habit.profile is not None

        assert len(habit_service.list_active_habits()) == len(PRESET_HABITS)
