"""Smoke tests for the command line interface."""

from __future__ import annotations

import json
from datetime import date

import pytest
from click.testing import CliRunner

from habitracer.cli import cli

QUIET = {"HABITRACER_DEV_MODE": "false"}


@pytest.fixture
def run():
    runner = CliRunner()

    def _run(*args: str, **kwargs):
        return runner.invoke(cli, list(args), env=QUIET, **kwargs)

    return _run


def test_init_db(run, tmp_path):
    result = run("init-db")

    assert result.exit_code == 0, result.output
    assert "habitracer.db" in result.output
    assert (tmp_path / "data" / "habitracer.db").exists()


def test_add_and_list(run):
    assert run("add", "Gym", "--emoji", "G").exit_code == 0
    assert run("add", "Run", "--type", "quantifiable", "--metric", "distance", "--unit", "km").exit_code == 0

    result = run("habits")

    assert result.exit_code == 0, result.output
    assert "Gym [boolean] streak=0" in result.output
    assert "Run [quantifiable] streak=0" in result.output


def test_add_specific_days(run):
    result = run("add", "Lift", "--frequency", "specific_days", "--day", "mon", "--day", "thu")
    assert result.exit_code == 0, result.output


def test_empty_list(run):
    result = run("habits")
    assert "No habits yet." in result.output


def test_quick_check_in_toggles_today(run):
    run("add", "Gym")
    today = date.today().isoformat()

    result = run("check-in", "1")
    assert result.exit_code == 0, result.output
    assert f"Recorded 1 on {today}; streak=1" in result.output

    result = run("check-in", "1")
    assert f"Recorded 0 on {today}; streak=0" in result.output


def test_race_text_and_json(run):
    run("add", "Run", "--type", "quantifiable")
    for day, value in (("2024-01-01", "10"), ("2024-01-02", "15"), ("2024-01-03", "12")):
        result = run("check-in", "1", "--value", value, "--date", day)
        assert result.exit_code == 0, result.output

    result = run("race", "1")
    assert result.exit_code == 0, result.output
    assert "Position 2 of 3" in result.output
    assert "Next target: 15 for #1" in result.output

    payload = json.loads(run("race", "1", "--json").output)
    assert payload["current_position"] == 2
    assert payload["positions"][0]["value"] == 15
    assert payload["positions"][0]["date"] == "2024-01-02"
    assert payload["previous_record"] == {"value": 15.0, "date": "2024-01-02"}


def test_streak_shows_trophy_progress(run):
    run("add", "Gym")
    run("check-in", "1")

    result = run("streak", "1")

    assert result.exit_code == 0, result.output
    assert "Current streak: 1" in result.output
    assert "Next: " in result.output
    assert "in 2 day(s)" in result.output


def test_stats(run):
    run("add", "Gym")
    run("check-in", "1")

    result = run("stats", "1")

    assert result.exit_code == 0, result.output
    assert "total_entries: 1" in result.output
    assert "completion_rate: 100.00" in result.output


def test_unknown_habit_is_a_clean_error(run):
    result = run("race", "99")

    assert result.exit_code == 1
    assert "Habit not found: 99" in result.output


def test_invalid_date(run):
    run("add", "Gym")
    result = run("check-in", "1", "--date", "yesterday")

    assert result.exit_code == 2
    assert "expected YYYY-MM-DD" in result.output


def test_seed_presets(run):
    result = run("seed-presets", "--name", "gym", "--name", "Reading")

    assert result.exit_code == 0, result.output
    assert "Gym" in result.output
    assert "Reading" in result.output
    assert run("seed-presets", "--name", "Juggling").exit_code == 2


def test_delete_entry_and_habit(run):
    run("add", "Gym")
    run("check-in", "1", "--date", "2024-01-05")

    assert "Deleted entry for 2024-01-05" in run("delete-entry", "1", "2024-01-05").output
    assert "No entry on 2024-01-05" in run("delete-entry", "1", "2024-01-05").output

    result = run("delete", "1", "--yes")
    assert result.exit_code == 0, result.output
    assert "No habits yet." in run("habits", "--all").output


def test_archive(run):
    run("add", "Gym")

    assert "Archived #1 Gym" in run("archive", "1").output
    assert "No habits yet." in run("habits").output
    assert "(archived)" in run("habits", "--all").output


def test_timer_flow(run):
    run("add", "Plank", "--type", "quantifiable", "--direction", "minimize")

    assert "Timer running for #1" in run("timer", "start", "1").output
    assert "Paused at 00:0" in run("timer", "pause", "1").output

    result = run("timer", "stop", "1")
    assert result.exit_code == 0, result.output
    assert "Recorded attempt:" in result.output
    assert "No timer." in run("timer", "stop", "1").output
