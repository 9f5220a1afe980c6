"""Command line interface for HabitRacer."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from functools import wraps
from typing import Optional

import click

from .config import BaseConfig
from .constants.presets import PRESET_HABITS, find_preset
from .context import AppContext, create_app_context
from .domain.errors import HabitNotFoundError
from .domain.habit import WEEKDAY_TOKENS, Direction, Frequency, HabitType, MetricType
from .logging_config import setup_logging
from .services.schedule import format_day, parse_day
from .services.timers import format_elapsed
from .services.trophies import next_trophy, trophy_for_streak


def _fmt_day(value: Optional[date]) -> str:
    return format_day(value) if value else "-"


def _fmt_value(value: float) -> str:
    return f"{value:g}"


def _parse_day_option(_ctx, _param, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_day(value)
    except ValueError as exc:
        raise click.BadParameter("expected YYYY-MM-DD") from exc


def _handle_domain_errors(func):
    """Turn domain errors into clean CLI failures."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


@click.group()
@click.option("--database-url", envvar="HABITRACER_DATABASE_URL", default=None, help="Override the database URL")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Track habits and race against your own records."""

    config = BaseConfig()
    if database_url:
        config.DATABASE_URL = database_url
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.command("init-db")
@click.pass_obj
def init_db(app: AppContext) -> None:
    """Create the database schema."""
    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("seed-presets")
@click.option("--name", "names", multiple=True, help="Preset name to add (repeatable); all when omitted")
@click.pass_obj
@_handle_domain_errors
def seed_presets(app: AppContext, names: tuple[str, ...]) -> None:
    """Create habits from the preset catalogue."""

    if names:
        presets = []
        for name in names:
            preset = find_preset(name)
            if preset is None:
                raise click.BadParameter(f"Unknown preset: {name}", param_hint="--name")
            presets.append(preset)
    else:
        presets = list(PRESET_HABITS)

    for preset in presets:
        habit = app.habit_service.create_habit_from_preset(preset)
        click.echo(f"Created #{habit.id} {habit.emoji} {habit.name}")


@cli.command("add")
@click.argument("name")
@click.option("--type", "habit_type", type=click.Choice([t.value for t in HabitType]), default="boolean")
@click.option("--direction", type=click.Choice([d.value for d in Direction]), default="maximize")
@click.option("--frequency", type=click.Choice([f.value for f in Frequency]), default="daily")
@click.option("--day", "days", multiple=True, type=click.Choice(WEEKDAY_TOKENS), help="Scheduled weekday for specific_days")
@click.option("--metric", "metric_type", type=click.Choice([m.value for m in MetricType]), default=None)
@click.option("--goal", "goal_value", type=float, default=None)
@click.option("--unit", default=None)
@click.option("--emoji", default="")
@click.pass_obj
@_handle_domain_errors
def add_habit(
    app: AppContext,
    name: str,
    habit_type: str,
    direction: str,
    frequency: str,
    days: tuple[str, ...],
    metric_type: Optional[str],
    goal_value: Optional[float],
    unit: Optional[str],
    emoji: str,
) -> None:
    """Create a habit."""

    habit = app.habit_service.create_habit(
        name=name,
        type=habit_type,
        direction=direction,
        frequency=frequency,
        specific_days=days,
        metric_type=metric_type,
        goal_value=goal_value,
        unit=unit,
        emoji=emoji,
    )
    click.echo(f"Created #{habit.id} {habit.name}")


@cli.command("habits")
@click.option("--all", "include_archived", is_flag=True, help="Include archived habits")
@click.pass_obj
def list_habits(app: AppContext, include_archived: bool) -> None:
    """List habits with their current streak."""

    habits = app.habit_repo.list_all(include_archived=include_archived)
    if not habits:
        click.echo("No habits yet.")
        return
    for habit in habits:
        streak = app.habit_service.get_current_streak(habit.id)
        flag = " (archived)" if habit.archived else ""
        click.echo(f"#{habit.id:<4} {habit.emoji} {habit.name} [{habit.type}] streak={streak}{flag}")


@cli.command("archive")
@click.argument("habit_id", type=int)
@click.pass_obj
@_handle_domain_errors
def archive_habit(app: AppContext, habit_id: int) -> None:
    """Archive a habit (keeps its history)."""
    habit = app.habit_service.archive_habit(habit_id)
    click.echo(f"Archived #{habit.id} {habit.name}")


@cli.command("delete")
@click.argument("habit_id", type=int)
@click.confirmation_option(prompt="Delete the habit and all its entries?")
@click.pass_obj
@_handle_domain_errors
def delete_habit(app: AppContext, habit_id: int) -> None:
    """Delete a habit with all its entries and streaks."""
    app.habit_service.delete_habit(habit_id)
    click.echo(f"Deleted #{habit_id}")


@cli.command("check-in")
@click.argument("habit_id", type=int)
@click.option("--value", type=float, default=None, help="Value to record; toggles today when omitted")
@click.option("--date", "day", callback=_parse_day_option, default=None, help="Day as YYYY-MM-DD (default today)")
@click.option("--attempt", is_flag=True, help="Record as a repeatable attempt")
@click.option("--notes", default=None)
@click.pass_obj
@_handle_domain_errors
def check_in(
    app: AppContext,
    habit_id: int,
    value: Optional[float],
    day: Optional[date],
    attempt: bool,
    notes: Optional[str],
) -> None:
    """Record an entry for a habit."""

    service = app.habit_service
    if value is None and day is None and not attempt:
        entry = service.quick_check_in(habit_id)
    else:
        entry = service.check_in_with_value(
            habit_id, 1 if value is None else value, notes=notes, day=day, is_attempt=attempt
        )
    click.echo(
        f"Recorded {_fmt_value(entry.value)} on {_fmt_day(entry.occurred_on)}; "
        f"streak={service.get_current_streak(habit_id)}"
    )


@cli.command("delete-entry")
@click.argument("habit_id", type=int)
@click.argument("day", callback=_parse_day_option)
@click.pass_obj
@_handle_domain_errors
def delete_entry(app: AppContext, habit_id: int, day: date) -> None:
    """Delete the entry recorded on DAY."""
    if app.habit_service.delete_entry(habit_id, day):
        click.echo(f"Deleted entry for {_fmt_day(day)}")
    else:
        click.echo(f"No entry on {_fmt_day(day)}")


@cli.command("streak")
@click.argument("habit_id", type=int)
@click.pass_obj
@_handle_domain_errors
def show_streak(app: AppContext, habit_id: int) -> None:
    """Show the current and longest streak plus trophy progress."""

    service = app.habit_service
    service.get_habit(habit_id)
    current = service.get_current_streak(habit_id)
    click.echo(f"Current streak: {current}")
    click.echo(f"Longest streak: {service.get_longest_streak(habit_id)}")
    trophy = trophy_for_streak(current)
    if trophy:
        click.echo(f"Trophy: {trophy.emoji} {trophy.name}")
    upcoming = next_trophy(current)
    if upcoming:
        target, remaining = upcoming
        click.echo(f"Next: {target.emoji} {target.name} in {remaining} day(s)")


@cli.command("race")
@click.argument("habit_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the race as JSON")
@click.pass_obj
@_handle_domain_errors
def show_race(app: AppContext, habit_id: int, as_json: bool) -> None:
    """Show the race leaderboard for a habit."""

    race = app.habit_service.race(habit_id)
    if as_json:
        click.echo(json.dumps(asdict(race), indent=2, default=str))
        return
    if not race.total_positions:
        click.echo("No race yet.")
        return

    for pos in race.positions:
        marks = ("PR " if pos.is_personal_record else "") + ("<- now" if pos.is_current else "")
        click.echo(f"{pos.position:>2}. {_fmt_value(pos.value):>8} {_fmt_day(pos.date)} {marks}".rstrip())
    click.echo(f"Position {race.current_position} of {race.total_positions}")
    if race.next_target:
        target = race.next_target
        line = f"Next target: {_fmt_value(target.value)} for #{target.position}"
        if target.estimated_date:
            line += f" (around {_fmt_day(target.estimated_date)})"
        click.echo(line)


@cli.command("stats")
@click.argument("habit_id", type=int)
@click.pass_obj
@_handle_domain_errors
def show_stats(app: AppContext, habit_id: int) -> None:
    """Show summary statistics for a habit."""

    stats = app.habit_service.stats(habit_id)
    for key, value in asdict(stats).items():
        if isinstance(value, float):
            value = f"{value:.2f}"
        click.echo(f"{key}: {value}")


@cli.group("timer")
def timer() -> None:
    """Time repeatable attempts."""


@timer.command("start")
@click.argument("habit_id", type=int)
@click.pass_obj
@_handle_domain_errors
def timer_start(app: AppContext, habit_id: int) -> None:
    app.timer_service.start(habit_id)
    click.echo(f"Timer running for #{habit_id}")


@timer.command("pause")
@click.argument("habit_id", type=int)
@click.pass_obj
def timer_pause(app: AppContext, habit_id: int) -> None:
    paused = app.timer_service.pause(habit_id)
    if paused is None:
        click.echo("No timer.")
        return
    click.echo(f"Paused at {format_elapsed(app.timer_service.elapsed_ms(paused)).display}")


@timer.command("stop")
@click.argument("habit_id", type=int)
@click.option("--restart/--no-restart", default=False, help="Start the next attempt right away")
@click.pass_obj
@_handle_domain_errors
def timer_stop(app: AppContext, habit_id: int, restart: bool) -> None:
    """Stop the timer and record the attempt in minutes."""
    if app.timer_service.get(habit_id) is None:
        click.echo("No timer.")
        return
    entry, _ = app.timer_service.stop_and_record(habit_id, auto_restart=restart)
    click.echo(f"Recorded attempt: {_fmt_value(entry.value)} min")


if __name__ == "__main__":  # pragma: no cover
    cli()
