"""Command line interface for HabitFlow."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import get_logger, setup_logging
from .models.habit import Habit
from .services.dates import format_date, local_today, parse_date
from .services.maintenance import cleanup_invalid_completions, validate_habits
from .services.rates import completion_rate
from .services.schedule import normalize_selected_days
from .services.stats import aggregate_stats

logger = get_logger(__name__)


@dataclass
class CliState:
    app: AppContext
    today: date


def _parse_day(value: Optional[str], param: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}", param_hint=param) from exc


def _parse_period(value: str):
    if value in ("week", "month"):
        return value
    try:
        days = int(value)
    except ValueError as exc:
        raise click.BadParameter("use 'week', 'month' or a number of days", param_hint="--period") from exc
    if days < 1:
        raise click.BadParameter("number of days must be positive", param_hint="--period")
    return days


def _schedule_label(selected_days) -> str:
    if not selected_days or len(selected_days) == 7:
        return "daily"
    return ",".join(day[:3] for day in selected_days)


@click.group()
@click.option("--today", "today_text", default=None, help="Evaluate as if today were YYYY-MM-DD.")
@click.pass_context
def cli(ctx: click.Context, today_text: Optional[str]) -> None:
    """Track habits and report streaks and completion rates."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = CliState(
        app=create_app_context(config),
        today=_parse_day(today_text, "--today") or local_today(),
    )


@cli.command("init-db")
@click.pass_obj
def init_db(state: CliState) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {state.app.config.DATABASE_URL}")


@cli.command("add")
@click.argument("name")
@click.option("--day", "days", multiple=True, help="Scheduled weekday; repeat for several. Omit for daily.")
@click.option("--category", default="personal", show_default=True)
@click.option("--description", default="")
@click.option("--created", "created_text", default=None, help="Creation date (defaults to today).")
@click.pass_obj
def add_habit(
    state: CliState,
    name: str,
    days: tuple[str, ...],
    category: str,
    description: str,
    created_text: Optional[str],
) -> None:
    """Create a habit."""

    try:
        selected = normalize_selected_days(days)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--day") from exc

    habit = Habit(
        user_id=state.app.user_id,
        name=name,
        description=description,
        category=category,
        created_date=_parse_day(created_text, "--created") or state.today,
    )
    created = state.app.habit_repo.create(habit, user_id=state.app.user_id, selected_days=selected)
    click.echo(f"Created habit {created.id}: {created.name} ({_schedule_label(selected)})")


@cli.command("list")
@click.pass_obj
def list_habits(state: CliState) -> None:
    """Show every habit with its streaks and weekly rate."""

    snapshots = state.app.habit_repo.list_snapshots(user_id=state.app.user_id, today=state.today)
    if not snapshots:
        click.echo("No habits yet.")
        return
    for habit in snapshots:
        week = completion_rate(habit, "week", today=state.today)
        click.echo(
            f"{habit.id:>4}  {habit.name:<24} {_schedule_label(habit.selected_days):<20} "
            f"streak {habit.current_streak:>3}  best {habit.best_streak:>3}  week {week:>3}%"
        )


@cli.command("toggle")
@click.argument("habit_id", type=int)
@click.option("--date", "date_text", default=None, help="Day to toggle (defaults to today).")
@click.pass_obj
def toggle(state: CliState, habit_id: int, date_text: Optional[str]) -> None:
    """Mark a habit done, or undo it, for a day."""

    day = _parse_day(date_text, "--date") or state.today
    repo = state.app.habit_repo
    try:
        completed = repo.toggle_completion(habit_id, day, user_id=state.app.user_id)
        habit = repo.load_snapshot(habit_id, user_id=state.app.user_id, today=state.today)
    except (LookupError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    verb = "done" if completed else "not done"
    click.echo(
        f"{habit.name} marked {verb} on {format_date(day)}; "
        f"streak {habit.current_streak}, best {habit.best_streak}"
    )


@cli.command("rate")
@click.argument("habit_id", type=int)
@click.option("--period", "period_text", default="week", show_default=True)
@click.pass_obj
def rate(state: CliState, habit_id: int, period_text: str) -> None:
    """Completion rate for one habit over a period."""

    period = _parse_period(period_text)
    try:
        habit = state.app.habit_repo.load_snapshot(habit_id, user_id=state.app.user_id, today=state.today)
    except LookupError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{completion_rate(habit, period, today=state.today)}%")


@cli.command("stats")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def stats(state: CliState, as_json: bool) -> None:
    """Summary statistics across all habits."""

    snapshots = state.app.habit_repo.list_snapshots(user_id=state.app.user_id, today=state.today)
    summary = aggregate_stats(snapshots, today=state.today)
    if as_json:
        click.echo(json.dumps(summary.as_dict()))
        return
    click.echo(f"Habits:            {summary.total_habits}")
    click.echo(f"Completions:       {summary.total_completions}")
    click.echo(f"Avg monthly rate:  {summary.average_completion_rate}%")
    click.echo(f"Longest streak:    {summary.longest_streak}")
    click.echo(f"Active streaks:    {summary.current_active_streaks}")


@cli.command("cleanup")
@click.option("--dry-run", is_flag=True, default=False, help="Only report invalid completions.")
@click.pass_obj
def cleanup(state: CliState, dry_run: bool) -> None:
    """Remove completions recorded before their habit was created."""

    repo = state.app.habit_repo
    if dry_run:
        reports = validate_habits(repo.list_snapshots(user_id=state.app.user_id, today=state.today))
        invalid = [report for report in reports if not report.is_valid]
        for report in invalid:
            click.echo(f"{report.name}: {', '.join(report.invalid_dates)}")
        click.echo(f"{sum(len(r.invalid_dates) for r in invalid)} invalid completion(s) found")
        return
    removed = cleanup_invalid_completions(repo, user_id=state.app.user_id)
    click.echo(f"Removed {removed} invalid completion(s)")


@cli.command("delete")
@click.argument("habit_id", type=int)
@click.confirmation_option(prompt="Delete this habit and all its completions?")
@click.pass_obj
def delete(state: CliState, habit_id: int) -> None:
    """Delete a habit and its completions."""

    try:
        state.app.habit_repo.delete(habit_id, user_id=state.app.user_id)
    except LookupError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted habit {habit_id}")


def main() -> None:
    cli(prog_name="habitflow")


if __name__ == "__main__":  # pragma: no cover
    main()
