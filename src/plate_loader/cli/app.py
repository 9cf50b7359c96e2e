"""Shared Typer app object, shared option types, and store utilities."""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger

from ..core.config import PREFERENCES_FILENAME
from ..core.errors import PersistenceError, ValidationError
from ..core.models import AppData, DayPlan, Weekday
from ..io.preferences import Preferences, load_preferences
from ..io.store import DataStore, get_default_data_dir
from . import views

LOG_FORMAT = "<level>{level: <8}</level> | {name}:{function} - {message}"

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Data directory (default: $PLATE_LOADER_HOME or ~/.plate-loader)"),
]

app = typer.Typer(
    name="plate-loader",
    help="Offline workout logger for split training plans with barbell plate math.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Route library logs to stderr: WARNING and up, or everything with --verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", format=LOG_FORMAT)
    logger.enable("plate_loader")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Offline workout logger. Run 'setup' first, then 'today' to see what's next.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    views.console.print("[bold cyan]plate-loader[/bold cyan]: split workout logger")
    views.console.print(ctx.get_help())


def preferences_path(data_dir: Path | None) -> Path:
    return (data_dir or get_default_data_dir()) / PREFERENCES_FILENAME


def get_preferences(data_dir: Path | None) -> Preferences:
    return load_preferences(preferences_path(data_dir))


def get_store(data_dir: Path | None) -> DataStore:
    """Store for --data-dir, else the preferences override, else the default location."""
    if data_dir is None:
        prefs = load_preferences(preferences_path(None))
        data_dir = Path(prefs.data_dir).expanduser() if prefs.data_dir else get_default_data_dir()
    return DataStore(data_dir)


def load_data(store: DataStore, require_setup: bool = True) -> AppData:
    """Load the entity graph, exiting with an error message on failure."""
    try:
        data = store.load()
    except (ValidationError, PersistenceError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if require_setup and data.needs_setup:
        views.print_error(f"No plan found in {store.data_dir}")
        views.print_info("Run 'setup' first to create your split.")
        raise typer.Exit(1)
    return data


def parse_weekday(text: str) -> Weekday:
    try:
        return Weekday.parse(text)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def resolve_day(data: AppData, week: int, weekday_text: str) -> DayPlan:
    """The configured DayPlan for (week, weekday), or exit with an error."""
    weekday = parse_weekday(weekday_text)
    plan_week = data.plan.week(week) if data.plan else None
    if plan_week is None:
        views.print_error(f"Week {week} is not part of the split")
        raise typer.Exit(1)
    day = plan_week.day_plan(weekday)
    if day is None:
        configured = ", ".join(d.weekday.short_name for d in plan_week.sorted_day_plans)
        views.print_error(f"Week {week} has no {weekday.full_name} (configured: {configured})")
        raise typer.Exit(1)
    return day


def resolve_position(day: DayPlan, position: int):
    """Active workout at a 1-based display position, or exit with an error."""
    workouts = day.active_sorted_workouts
    if not 1 <= position <= len(workouts):
        views.print_error(
            f"Position must be between 1 and {len(workouts)}" if workouts else f"{day.label} has no workouts"
        )
        raise typer.Exit(1)
    return workouts[position - 1]


def save_or_exit(store: DataStore, data: AppData) -> None:
    try:
        store.save(data)
    except PersistenceError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
