"""Day and workout commands: today, day, add/edit/rename/move/delete/archive-workout, saved-workouts."""

from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.calendar import auto_select_day, ensure_valid_day
from ...core.config import WARM_UP_SETS_RANGE, WORKING_SETS_RANGE
from ...core.errors import ValidationError
from ...core.models import WeightType, WeightUnit
from ...core.workouts import (
    WorkoutDraft,
    archive_workout,
    delete_workout,
    move_workout,
    rename_workout,
    save_workout,
    saved_workouts,
)
from .. import views
from ..app import (
    DataDirOption,
    app,
    get_store,
    load_data,
    parse_weekday,
    resolve_day,
    resolve_position,
    save_or_exit,
)

WeekArg = Annotated[int, typer.Argument(help="Week of the split (1-based)")]
WeekdayArg = Annotated[str, typer.Argument(help="Weekday, e.g. mon or Monday")]
PositionArg = Annotated[int, typer.Argument(help="Workout position in the day (1-based)")]
WarmUpOption = Annotated[
    Optional[int],
    typer.Option("--warm-up", min=WARM_UP_SETS_RANGE[0], max=WARM_UP_SETS_RANGE[1], help="Planned warm-up sets"),
]
WorkingOption = Annotated[
    Optional[int],
    typer.Option("--working", min=WORKING_SETS_RANGE[0], max=WORKING_SETS_RANGE[1], help="Planned working sets"),
]


def parse_date_option(raw: str | None) -> datetime:
    """YYYY-MM-DD to a datetime at the current time of day; now when omitted."""
    now = datetime.now()
    if raw is None:
        return now
    try:
        day = datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        views.print_error(f"Invalid date '{raw}'. Use YYYY-MM-DD")
        raise typer.Exit(1)
    return day.replace(hour=now.hour, minute=now.minute, second=now.second)


@app.command()
def today(
    data_dir: DataDirOption = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Pretend today is this date (YYYY-MM-DD)"),
    ] = None,
) -> None:
    """Show today's workouts, or the next configured training day."""
    data = load_data(get_store(data_dir))
    selection = auto_select_day(data.config, data.plan, parse_date_option(date))
    if selection is None:
        views.print_warning("The plan has no training days. Add some with 'settings --day'.")
        raise typer.Exit(0)
    views.print_day(selection.day_plan, selection.week_index, selection)


@app.command()
def day(
    week: WeekArg,
    weekday: WeekdayArg,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show one day's workouts.

    When the week has no such weekday, the week's first training day is
    shown instead.
    """
    data = load_data(get_store(data_dir))
    requested = parse_weekday(weekday)
    shown = ensure_valid_day(data.plan, week, requested)
    if shown is None:
        views.print_error(f"Week {week} has no training days")
        raise typer.Exit(1)
    if shown != requested:
        views.print_warning(f"Week {week} has no {requested.full_name}; showing {shown.full_name}.")
    views.print_day(data.plan.week(week).day_plan(shown), week)


@app.command("add-workout")
def add_workout(
    week: WeekArg,
    weekday: WeekdayArg,
    name: Annotated[Optional[str], typer.Argument(help="Workout name")] = None,
    weight_type: Annotated[
        WeightType,
        typer.Option("--type", "-t", help="Equipment type"),
    ] = WeightType.DUMBBELL,
    unit: Annotated[
        Optional[WeightUnit],
        typer.Option("--unit", "-u", help="Unit for dumbbell/machine (plate types use the bar unit)"),
    ] = None,
    warm_up: WarmUpOption = None,
    working: WorkingOption = None,
    from_saved: Annotated[
        Optional[int],
        typer.Option("--from-saved", help="Prefill from 'saved-workouts' entry N"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add a workout to a day.

      plate-loader add-workout 1 mon "Bench Press" --type barbell --warm-up 2 --working 3
    """
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)

    if from_saved is not None:
        saved = saved_workouts(data.plan)
        if not 1 <= from_saved <= len(saved):
            views.print_error(f"Saved workout must be between 1 and {len(saved)}")
            raise typer.Exit(1)
        draft = WorkoutDraft.from_template(saved[from_saved - 1])
    else:
        if name is None:
            views.print_error("Workout name is required.")
            raise typer.Exit(1)
        draft = WorkoutDraft(name=name, weight_type=weight_type, preferred_unit=unit or data.config.bar_weight_unit)

    if name is not None:
        draft.name = name
    if warm_up is not None:
        draft.planned_warm_up_set_count = warm_up
    if working is not None:
        draft.planned_working_set_count = working

    try:
        template = save_workout(day_plan, draft, data.config.bar_weight_unit)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_or_exit(store, data)
    views.print_success(f"Added {template.name} to week {week} {day_plan.label}.")
    views.print_day(day_plan, week)


@app.command("edit-workout")
def edit_workout(
    week: WeekArg,
    weekday: WeekdayArg,
    position: PositionArg,
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="New name")] = None,
    weight_type: Annotated[
        Optional[WeightType],
        typer.Option("--type", "-t", help="Equipment type"),
    ] = None,
    unit: Annotated[Optional[WeightUnit], typer.Option("--unit", "-u", help="Preferred unit")] = None,
    warm_up: WarmUpOption = None,
    working: WorkingOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Edit a workout's name, type, unit or planned set counts."""
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)
    template = resolve_position(day_plan, position)

    draft = WorkoutDraft.from_template(template)
    if name is not None:
        draft.name = name
    if weight_type is not None:
        draft.weight_type = weight_type
    if unit is not None:
        draft.preferred_unit = unit
    if warm_up is not None:
        draft.planned_warm_up_set_count = warm_up
    if working is not None:
        draft.planned_working_set_count = working

    try:
        save_workout(day_plan, draft, data.config.bar_weight_unit, editing=template)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_or_exit(store, data)
    views.print_success(f"Updated {template.name}.")
    views.print_day(day_plan, week)


@app.command("rename-workout")
def rename_workout_cmd(
    week: WeekArg,
    weekday: WeekdayArg,
    position: PositionArg,
    new_name: Annotated[str, typer.Argument(help="New workout name")],
    data_dir: DataDirOption = None,
) -> None:
    """Rename a workout.  Logged history keeps the old name."""
    store = get_store(data_dir)
    data = load_data(store)
    template = resolve_position(resolve_day(data, week, weekday), position)

    old_name = template.name
    try:
        rename_workout(template, new_name)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_or_exit(store, data)
    views.print_success(f"Renamed {old_name} to {template.name}.")


@app.command("move-workout")
def move_workout_cmd(
    week: WeekArg,
    weekday: WeekdayArg,
    from_position: PositionArg,
    to_position: Annotated[int, typer.Argument(help="New position (1-based)")],
    data_dir: DataDirOption = None,
) -> None:
    """Move a workout to a new position in the day's order."""
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)

    try:
        move_workout(day_plan, from_position - 1, to_position - 1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_or_exit(store, data)
    views.print_day(day_plan, week)


@app.command("delete-workout")
def delete_workout_cmd(
    week: WeekArg,
    weekday: WeekdayArg,
    position: PositionArg,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Delete a workout from a day.  Logged sessions are kept."""
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)
    template = resolve_position(day_plan, position)

    if not yes and not views.confirm_action(f"Delete {template.name}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    delete_workout(day_plan, template.id)
    save_or_exit(store, data)
    views.print_success(f"Deleted {template.name}.")


@app.command("archive-workout")
def archive_workout_cmd(
    week: WeekArg,
    weekday: WeekdayArg,
    position: PositionArg,
    data_dir: DataDirOption = None,
) -> None:
    """Hide a workout from the day and from trends, keeping it on file."""
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)
    template = resolve_position(day_plan, position)

    archive_workout(day_plan, template.id)
    save_or_exit(store, data)
    views.print_success(f"Archived {template.name}.")


@app.command("saved-workouts")
def saved_workouts_cmd(data_dir: DataDirOption = None) -> None:
    """List saved workouts for quick fill (add-workout --from-saved N)."""
    data = load_data(get_store(data_dir))
    views.print_saved_workouts(saved_workouts(data.plan))
