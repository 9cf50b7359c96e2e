"""Session commands: log, history, show-session, and helpers."""

from typing import Annotated, Optional

import typer

from ...core.errors import PersistenceError, ValidationError
from ...core.history import sessions_for_day
from ...core.models import PlateOption, SetType, WeightUnit, WorkoutTemplate
from ...core.recorder import (
    DuplicateResolution,
    LoggingContext,
    SavePlan,
    SetDraft,
    commit_save,
    compare_to_previous,
    copy_last_draft,
    default_drafts,
    find_previous_entry,
    prepare_save,
    remove_drafts,
)
from ...io.serializers import parse_set_draft, parse_sets_string
from .. import views
from ..app import DataDirOption, app, get_store, load_data, parse_weekday, resolve_day, resolve_position
from .workouts import PositionArg, WeekArg, WeekdayArg, parse_date_option


def _interactive_sets(template: WorkoutTemplate, plate_options: list[PlateOption] | None) -> list[SetDraft]:
    """
    Prompt for sets one by one, following the planned warm-up/working layout.

    Rows past the plan are working sets unless prefixed with ``w``.
    """
    planned = default_drafts(template, [o.id for o in plate_options or []])
    views.console.print()
    views.console.print("[bold]Enter sets one per line.[/bold]")
    if plate_options is None:
        views.console.print("  Format: [cyan]reps@weight[/cyan]  e.g. [green]8@50[/green]  [green]12[/green]")
    else:
        views.console.print(
            "  Format: [cyan]reps@plate x count per side[/cyan]"
            "  e.g. [green]5@45x2+10x1[/green]  [green]10@bar[/green]"
        )
    views.console.print(
        "  [green]c[/green] copies the last set, [green]d[/green] deletes it."
        "  Press [bold]Enter[/bold] on an empty line when done.\n"
    )

    drafts: list[SetDraft] = []
    while True:
        default_type = planned[len(drafts)].set_type if len(drafts) < len(planned) else SetType.WORKING
        kind = "Warm-up" if default_type == SetType.WARM_UP else "Working"
        raw = views.console.input(f"  Set {len(drafts) + 1} ({kind}): ").strip()
        if not raw:
            if drafts:
                break
            views.print_warning("Enter at least one set.")
            continue
        if raw.lower() in ("c", "d"):
            if not drafts:
                views.print_warning("No sets entered yet.")
            elif raw.lower() == "c":
                copy_last_draft(drafts)
            else:
                remove_drafts(drafts, [len(drafts) - 1])
            continue
        try:
            draft = parse_set_draft(raw, plate_options)
        except ValidationError as e:
            views.print_error(str(e))
            continue
        if not raw.lower().startswith("w"):
            draft.set_type = default_type
        drafts.append(draft)
    return drafts


def _ask_resolution(save_plan: SavePlan) -> DuplicateResolution:
    views.print_warning(
        f"This workout is already logged today ({len(save_plan.duplicate_indices)} time(s))."
    )
    while True:
        raw = views.console.input("[R]eplace latest, [K]eep both, or [C]ancel [R]: ").strip().lower() or "r"
        if raw in ("r", "replace"):
            return DuplicateResolution.REPLACE_LATEST
        if raw in ("k", "keep"):
            return DuplicateResolution.KEEP_BOTH
        if raw in ("c", "cancel"):
            views.print_info("Cancelled. Nothing saved.")
            raise typer.Exit(0)
        views.print_error("Choose R, K or C")


@app.command()
def log(
    week: WeekArg,
    weekday: WeekdayArg,
    position: PositionArg,
    sets: Annotated[
        Optional[str],
        typer.Option(
            "--sets",
            "-s",
            help="Comma-separated sets: reps@weight (8@50), reps@plates (5@45x2+10x1, 5@bar); prefix w for warm-up",
        ),
    ] = None,
    unit: Annotated[
        Optional[WeightUnit],
        typer.Option("--unit", "-u", help="Unit for dumbbell/machine loads (default: workout's unit)"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Session date (YYYY-MM-DD, default today)"),
    ] = None,
    on_duplicate: Annotated[
        Optional[DuplicateResolution],
        typer.Option("--on-duplicate", help="When already logged today: replace_latest or keep_both"),
    ] = None,
    sync_plan: Annotated[
        Optional[bool],
        typer.Option(
            "--sync-plan/--keep-plan",
            help="Update the workout's planned set counts when they differ from what you logged",
        ),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Log sets for a workout.

    Run without --sets for interactive entry, or in one line:

      plate-loader log 1 mon 1 --sets "w10@bar,5@45x2,5@45x2,5@45x2"
    """
    store = get_store(data_dir)
    data = load_data(store)
    day_plan = resolve_day(data, week, weekday)
    template = resolve_position(day_plan, position)

    context = LoggingContext(
        template=template,
        day_plan=day_plan,
        week_index=week,
        config=data.config,
        session_date=parse_date_option(date),
        unit=unit,
    )
    plate_options = context.plate_options if context.uses_plate_picker else None
    if plate_options == []:
        views.print_warning(
            f"No plates in {context.config.bar_weight_unit.value}; only empty-bar sets can be logged."
        )

    views.console.print(f"[bold]{template.name}[/bold] [dim]week {week} • {day_plan.label}[/dim]")
    previous = find_previous_entry(data.sessions, template)
    views.print_previous(previous)

    try:
        drafts = (
            parse_sets_string(sets, plate_options)
            if sets is not None
            else _interactive_sets(template, plate_options)
        )
        save_plan = prepare_save(data.sessions, context, drafts)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    resolution = on_duplicate
    if save_plan.has_duplicates and resolution is None:
        resolution = _ask_resolution(save_plan)

    sync = bool(sync_plan)
    drift = save_plan.plan_drift
    if drift is not None and sync_plan is None:
        sync = views.confirm_action(
            f"Planned {drift.planned_warm_up} warm-up / {drift.planned_working} working, "
            f"logged {drift.warm_up} / {drift.working}. Update the plan?"
        )

    try:
        result = commit_save(store, data, context, drafts, save_plan, resolution, sync)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    except PersistenceError as e:
        views.print_error(str(e))
        views.print_info("Your sets were not saved; run the command again to retry.")
        raise typer.Exit(1)

    verb = "Replaced" if result.replaced_duplicate else "Logged"
    views.print_success(f"{verb} {len(result.entry.sets)} sets of {template.name}.")
    if result.synced_plan:
        views.print_info(
            f"Plan updated: {template.planned_warm_up_set_count} warm-up / "
            f"{template.planned_working_set_count} working."
        )
    if previous.found:
        views.print_deltas(result.entry, compare_to_previous(drafts, previous, context))


@app.command()
def history(
    week: Annotated[Optional[int], typer.Argument(help="Only sessions for this week")] = None,
    weekday: Annotated[Optional[str], typer.Argument(help="Only sessions for this weekday")] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show at most N sessions"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """List logged sessions, newest first."""
    store = get_store(data_dir)
    load_data(store, require_setup=False)

    sessions = store.fetch_sessions(newest_first=True)
    title = "Workout History"
    if week is not None and weekday is not None:
        parsed = parse_weekday(weekday)
        sessions = sessions_for_day(sessions, week, parsed)
        title = f"History: week {week} {parsed.full_name}"
    elif week is not None:
        sessions = [s for s in sessions if s.week_index == week]
        title = f"History: week {week}"

    if limit is not None:
        sessions = sessions[:limit]
    views.print_history(sessions, title)


@app.command("show-session")
def show_session(
    number: Annotated[int, typer.Argument(help="Session # from 'history' (1 = newest)")],
    data_dir: DataDirOption = None,
) -> None:
    """Show every set of one session."""
    store = get_store(data_dir)
    data = load_data(store, require_setup=False)

    sessions = store.fetch_sessions(newest_first=True)
    if not sessions:
        views.print_error("No sessions in history.")
        raise typer.Exit(1)
    if not 1 <= number <= len(sessions):
        views.print_error(f"Session # must be between 1 and {len(sessions)}")
        raise typer.Exit(1)

    views.print_session_detail(sessions[number - 1], data.config)
