"""Setup commands: setup, settings, reset, profile, and day-spec helpers."""

from typing import Annotated, Optional

import typer

from ...core.config import MAX_SPLIT_WEEKS, MIN_SPLIT_WEEKS, PLATE_VALUE_TOLERANCE
from ...core.errors import PersistenceError, ValidationError
from ...core.models import PlateOption, Weekday, WeightUnit
from ...core.setup import (
    WeekDraft,
    add_plate_draft,
    apply_settings,
    complete_setup,
    default_week_drafts,
    factory_reset,
    resize_week_drafts,
    week_drafts_from_plan,
)
from ...core.units import default_bar_weight, default_plate_options, parse_weight, plate_label, pretty_weight
from ...io.preferences import save_preferences
from .. import views
from ..app import DataDirOption, app, get_preferences, get_store, load_data, preferences_path

SplitWeeksOption = Annotated[
    Optional[int],
    typer.Option("--split-weeks", "-w", min=MIN_SPLIT_WEEKS, max=MAX_SPLIT_WEEKS, help="Weeks in the split (1-4)"),
]
DayOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--day",
        help="Training day as [WEEK:]DAY[=Label], e.g. 1:mon=Push (repeatable)",
    ),
]
PlateOpt = Annotated[
    Optional[list[str]],
    typer.Option("--plate", help="Extra plate value in the bar unit (repeatable)"),
]


def parse_day_spec(spec: str) -> tuple[int, Weekday, str]:
    """
    Parse "[WEEK:]DAY[=Label]" into (week, weekday, label).

    Raises:
        ValidationError: If the week or weekday is invalid
    """
    text = spec.strip()
    week = 1
    if ":" in text:
        week_text, text = text.split(":", 1)
        try:
            week = int(week_text)
        except ValueError as e:
            raise ValidationError(f"Invalid week in day spec '{spec}'") from e
    day_text, _, label = text.partition("=")
    try:
        weekday = Weekday.parse(day_text)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return week, weekday, label.strip()


def apply_day_specs(drafts: list[WeekDraft], specs: list[str]) -> None:
    """
    Select days in ``drafts`` from day specs.

    Every week named by a spec is cleared first, so the specs describe
    that week completely.

    Raises:
        ValidationError: If a spec is invalid or names a week outside the split
    """
    parsed = [parse_day_spec(s) for s in specs]
    by_index = {d.week_index: d for d in drafts}
    for week, _, _ in parsed:
        if week not in by_index:
            raise ValidationError(f"Week {week} is outside the {len(drafts)}-week split")
    for week in {w for w, _, _ in parsed}:
        for day in by_index[week].days:
            day.selected = False
            day.label = ""
    for week, weekday, label in parsed:
        by_index[week].select(weekday, label)


def _prompt_week_days(drafts: list[WeekDraft]) -> None:
    """Ask for each week's training days, e.g. "mon=Push, wed=Pull, fri"."""
    views.console.print()
    views.console.print("[bold]Pick training days for each week.[/bold]")
    views.console.print("  Format: [cyan]day[=Label], ...[/cyan]  e.g. [green]mon=Push, wed=Pull, fri=Legs[/green]")
    for draft in drafts:
        while True:
            raw = views.console.input(f"  Week {draft.week_index}: ").strip()
            specs = [f"{draft.week_index}:{part.strip()}" for part in raw.split(",") if part.strip()]
            try:
                apply_day_specs(drafts, specs)
            except ValidationError as e:
                views.print_error(str(e))
                continue
            if not draft.selected_days:
                views.print_error("Pick at least one day.")
                continue
            break


def _add_plates(plates: list[PlateOption], values: list[str], unit: WeightUnit) -> None:
    for value in values:
        try:
            if not add_plate_draft(plates, value, unit):
                views.print_info(f"Plate {value} {unit.value} already in the list.")
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)


@app.command()
def setup(
    data_dir: DataDirOption = None,
    split_weeks: SplitWeeksOption = None,
    unit: Annotated[
        Optional[WeightUnit],
        typer.Option("--unit", "-u", help="Bar and plate unit (default: profile default unit)"),
    ] = None,
    bar_weight: Annotated[
        Optional[str],
        typer.Option("--bar-weight", "-b", help="Empty bar weight (default: 45 lb / 20 kg)"),
    ] = None,
    days: DayOption = None,
    plates: PlateOpt = None,
    no_default_plates: Annotated[
        bool,
        typer.Option("--no-default-plates", help="Start from an empty plate list"),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace existing data without asking"),
    ] = False,
) -> None:
    """
    Create the split, bar and plate catalog.  Replaces any existing data.

    Run without --day for interactive day selection, or in one line:

      plate-loader setup --split-weeks 2 --unit lb \\
        --day 1:mon=Push --day 1:thu=Pull --day 2:tue=Legs
    """
    store = get_store(data_dir)
    prefs = get_preferences(data_dir)

    if store.exists() and not force:
        views.print_warning(f"Existing plan and sessions in {store.data_dir} will be deleted.")
        if not views.confirm_action("Continue?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    unit = unit or prefs.default_unit
    length = split_weeks or MIN_SPLIT_WEEKS
    bar_text = bar_weight if bar_weight is not None else pretty_weight(default_bar_weight(unit))

    plate_list = [] if no_default_plates else default_plate_options(unit)
    _add_plates(plate_list, plates or [], unit)

    drafts = default_week_drafts(length)
    try:
        if days:
            apply_day_specs(drafts, days)
        else:
            _prompt_week_days(drafts)
        data = complete_setup(store, length, bar_text, unit, drafts, plate_list)
    except (ValidationError, PersistenceError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Setup complete in {store.data_dir}")
    views.print_settings(data.config, data.plan, prefs.profile_name)


@app.command()
def settings(
    data_dir: DataDirOption = None,
    split_weeks: SplitWeeksOption = None,
    unit: Annotated[
        Optional[WeightUnit],
        typer.Option("--unit", "-u", help="Bar unit; plates are rewritten in this unit"),
    ] = None,
    bar_weight: Annotated[
        Optional[str],
        typer.Option("--bar-weight", "-b", help="Empty bar weight"),
    ] = None,
    days: DayOption = None,
    plates: PlateOpt = None,
    remove_plates: Annotated[
        Optional[list[str]],
        typer.Option("--remove-plate", help="Plate value to remove (repeatable)"),
    ] = None,
    reset_plates: Annotated[
        bool,
        typer.Option("--reset-plates", help="Replace the plate list with the unit's presets"),
    ] = False,
) -> None:
    """
    Show or edit settings.  Workouts on days that stay selected are kept.

    Without options, prints the current settings.  --day replaces the
    whole week it names.
    """
    store = get_store(data_dir)
    data = load_data(store)
    config, plan = data.config, data.plan

    changed = any(
        v for v in (split_weeks, unit, bar_weight, days, plates, remove_plates, reset_plates)
    )
    if not changed:
        views.print_settings(config, plan, get_preferences(data_dir).profile_name)
        return

    length = split_weeks or config.split_length_weeks
    unit = unit or config.bar_weight_unit
    bar_text = bar_weight if bar_weight is not None else pretty_weight(config.bar_weight_value)

    if reset_plates:
        plate_list = default_plate_options(unit)
    else:
        plate_list = [
            PlateOption(
                id=p.id,
                value=p.value,
                unit=unit,
                label=p.label if p.unit == unit else plate_label(p.value, unit),
            )
            for p in config.plate_catalog
        ]
    for raw in remove_plates or []:
        value = parse_weight(raw)
        if value is None:
            views.print_error(f"Plate value must be a number >= 0, got '{raw}'")
            raise typer.Exit(1)
        plate_list = [p for p in plate_list if abs(p.value - value) >= PLATE_VALUE_TOLERANCE]
    _add_plates(plate_list, plates or [], unit)

    drafts = resize_week_drafts(week_drafts_from_plan(plan, length), length)
    try:
        if days:
            apply_day_specs(drafts, days)
        apply_settings(store, data, length, bar_text, unit, drafts, plate_list)
    except (ValidationError, PersistenceError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success("Settings saved.")
    views.print_settings(data.config, data.plan)


@app.command()
def reset(
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
) -> None:
    """Factory reset: delete the plan, settings and every logged session."""
    store = get_store(data_dir)
    data = load_data(store, require_setup=False)

    if not yes and not views.confirm_action("Delete ALL plans and logged sessions?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        factory_reset(store, data)
    except PersistenceError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success("All data deleted. Run 'setup' to start again.")


@app.command()
def profile(
    data_dir: DataDirOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Profile name shown in headers"),
    ] = None,
    default_unit: Annotated[
        Optional[WeightUnit],
        typer.Option("--default-unit", help="Unit offered by setup"),
    ] = None,
    home: Annotated[
        Optional[str],
        typer.Option("--home", help="Data directory to use when --data-dir is not given"),
    ] = None,
) -> None:
    """Show or edit presentation preferences (stored in preferences.yaml)."""
    path = preferences_path(data_dir)
    prefs = get_preferences(data_dir)

    if name is None and default_unit is None and home is None:
        views.console.print(f"[bold]Profile name:[/bold] {prefs.profile_name or '[dim]not set[/dim]'}")
        views.console.print(f"[bold]Default unit:[/bold] {prefs.default_unit.value}")
        views.console.print(f"[bold]Data directory:[/bold] {prefs.data_dir or '[dim]default[/dim]'}")
        views.console.print(f"[dim]{path}[/dim]")
        return

    if name is not None:
        prefs.profile_name = name.strip()
    if default_unit is not None:
        prefs.default_unit = default_unit
    if home is not None:
        prefs.data_dir = home.strip() or None

    try:
        save_preferences(prefs, path)
    except OSError as e:
        views.print_error(f"Could not save preferences: {e}")
        raise typer.Exit(1)
    views.print_success(f"Preferences saved to {path}")
