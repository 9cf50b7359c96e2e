"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, sessions and trends.
"""

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_simple_bar_chart, create_trend_plot
from ..core.calendar import DaySelection
from ..core.history import describe_set, plate_breakdown, session_summary
from ..core.models import (
    AppConfig,
    DayPlan,
    PlateOption,
    SessionEntry,
    SetType,
    SplitPlan,
    WorkoutSession,
    WorkoutTemplate,
)
from ..core.recorder import PreviousPerformance, SetDelta
from ..core.trends import TrendMetric, TrendSeries
from ..core.units import pretty_weight
from ..core.workouts import saved_workout_subtitle

console = Console()

_SELECTION_NOTES = {
    "today": "Today",
    "forward_scan": "Next training day",
    "week_fallback": "No training today; first day of this week",
    "plan_fallback": "No training this week; first day of the plan",
}


def _fmt_weight(value: float, unit: str) -> str:
    return f"{pretty_weight(value)} {unit}"


def _fmt_delta(value: float | int | None, suffix: str = "") -> str:
    if value is None:
        return "-"
    if abs(value) < 1e-9:
        return "[dim]±0[/dim]"
    color = "green" if value > 0 else "red"
    return f"[{color}]{value:+g}{suffix}[/{color}]"


def format_day_table(day: DayPlan, week_index: int) -> Table:
    """
    Create a Rich table of a day's active workouts in display order.

    Args:
        day: Day plan to display
        week_index: Week the day belongs to (for the title)

    Returns:
        Rich Table object
    """
    table = Table(title=f"Week {week_index} • {day.label} ({day.weekday.full_name})")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Workout", style="bold")
    table.add_column("Type", style="magenta")
    table.add_column("Unit", style="cyan")
    table.add_column("Warm-up", justify="right")
    table.add_column("Working", justify="right")

    for i, template in enumerate(day.active_sorted_workouts, 1):
        table.add_row(
            str(i),
            template.name,
            template.weight_type.title,
            "plates" if template.weight_type.uses_plate_picker else template.preferred_unit.value,
            str(template.planned_warm_up_set_count),
            str(template.planned_working_set_count),
        )

    return table


def print_day(day: DayPlan, week_index: int, selection: DaySelection | None = None) -> None:
    """Print a day's workout list, with how it was chosen when auto-selected."""
    if selection is not None:
        note = _SELECTION_NOTES[selection.reason]
        when = f" ({selection.date.isoformat()})" if selection.date else ""
        console.print(f"[dim]{note}{when}[/dim]")

    if not day.active_sorted_workouts:
        console.print(f"[bold]Week {week_index} • {day.label}[/bold]")
        console.print("[yellow]No workouts yet. Add one with 'add-workout'.[/yellow]")
        return
    console.print(format_day_table(day, week_index))


def print_plan_overview(plan: SplitPlan) -> None:
    """One line per configured day across all weeks."""
    for week in plan.sorted_weeks:
        days = ", ".join(
            f"{d.weekday.short_name} {d.label} ({len(d.active_sorted_workouts)})"
            for d in week.sorted_day_plans
        )
        console.print(f"  Week {week.week_index}: {days or '[dim]no days[/dim]'}")


def print_saved_workouts(templates: list[WorkoutTemplate]) -> None:
    if not templates:
        console.print("[yellow]No saved workouts yet.[/yellow]")
        return

    table = Table(title="Saved Workouts")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Workout", style="bold")
    table.add_column("Details")
    for i, template in enumerate(templates, 1):
        table.add_row(str(i), template.name, saved_workout_subtitle(template))
    console.print(table)


def format_session_table(sessions: list[WorkoutSession], title: str = "Workout History") -> Table:
    """
    Create a Rich table listing sessions.

    Args:
        sessions: Sessions in display order

    Returns:
        Rich Table object
    """
    table = Table(title=title)

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Week", justify="right")
    table.add_column("Day", style="magenta")
    table.add_column("Summary")
    table.add_column("Sets", justify="right")

    for i, session in enumerate(sessions, 1):
        table.add_row(
            str(i),
            session.date.strftime("%Y-%m-%d %H:%M"),
            str(session.week_index),
            session.weekday.short_name,
            session_summary(session),
            str(sum(len(e.sets) for e in session.entries)),
        )

    return table


def print_history(sessions: list[WorkoutSession], title: str = "Workout History") -> None:
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return
    console.print(format_session_table(sessions, title))


def print_entry(entry: SessionEntry, catalog: list[PlateOption]) -> None:
    console.print(f"[bold]{entry.workout_name_snapshot}[/bold] [dim]{entry.weight_type_snapshot.title}[/dim]")
    for logged_set in entry.sorted_sets:
        console.print(f"  {describe_set(entry, logged_set)}")
        plates = plate_breakdown(logged_set, catalog)
        if plates:
            console.print(f"    [dim]per side: {', '.join(plates)}[/dim]")


def print_session_detail(session: WorkoutSession, config: AppConfig | None) -> None:
    """Print every entry and set of a session."""
    catalog = config.plate_catalog if config else []
    console.print(
        f"[bold cyan]{session.date.strftime('%A %Y-%m-%d %H:%M')}[/bold cyan]  "
        f"Week {session.week_index} • {session_summary(session)}"
    )
    if not session.entries:
        console.print("[dim]No workouts logged.[/dim]")
        return
    for entry in session.entries:
        console.print()
        print_entry(entry, catalog)


def print_previous(previous: PreviousPerformance) -> None:
    if not previous.found:
        console.print("[dim]No previous session for this workout.[/dim]")
        return

    console.print(f"[dim]Last time ({previous.session_date:%Y-%m-%d}):[/dim]")
    for prev in previous.sets:
        kind = "W" if prev.set_type == SetType.WARM_UP else " "
        console.print(
            f"  [dim]{kind} Set {prev.set_number}: {prev.reps} × "
            f"{_fmt_weight(prev.weight, prev.unit.value)}[/dim]"
        )


def print_deltas(entry: SessionEntry, deltas: list[SetDelta]) -> None:
    """Per-set comparison against the previous session."""
    table = Table(title=f"{entry.workout_name_snapshot} vs last time", show_header=True)
    table.add_column("Set", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Δ reps", justify="right")
    table.add_column("Δ weight", justify="right")

    for logged_set, delta in zip(entry.sorted_sets, deltas):
        table.add_row(
            str(logged_set.set_number),
            str(logged_set.reps),
            _fmt_weight(logged_set.weight_value, logged_set.weight_unit.value),
            _fmt_delta(delta.reps),
            _fmt_delta(round(delta.weight, 2) if delta.weight is not None else None),
        )
    console.print(table)


def format_trends_table(series_list: list[TrendSeries], metric: TrendMetric) -> Table:
    table = Table(title=f"Trends ({metric.title})")
    table.add_column("Workout", style="bold")
    table.add_column("Type")
    table.add_column("Sessions", justify="right")
    table.add_column("Best weight", justify="right")
    table.add_column("Best reps", justify="right")

    for series in series_list:
        best = series.best_weight
        table.add_row(
            series.name,
            series.subtitle,
            str(len(series.points)),
            _fmt_weight(best, series.weight_unit_label.value) if best is not None else "No data",
            str(series.best_reps),
        )
    return table


def print_trends(series_list: list[TrendSeries], metric: TrendMetric, plot: bool = False) -> None:
    if not series_list:
        console.print("[yellow]No workouts to chart yet.[/yellow]")
        return

    console.print(format_trends_table(series_list, metric))
    if plot:
        for series in series_list:
            console.print()
            console.print(create_trend_plot(series, metric))


def print_best_chart(series_list: list[TrendSeries], metric: TrendMetric) -> None:
    """Bar chart of each workout's best value for the metric."""
    labels: list[str] = []
    values: list[float] = []
    for series in series_list:
        best = series.best_weight if metric == TrendMetric.WEIGHT else float(series.best_reps)
        if best is None:
            continue
        labels.append(series.name)
        values.append(best)
    console.print(create_simple_bar_chart(labels, values, title=f"Best {metric.value}"))


def print_settings(config: AppConfig, plan: SplitPlan, profile_name: str = "") -> None:
    if profile_name:
        console.print(f"[bold]Profile:[/bold] {profile_name}")
    console.print(f"[bold]Split:[/bold] {config.split_length_weeks} week(s), started {config.created_at:%Y-%m-%d}")
    console.print(f"[bold]Bar:[/bold] {_fmt_weight(config.bar_weight_value, config.bar_weight_unit.value)}")
    plates = ", ".join(p.label for p in sorted(config.plate_catalog, key=lambda p: p.value, reverse=True))
    console.print(f"[bold]Plates:[/bold] {plates or '[dim]none[/dim]'}")
    print_plan_overview(plan)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
