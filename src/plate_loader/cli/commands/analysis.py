"""Analysis commands: trends."""

from typing import Annotated, Optional

import typer

from ...core.models import normalize_name
from ...core.trends import TrendMetric, build_trend_series
from .. import views
from ..app import DataDirOption, app, get_store, load_data


@app.command()
def trends(
    metric: Annotated[
        TrendMetric,
        typer.Option("--metric", "-m", help="weight (peak load) or reps (peak reps)"),
    ] = TrendMetric.WEIGHT,
    workout: Annotated[
        Optional[str],
        typer.Option("--workout", "-w", help="Only workouts whose name contains this text"),
    ] = None,
    plot: Annotated[
        bool,
        typer.Option("--plot", "-p", help="Draw an ASCII chart per workout"),
    ] = False,
    chart: Annotated[
        bool,
        typer.Option("--chart", help="Bar chart of each workout's best value"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show per-workout progress across sessions.

    Workouts with the same name and equipment are combined, even across days.
    """
    data = load_data(get_store(data_dir))
    series = build_trend_series(data.plan.all_templates(), data.sessions)

    if workout:
        needle = normalize_name(workout)
        series = [s for s in series if needle in normalize_name(s.name)]
        if not series:
            views.print_warning(f"No workouts match '{workout}'.")
            raise typer.Exit(0)

    views.print_trends(series, metric, plot=plot)
    if chart and series:
        views.console.print()
        views.print_best_chart(series, metric)
