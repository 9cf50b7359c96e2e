"""Per-workout trend series and their ASCII rendering."""

from datetime import datetime

from plate_loader.core.ascii_plot import create_simple_bar_chart, create_trend_plot
from plate_loader.core.models import (
    DirectLoad,
    LoggedSet,
    PlateLoad,
    SessionEntry,
    SetType,
    Weekday,
    WeightType,
    WeightUnit,
    WorkoutSession,
    WorkoutTemplate,
)
from plate_loader.core.trends import (
    TrendMetric,
    build_trend_series,
    metric_values,
    trend_identity_key,
)


def _template(name: str, weight_type: WeightType = WeightType.DUMBBELL, unit: WeightUnit = WeightUnit.LB, **kwargs):
    return WorkoutTemplate(name=name, weight_type=weight_type, preferred_unit=unit, **kwargs)


def _direct(template: WorkoutTemplate, *sets: tuple[float, int]) -> SessionEntry:
    return SessionEntry(
        workout_template_id=template.id,
        workout_name_snapshot=template.name,
        weight_type_snapshot=template.weight_type,
        sets=[
            LoggedSet(set_number=i + 1, reps=reps, load=DirectLoad(value=weight, unit=template.preferred_unit))
            for i, (weight, reps) in enumerate(sets)
        ],
    )


def _barbell(template: WorkoutTemplate, *sets: tuple[float, int]) -> SessionEntry:
    return SessionEntry(
        workout_template_id=template.id,
        workout_name_snapshot=template.name,
        weight_type_snapshot=template.weight_type,
        sets=[
            LoggedSet(
                set_number=i + 1,
                reps=reps,
                load=PlateLoad(
                    per_side_plates=[],
                    bar_weight_value=45,
                    bar_weight_unit=WeightUnit.LB,
                    total_value=total,
                    total_unit=WeightUnit.LB,
                ),
            )
            for i, (total, reps) in enumerate(sets)
        ],
    )


def _session(day: int, *entries: SessionEntry, weekday: Weekday = Weekday.MONDAY) -> WorkoutSession:
    return WorkoutSession(
        date=datetime(2024, 1, day, 18, 0),
        week_index=1,
        weekday=weekday,
        day_label_snapshot="Push",
        entries=list(entries),
    )


class TestIdentity:
    def test_plate_types_ignore_preferred_unit(self):
        a = _template("Squat", WeightType.BARBELL, WeightUnit.LB)
        b = _template(" squat", WeightType.BARBELL, WeightUnit.KG)
        assert trend_identity_key(a) == trend_identity_key(b) == "squat|barbell|plate"

    def test_numeric_types_split_by_unit(self):
        lb = _template("Curl", unit=WeightUnit.LB)
        kg = _template("Curl", unit=WeightUnit.KG)
        assert trend_identity_key(lb) != trend_identity_key(kg)


class TestBuildSeries:
    def test_same_workout_on_two_days_is_one_series(self):
        """Curl on Monday and Thursday templates groups into one series with two points."""
        monday_curl = _template("Curl")
        thursday_curl = _template("curl ")
        sessions = [
            _session(8, _direct(monday_curl, (20, 10), (25, 8))),
            _session(11, _direct(thursday_curl, (30, 6)), weekday=Weekday.THURSDAY),
        ]
        series = build_trend_series([monday_curl, thursday_curl], sessions)
        assert len(series) == 1
        assert [p.weight_peak for p in series[0].points] == [25.0, 30.0]
        assert [p.reps_peak for p in series[0].points] == [10, 6]
        assert [p.sequence for p in series[0].points] == [1, 2]

    def test_points_ordered_by_date(self):
        curl = _template("Curl")
        sessions = [_session(15, _direct(curl, (30, 5))), _session(8, _direct(curl, (20, 5)))]
        points = build_trend_series([curl], sessions)[0].points
        assert [p.date.day for p in points] == [8, 15]

    def test_barbell_peak_uses_total(self):
        squat = _template("Squat", WeightType.BARBELL)
        entry = _barbell(squat, (45, 10), (245, 5), (225, 5))
        entry.sets[0].set_type = SetType.WARM_UP
        series = build_trend_series([squat], [_session(8, entry)])[0]
        assert series.best_weight == 245.0
        assert series.best_reps == 10
        assert series.subtitle == "Barbell"

    def test_archived_and_blank_templates_skipped(self):
        archived = _template("Fly", is_archived=True)
        blank = _template("   ")
        assert build_trend_series([archived, blank], []) == []

    def test_series_without_points_kept(self):
        series = build_trend_series([_template("Lateral Raise")], [])
        assert len(series) == 1
        assert series[0].points == []
        assert series[0].best_weight is None
        assert series[0].best_reps == 0

    def test_sorted_by_name_then_type(self):
        templates = [
            _template("row", WeightType.MACHINE),
            _template("Bench", WeightType.BARBELL),
            _template("Row", WeightType.BARBELL),
        ]
        series = build_trend_series(templates, [])
        assert [(s.name.casefold(), s.weight_type) for s in series] == [
            ("bench", WeightType.BARBELL),
            ("row", WeightType.BARBELL),
            ("row", WeightType.MACHINE),
        ]

    def test_unit_label_falls_back_to_preferred(self):
        curl = _template("Curl", unit=WeightUnit.KG)
        series = build_trend_series([curl], [])[0]
        assert series.weight_unit_label == WeightUnit.KG
        assert series.subtitle == "Dumbbell • KG"

    def test_metric_values(self):
        curl = _template("Curl")
        sessions = [_session(8, _direct(curl, (20, 12))), _session(15, _direct(curl, (22.5, 10)))]
        series = build_trend_series([curl], sessions)[0]
        assert metric_values(series, TrendMetric.WEIGHT) == [(1, 20.0), (2, 22.5)]
        assert metric_values(series, TrendMetric.REPS) == [(1, 12.0), (2, 10.0)]


class TestPlots:
    def test_trend_plot_has_title_and_points(self):
        curl = _template("Curl")
        sessions = [_session(d, _direct(curl, (w, 8))) for d, w in ((8, 20), (15, 25), (22, 30))]
        series = build_trend_series([curl], sessions)[0]
        plot = create_trend_plot(series, TrendMetric.WEIGHT)
        assert plot.splitlines()[0] == "Curl: peak weight (lb)"
        assert plot.count("●") == 3
        assert "#1" in plot and "#3" in plot

    def test_trend_plot_without_data(self):
        series = build_trend_series([_template("Curl")], [])[0]
        assert create_trend_plot(series) == "No weight data for Curl yet."
        assert create_trend_plot(series, TrendMetric.REPS) == "No sessions logged for Curl yet."

    def test_bar_chart(self):
        chart = create_simple_bar_chart(["Squat", "Curl"], [245.0, 30.0], title="Best weight")
        lines = chart.splitlines()
        assert lines[0] == "Best weight"
        assert lines[2].endswith("245")
        assert create_simple_bar_chart([], []) == "No data to display."
