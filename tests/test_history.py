"""History browsing helpers."""

from datetime import datetime

from plate_loader.core.history import describe_set, plate_breakdown, session_summary, sessions_for_day
from plate_loader.core.models import (
    DirectLoad,
    LoggedSet,
    PlateCount,
    PlateLoad,
    SessionEntry,
    SetType,
    Weekday,
    WeightType,
    WeightUnit,
    WorkoutSession,
)


def _plate_set(lb_config) -> LoggedSet:
    by_value = {p.value: p.id for p in lb_config.plate_catalog}
    return LoggedSet(
        set_number=2,
        reps=5,
        load=PlateLoad(
            per_side_plates=[
                PlateCount(plate_option_id=by_value[10.0], count_per_side=1),
                PlateCount(plate_option_id=by_value[45.0], count_per_side=2),
                PlateCount(plate_option_id="0123456789abcdef", count_per_side=1),
            ],
            bar_weight_value=45,
            bar_weight_unit=WeightUnit.LB,
            total_value=245,
            total_unit=WeightUnit.LB,
        ),
    )


def _session(day: int, week: int = 1, weekday: Weekday = Weekday.MONDAY, entries: int = 1) -> WorkoutSession:
    return WorkoutSession(
        date=datetime(2024, 1, day, 18, 0),
        week_index=week,
        weekday=weekday,
        day_label_snapshot="Push",
        entries=[
            SessionEntry(workout_template_id=f"t{i}", workout_name_snapshot="Curl", weight_type_snapshot=WeightType.DUMBBELL)
            for i in range(entries)
        ],
    )


class TestHistory:
    def test_sessions_for_day_newest_first(self):
        sessions = [_session(8), _session(15), _session(9, weekday=Weekday.TUESDAY), _session(22, week=2)]
        result = sessions_for_day(sessions, 1, Weekday.MONDAY)
        assert [s.date.day for s in result] == [15, 8]

    def test_summary_pluralizes(self):
        assert session_summary(_session(8)) == "Push • 1 workout"
        assert session_summary(_session(8, entries=3)) == "Push • 3 workouts"

    def test_plate_breakdown(self, lb_config):
        rows = plate_breakdown(_plate_set(lb_config), lb_config.plate_catalog)
        assert rows[0] == "2 × 45 lb"
        assert "1 × 10 lb" in rows
        assert "1 × plate 01234567" in rows

    def test_plate_breakdown_for_numeric_set(self, lb_config):
        logged = LoggedSet(set_number=1, reps=10, load=DirectLoad(value=20, unit=WeightUnit.LB))
        assert plate_breakdown(logged, lb_config.plate_catalog) == []

    def test_describe_set(self, lb_config):
        barbell = SessionEntry(
            workout_template_id="t", workout_name_snapshot="Squat", weight_type_snapshot=WeightType.BARBELL
        )
        assert describe_set(barbell, _plate_set(lb_config)) == "Set 2 (Working): Total 245 lb • Reps 5"

        curl = SessionEntry(
            workout_template_id="c", workout_name_snapshot="Curl", weight_type_snapshot=WeightType.DUMBBELL
        )
        warm_up = LoggedSet(
            set_number=1, reps=12, load=DirectLoad(value=12.5, unit=WeightUnit.KG), set_type=SetType.WARM_UP
        )
        assert describe_set(curl, warm_up) == "Set 1 (Warm-up): Weight 12.5 kg • Reps 12"
