"""Workout template management within a day."""

import pytest

from plate_loader.core.errors import ValidationError
from plate_loader.core.models import DayPlan, PlanWeek, SplitPlan, Weekday, WeightType, WeightUnit
from plate_loader.core.workouts import (
    WorkoutDraft,
    archive_workout,
    delete_workout,
    move_workout,
    rename_workout,
    renumber,
    reorder_workouts,
    save_workout,
    saved_workout_subtitle,
    saved_workouts,
)


@pytest.fixture
def day() -> DayPlan:
    return DayPlan(weekday=Weekday.MONDAY, label="Push")


def _add(day: DayPlan, name: str, weight_type: WeightType = WeightType.DUMBBELL, **kwargs):
    return save_workout(day, WorkoutDraft(name=name, weight_type=weight_type, **kwargs), WeightUnit.LB)


class TestSaveWorkout:
    def test_appends_with_dense_sort_index(self, day):
        first = _add(day, "Bench Press", WeightType.BARBELL)
        second = _add(day, "Fly")
        assert (first.sort_index, second.sort_index) == (0, 1)
        assert [w.name for w in day.active_sorted_workouts] == ["Bench Press", "Fly"]

    def test_trims_name(self, day):
        assert _add(day, "  Dips  ").name == "Dips"

    def test_blank_name_rejected(self, day):
        with pytest.raises(ValidationError, match="Workout name is required."):
            _add(day, "   ")

    def test_duplicate_name_and_type_rejected(self, day):
        _add(day, "Squat", WeightType.BARBELL)
        with pytest.raises(ValidationError, match="already exists"):
            _add(day, " squat ", WeightType.BARBELL)
        assert len(day.workouts) == 1

    def test_same_name_other_type_allowed(self, day):
        _add(day, "Row", WeightType.BARBELL)
        _add(day, "Row", WeightType.MACHINE)
        assert len(day.workouts) == 2

    def test_plate_types_store_bar_unit(self, day):
        template = save_workout(
            day,
            WorkoutDraft(name="Leg Press", weight_type=WeightType.PLATE_LOADED, preferred_unit=WeightUnit.KG),
            WeightUnit.LB,
        )
        assert template.preferred_unit == WeightUnit.LB

    def test_counts_clamped(self, day):
        template = _add(day, "Curl", planned_warm_up_set_count=-2, planned_working_set_count=0)
        assert template.planned_warm_up_set_count == 0
        assert template.planned_working_set_count == 1

    def test_edit_keeps_own_name(self, day):
        template = _add(day, "Press")
        draft = WorkoutDraft.from_template(template)
        draft.planned_working_set_count = 5
        save_workout(day, draft, WeightUnit.LB, editing=template)
        assert len(day.workouts) == 1
        assert template.planned_working_set_count == 5

    def test_rename_rejects_blank(self, day):
        template = _add(day, "Press")
        with pytest.raises(ValidationError):
            rename_workout(template, "  ")
        rename_workout(template, "Overhead Press")
        assert template.name == "Overhead Press"


class TestOrdering:
    def test_move_renumbers_densely(self, day):
        for name in ("A", "B", "C"):
            _add(day, name)
        move_workout(day, 2, 0)
        assert [w.name for w in day.active_sorted_workouts] == ["C", "A", "B"]
        assert [w.sort_index for w in day.active_sorted_workouts] == [0, 1, 2]

    def test_reorder_requires_permutation(self, day):
        a = _add(day, "A")
        _add(day, "B")
        with pytest.raises(ValidationError):
            reorder_workouts(day, [a.id])

    def test_delete_closes_gap(self, day):
        a, b, c = (_add(day, n) for n in ("A", "B", "C"))
        delete_workout(day, b.id)
        assert [w.id for w in day.active_sorted_workouts] == [a.id, c.id]
        assert c.sort_index == 1

    def test_archive_hides_and_renumbers(self, day):
        a, b = (_add(day, n) for n in ("A", "B"))
        archive_workout(day, a.id)
        assert day.active_sorted_workouts == [b]
        assert b.sort_index == 0
        assert a in day.workouts

    def test_renumber_idempotent(self, day):
        for name in ("A", "B", "C"):
            _add(day, name)
        day.workouts[0].sort_index = 7
        renumber(day)
        once = [w.sort_index for w in day.workouts]
        renumber(day)
        assert [w.sort_index for w in day.workouts] == once

    def test_ties_broken_by_name(self, day):
        _add(day, "b")
        _add(day, "A")
        for w in day.workouts:
            w.sort_index = 0
        assert [w.name for w in day.active_sorted_workouts] == ["A", "b"]


class TestSavedWorkouts:
    def test_deduplicates_across_days(self):
        monday = DayPlan(weekday=Weekday.MONDAY, label="Push")
        thursday = DayPlan(weekday=Weekday.THURSDAY, label="Push B")
        _add(monday, "Bench", WeightType.BARBELL)
        _add(thursday, "Bench", WeightType.BARBELL)
        _add(thursday, "Arnold Press")
        plan = SplitPlan(weeks=[PlanWeek(week_index=1, day_plans=[monday, thursday])])

        saved = saved_workouts(plan)
        assert [t.name for t in saved] == ["Arnold Press", "Bench"]

    def test_archived_excluded(self):
        monday = DayPlan(weekday=Weekday.MONDAY, label="Push")
        template = _add(monday, "Bench", WeightType.BARBELL)
        archive_workout(monday, template.id)
        plan = SplitPlan(weeks=[PlanWeek(week_index=1, day_plans=[monday])])
        assert saved_workouts(plan) == []

    def test_subtitle(self, day):
        template = _add(day, "Bench", WeightType.BARBELL, planned_warm_up_set_count=2)
        assert saved_workout_subtitle(template) == "Barbell • WU 2 • WK 3"
