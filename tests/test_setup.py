"""First-run setup, settings edits and factory reset."""

from datetime import datetime

import pytest

from plate_loader.core.errors import ValidationError
from plate_loader.core.models import AppData, Weekday, WeightType, WeightUnit, WorkoutTemplate
from plate_loader.core.setup import (
    add_plate_draft,
    apply_settings,
    complete_setup,
    default_week_drafts,
    factory_reset,
    resize_week_drafts,
    week_drafts_from_plan,
)
from plate_loader.core.units import default_plate_options

NOW = datetime(2024, 1, 7, 9, 0)


def _weeks(*selected: list[tuple[Weekday, str]]):
    drafts = default_week_drafts(len(selected))
    for draft, days in zip(drafts, selected):
        for weekday, label in days:
            draft.select(weekday, label)
    return drafts


class TestCompleteSetup:
    def test_saves_config_and_plan(self, store):
        weeks = _weeks([(Weekday.MONDAY, "Push"), (Weekday.THURSDAY, "  ")], [(Weekday.TUESDAY, "Pull")])
        data = complete_setup(store, 2, "45", WeightUnit.LB, weeks, default_plate_options(WeightUnit.LB), now=NOW)

        assert data.config.split_length_weeks == 2
        assert data.config.created_at == NOW
        labels = [d.label for d in data.plan.week(1).sorted_day_plans]
        assert labels == ["Push", "Thursday"]
        assert store.load().plan.week(2).day_plan(Weekday.TUESDAY).label == "Pull"

    def test_bad_bar_weight(self, store):
        with pytest.raises(ValidationError, match="Bar weight must be a number >= 0."):
            complete_setup(store, 1, "-1", WeightUnit.LB, _weeks([(Weekday.MONDAY, "")]), default_plate_options(WeightUnit.LB))
        assert not store.exists()

    def test_no_plates(self, store):
        with pytest.raises(ValidationError, match="Add at least one plate option."):
            complete_setup(store, 1, "45", WeightUnit.LB, _weeks([(Weekday.MONDAY, "")]), [])

    def test_week_without_days(self, store):
        with pytest.raises(ValidationError, match="Each week must have at least one selected day."):
            complete_setup(store, 2, "45", WeightUnit.LB, _weeks([(Weekday.MONDAY, "")], []), default_plate_options(WeightUnit.LB))

    def test_split_length_clamped(self, store):
        weeks = _weeks(*([[(Weekday.MONDAY, "")]] * 4))
        data = complete_setup(store, 9, "20", WeightUnit.KG, weeks, default_plate_options(WeightUnit.KG))
        assert data.config.split_length_weeks == 4


class TestPlateDrafts:
    def test_adds_sorted(self):
        plates = default_plate_options(WeightUnit.LB)
        assert add_plate_draft(plates, "15", WeightUnit.LB)
        values = [p.value for p in plates]
        assert values == sorted(values, reverse=True)
        assert any(p.label == "15 lb" for p in plates)

    def test_duplicate_within_tolerance(self):
        plates = default_plate_options(WeightUnit.LB)
        assert not add_plate_draft(plates, "45.00001", WeightUnit.LB)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="Plate value must be a number >= 0."):
            add_plate_draft([], "-2.5", WeightUnit.KG)


class TestApplySettings:
    def test_keeps_workouts_on_surviving_days(self, store, app_data, squat):
        weeks = week_drafts_from_plan(app_data.plan, 2)
        weeks[0].select(Weekday.MONDAY, "Legs")
        weeks[1].select(Weekday.FRIDAY, "")

        apply_settings(store, app_data, 2, "20", WeightUnit.KG, weeks, app_data.config.plate_catalog)

        monday = app_data.plan.week(1).day_plan(Weekday.MONDAY)
        assert monday.label == "Legs"
        assert monday.workouts == [squat]
        assert app_data.plan.week(2).day_plan(Weekday.FRIDAY).label == "Friday"
        assert app_data.config.bar_weight_unit == WeightUnit.KG
        assert store.load().config.split_length_weeks == 2

    def test_plate_ids_preserved(self, store, app_data):
        ids = [p.id for p in app_data.config.plate_catalog]
        weeks = week_drafts_from_plan(app_data.plan, 1)
        apply_settings(store, app_data, 1, "45", WeightUnit.LB, weeks, list(app_data.config.plate_catalog))
        assert [p.id for p in app_data.config.plate_catalog] == ids

    def test_unselected_day_and_extra_weeks_dropped(self, store, app_data):
        weeks = week_drafts_from_plan(app_data.plan, 1)
        weeks[0].day(Weekday.MONDAY).selected = False
        weeks[0].select(Weekday.WEDNESDAY, "")
        apply_settings(store, app_data, 1, "45", WeightUnit.LB, weeks, app_data.config.plate_catalog)
        assert [d.weekday for d in app_data.plan.week(1).day_plans] == [Weekday.WEDNESDAY]

    def test_invalid_input_leaves_data_alone(self, store, app_data):
        weeks = week_drafts_from_plan(app_data.plan, 1)
        with pytest.raises(ValidationError):
            apply_settings(store, app_data, 1, "heavy", WeightUnit.LB, weeks, app_data.config.plate_catalog)
        assert app_data.config.bar_weight_value == 45.0

    def test_requires_setup(self, store):
        with pytest.raises(ValidationError, match="Run setup first."):
            apply_settings(store, AppData(), 1, "45", WeightUnit.LB, [], [])


class TestWeekDrafts:
    def test_resize(self):
        drafts = default_week_drafts(3)
        drafts[0].select(Weekday.MONDAY)
        assert len(resize_week_drafts(drafts, 1)) == 1
        grown = resize_week_drafts(drafts[:1], 3)
        assert [w.week_index for w in grown] == [1, 2, 3]
        assert grown[0].selected_days[0].weekday == Weekday.MONDAY
        assert grown[2].selected_days == []


class TestFactoryReset:
    def test_clears_everything(self, store, app_data, squat):
        store.save(app_data)
        factory_reset(store, app_data)
        assert app_data.needs_setup
        assert app_data.sessions == []
        assert store.load().needs_setup

    def test_setup_after_reset(self, store, app_data):
        store.save(app_data)
        factory_reset(store, app_data)
        data = complete_setup(store, 1, "45", WeightUnit.LB, _weeks([(Weekday.SUNDAY, "Full")]), default_plate_options(WeightUnit.LB))
        template = WorkoutTemplate(name="Deadlift", weight_type=WeightType.BARBELL, preferred_unit=WeightUnit.LB)
        data.plan.week(1).day_plan(Weekday.SUNDAY).workouts.append(template)
        store.save(data)
        assert store.load().plan.find_template(template.id) is not None
