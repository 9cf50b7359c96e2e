"""Shared fixtures: an lb config anchored on a Sunday, a one-day plan, and a temp store."""

from datetime import datetime

import pytest

from plate_loader.core.models import (
    AppConfig,
    AppData,
    DayPlan,
    PlanWeek,
    SplitPlan,
    WeightType,
    WeightUnit,
    Weekday,
    WorkoutTemplate,
)
from plate_loader.core.units import default_plate_options
from plate_loader.io.store import DataStore

ANCHOR = datetime(2024, 1, 7, 9, 0)  # a Sunday


@pytest.fixture
def lb_config() -> AppConfig:
    """1-week split, 45 lb bar, default lb plates (45/35/25/10/5/2.5)."""
    return AppConfig(
        split_length_weeks=1,
        bar_weight_value=45.0,
        bar_weight_unit=WeightUnit.LB,
        created_at=ANCHOR,
        plate_catalog=default_plate_options(WeightUnit.LB),
    )


@pytest.fixture
def squat() -> WorkoutTemplate:
    return WorkoutTemplate(
        name="Squat",
        weight_type=WeightType.BARBELL,
        preferred_unit=WeightUnit.LB,
        planned_warm_up_set_count=1,
        planned_working_set_count=3,
    )


@pytest.fixture
def push_day(squat: WorkoutTemplate) -> DayPlan:
    return DayPlan(weekday=Weekday.MONDAY, label="Push", workouts=[squat])


@pytest.fixture
def plan(push_day: DayPlan) -> SplitPlan:
    return SplitPlan(weeks=[PlanWeek(week_index=1, day_plans=[push_day])])


@pytest.fixture
def app_data(lb_config: AppConfig, plan: SplitPlan) -> AppData:
    return AppData(config=lb_config, plan=plan, sessions=[])


@pytest.fixture
def store(tmp_path) -> DataStore:
    return DataStore(tmp_path / "data")

