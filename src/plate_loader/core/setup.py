"""
First-run setup, settings edits and factory reset.

Week drafts describe which weekdays are training days in each week of
the split, with optional labels.  The same draft shape feeds the initial
setup and later settings edits; settings edits keep existing workouts
on days that stay selected.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from loguru import logger

from .config import PLATE_VALUE_TOLERANCE, clamp_split_length
from .errors import ValidationError
from .models import (
    AppConfig,
    AppData,
    DayPlan,
    PlanWeek,
    PlateOption,
    SplitPlan,
    Weekday,
    WeightUnit,
)
from .units import parse_non_negative, plate_label

if TYPE_CHECKING:
    from ..io.store import DataStore


@dataclass
class DayDraft:
    weekday: Weekday
    selected: bool = False
    label: str = ""

    @property
    def final_label(self) -> str:
        """Trimmed label, or the weekday's full name when blank."""
        return self.label.strip() or self.weekday.full_name


@dataclass
class WeekDraft:
    week_index: int
    days: list[DayDraft] = field(default_factory=list)

    @classmethod
    def empty(cls, week_index: int) -> "WeekDraft":
        """A week with all seven days present and none selected."""
        return cls(week_index=week_index, days=[DayDraft(weekday=d) for d in Weekday])

    def day(self, weekday: Weekday) -> DayDraft:
        return next(d for d in self.days if d.weekday == weekday)

    def select(self, weekday: Weekday, label: str = "") -> None:
        day = self.day(weekday)
        day.selected = True
        day.label = label

    @property
    def selected_days(self) -> list[DayDraft]:
        return [d for d in self.days if d.selected]


def default_week_drafts(split_length: int) -> list[WeekDraft]:
    return [WeekDraft.empty(i) for i in range(1, clamp_split_length(split_length) + 1)]


def week_drafts_from_plan(plan: SplitPlan, split_length: int) -> list[WeekDraft]:
    """Drafts mirroring the current plan: configured days selected with their labels."""
    drafts = []
    for index in range(1, clamp_split_length(split_length) + 1):
        draft = WeekDraft.empty(index)
        week = plan.week(index)
        if week is not None:
            for day in week.day_plans:
                draft.select(day.weekday, day.label)
        drafts.append(draft)
    return drafts


def resize_week_drafts(drafts: list[WeekDraft], split_length: int) -> list[WeekDraft]:
    """Truncate or extend (with empty weeks) to the clamped split length."""
    target = clamp_split_length(split_length)
    resized = drafts[:target]
    for index in range(len(resized) + 1, target + 1):
        resized.append(WeekDraft.empty(index))
    return resized


def validate_week_drafts(drafts: list[WeekDraft], split_length: int) -> None:
    """
    Raises:
        ValidationError: If a week within the split has no selected day
    """
    for draft in drafts[: clamp_split_length(split_length)]:
        if not draft.selected_days:
            raise ValidationError("Each week must have at least one selected day.")


def add_plate_draft(plates: list[PlateOption], value_text: str, unit: WeightUnit) -> bool:
    """
    Add a custom plate to ``plates`` (kept sorted heaviest first).

    Returns:
        False if a plate within tolerance of the value already exists

    Raises:
        ValidationError: If the value is not a number >= 0
    """
    value = parse_non_negative(value_text, "Plate value")
    if any(abs(p.value - value) < PLATE_VALUE_TOLERANCE for p in plates):
        return False
    plates.append(PlateOption(value=value, unit=unit, label=plate_label(value, unit)))
    plates.sort(key=lambda p: p.value, reverse=True)
    return True


def _validate_inputs(
    split_length: int,
    bar_weight_text: str,
    week_drafts: list[WeekDraft],
    plates: list[PlateOption],
) -> float:
    bar_weight = parse_non_negative(bar_weight_text, "Bar weight")
    if not plates:
        raise ValidationError("Add at least one plate option.")
    validate_week_drafts(week_drafts, split_length)
    return bar_weight


def _draft_for(week_drafts: list[WeekDraft], week_index: int) -> WeekDraft | None:
    return next((w for w in week_drafts if w.week_index == week_index), None)


def complete_setup(
    store: "DataStore",
    split_length: int,
    bar_weight_text: str,
    bar_unit: WeightUnit,
    week_drafts: list[WeekDraft],
    plates: list[PlateOption],
    now: datetime | None = None,
) -> AppData:
    """
    Build and save a fresh config and plan, replacing any existing data.

    ``now`` becomes the split anchor (AppConfig.created_at).

    Raises:
        ValidationError: Bad bar weight, empty plate list, or a week
            without selected days
        PersistenceError: If saving fails
    """
    length = clamp_split_length(split_length)
    bar_weight = _validate_inputs(length, bar_weight_text, week_drafts, plates)

    config = AppConfig(
        split_length_weeks=length,
        bar_weight_value=bar_weight,
        bar_weight_unit=bar_unit,
        created_at=now or datetime.now(),
        plate_catalog=[PlateOption(value=p.value, unit=p.unit, label=p.label) for p in plates],
    )

    plan = SplitPlan()
    for index in range(1, length + 1):
        draft = _draft_for(week_drafts, index)
        if draft is None:
            continue
        plan.weeks.append(
            PlanWeek(
                week_index=index,
                day_plans=[
                    DayPlan(weekday=d.weekday, label=d.final_label) for d in draft.selected_days
                ],
            )
        )

    data = AppData(config=config, plan=plan, sessions=[])
    store.save(data)
    logger.info(f"Setup complete: {length}-week split, bar {bar_weight} {bar_unit.value}")
    return data


def apply_settings(
    store: "DataStore",
    data: AppData,
    split_length: int,
    bar_weight_text: str,
    bar_unit: WeightUnit,
    week_drafts: list[WeekDraft],
    plates: list[PlateOption],
) -> None:
    """
    Apply edited settings to an existing config and plan.

    The plate catalog is rewritten in the bar unit, keeping plate ids so
    logged plate counts still resolve.  Weeks beyond the new length are
    dropped, missing weeks created, unselected days removed and selected
    days relabelled or created.  Workouts on surviving days are kept.

    Raises:
        ValidationError: As complete_setup(), or if setup has not run
        PersistenceError: If saving fails; ``data`` is left unchanged
    """
    if data.config is None or data.plan is None:
        raise ValidationError("Run setup first.")
    length = clamp_split_length(split_length)
    bar_weight = _validate_inputs(length, bar_weight_text, week_drafts, plates)

    config, plan = data.config, data.plan
    touched = [config, plan, *plan.weeks, *(d for w in plan.weeks for d in w.day_plans)]
    with store.transaction(data, *touched):
        config.split_length_weeks = length
        config.bar_weight_unit = bar_unit
        config.bar_weight_value = bar_weight
        config.plate_catalog = [
            PlateOption(id=p.id, value=p.value, unit=bar_unit, label=p.label) for p in plates
        ]

        plan.weeks = [w for w in plan.weeks if w.week_index <= length]
        for index in range(1, length + 1):
            draft = _draft_for(week_drafts, index)
            if draft is None:
                continue
            week = plan.week(index)
            if week is None:
                week = PlanWeek(week_index=index)
                plan.weeks.append(week)

            selected = {d.weekday: d for d in draft.selected_days}
            week.day_plans = [d for d in week.day_plans if d.weekday in selected]
            for weekday, day_draft in selected.items():
                existing = week.day_plan(weekday)
                if existing is not None:
                    existing.label = day_draft.final_label
                else:
                    week.day_plans.append(DayPlan(weekday=weekday, label=day_draft.final_label))

    logger.info(f"Settings saved: {length}-week split, {len(plates)} plates")


def factory_reset(store: "DataStore", data: AppData) -> None:
    """Delete config, plan and every session, on disk and in memory."""
    store.clear()
    data.config = None
    data.plan = None
    data.sessions = []
    logger.info("Factory reset: all data removed")


def needs_setup(data: AppData) -> bool:
    return data.needs_setup
