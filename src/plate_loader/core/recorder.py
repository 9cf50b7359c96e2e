"""
Session logging engine.

Turns in-progress set drafts into persisted LoggedSet / SessionEntry /
WorkoutSession records.

Save protocol
-------------
  prepare_save()  validate → locate today's session for the slot →
                  detect duplicate entries → check plan drift
  (caller asks the user: replace latest / keep both, sync planned counts?)
  commit_save()   build sets, create or reuse the session, apply the
                  duplicate resolution, update template, save; all inside
                  one store transaction

A "slot" is the (week_index, weekday) pair of the day plan being logged.
Two saves land in the same session when the slot matches and both fall on
the same calendar day.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from .errors import ValidationError
from .models import (
    AppConfig,
    AppData,
    DayPlan,
    DirectLoad,
    LoggedSet,
    PlateCount,
    PlateLoad,
    PlateOption,
    SessionEntry,
    SetType,
    WeightUnit,
    WorkoutSession,
    WorkoutTemplate,
)
from .units import (
    base_plate_weight,
    convert,
    parse_weight,
    plate_total,
    plates_for_unit,
    pretty_weight,
)

if TYPE_CHECKING:
    from ..io.store import DataStore


class DuplicateResolution(str, Enum):
    REPLACE_LATEST = "replace_latest"
    KEEP_BOTH = "keep_both"


@dataclass
class SetDraft:
    """One editable set row.  Text fields hold raw user input."""

    set_type: SetType = SetType.WORKING
    reps_text: str = ""
    load_text: str = ""
    plate_counts: dict[str, int] = field(default_factory=dict)

    def duplicate(self) -> "SetDraft":
        return SetDraft(
            set_type=self.set_type,
            reps_text=self.reps_text,
            load_text=self.load_text,
            plate_counts=dict(self.plate_counts),
        )


@dataclass
class LoggingContext:
    """Everything a save needs besides the drafts."""

    template: WorkoutTemplate
    day_plan: DayPlan
    week_index: int
    config: AppConfig
    session_date: datetime = field(default_factory=datetime.now)
    unit: WeightUnit | None = None  # chosen unit for dumbbell/machine; None = template's

    @property
    def uses_plate_picker(self) -> bool:
        return self.template.weight_type.uses_plate_picker

    @property
    def load_unit(self) -> WeightUnit:
        """Unit the sets are logged in."""
        if self.uses_plate_picker:
            return self.config.bar_weight_unit
        return self.unit or self.template.preferred_unit

    @property
    def plate_options(self) -> list[PlateOption]:
        """Plates usable for this log: catalog plates in the bar unit, heaviest first."""
        return plates_for_unit(self.config.plate_catalog, self.config.bar_weight_unit)

    @property
    def base_weight(self) -> float:
        return base_plate_weight(self.template.weight_type, self.config)


@dataclass
class PlanDrift:
    """Logged warm-up/working counts that differ from the template's plan."""

    warm_up: int
    working: int
    planned_warm_up: int
    planned_working: int


@dataclass
class SavePlan:
    """Outcome of prepare_save(): what commit_save() will run into."""

    existing_session: WorkoutSession | None
    duplicate_indices: list[int]
    plan_drift: PlanDrift | None

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_indices)


@dataclass
class SaveResult:
    session: WorkoutSession
    entry: SessionEntry
    created_session: bool
    replaced_duplicate: bool
    synced_plan: bool


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


def _empty_counts(plate_option_ids: list[str]) -> dict[str, int]:
    return {option_id: 0 for option_id in plate_option_ids}


def default_drafts(template: WorkoutTemplate, plate_option_ids: list[str]) -> list[SetDraft]:
    """
    Initial draft rows: planned warm-ups, then planned working sets.

    Falls back to a single working row when both counts are zero.
    """
    warm_ups = max(0, template.planned_warm_up_set_count)
    working = max(0, template.planned_working_set_count)
    drafts = [
        SetDraft(set_type=SetType.WARM_UP, plate_counts=_empty_counts(plate_option_ids))
        for _ in range(warm_ups)
    ]
    drafts += [
        SetDraft(set_type=SetType.WORKING, plate_counts=_empty_counts(plate_option_ids))
        for _ in range(working)
    ]
    if not drafts:
        drafts.append(SetDraft(plate_counts=_empty_counts(plate_option_ids)))
    return drafts


def copy_last_draft(drafts: list[SetDraft]) -> SetDraft | None:
    """Append a copy of the last row; no-op (None) on an empty list."""
    if not drafts:
        return None
    copy = drafts[-1].duplicate()
    drafts.append(copy)
    return copy


def remove_drafts(drafts: list[SetDraft], indices: list[int]) -> None:
    for index in sorted(set(indices), reverse=True):
        if 0 <= index < len(drafts):
            del drafts[index]


def parse_reps(text: str) -> int:
    """Reps from typed text; anything non-integer counts as 0."""
    try:
        return max(0, int(text.strip()))
    except ValueError:
        return 0


def draft_total(draft: SetDraft, context: LoggingContext) -> float:
    """Live plate total for a plate-picker draft row."""
    return plate_total(context.base_weight, context.plate_options, draft.plate_counts)


def build_logged_sets(drafts: list[SetDraft], context: LoggingContext) -> list[LoggedSet]:
    """
    Convert drafts to LoggedSet rows numbered from 1.

    Plate-picker sets keep only plates in the bar unit with a positive
    count and snapshot the bar weight.  Numeric sets use the parsed load,
    0 when blank or unparsable.
    """
    sets: list[LoggedSet] = []
    for index, draft in enumerate(drafts):
        reps = parse_reps(draft.reps_text)
        load: DirectLoad | PlateLoad
        if context.uses_plate_picker:
            plates = [
                PlateCount(plate_option_id=option.id, count_per_side=count)
                for option in context.plate_options
                if (count := max(0, draft.plate_counts.get(option.id, 0))) > 0
            ]
            load = PlateLoad(
                per_side_plates=plates,
                bar_weight_value=context.base_weight,
                bar_weight_unit=context.config.bar_weight_unit,
                total_value=draft_total(draft, context),
                total_unit=context.config.bar_weight_unit,
            )
        else:
            value = parse_weight(draft.load_text)
            load = DirectLoad(value=max(0.0, value or 0.0), unit=context.load_unit)
        sets.append(
            LoggedSet(set_number=index + 1, reps=reps, load=load, set_type=draft.set_type)
        )
    return sets


# ---------------------------------------------------------------------------
# Save protocol
# ---------------------------------------------------------------------------


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def find_existing_session(
    sessions: list[WorkoutSession],
    week_index: int,
    day_plan: DayPlan,
    on_day: date,
) -> WorkoutSession | None:
    """The session already logged for this slot on ``on_day``, if any."""
    for session in sessions:
        if (
            session.week_index == week_index
            and session.weekday == day_plan.weekday
            and session.calendar_day == on_day
        ):
            return session
    return None


def find_duplicate_indices(session: WorkoutSession, template: WorkoutTemplate) -> list[int]:
    """Indices of entries in ``session`` that log the same workout as ``template``."""
    return [i for i, entry in enumerate(session.entries) if entry.matches(template)]


def check_plan_drift(drafts: list[SetDraft], template: WorkoutTemplate) -> PlanDrift | None:
    warm_up = sum(1 for d in drafts if d.set_type == SetType.WARM_UP)
    working = sum(1 for d in drafts if d.set_type == SetType.WORKING)
    if (
        warm_up == template.planned_warm_up_set_count
        and working == template.planned_working_set_count
    ):
        return None
    return PlanDrift(
        warm_up=warm_up,
        working=working,
        planned_warm_up=template.planned_warm_up_set_count,
        planned_working=template.planned_working_set_count,
    )


def prepare_save(
    sessions: list[WorkoutSession],
    context: LoggingContext,
    drafts: list[SetDraft],
) -> SavePlan:
    """
    Run the read-only half of a save.

    Raises:
        ValidationError: If there are no drafts
    """
    if not drafts:
        raise ValidationError("Add at least one set before saving.")

    existing = find_existing_session(
        sessions, context.week_index, context.day_plan, context.session_date.date()
    )
    duplicates = find_duplicate_indices(existing, context.template) if existing else []
    drift = check_plan_drift(drafts, context.template)

    logger.debug(
        f"Prepared save for '{context.template.name}': "
        f"existing session={'yes' if existing else 'no'}, duplicates={duplicates}, "
        f"drift={'yes' if drift else 'no'}"
    )
    return SavePlan(existing_session=existing, duplicate_indices=duplicates, plan_drift=drift)


def commit_save(
    store: "DataStore",
    data: AppData,
    context: LoggingContext,
    drafts: list[SetDraft],
    save_plan: SavePlan,
    resolution: DuplicateResolution | None = None,
    sync_plan: bool = False,
) -> SaveResult:
    """
    Persist the drafts as one entry, atomically.

    Args:
        store: Store to save through
        data: Loaded entity graph (mutated in place)
        context: Logging context
        drafts: Set drafts to log
        save_plan: Result of prepare_save() on the same data
        resolution: Required when save_plan.has_duplicates
        sync_plan: Write the drafted warm-up/working counts onto the template

    Returns:
        SaveResult describing what was written

    Raises:
        ValidationError: No drafts, or duplicates without a resolution
        PersistenceError: Save failed; in-memory data is rolled back
    """
    if not drafts:
        raise ValidationError("Add at least one set before saving.")
    if save_plan.has_duplicates and resolution is None:
        raise ValidationError("This workout was already logged today: choose replace or keep both.")

    template = context.template
    entry = SessionEntry(
        workout_template_id=template.id,
        workout_name_snapshot=template.name,
        weight_type_snapshot=template.weight_type,
        sets=build_logged_sets(drafts, context),
    )

    session = save_plan.existing_session
    touched: list = [template]
    if session is not None:
        touched.append(session)

    replaced = False
    synced = False
    with store.transaction(data, *touched):
        created = session is None
        if session is None:
            session = WorkoutSession(
                date=context.session_date,
                week_index=context.week_index,
                weekday=context.day_plan.weekday,
                day_label_snapshot=context.day_plan.label,
            )
            data.sessions.append(session)

        if resolution == DuplicateResolution.REPLACE_LATEST and save_plan.duplicate_indices:
            del session.entries[max(save_plan.duplicate_indices)]
            replaced = True

        session.entries.append(entry)
        session.date = context.session_date
        session.session_day_start = start_of_day(context.session_date)
        session.day_label_snapshot = context.day_plan.label

        if not template.weight_type.uses_plate_picker:
            template.preferred_unit = context.load_unit

        if sync_plan and save_plan.plan_drift is not None:
            template.planned_warm_up_set_count = max(0, save_plan.plan_drift.warm_up)
            template.planned_working_set_count = max(1, save_plan.plan_drift.working)
            synced = True

    logger.info(
        f"Logged {len(entry.sets)} sets of '{template.name}' "
        f"(week {context.week_index} {context.day_plan.weekday.short_name}"
        f"{', replaced previous entry' if replaced else ''})"
    )
    return SaveResult(
        session=session,
        entry=entry,
        created_session=created,
        replaced_duplicate=replaced,
        synced_plan=synced,
    )


# ---------------------------------------------------------------------------
# Previous-value recall
# ---------------------------------------------------------------------------


@dataclass
class PreviousSet:
    set_number: int
    set_type: SetType
    reps: int
    weight: float
    unit: WeightUnit
    is_plate_load: bool = False
    plate_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class PreviousPerformance:
    """
    The last logged entry for a workout, as a read-only baseline.

    ``found`` is False when the workout was never logged; callers show
    that explicitly.
    """

    session_date: datetime | None = None
    sets: list[PreviousSet] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.session_date is not None

    @property
    def unit(self) -> WeightUnit | None:
        return self.sets[0].unit if self.sets else None


@dataclass
class SetDelta:
    """Change versus the previous set at the same position (None = nothing to compare)."""

    reps: int | None
    weight: float | None


def _latest_entry_in(session: WorkoutSession, template: WorkoutTemplate) -> SessionEntry | None:
    exact = next((e for e in session.entries if e.workout_template_id == template.id), None)
    if exact is not None:
        return exact
    return next((e for e in session.entries if e.matches(template)), None)


def _previous_set(logged_set: LoggedSet) -> PreviousSet:
    load = logged_set.load
    return PreviousSet(
        set_number=logged_set.set_number,
        set_type=logged_set.set_type,
        reps=logged_set.reps,
        weight=logged_set.weight_value,
        unit=logged_set.weight_unit,
        is_plate_load=isinstance(load, PlateLoad),
        plate_counts=(
            {p.plate_option_id: p.count_per_side for p in load.per_side_plates}
            if isinstance(load, PlateLoad)
            else {}
        ),
    )


def find_previous_entry(
    sessions: list[WorkoutSession],
    template: WorkoutTemplate,
) -> PreviousPerformance:
    """
    Most recent logged performance of ``template``.

    Sessions are searched newest first.  Within a session an entry with
    the exact template id wins over a name + weight type match.

    Returns:
        PreviousPerformance; ``found`` is False when nothing matches
    """
    for session in sorted(sessions, key=lambda s: s.date, reverse=True):
        entry = _latest_entry_in(session, template)
        if entry is not None:
            return PreviousPerformance(
                session_date=session.date,
                sets=[_previous_set(s) for s in entry.sorted_sets],
            )
    return PreviousPerformance()


def compare_to_previous(
    drafts: list[SetDraft],
    previous: PreviousPerformance,
    context: LoggingContext,
) -> list[SetDelta]:
    """
    Per-draft deltas (current − previous) against the set at the same position.

    Previous weights in another unit are converted to the current unit.
    Drafts never change.
    """
    deltas: list[SetDelta] = []
    for index, draft in enumerate(drafts):
        if index >= len(previous.sets):
            deltas.append(SetDelta(reps=None, weight=None))
            continue
        prev = previous.sets[index]
        reps_delta = parse_reps(draft.reps_text) - prev.reps

        current: float | None
        if context.uses_plate_picker:
            current = draft_total(draft, context)
        else:
            current = parse_weight(draft.load_text)
        weight_delta = None
        if current is not None:
            weight_delta = current - convert(prev.weight, prev.unit, context.load_unit)
        deltas.append(SetDelta(reps=reps_delta, weight=weight_delta))
    return deltas


def restore_drafts_from_previous(
    previous: PreviousPerformance,
    template: WorkoutTemplate,
    plate_option_ids: list[str],
) -> tuple[list[SetDraft], WeightUnit | None]:
    """
    Prefill drafts from the previous entry.

    The first ``planned_warm_up_set_count`` rows become warm-ups.  Plate
    counts for plates no longer in ``plate_option_ids`` are dropped.

    Returns:
        (drafts, unit of the previous load or None); empty drafts when
        there is nothing to restore
    """
    drafts: list[SetDraft] = []
    for index, prev in enumerate(previous.sets):
        counts = _empty_counts(plate_option_ids)
        for option_id, count in prev.plate_counts.items():
            if option_id in counts:
                counts[option_id] = max(0, count)
        set_type = (
            SetType.WARM_UP if index < template.planned_warm_up_set_count else SetType.WORKING
        )
        drafts.append(
            SetDraft(
                set_type=set_type,
                reps_text=str(max(0, prev.reps)),
                load_text="" if prev.is_plate_load else pretty_weight(max(0.0, prev.weight)),
                plate_counts=counts,
            )
        )
    return drafts, previous.unit
