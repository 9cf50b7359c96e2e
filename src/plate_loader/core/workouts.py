"""
Workout template management within a day plan.

All functions mutate the in-memory plan only; callers persist with
DataStore.save() (or a transaction) afterwards.
"""

from dataclasses import dataclass

from loguru import logger

from .config import DEFAULT_WARM_UP_SETS, DEFAULT_WORKING_SETS
from .errors import ValidationError
from .models import DayPlan, SplitPlan, WeightType, WeightUnit, WorkoutTemplate, normalize_name


@dataclass
class WorkoutDraft:
    """Form values for adding or editing a workout."""

    name: str
    weight_type: WeightType = WeightType.DUMBBELL
    preferred_unit: WeightUnit = WeightUnit.LB
    planned_warm_up_set_count: int = DEFAULT_WARM_UP_SETS
    planned_working_set_count: int = DEFAULT_WORKING_SETS

    @classmethod
    def from_template(cls, template: WorkoutTemplate) -> "WorkoutDraft":
        """Prefill a draft from an existing template (saved-workout quick fill)."""
        return cls(
            name=template.name,
            weight_type=template.weight_type,
            preferred_unit=template.preferred_unit,
            planned_warm_up_set_count=max(0, template.planned_warm_up_set_count),
            planned_working_set_count=max(1, template.planned_working_set_count),
        )


def active_sorted_workouts(day: DayPlan) -> list[WorkoutTemplate]:
    return day.active_sorted_workouts


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Workout name is required.")
    return cleaned


def renumber(day: DayPlan) -> None:
    """Rewrite sort_index of active workouts densely as 0..n-1 in display order."""
    for index, template in enumerate(day.active_sorted_workouts):
        template.sort_index = index


def save_workout(
    day: DayPlan,
    draft: WorkoutDraft,
    default_unit: WeightUnit,
    editing: WorkoutTemplate | None = None,
) -> WorkoutTemplate:
    """
    Add a new workout to ``day`` or update ``editing`` in place.

    Plate-picker types always store ``default_unit`` (the bar unit) as
    their preferred unit since their totals come out in that unit.

    Raises:
        ValidationError: Blank name, or an active workout with the same
            name (trimmed, case-insensitive) and weight type already exists
            in the day
    """
    cleaned = _clean_name(draft.name)
    editing_id = editing.id if editing is not None else None

    for existing in day.active_sorted_workouts:
        if (
            existing.id != editing_id
            and normalize_name(existing.name) == normalize_name(cleaned)
            and existing.weight_type == draft.weight_type
        ):
            raise ValidationError("That workout already exists for this day.")

    unit = default_unit if draft.weight_type.uses_plate_picker else draft.preferred_unit

    if editing is not None:
        editing.name = cleaned
        editing.weight_type = draft.weight_type
        editing.planned_warm_up_set_count = max(0, draft.planned_warm_up_set_count)
        editing.planned_working_set_count = max(1, draft.planned_working_set_count)
        editing.preferred_unit = unit
        logger.info(f"Updated workout '{cleaned}' in {day.label}")
        return editing

    template = WorkoutTemplate(
        name=cleaned,
        weight_type=draft.weight_type,
        preferred_unit=unit,
        planned_warm_up_set_count=draft.planned_warm_up_set_count,
        planned_working_set_count=draft.planned_working_set_count,
        sort_index=len(day.active_sorted_workouts),
    )
    day.workouts.append(template)
    logger.info(f"Added workout '{cleaned}' to {day.label} at position {template.sort_index}")
    return template


def rename_workout(template: WorkoutTemplate, new_name: str) -> None:
    """Change only the name.  Raises ValidationError for a blank name."""
    template.name = _clean_name(new_name)


def reorder_workouts(day: DayPlan, ordered_ids: list[str]) -> None:
    """
    Apply a new display order given as the full list of active template ids.

    Raises:
        ValidationError: If ``ordered_ids`` is not a permutation of the
            day's active workouts
    """
    active = {w.id: w for w in day.active_sorted_workouts}
    if sorted(ordered_ids) != sorted(active):
        raise ValidationError("New order must list every active workout exactly once.")
    for index, template_id in enumerate(ordered_ids):
        active[template_id].sort_index = index


def move_workout(day: DayPlan, from_index: int, to_index: int) -> None:
    """Move the workout at display position ``from_index`` to ``to_index``."""
    ordered = day.active_sorted_workouts
    if not 0 <= from_index < len(ordered):
        raise ValidationError(f"No workout at position {from_index + 1}.")
    to_index = min(max(0, to_index), len(ordered) - 1)
    moved = ordered.pop(from_index)
    ordered.insert(to_index, moved)
    reorder_workouts(day, [w.id for w in ordered])


def delete_workout(day: DayPlan, template_id: str) -> WorkoutTemplate:
    """
    Remove a template from the day and close the gap in sort order.

    Logged history is untouched: entries keep their copied template id and
    snapshots.
    """
    template = day.workout(template_id)
    if template is None:
        raise ValidationError("Workout not found in this day.")
    day.workouts = [w for w in day.workouts if w.id != template_id]
    renumber(day)
    logger.info(f"Deleted workout '{template.name}' from {day.label}")
    return template


def archive_workout(day: DayPlan, template_id: str) -> WorkoutTemplate:
    """Soft-delete: keep the template but hide it from the day and from trends."""
    template = day.workout(template_id)
    if template is None:
        raise ValidationError("Workout not found in this day.")
    template.is_archived = True
    renumber(day)
    logger.info(f"Archived workout '{template.name}' in {day.label}")
    return template


def _saved_key(template: WorkoutTemplate) -> tuple:
    return (
        template.normalized_name,
        template.weight_type.value,
        template.preferred_unit.value,
        template.planned_warm_up_set_count,
        template.planned_working_set_count,
    )


def saved_workouts(plan: SplitPlan) -> list[WorkoutTemplate]:
    """
    Quick-fill suggestions: every non-archived template app-wide, sorted
    by name, keeping the first template per (name, type, unit, warm-up,
    working) combination.
    """
    seen: set[tuple] = set()
    result: list[WorkoutTemplate] = []
    templates = sorted(plan.all_templates(), key=lambda t: t.name)
    for template in templates:
        if template.is_archived:
            continue
        key = _saved_key(template)
        if key in seen:
            continue
        seen.add(key)
        result.append(template)
    return result


def saved_workout_subtitle(template: WorkoutTemplate) -> str:
    warm_ups = max(0, template.planned_warm_up_set_count)
    working = max(1, template.planned_working_set_count)
    return f"{template.weight_type.title} • WU {warm_ups} • WK {working}"
