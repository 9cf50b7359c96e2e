"""
Read-only helpers for browsing logged sessions.
"""

from .models import (
    LoggedSet,
    PlateLoad,
    PlateOption,
    SessionEntry,
    SetType,
    Weekday,
    WorkoutSession,
)
from .units import pretty_weight


def sessions_for_day(
    sessions: list[WorkoutSession],
    week_index: int,
    weekday: Weekday,
) -> list[WorkoutSession]:
    """Sessions logged against one (week, weekday) slot, newest first."""
    matching = [s for s in sessions if s.week_index == week_index and s.weekday == weekday]
    return sorted(matching, key=lambda s: s.date, reverse=True)


def session_summary(session: WorkoutSession) -> str:
    count = len(session.entries)
    noun = "workout" if count == 1 else "workouts"
    return f"{session.day_label_snapshot} • {count} {noun}"


def plate_breakdown(logged_set: LoggedSet, catalog: list[PlateOption]) -> list[str]:
    """
    Per-side plates of a plate-picker set, most-used plate first.

    Plates deleted from the catalog since logging show a shortened id.
    Returns an empty list for numeric sets and empty bars.
    """
    load = logged_set.load
    if not isinstance(load, PlateLoad):
        return []

    by_id = {option.id: option for option in catalog}
    rows = []
    for plate in sorted(load.per_side_plates, key=lambda p: p.count_per_side, reverse=True):
        option = by_id.get(plate.plate_option_id)
        name = option.label if option is not None else f"plate {plate.plate_option_id[:8]}"
        rows.append(f"{plate.count_per_side} × {name}")
    return rows


def describe_set(entry: SessionEntry, logged_set: LoggedSet) -> str:
    """One-line description, e.g. "Set 2 (Working): Total 245 lb • Reps 5"."""
    kind = "Warm-up" if logged_set.set_type == SetType.WARM_UP else "Working"
    label = "Total" if entry.weight_type_snapshot.uses_plate_picker else "Weight"
    weight = f"{pretty_weight(logged_set.weight_value)} {logged_set.weight_unit.value}"
    return f"Set {logged_set.set_number} ({kind}): {label} {weight} • Reps {logged_set.reps}"
