"""
JSON serialization for plate-loader models.

Handles conversion between dataclasses and JSON-compatible dicts.
Timestamps are stored as ISO-8601 strings; enums as their raw values.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.config import MAX_PLATES_PER_SIDE, PLATE_VALUE_TOLERANCE
from ..core.errors import ValidationError
from ..core.models import (
    AppConfig,
    DayPlan,
    DirectLoad,
    LoggedSet,
    PlanWeek,
    PlateCount,
    PlateLoad,
    PlateOption,
    SessionEntry,
    SetType,
    SplitPlan,
    WeightType,
    WeightUnit,
    Weekday,
    WorkoutSession,
    WorkoutTemplate,
)
from ..core.recorder import SetDraft
from ..core.units import parse_weight

__all__ = [
    "ValidationError",
    "app_config_to_dict",
    "dict_to_app_config",
    "split_plan_to_dict",
    "dict_to_split_plan",
    "session_to_dict",
    "dict_to_session",
    "session_to_json_line",
    "json_line_to_session",
    "parse_set_draft",
    "parse_sets_string",
]


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _parse_datetime(raw: str, name: str) -> datetime:
    try:
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {name}: {raw!r}") from e


def _parse_enum(enum_cls: type, raw: Any, name: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {raw!r}") from e


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def plate_option_to_dict(option: PlateOption) -> dict[str, Any]:
    return {
        "id": option.id,
        "value": option.value,
        "unit": option.unit.value,
        "label": option.label,
    }


def dict_to_plate_option(data: dict[str, Any]) -> PlateOption:
    validate_non_negative(data.get("value", 0), "plate value")
    return PlateOption(
        id=data["id"],
        value=float(data["value"]),
        unit=_parse_enum(WeightUnit, data["unit"], "plate unit"),
        label=data.get("label", ""),
    )


def app_config_to_dict(config: AppConfig) -> dict[str, Any]:
    return {
        "split_length_weeks": config.split_length_weeks,
        "created_at": config.created_at.isoformat(),
        "bar_weight_value": config.bar_weight_value,
        "bar_weight_unit": config.bar_weight_unit.value,
        "plate_catalog": [plate_option_to_dict(p) for p in config.plate_catalog],
    }


def dict_to_app_config(data: dict[str, Any]) -> AppConfig:
    """
    Convert dict to AppConfig.

    Raises:
        ValidationError: If data is invalid
    """
    validate_non_negative(data.get("bar_weight_value", 0), "bar_weight_value")
    return AppConfig(
        split_length_weeks=int(data["split_length_weeks"]),
        created_at=_parse_datetime(data["created_at"], "created_at"),
        bar_weight_value=float(data["bar_weight_value"]),
        bar_weight_unit=_parse_enum(WeightUnit, data["bar_weight_unit"], "bar_weight_unit"),
        plate_catalog=[dict_to_plate_option(p) for p in data.get("plate_catalog", [])],
    )


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


def workout_template_to_dict(template: WorkoutTemplate) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "weight_type": template.weight_type.value,
        "preferred_unit": template.preferred_unit.value,
        "planned_warm_up_set_count": template.planned_warm_up_set_count,
        "planned_working_set_count": template.planned_working_set_count,
        "sort_index": template.sort_index,
        "is_archived": template.is_archived,
    }


def dict_to_workout_template(data: dict[str, Any]) -> WorkoutTemplate:
    return WorkoutTemplate(
        id=data["id"],
        name=data["name"],
        weight_type=_parse_enum(WeightType, data["weight_type"], "weight_type"),
        preferred_unit=_parse_enum(WeightUnit, data["preferred_unit"], "preferred_unit"),
        planned_warm_up_set_count=int(data.get("planned_warm_up_set_count", 1)),
        planned_working_set_count=int(data.get("planned_working_set_count", 3)),
        sort_index=int(data.get("sort_index", 0)),
        is_archived=bool(data.get("is_archived", False)),
    )


def split_plan_to_dict(plan: SplitPlan) -> dict[str, Any]:
    return {
        "weeks": [
            {
                "week_index": week.week_index,
                "day_plans": [
                    {
                        "weekday": int(day.weekday),
                        "label": day.label,
                        "workouts": [workout_template_to_dict(w) for w in day.workouts],
                    }
                    for day in week.day_plans
                ],
            }
            for week in plan.weeks
        ]
    }


def dict_to_split_plan(data: dict[str, Any]) -> SplitPlan:
    """
    Convert dict to SplitPlan.

    Raises:
        ValidationError: If a week index repeats or a weekday is invalid
    """
    weeks: list[PlanWeek] = []
    seen: set[int] = set()
    for raw_week in data.get("weeks", []):
        index = int(raw_week["week_index"])
        if index < 1 or index in seen:
            raise ValidationError(f"Invalid or duplicate week_index: {index}")
        seen.add(index)
        days = [
            DayPlan(
                weekday=_parse_enum(Weekday, int(raw_day["weekday"]), "weekday"),
                label=raw_day.get("label", ""),
                workouts=[dict_to_workout_template(w) for w in raw_day.get("workouts", [])],
            )
            for raw_day in raw_week.get("day_plans", [])
        ]
        weeks.append(PlanWeek(week_index=index, day_plans=days))
    return SplitPlan(weeks=weeks)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def logged_set_to_dict(logged_set: LoggedSet) -> dict[str, Any]:
    """
    Convert LoggedSet to a dict.

    The load variant is tagged with ``"kind"``: "direct" or "plates".
    """
    load = logged_set.load
    if isinstance(load, PlateLoad):
        load_dict: dict[str, Any] = {
            "kind": "plates",
            "per_side_plates": [
                {"plate_option_id": p.plate_option_id, "count_per_side": p.count_per_side}
                for p in load.per_side_plates
            ],
            "bar_weight_value": load.bar_weight_value,
            "bar_weight_unit": load.bar_weight_unit.value,
            "total_value": load.total_value,
            "total_unit": load.total_unit.value,
        }
    else:
        load_dict = {"kind": "direct", "value": load.value, "unit": load.unit.value}
    return {
        "set_number": logged_set.set_number,
        "reps": logged_set.reps,
        "set_type": logged_set.set_type.value,
        "load": load_dict,
    }


def dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    """
    Convert dict to LoggedSet.

    Raises:
        ValidationError: If the load is missing, of an unknown kind, or negative
    """
    validate_non_negative(data.get("reps", 0), "reps")
    raw_load = data.get("load")
    if not isinstance(raw_load, dict):
        raise ValidationError("Logged set has no load")

    kind = raw_load.get("kind")
    load: DirectLoad | PlateLoad
    if kind == "direct":
        validate_non_negative(raw_load.get("value", 0), "load value")
        load = DirectLoad(
            value=float(raw_load.get("value", 0.0)),
            unit=_parse_enum(WeightUnit, raw_load["unit"], "load unit"),
        )
    elif kind == "plates":
        validate_non_negative(raw_load.get("total_value", 0), "total_value")
        load = PlateLoad(
            per_side_plates=[
                PlateCount(
                    plate_option_id=p["plate_option_id"],
                    count_per_side=int(p.get("count_per_side", 0)),
                )
                for p in raw_load.get("per_side_plates", [])
            ],
            bar_weight_value=float(raw_load.get("bar_weight_value", 0.0)),
            bar_weight_unit=_parse_enum(WeightUnit, raw_load["bar_weight_unit"], "bar unit"),
            total_value=float(raw_load.get("total_value", 0.0)),
            total_unit=_parse_enum(WeightUnit, raw_load["total_unit"], "total unit"),
        )
    else:
        raise ValidationError(f"Unknown load kind: {kind!r}")

    return LoggedSet(
        set_number=int(data.get("set_number", 1)),
        reps=int(data.get("reps", 0)),
        set_type=_parse_enum(SetType, data.get("set_type", "working"), "set_type"),
        load=load,
    )


def session_entry_to_dict(entry: SessionEntry) -> dict[str, Any]:
    return {
        "workout_template_id": entry.workout_template_id,
        "workout_name_snapshot": entry.workout_name_snapshot,
        "weight_type_snapshot": entry.weight_type_snapshot.value,
        "sets": [logged_set_to_dict(s) for s in entry.sets],
    }


def dict_to_session_entry(data: dict[str, Any]) -> SessionEntry:
    try:
        return SessionEntry(
            workout_template_id=data["workout_template_id"],
            workout_name_snapshot=data.get("workout_name_snapshot", ""),
            weight_type_snapshot=_parse_enum(
                WeightType, data["weight_type_snapshot"], "weight_type_snapshot"
            ),
            sets=[dict_to_logged_set(s) for s in data.get("sets", [])],
        )
    except ValueError as e:
        # load variant does not match the weight type snapshot
        raise ValidationError(str(e)) from e


def session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": session.id,
        "date": session.date.isoformat(),
        "week_index": session.week_index,
        "weekday": int(session.weekday),
        "day_label_snapshot": session.day_label_snapshot,
        "entries": [session_entry_to_dict(e) for e in session.entries],
    }
    if session.session_day_start is not None:
        d["session_day_start"] = session.session_day_start.isoformat()
    return d


def dict_to_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Older records without ``session_day_start`` load with it unset; the
    session's calendar day then falls back to ``date``.

    Raises:
        ValidationError: If data is invalid
    """
    raw_start = data.get("session_day_start")
    return WorkoutSession(
        id=data["id"],
        date=_parse_datetime(data["date"], "date"),
        session_day_start=_parse_datetime(raw_start, "session_day_start") if raw_start else None,
        week_index=int(data.get("week_index", 1)),
        weekday=_parse_enum(Weekday, int(data["weekday"]), "weekday"),
        day_label_snapshot=data.get("day_label_snapshot", ""),
        entries=[dict_to_session_entry(e) for e in data.get("entries", [])],
    )


def session_to_json_line(session: WorkoutSession) -> str:
    """Serialize a session to a single JSON line (no trailing newline)."""
    return json.dumps(session_to_dict(session), separators=(",", ":"))


def json_line_to_session(line: str) -> WorkoutSession:
    """
    Deserialize a JSON line to a WorkoutSession.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        return dict_to_session(data)
    except KeyError as e:
        raise ValidationError(f"Missing field {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise ValidationError(f"Invalid session record: {e}") from e


# ---------------------------------------------------------------------------
# Set strings (CLI input)
# ---------------------------------------------------------------------------

_SET_RE = re.compile(r"^(w)?(\d+)(?:@(.+))?$", re.IGNORECASE)
_PLATE_TERM_RE = re.compile(r"^(\d+\.?\d*)(?:x(\d+))?$", re.IGNORECASE)


def _parse_plate_counts(load: str, plate_options: list[PlateOption]) -> dict[str, int]:
    counts = {option.id: 0 for option in plate_options}
    if load.lower() == "bar":
        return counts

    for term in load.split("+"):
        term = term.strip()
        match = _PLATE_TERM_RE.match(term)
        if not match:
            raise ValidationError(f"Invalid plate term '{term}'. Use <plate>x<count>, e.g. 45x2")
        value = float(match.group(1))
        count = int(match.group(2) or 1)
        if count > MAX_PLATES_PER_SIDE:
            raise ValidationError(f"At most {MAX_PLATES_PER_SIDE} plates per side, got {count}")
        option = next(
            (o for o in plate_options if abs(o.value - value) < PLATE_VALUE_TOLERANCE), None
        )
        if option is None:
            available = ", ".join(o.label for o in plate_options) or "none"
            raise ValidationError(f"No {match.group(1)} plate in the catalog (available: {available})")
        counts[option.id] += count
        if counts[option.id] > MAX_PLATES_PER_SIDE:
            raise ValidationError(
                f"At most {MAX_PLATES_PER_SIDE} plates per side, got {counts[option.id]} of {option.label}"
            )
    return counts


def parse_set_draft(text: str, plate_options: list[PlateOption] | None = None) -> SetDraft:
    """
    Parse one set.

    Numeric workouts (``plate_options`` is None):
        8@50      8 reps at 50
        8         8 reps, no load
    Plate workouts:
        5@45x2+10x1   5 reps, two 45s and one 10 per side
        5@bar         5 reps, empty bar
        5@45          one 45 per side (count defaults to 1)
    A leading ``w`` marks a warm-up set: w10@20, w10@bar.

    Raises:
        ValidationError: If the text does not match, or names an unknown plate
    """
    part = text.strip()
    match = _SET_RE.match(part)
    if not match:
        raise ValidationError(f"Invalid set format: '{part}'. Expected reps@load, e.g. 8@50")

    set_type = SetType.WARM_UP if match.group(1) else SetType.WORKING
    reps_text = match.group(2)
    load = (match.group(3) or "").strip()

    if plate_options is None:
        value = parse_weight(load) if load else 0.0
        if value is None or value < 0:
            raise ValidationError(f"Weight must be a number >= 0, got '{load}'")
        return SetDraft(set_type=set_type, reps_text=reps_text, load_text=load)

    counts = _parse_plate_counts(load or "bar", plate_options)
    return SetDraft(set_type=set_type, reps_text=reps_text, plate_counts=counts)


def parse_sets_string(sets_str: str, plate_options: list[PlateOption] | None = None) -> list[SetDraft]:
    """
    Parse a comma-separated list of sets, e.g. "w10@bar, 5@45x2, 5@45x2".

    Raises:
        ValidationError: If the string is empty or any set is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")
    return [
        parse_set_draft(part, plate_options) for part in sets_str.split(",") if part.strip()
    ]
