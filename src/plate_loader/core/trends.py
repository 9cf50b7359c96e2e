"""
Per-workout progress series.

Templates are grouped into one series per identity:

  key = "<normalized name>|<weight type>|<unit>"

where <unit> is the preferred unit for dumbbell/machine and the literal
"plate" for plate-picker types (their totals follow the bar unit).

Each session holding matching entries yields one point:

  weight_peak = max total (plate types) or max load value (numeric types)
  reps_peak   = max reps over every matching set

All functions are pure; nothing here touches the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .models import (
    DirectLoad,
    PlateLoad,
    SessionEntry,
    WeightType,
    WeightUnit,
    WorkoutSession,
    WorkoutTemplate,
    normalize_name,
)


class TrendMetric(str, Enum):
    WEIGHT = "weight"
    REPS = "reps"

    @property
    def title(self) -> str:
        return self.value.capitalize()


@dataclass
class TrendPoint:
    sequence: int
    date: datetime
    weight_peak: float | None
    weight_unit: WeightUnit | None
    reps_peak: int


@dataclass
class TrendSeries:
    """One workout identity's points, oldest session first."""

    key: str
    name: str
    weight_type: WeightType
    preferred_unit: WeightUnit
    points: list[TrendPoint] = field(default_factory=list)

    @property
    def subtitle(self) -> str:
        if self.weight_type.uses_plate_picker:
            return self.weight_type.title
        return f"{self.weight_type.title} • {self.preferred_unit.title}"

    @property
    def weight_points(self) -> list[TrendPoint]:
        """Points that have a weight peak."""
        return [p for p in self.points if p.weight_peak is not None]

    @property
    def best_weight(self) -> float | None:
        values = [p.weight_peak for p in self.weight_points]
        return max(values) if values else None

    @property
    def best_reps(self) -> int:
        return max((p.reps_peak for p in self.points), default=0)

    @property
    def weight_unit_label(self) -> WeightUnit:
        """First unit seen among weight points, else the preferred unit."""
        for point in self.weight_points:
            if point.weight_unit is not None:
                return point.weight_unit
        return self.preferred_unit


@dataclass
class _TrendDefinition:
    key: str
    display_name: str
    normalized_name: str
    weight_type: WeightType
    preferred_unit: WeightUnit
    template_ids: set[str] = field(default_factory=set)

    def matches(self, entry: SessionEntry) -> bool:
        if entry.workout_template_id in self.template_ids:
            return True
        return (
            entry.weight_type_snapshot == self.weight_type
            and normalize_name(entry.workout_name_snapshot) == self.normalized_name
        )


def trend_identity_key(template: WorkoutTemplate) -> str:
    unit_key = "plate" if template.weight_type.uses_plate_picker else template.preferred_unit.value
    return f"{template.normalized_name}|{template.weight_type.value}|{unit_key}"


def _session_point(
    sequence: int,
    session: WorkoutSession,
    entries: list[SessionEntry],
    uses_plates: bool,
) -> TrendPoint:
    peak_weight: float | None = None
    peak_unit: WeightUnit | None = None
    peak_reps = 0

    for entry in entries:
        for logged_set in entry.sets:
            peak_reps = max(peak_reps, max(0, logged_set.reps))

            load = logged_set.load
            if uses_plates and isinstance(load, PlateLoad):
                value, unit = max(0.0, load.total_value), load.total_unit
            elif not uses_plates and isinstance(load, DirectLoad):
                value, unit = max(0.0, load.value), load.unit
            else:
                continue

            if peak_weight is None or value > peak_weight:
                peak_weight, peak_unit = value, unit

    return TrendPoint(
        sequence=sequence,
        date=session.date,
        weight_peak=peak_weight,
        weight_unit=peak_unit,
        reps_peak=peak_reps,
    )


def build_trend_series(
    templates: list[WorkoutTemplate],
    sessions: list[WorkoutSession],
) -> list[TrendSeries]:
    """
    Build one series per workout identity.

    Archived templates and blank names are skipped.  A series keeps the
    display name and preferred unit of the first template seen in name
    order.  Series with no points are kept.

    Args:
        templates: Templates from the whole plan (archived ones are ignored)
        sessions: Logged sessions, any order

    Returns:
        Series sorted by name (case-insensitive), then weight type value
    """
    definitions: dict[str, _TrendDefinition] = {}
    for template in sorted(templates, key=lambda t: t.name):
        if template.is_archived or not template.normalized_name:
            continue
        key = trend_identity_key(template)
        if key in definitions:
            definitions[key].template_ids.add(template.id)
            continue
        definitions[key] = _TrendDefinition(
            key=key,
            display_name=template.name,
            normalized_name=template.normalized_name,
            weight_type=template.weight_type,
            preferred_unit=template.preferred_unit,
            template_ids={template.id},
        )

    ordered_sessions = sorted(sessions, key=lambda s: s.date)
    series: list[TrendSeries] = []
    for definition in definitions.values():
        points: list[TrendPoint] = []
        for session in ordered_sessions:
            matching = [e for e in session.entries if definition.matches(e)]
            if not matching:
                continue
            points.append(
                _session_point(
                    len(points) + 1,
                    session,
                    matching,
                    definition.weight_type.uses_plate_picker,
                )
            )
        series.append(
            TrendSeries(
                key=definition.key,
                name=definition.display_name,
                weight_type=definition.weight_type,
                preferred_unit=definition.preferred_unit,
                points=points,
            )
        )

    series.sort(key=lambda s: (s.name.casefold(), s.weight_type.value))
    return series


def metric_values(series: TrendSeries, metric: TrendMetric) -> list[tuple[int, float]]:
    """(sequence, value) pairs to plot for a metric."""
    if metric == TrendMetric.WEIGHT:
        return [(p.sequence, p.weight_peak) for p in series.weight_points]
    return [(p.sequence, float(p.reps_peak)) for p in series.points]
