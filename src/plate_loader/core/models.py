"""
Data models for plate-loader.

The plan hierarchy (SplitPlan → PlanWeek → DayPlan → WorkoutTemplate) and
the logging hierarchy (WorkoutSession → SessionEntry → LoggedSet) are
dataclasses owning their children as plain lists.  Children carry no
back-pointers; parents are found through id lookups on the owner.

Numeric physical fields are clamped at construction, matching what the
input layer would have accepted anyway.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum

from .config import DEFAULT_WARM_UP_SETS, DEFAULT_WORKING_SETS, clamp_split_length


def new_id() -> str:
    """Return a fresh unique identifier string."""
    return str(uuid.uuid4())


def normalize_name(name: str) -> str:
    """Trim surrounding whitespace and lower-case a workout name."""
    return name.strip().lower()


class WeightType(str, Enum):
    """Equipment category; decides how a set's load is recorded."""

    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    BARBELL = "barbell"
    PLATE_LOADED = "plateLoaded"

    @property
    def title(self) -> str:
        return {
            WeightType.DUMBBELL: "Dumbbell",
            WeightType.MACHINE: "Machine",
            WeightType.BARBELL: "Barbell",
            WeightType.PLATE_LOADED: "Plate Loaded",
        }[self]

    @property
    def uses_plate_picker(self) -> bool:
        """True when the total is derived from per-side plate counts."""
        return self in (WeightType.BARBELL, WeightType.PLATE_LOADED)


class WeightUnit(str, Enum):
    LB = "lb"
    KG = "kg"

    @property
    def title(self) -> str:
        return self.value.upper()


class Weekday(IntEnum):
    """Calendar weekday, Sunday=1 through Saturday=7."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def short_name(self) -> str:
        return self.full_name[:3]

    @property
    def full_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Weekday of a calendar date (Python's Monday=0 shifted to Sunday=1)."""
        return cls((day.weekday() + 1) % 7 + 1)

    @classmethod
    def parse(cls, text: str) -> "Weekday":
        """Parse 'mon', 'Monday' or '2' into a Weekday."""
        raw = text.strip().lower()
        if raw.isdigit():
            return cls(int(raw))
        if len(raw) >= 3:
            for day in cls:
                if day.full_name.lower().startswith(raw):
                    return day
        raise ValueError(f"Unknown weekday: {text!r}")


class SetType(str, Enum):
    WARM_UP = "warmUp"
    WORKING = "working"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class PlateOption:
    """One plate size in the user's catalog."""

    value: float
    unit: WeightUnit
    label: str
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.value = max(0.0, float(self.value))


@dataclass
class AppConfig:
    """
    Singleton app configuration written by the setup flow.

    ``created_at`` anchors the split calendar: week 1 starts on that day.
    """

    split_length_weeks: int
    bar_weight_value: float
    bar_weight_unit: WeightUnit
    created_at: datetime = field(default_factory=datetime.now)
    plate_catalog: list[PlateOption] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.split_length_weeks = clamp_split_length(self.split_length_weeks)
        self.bar_weight_value = max(0.0, float(self.bar_weight_value))

    def plate_option(self, option_id: str) -> PlateOption | None:
        """Look up a catalog plate by id."""
        return next((p for p in self.plate_catalog if p.id == option_id), None)


# ---------------------------------------------------------------------------
# Plan hierarchy
# ---------------------------------------------------------------------------


@dataclass
class WorkoutTemplate:
    """A reusable exercise slot inside a day plan."""

    name: str
    weight_type: WeightType
    preferred_unit: WeightUnit
    planned_warm_up_set_count: int = DEFAULT_WARM_UP_SETS
    planned_working_set_count: int = DEFAULT_WORKING_SETS
    sort_index: int = 0
    is_archived: bool = False
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.planned_warm_up_set_count = max(0, self.planned_warm_up_set_count)
        self.planned_working_set_count = max(1, self.planned_working_set_count)
        self.sort_index = max(0, self.sort_index)

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


@dataclass
class DayPlan:
    """A weekday's configured training focus within one week of the split."""

    weekday: Weekday
    label: str
    workouts: list[WorkoutTemplate] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.label.strip():
            self.label = self.weekday.full_name

    @property
    def active_sorted_workouts(self) -> list[WorkoutTemplate]:
        """Non-archived workouts by sort_index, ties broken by name (case-insensitive)."""
        active = [w for w in self.workouts if not w.is_archived]
        return sorted(active, key=lambda w: (w.sort_index, w.name.casefold()))

    def workout(self, template_id: str) -> WorkoutTemplate | None:
        return next((w for w in self.workouts if w.id == template_id), None)


@dataclass
class PlanWeek:
    week_index: int
    day_plans: list[DayPlan] = field(default_factory=list)

    @property
    def sorted_day_plans(self) -> list[DayPlan]:
        return sorted(self.day_plans, key=lambda d: d.weekday)

    def day_plan(self, weekday: Weekday) -> DayPlan | None:
        return next((d for d in self.day_plans if d.weekday == weekday), None)


@dataclass
class SplitPlan:
    """Singleton training split: an ordered set of weeks."""

    weeks: list[PlanWeek] = field(default_factory=list)

    @property
    def sorted_weeks(self) -> list[PlanWeek]:
        return sorted(self.weeks, key=lambda w: w.week_index)

    def week(self, index: int) -> PlanWeek | None:
        return next((w for w in self.weeks if w.week_index == index), None)

    def all_templates(self) -> list[WorkoutTemplate]:
        """Every template in the plan, archived ones included."""
        return [w for week in self.weeks for day in week.day_plans for w in day.workouts]

    def day_for_workout(self, template_id: str) -> tuple[PlanWeek, DayPlan] | None:
        """Find the (week, day) owning a template."""
        for week in self.weeks:
            for day in week.day_plans:
                if day.workout(template_id) is not None:
                    return week, day
        return None

    def find_template(self, template_id: str) -> WorkoutTemplate | None:
        return next((t for t in self.all_templates() if t.id == template_id), None)


# ---------------------------------------------------------------------------
# Logging hierarchy
# ---------------------------------------------------------------------------


@dataclass
class PlateCount:
    """How many of one catalog plate sit on each side of the bar."""

    plate_option_id: str
    count_per_side: int

    def __post_init__(self) -> None:
        self.count_per_side = max(0, self.count_per_side)


@dataclass
class DirectLoad:
    """Load entered as a number (dumbbell / machine)."""

    value: float
    unit: WeightUnit

    def __post_init__(self) -> None:
        self.value = max(0.0, float(self.value))


@dataclass
class PlateLoad:
    """
    Load derived from per-side plates (barbell / plate-loaded).

    The bar weight is snapshotted so later settings edits don't rewrite
    history; it is 0 for plate-loaded machines.
    """

    per_side_plates: list[PlateCount]
    bar_weight_value: float
    bar_weight_unit: WeightUnit
    total_value: float
    total_unit: WeightUnit

    def __post_init__(self) -> None:
        self.bar_weight_value = max(0.0, float(self.bar_weight_value))
        self.total_value = max(0.0, float(self.total_value))


Load = DirectLoad | PlateLoad


@dataclass
class LoggedSet:
    set_number: int
    reps: int
    load: Load
    set_type: SetType = SetType.WORKING

    def __post_init__(self) -> None:
        self.set_number = max(1, self.set_number)
        self.reps = max(0, self.reps)

    @property
    def weight_value(self) -> float:
        """The set's load in its own unit, whichever variant it is."""
        if isinstance(self.load, PlateLoad):
            return self.load.total_value
        return self.load.value

    @property
    def weight_unit(self) -> WeightUnit:
        if isinstance(self.load, PlateLoad):
            return self.load.total_unit
        return self.load.unit


@dataclass
class SessionEntry:
    """
    One workout's sets inside a session.

    ``workout_template_id`` is a copied id, so the entry survives deletion
    of its template; the name and weight type are snapshots.
    """

    workout_template_id: str
    workout_name_snapshot: str
    weight_type_snapshot: WeightType
    sets: list[LoggedSet] = field(default_factory=list)

    def __post_init__(self) -> None:
        expects_plates = self.weight_type_snapshot.uses_plate_picker
        for s in self.sets:
            if isinstance(s.load, PlateLoad) != expects_plates:
                raise ValueError(
                    f"Set {s.set_number} load does not match weight type "
                    f"{self.weight_type_snapshot.value}"
                )

    @property
    def sorted_sets(self) -> list[LoggedSet]:
        return sorted(self.sets, key=lambda s: s.set_number)

    def matches(self, template: WorkoutTemplate) -> bool:
        """
        Same workout as ``template``: identical template id, or the same
        normalized name with the same weight type (covers templates that
        were deleted and recreated).
        """
        if self.workout_template_id == template.id:
            return True
        return (
            self.weight_type_snapshot == template.weight_type
            and normalize_name(self.workout_name_snapshot) == template.normalized_name
        )


@dataclass
class WorkoutSession:
    """A real-world day's logged performance against one day plan."""

    date: datetime
    week_index: int
    weekday: Weekday
    day_label_snapshot: str
    session_day_start: datetime | None = None
    entries: list[SessionEntry] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.week_index = max(1, self.week_index)

    @property
    def calendar_day(self) -> date:
        """The logged calendar day (session_day_start, falling back to date)."""
        return (self.session_day_start or self.date).date()


@dataclass
class AppData:
    """
    The whole persisted entity graph.

    ``config`` and ``plan`` are None until setup completes.
    """

    config: AppConfig | None = None
    plan: SplitPlan | None = None
    sessions: list[WorkoutSession] = field(default_factory=list)

    @property
    def needs_setup(self) -> bool:
        return self.config is None or self.plan is None
