"""
Configuration constants for plate-loader.

All fixed parameters of the domain model live here.
"""

from typing import Final

# =============================================================================
# UNITS
# =============================================================================

LB_PER_KG: Final[float] = 2.2046226218  # lb → kg divides, kg → lb multiplies

# =============================================================================
# PLATES & BAR
# =============================================================================

DEFAULT_PLATES: Final[dict[str, tuple[float, ...]]] = {
    "lb": (45, 35, 25, 10, 5, 2.5),
    "kg": (25, 20, 15, 10, 5, 2.5, 1.25),
}

DEFAULT_BAR_WEIGHT: Final[dict[str, float]] = {
    "lb": 45.0,
    "kg": 20.0,
}

MAX_PLATES_PER_SIDE: Final[int] = 20  # input-layer limit, not a model invariant
PLATE_VALUE_TOLERANCE: Final[float] = 0.0001  # two plates closer than this are the same

# =============================================================================
# SPLIT
# =============================================================================

MIN_SPLIT_WEEKS: Final[int] = 1
MAX_SPLIT_WEEKS: Final[int] = 4
DAYS_PER_WEEK: Final[int] = 7

# =============================================================================
# WORKOUT TEMPLATE DEFAULTS
# =============================================================================

DEFAULT_WARM_UP_SETS: Final[int] = 1
DEFAULT_WORKING_SETS: Final[int] = 3

WARM_UP_SETS_RANGE: Final[tuple[int, int]] = (0, 10)  # CLI input bounds
WORKING_SETS_RANGE: Final[tuple[int, int]] = (1, 12)

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_ENV: Final[str] = "PLATE_LOADER_HOME"
DEFAULT_DATA_DIRNAME: Final[str] = ".plate-loader"
PLAN_FILENAME: Final[str] = "plan.json"
SESSIONS_FILENAME: Final[str] = "sessions.jsonl"
PREFERENCES_FILENAME: Final[str] = "preferences.yaml"


def clamp_split_length(value: int) -> int:
    """Clamp a requested split length to [MIN_SPLIT_WEEKS, MAX_SPLIT_WEEKS]."""
    return min(max(value, MIN_SPLIT_WEEKS), MAX_SPLIT_WEEKS)
