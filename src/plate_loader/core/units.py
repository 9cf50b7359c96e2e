"""
Unit conversion and plate math.

Plate totals
------------
  total = base + 2 × Σ(plate value × count per side)

  base = configured bar weight for barbells, 0 for plate-loaded machines
  (the machine's own sled is not counted).
"""

import re
from typing import Iterable, Mapping

from .config import DEFAULT_BAR_WEIGHT, DEFAULT_PLATES, LB_PER_KG
from .errors import ValidationError
from .models import AppConfig, PlateOption, WeightType, WeightUnit


def convert(value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """Convert a weight between lb and kg (identity when units match)."""
    if from_unit == to_unit:
        return value
    if from_unit == WeightUnit.LB:
        return value / LB_PER_KG
    return value * LB_PER_KG


def plate_total(
    base_weight: float,
    plate_options: Iterable[PlateOption],
    counts_by_option_id: Mapping[str, int],
) -> float:
    """
    Total load for per-side plate counts.

    Counts for ids that are not among ``plate_options`` are ignored;
    negative counts count as zero.

    Args:
        base_weight: Bar weight (0 for plate-loaded equipment)
        plate_options: Plates that may be on the bar
        counts_by_option_id: {plate_option_id: count per side}

    Returns:
        base_weight + 2 × per-side plate weight
    """
    per_side = sum(
        option.value * max(0, counts_by_option_id.get(option.id, 0))
        for option in plate_options
    )
    return base_weight + 2 * per_side


def base_plate_weight(weight_type: WeightType, config: AppConfig) -> float:
    """Bar weight that counts toward the total for this equipment type."""
    if weight_type == WeightType.BARBELL:
        return max(0.0, config.bar_weight_value)
    return 0.0


def plates_for_unit(catalog: Iterable[PlateOption], unit: WeightUnit) -> list[PlateOption]:
    """Catalog plates in ``unit``, heaviest first.  Empty list when none."""
    return sorted((p for p in catalog if p.unit == unit), key=lambda p: p.value, reverse=True)


def pretty_weight(value: float) -> str:
    """
    Render a weight compactly: "45", "2.5", "1.25".

    Whole numbers print without decimals; anything else prints with up to
    two decimals, trailing zeros and a dangling point removed.
    """
    if float(value).is_integer():
        return f"{value:.0f}"
    text = f"{value:.2f}"
    text = re.sub(r"(\.[0-9]*?)0+$", r"\1", text)
    return re.sub(r"\.$", "", text)


def parse_weight(text: str | None) -> float | None:
    """Parse a typed weight; None for blank or non-numeric input."""
    if text is None or not text.strip():
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None


def parse_non_negative(text: str | None, name: str) -> float:
    """
    Parse a required non-negative number.

    Raises:
        ValidationError: If the text is blank, non-numeric or negative
    """
    value = parse_weight(text)
    if value is None or value < 0:
        raise ValidationError(f"{name} must be a number >= 0.")
    return value


def plate_label(value: float, unit: WeightUnit) -> str:
    return f"{pretty_weight(value)} {unit.value}"


def default_plate_values(unit: WeightUnit) -> list[float]:
    """Preset plate sizes for a unit."""
    return [float(v) for v in DEFAULT_PLATES[unit.value]]


def default_plate_options(unit: WeightUnit) -> list[PlateOption]:
    """Fresh PlateOption objects for the unit's presets."""
    return [
        PlateOption(value=v, unit=unit, label=plate_label(v, unit))
        for v in default_plate_values(unit)
    ]


def default_bar_weight(unit: WeightUnit) -> float:
    return DEFAULT_BAR_WEIGHT[unit.value]
