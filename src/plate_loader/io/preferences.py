"""
YAML-backed user preferences.

Small key-value settings that are presentation preferences rather than
domain data: the profile name shown in the CLI header, the unit offered
by default during setup, and an optional data directory override.

Load order (later overrides earlier):
1. Built-in defaults
2. ~/.plate-loader/preferences.yaml (or $PLATE_LOADER_HOME/preferences.yaml)

If the file has parse errors, a warning is issued and defaults are used.
"""

from __future__ import annotations

import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.config import PREFERENCES_FILENAME
from ..core.models import WeightUnit
from .store import get_default_data_dir


@dataclass
class Preferences:
    profile_name: str = ""
    default_unit: WeightUnit = WeightUnit.LB
    data_dir: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["default_unit"] = self.default_unit.value
        return {k: v for k, v in d.items() if v not in (None, "")}


def get_preferences_path() -> Path:
    return get_default_data_dir() / PREFERENCES_FILENAME


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} when it cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"plate-loader: ignoring preferences file {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def load_preferences(path: Path | None = None) -> Preferences:
    """
    Load preferences, falling back to defaults for anything missing or invalid.
    """
    path = path or get_preferences_path()
    if not path.exists():
        return Preferences()

    raw = _load_yaml_file(path)
    prefs = Preferences()

    name = raw.get("profile_name")
    if isinstance(name, str):
        prefs.profile_name = name.strip()

    unit = raw.get("default_unit")
    if unit is not None:
        try:
            prefs.default_unit = WeightUnit(str(unit).lower())
        except ValueError:
            warnings.warn(
                f"plate-loader: unknown default_unit {unit!r} in {path}; using lb",
                stacklevel=2,
            )

    data_dir = raw.get("data_dir")
    if isinstance(data_dir, str) and data_dir.strip():
        prefs.data_dir = data_dir.strip()

    return prefs


def save_preferences(prefs: Preferences, path: Path | None = None) -> None:
    """Write preferences as YAML, creating the directory if needed."""
    path = path or get_preferences_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(prefs.to_dict(), fh, sort_keys=True)
