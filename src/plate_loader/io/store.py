"""
Local file storage for the plate-loader entity graph.

Two files live in the data directory:

- ``plan.json``      AppConfig + SplitPlan, indented JSON
- ``sessions.jsonl`` one WorkoutSession per line, compact JSON

Writes go to temporary files first and replace the originals with
os.replace, so a failed save leaves the previous files intact.
"""

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from ..core.config import DATA_DIR_ENV, DEFAULT_DATA_DIRNAME, PLAN_FILENAME, SESSIONS_FILENAME
from ..core.errors import PersistenceError, ValidationError
from ..core.models import AppData, WorkoutSession
from .serializers import (
    app_config_to_dict,
    dict_to_app_config,
    dict_to_split_plan,
    json_line_to_session,
    session_to_json_line,
    split_plan_to_dict,
)


def _snapshot(obj: Any) -> dict[str, Any]:
    """Shallow copy of an object's fields, with list fields copied too."""
    return {k: list(v) if isinstance(v, list) else v for k, v in vars(obj).items()}


class DataStore:
    """
    Manages the plan and session files in one data directory.

    Acts as the app's transactional object store: load the whole graph,
    mutate it in memory, then save() or use transaction().
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding plan.json and sessions.jsonl
        """
        self.data_dir = Path(data_dir)
        self.plan_path = self.data_dir / PLAN_FILENAME
        self.sessions_path = self.data_dir / SESSIONS_FILENAME

    def exists(self) -> bool:
        """True once setup has written a plan file."""
        return self.plan_path.exists()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def load(self) -> AppData:
        """
        Load the full entity graph.

        Missing files mean "nothing yet": config/plan None, no sessions.

        Raises:
            ValidationError: If a file holds invalid data
            PersistenceError: If a file cannot be read
        """
        data = AppData()
        if self.plan_path.exists():
            try:
                with open(self.plan_path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Error parsing {self.plan_path}: {e}") from e
            except OSError as e:
                raise PersistenceError(f"Could not read {self.plan_path}: {e}") from e

            try:
                if raw.get("config") is not None:
                    data.config = dict_to_app_config(raw["config"])
                if raw.get("plan") is not None:
                    data.plan = dict_to_split_plan(raw["plan"])
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Error parsing {self.plan_path}: {e}") from e

        data.sessions = self.load_sessions()
        logger.debug(
            f"Loaded {self.data_dir}: setup={'no' if data.needs_setup else 'yes'}, "
            f"{len(data.sessions)} sessions"
        )
        return data

    def load_sessions(self) -> list[WorkoutSession]:
        """
        Load all sessions, sorted by date ascending.

        Raises:
            ValidationError: If a line cannot be parsed (names the line)
        """
        if not self.sessions_path.exists():
            return []

        sessions: list[WorkoutSession] = []
        try:
            with open(self.sessions_path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        sessions.append(json_line_to_session(line))
                    except ValidationError as e:
                        raise ValidationError(
                            f"Error parsing line {line_num} in {self.sessions_path}: {e}"
                        ) from e
        except OSError as e:
            raise PersistenceError(f"Could not read {self.sessions_path}: {e}") from e

        sessions.sort(key=lambda s: s.date)
        return sessions

    def fetch_sessions(self, newest_first: bool = False) -> list[WorkoutSession]:
        """Sessions sorted by date; the sorted query used by history views."""
        sessions = self.load_sessions()
        if newest_first:
            sessions.reverse()
        return sessions

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, data: AppData) -> None:
        """
        Write the whole graph.

        The two renames are not atomic as a pair.  Sessions are replaced
        first, so a failed plan rename can leave the old plan beside the
        new session log but never loses a logged entry.

        Raises:
            PersistenceError: If either file cannot be written
        """
        plan_doc = {
            "config": app_config_to_dict(data.config) if data.config else None,
            "plan": split_plan_to_dict(data.plan) if data.plan else None,
        }
        sessions = sorted(data.sessions, key=lambda s: s.date)

        plan_tmp = self.plan_path.with_suffix(".json.tmp")
        sessions_tmp = self.sessions_path.with_suffix(".jsonl.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(plan_tmp, "w", encoding="utf-8") as f:
                json.dump(plan_doc, f, indent=2)
            with open(sessions_tmp, "w", encoding="utf-8") as f:
                for session in sessions:
                    f.write(session_to_json_line(session) + "\n")
            os.replace(sessions_tmp, self.sessions_path)
            os.replace(plan_tmp, self.plan_path)
        except OSError as e:
            for tmp in (plan_tmp, sessions_tmp):
                tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Could not save data to {self.data_dir}: {e}") from e

        logger.debug(f"Saved {len(sessions)} sessions to {self.data_dir}")

    @contextmanager
    def transaction(self, data: AppData, *touched: Any) -> Iterator[AppData]:
        """
        Mutate ``data`` and save it as one unit.

        ``data`` and every object in ``touched`` are snapshotted first.  If
        the block raises, or the save fails, the snapshots are restored and
        the exception propagates, so in-memory state matches the files.

        Usage:
            with store.transaction(data, session, template):
                session.entries.append(entry)
        """
        snapshots = [(obj, _snapshot(obj)) for obj in (data, *touched)]
        try:
            yield data
            self.save(data)
        except Exception:
            for obj, state in snapshots:
                vars(obj).clear()
                vars(obj).update(state)
            logger.warning("Transaction rolled back")
            raise

    def clear(self) -> None:
        """Delete both data files (factory reset)."""
        for path in (self.plan_path, self.sessions_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f"Could not delete {path}: {e}") from e


def get_default_data_dir() -> Path:
    """
    Data directory: $PLATE_LOADER_HOME if set, else ~/.plate-loader.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_DATA_DIRNAME


def get_default_store() -> DataStore:
    return DataStore(get_default_data_dir())
