"""
Minimal smoke tests for the plate-loader CLI.

Tests basic functionality:
- App runs without errors
- Setup writes the plan file
- Workouts can be added and logged
- Duplicates are resolved from the command line
- History, trends and settings render
"""

import tempfile
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from plate_loader.cli.main import app
from plate_loader.io.store import DataStore


runner = CliRunner()


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def quiet_logging():
    """Drop the stderr sink the CLI callback installs on the runner's stream."""
    yield
    logger.remove()
    logger.disable("plate_loader")


def _invoke(data_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _setup_with_squat(data_dir: Path) -> None:
    result = _invoke(data_dir, "setup", "--unit", "lb", "--day", "1:mon=Push", "--force")
    assert result.exit_code == 0, result.output
    result = _invoke(data_dir, "add-workout", "1", "mon", "Squat", "--type", "barbell")
    assert result.exit_code == 0, result.output


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "workout" in result.output.lower()

    def test_setup_creates_plan(self, temp_data_dir):
        """Test setup writes plan.json with the requested day."""
        result = _invoke(temp_data_dir, "setup", "--day", "1:mon=Push", "--force")

        assert result.exit_code == 0
        assert (temp_data_dir / "plan.json").exists()
        data = DataStore(temp_data_dir).load()
        assert data.plan.week(1).day_plans[0].label == "Push"

    def test_add_workout_shows_day(self, temp_data_dir):
        """Test add-workout stores the template and prints the day."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "day", "1", "mon")
        assert result.exit_code == 0
        assert "Squat" in result.output

        template = DataStore(temp_data_dir).load().plan.all_templates()[0]
        assert template.weight_type.value == "barbell"

    def test_log_barbell_sets(self, temp_data_dir):
        """Test log stores the plate total (45 bar + 2×(2×45 + 10) = 245)."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(
            temp_data_dir, "log", "1", "mon", "1", "--sets", "w10@bar,5@45x2+10x1", "--keep-plan"
        )

        assert result.exit_code == 0, result.output
        assert "Logged 2 sets" in result.output
        sets = DataStore(temp_data_dir).load().sessions[0].entries[0].sets
        assert sets[0].load.total_value == 45.0
        assert sets[1].load.total_value == 245.0

    def test_duplicate_replaced_from_option(self, temp_data_dir):
        """Test logging the same workout twice with replace_latest keeps one entry."""
        _setup_with_squat(temp_data_dir)
        _invoke(temp_data_dir, "log", "1", "mon", "1", "--sets", "5@45x2", "--keep-plan")

        result = _invoke(
            temp_data_dir,
            "log", "1", "mon", "1",
            "--sets", "5@45x2+10",
            "--on-duplicate", "replace_latest",
            "--keep-plan",
        )

        assert result.exit_code == 0, result.output
        assert "Replaced" in result.output
        sessions = DataStore(temp_data_dir).load().sessions
        assert len(sessions) == 1
        assert len(sessions[0].entries) == 1
        assert sessions[0].entries[0].sets[0].load.total_value == 245.0

    def test_log_syncs_plan(self, temp_data_dir):
        """Test --sync-plan writes the logged set counts to the workout."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "log", "1", "mon", "1", "--sets", "5@45,5@45", "--sync-plan")

        assert result.exit_code == 0, result.output
        template = DataStore(temp_data_dir).load().plan.all_templates()[0]
        assert template.planned_warm_up_set_count == 0
        assert template.planned_working_set_count == 2

    def test_history_and_trends(self, temp_data_dir):
        """Test history and trends show the logged workout."""
        _setup_with_squat(temp_data_dir)
        _invoke(temp_data_dir, "log", "1", "mon", "1", "--sets", "5@45x2", "--keep-plan")

        result = _invoke(temp_data_dir, "history")
        assert result.exit_code == 0
        assert "Push" in result.output

        result = _invoke(temp_data_dir, "show-session", "1")
        assert result.exit_code == 0
        assert "Squat" in result.output

        result = _invoke(temp_data_dir, "trends", "--plot")
        assert result.exit_code == 0
        assert "Squat" in result.output

    def test_today_and_settings(self, temp_data_dir):
        """Test today finds the next training day and settings render."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "today")
        assert result.exit_code == 0
        assert "Push" in result.output

        result = _invoke(temp_data_dir, "settings", "--bar-weight", "35")
        assert result.exit_code == 0
        assert DataStore(temp_data_dir).load().config.bar_weight_value == 35.0

    def test_bad_sets_rejected(self, temp_data_dir):
        """Test an unknown plate fails without saving."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "log", "1", "mon", "1", "--sets", "5@50x2", "--keep-plan")

        assert result.exit_code == 1
        assert DataStore(temp_data_dir).load().sessions == []

    def test_reset_deletes_everything(self, temp_data_dir):
        """Test reset --yes removes the plan file."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "reset", "--yes")

        assert result.exit_code == 0
        assert not (temp_data_dir / "plan.json").exists()

    def test_profile_name_saved(self, temp_data_dir):
        """Test profile --name writes preferences.yaml."""
        result = _invoke(temp_data_dir, "profile", "--name", "Sam")

        assert result.exit_code == 0
        assert "Sam" in (temp_data_dir / "preferences.yaml").read_text()

    def test_commands_need_setup(self, temp_data_dir):
        """Test today fails cleanly before setup."""
        result = _invoke(temp_data_dir, "today")

        assert result.exit_code == 1
        assert "setup" in result.output

    def test_day_falls_back_to_first_training_day(self, temp_data_dir):
        """Test day shows the week's first training day when the weekday is not configured."""
        _setup_with_squat(temp_data_dir)

        result = _invoke(temp_data_dir, "day", "1", "fri")

        assert result.exit_code == 0, result.output
        assert "no Friday" in result.output
        assert "Squat" in result.output

    def test_interactive_sets_copy_and_delete(self, temp_data_dir):
        """Test typed sets accept c to copy the last set and d to delete it."""
        _setup_with_squat(temp_data_dir)

        result = runner.invoke(
            app,
            ["log", "1", "mon", "1", "--keep-plan", "--data-dir", str(temp_data_dir)],
            input="5@45x2\nc\nd\nc\n\n",
        )

        assert result.exit_code == 0, result.output
        sets = DataStore(temp_data_dir).load().sessions[0].entries[0].sets
        assert len(sets) == 2
        assert [s.load.total_value for s in sets] == [225.0, 225.0]
        assert [s.set_number for s in sets] == [1, 2]
