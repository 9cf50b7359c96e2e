"""
CLI entry point using Typer.

Provides commands for split planning and workout logging:
- setup / settings / reset / profile: configure the split, bar and plates
- today / day: show the workouts for a training day
- add-workout / edit-workout / rename-workout / move-workout /
  delete-workout / archive-workout / saved-workouts: manage a day's list
- log: log sets for a workout
- history / show-session: browse logged sessions
- trends: per-workout progress
"""

from .app import app
from .commands import analysis, sessions, setup, workouts  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
