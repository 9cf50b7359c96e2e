"""
Split calendar resolution.

Maps a calendar date onto the rotating split:

  days_since_anchor = max(0, days between start-of-day(anchor) and start-of-day(target))
  week_index        = (days_since_anchor // 7) % split_length_weeks + 1
  weekday           = calendar weekday of target

The anchor is AppConfig.created_at.  Dates before the anchor resolve to
week 1.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from loguru import logger

from .config import DAYS_PER_WEEK, clamp_split_length
from .models import AppConfig, DayPlan, SplitPlan, Weekday

SelectionReason = Literal["today", "forward_scan", "week_fallback", "plan_fallback"]


@dataclass
class DaySelection:
    """The day plan picked for display, and how it was picked."""

    week_index: int
    weekday: Weekday
    day_plan: DayPlan
    date: date | None  # calendar day the selection resolved for; None for fallbacks
    reason: SelectionReason


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def split_week_index(
    anchor: date | datetime,
    target: date | datetime,
    split_length_weeks: int,
) -> int:
    """
    1-based week of the split that ``target`` falls in.

    Args:
        anchor: Split start (AppConfig.created_at)
        target: Date to resolve
        split_length_weeks: Split length; clamped to >= 1

    Returns:
        Week index in [1, split_length_weeks]
    """
    length = max(1, split_length_weeks)
    days = max(0, (_as_date(target) - _as_date(anchor)).days)
    return (days // DAYS_PER_WEEK) % length + 1


def resolve_split_day(
    anchor: date | datetime,
    target: date | datetime,
    split_length_weeks: int,
) -> tuple[int, Weekday]:
    """Return (week_index, weekday) for ``target``."""
    return (
        split_week_index(anchor, target, split_length_weeks),
        Weekday.from_date(_as_date(target)),
    )


def _configured_day(plan: SplitPlan, week_index: int, weekday: Weekday) -> DayPlan | None:
    week = plan.week(week_index)
    return week.day_plan(weekday) if week is not None else None


def auto_select_day(
    config: AppConfig,
    plan: SplitPlan,
    today: date | datetime,
) -> DaySelection | None:
    """
    Pick the day plan to show first.

    Order of preference:
      1. today's (week, weekday) if configured
      2. the first configured day found scanning forward, up to
         split_length × 7 days ahead
      3. the first configured day of today's week
      4. the first configured day in the plan (week index, then weekday)

    Returns:
        DaySelection, or None when the plan has no configured days at all
    """
    length = clamp_split_length(config.split_length_weeks)
    start = _as_date(today)
    week_index, weekday = resolve_split_day(config.created_at, start, length)

    day = _configured_day(plan, week_index, weekday)
    if day is not None:
        logger.debug(f"Auto-select: today is week {week_index} {weekday.short_name}")
        return DaySelection(week_index, weekday, day, start, "today")

    for offset in range(1, length * DAYS_PER_WEEK + 1):
        candidate = start + timedelta(days=offset)
        cand_week, cand_weekday = resolve_split_day(config.created_at, candidate, length)
        day = _configured_day(plan, cand_week, cand_weekday)
        if day is not None:
            logger.debug(
                f"Auto-select: next configured day is week {cand_week} "
                f"{cand_weekday.short_name} ({candidate.isoformat()})"
            )
            return DaySelection(cand_week, cand_weekday, day, candidate, "forward_scan")

    week = plan.week(week_index)
    if week is not None and week.day_plans:
        first = week.sorted_day_plans[0]
        return DaySelection(week_index, first.weekday, first, None, "week_fallback")

    for week in plan.sorted_weeks:
        if week.day_plans:
            first = week.sorted_day_plans[0]
            return DaySelection(week.week_index, first.weekday, first, None, "plan_fallback")

    logger.debug("Auto-select: plan has no configured days")
    return None


def ensure_valid_day(plan: SplitPlan, week_index: int, weekday: Weekday) -> Weekday | None:
    """
    Keep a weekday selection valid after the week changes.

    Returns the weekday itself when the week has it, the week's first
    configured weekday otherwise, or None for a week without days.
    """
    week = plan.week(week_index)
    if week is None or not week.day_plans:
        return None
    if week.day_plan(weekday) is not None:
        return weekday
    return week.sorted_day_plans[0].weekday
