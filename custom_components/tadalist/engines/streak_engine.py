"""Streak Engine - daily progress reconciliation for task groups.

Every structural change to a group's tasks or threshold (task add, toggle,
delete, threshold change, reset, group creation) is followed by a single
`StreakEngine.reconcile()` pass that brings `streak`, `last_streak_date` and
`daily_progress` back in line with the current task state.

Design Principles:
    - Stateless: No coordinator reference, operates on passed data structures
    - Pure: `reconcile()` returns a new group, the input is never mutated
    - Injectable clock: every entry point accepts `reference_date` and `tz`

Reconciliation rules:
    - Today qualifies when today's completions reach the streak threshold
    - Qualifying for the first time today extends the streak when the last
      streak day was yesterday, otherwise restarts it at 1
    - Losing qualification today (uncomplete, delete, threshold raise) rebuilds
      the streak from the unbroken run of earlier earned days
    - Progress entries older than the retention window are dropped
"""

from __future__ import annotations

import copy
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    are_consecutive_days,
    dt_days_ago_iso,
    dt_resolve_date,
    dt_to_local_date_iso,
    dt_yesterday_iso,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from zoneinfo import ZoneInfo

    from ..type_defs import DailyProgressData, GroupData, TaskData


class StreakEngine:
    """Pure reconciliation engine for group streaks.

    All methods are static and side-effect free. The engine does NOT persist
    data; the caller stores the returned group and schedules persistence.

    Example:
        new_group = StreakEngine.reconcile(group)
        coordinator.replace_group(new_group)
    """

    # ────────────────────────────────────────────────────────────────
    # Threshold
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def clamp_threshold(value: Any) -> int:
        """Return a valid streak threshold (integer >= 1).

        Non-numeric values fall back to the default threshold.
        """
        try:
            threshold = int(value)
        except (TypeError, ValueError):
            return const.DEFAULT_STREAK_THRESHOLD
        return max(const.MIN_STREAK_THRESHOLD, threshold)

    @staticmethod
    def qualifies(completed_count: int, threshold: int) -> bool:
        """Return True when a day's completion count meets the threshold."""
        return completed_count >= threshold

    # ────────────────────────────────────────────────────────────────
    # Task Counting
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def count_completed_on(
        tasks: Iterable[TaskData],
        day_iso: str,
        tz: ZoneInfo | None = None,
    ) -> int:
        """Count completed tasks whose completion timestamp falls on `day_iso`.

        The completion timestamp is converted to the local calendar day before
        comparing, so a task completed at 23:30 local time counts for that day
        even when the UTC date has already rolled over.

        Args:
            tasks: Tasks of a single group.
            day_iso: Calendar-day identifier ("YYYY-MM-DD").
            tz: Optional timezone override.

        Returns:
            Number of tasks completed on that day.
        """
        count = 0
        for task in tasks:
            if not task.get(const.DATA_TASK_COMPLETED):
                continue
            completed_day = dt_to_local_date_iso(
                task.get(const.DATA_TASK_COMPLETED_AT), tz
            )
            if completed_day == day_iso:
                count += 1
        return count

    # ────────────────────────────────────────────────────────────────
    # Daily Progress
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def get_progress_entry(
        daily_progress: Iterable[DailyProgressData], day_iso: str
    ) -> DailyProgressData | None:
        """Return the progress entry for `day_iso`, or None."""
        for entry in daily_progress:
            if entry.get(const.DATA_PROGRESS_DATE) == day_iso:
                return entry
        return None

    @staticmethod
    def recompute_streak_tail(
        daily_progress: Iterable[DailyProgressData], exclude_date: str
    ) -> tuple[int, str | None]:
        """Rebuild the streak from the most recent earned days.

        Only earned entries other than `exclude_date` are considered. The
        streak is the length of the run of consecutive days ending at the most
        recent of them; counting stops at the first gap.

        Returns:
            Tuple of (streak, last_streak_date). (0, None) when no earned
            day remains.
        """
        earned_dates = sorted(
            (
                entry[const.DATA_PROGRESS_DATE]
                for entry in daily_progress
                if entry.get(const.DATA_PROGRESS_STREAK_EARNED)
                and entry.get(const.DATA_PROGRESS_DATE) != exclude_date
            ),
            reverse=True,
        )
        if not earned_dates:
            return const.DEFAULT_ZERO, None

        streak = 1
        for newer, older in zip(earned_dates, earned_dates[1:]):
            if not are_consecutive_days(newer, older):
                break
            streak += 1
        return streak, earned_dates[0]

    @staticmethod
    def prune_daily_progress(
        daily_progress: Iterable[DailyProgressData],
        today: date | datetime | str | None = None,
        retention_days: int = const.DEFAULT_PROGRESS_RETENTION_DAYS,
        tz: ZoneInfo | None = None,
    ) -> list[DailyProgressData]:
        """Return progress entries within the retention window.

        Entries dated strictly before `today - retention_days` are dropped.
        The cutoff day itself is kept.
        """
        cutoff_iso = dt_days_ago_iso(retention_days, today, tz)
        return [
            entry
            for entry in daily_progress
            if entry.get(const.DATA_PROGRESS_DATE, const.SENTINEL_EMPTY) >= cutoff_iso
        ]

    # ────────────────────────────────────────────────────────────────
    # Reconciliation
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def reconcile(
        group: GroupData,
        reference_date: date | datetime | str | None = None,
        tz: ZoneInfo | None = None,
        retention_days: int = const.DEFAULT_PROGRESS_RETENTION_DAYS,
    ) -> GroupData:
        """Return a copy of `group` with streak state matching its tasks.

        Args:
            group: Group snapshot taken after the task/threshold mutation.
            reference_date: Date to use as "today". Defaults to local today.
            tz: Optional timezone override for calendar-day computation.
            retention_days: Days of daily progress history to keep.

        Returns:
            New group dict. `streak`, `last_streak_date`, `daily_progress` and
            `streak_threshold` (clamped) may differ from the input.

        Example:
            # Two tasks done today, threshold 2, earned yesterday with streak 4
            new_group = StreakEngine.reconcile(group)
            # new_group["streak"] == 5, new_group["last_streak_date"] == today
        """
        new_group: GroupData = copy.deepcopy(group)

        today = dt_resolve_date(reference_date, tz)
        today_iso = today.isoformat()
        yesterday_iso = dt_yesterday_iso(today, tz)

        threshold = StreakEngine.clamp_threshold(
            new_group.get(const.DATA_GROUP_STREAK_THRESHOLD)
        )
        new_group[const.DATA_GROUP_STREAK_THRESHOLD] = threshold

        today_completed = StreakEngine.count_completed_on(
            new_group.get(const.DATA_GROUP_TASKS) or [], today_iso, tz
        )

        daily_progress: list[DailyProgressData] = list(
            new_group.get(const.DATA_GROUP_DAILY_PROGRESS) or []
        )
        today_entry = StreakEngine.get_progress_entry(daily_progress, today_iso)
        if today_entry is None:
            today_entry = {
                const.DATA_PROGRESS_DATE: today_iso,
                const.DATA_PROGRESS_COMPLETED_TASKS: today_completed,
                const.DATA_PROGRESS_STREAK_EARNED: False,
            }
            daily_progress.append(today_entry)
        today_entry[const.DATA_PROGRESS_COMPLETED_TASKS] = today_completed

        streak = max(const.DEFAULT_ZERO, new_group.get(const.DATA_GROUP_STREAK) or 0)
        last_streak_date = new_group.get(const.DATA_GROUP_LAST_STREAK_DATE)

        if StreakEngine.qualifies(today_completed, threshold):
            if not today_entry.get(const.DATA_PROGRESS_STREAK_EARNED):
                if last_streak_date == yesterday_iso:
                    streak += 1
                elif last_streak_date != today_iso:
                    # No previous streak day, or a gap
                    streak = 1
                last_streak_date = today_iso
                today_entry[const.DATA_PROGRESS_STREAK_EARNED] = True
                const.LOGGER.debug(
                    "Group '%s' earned %s (streak %s)",
                    new_group.get(const.DATA_GROUP_NAME),
                    today_iso,
                    streak,
                )
        elif last_streak_date == today_iso:
            today_entry[const.DATA_PROGRESS_STREAK_EARNED] = False
            streak, last_streak_date = StreakEngine.recompute_streak_tail(
                daily_progress, today_iso
            )
            const.LOGGER.debug(
                "Group '%s' lost %s, streak rebuilt to %s (last %s)",
                new_group.get(const.DATA_GROUP_NAME),
                today_iso,
                streak,
                last_streak_date,
            )

        new_group[const.DATA_GROUP_STREAK] = streak
        new_group[const.DATA_GROUP_LAST_STREAK_DATE] = last_streak_date
        new_group[const.DATA_GROUP_DAILY_PROGRESS] = StreakEngine.prune_daily_progress(
            daily_progress, today, retention_days
        )
        return new_group
