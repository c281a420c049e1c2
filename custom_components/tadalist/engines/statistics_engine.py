"""Statistics Engine - read-only summaries of group progress.

Computes the values shown by the sensors: per-group progress toward today's
goal, collection-wide totals and the streak leaderboard.

Design Principles:
    - Stateless: No coordinator reference, operates on passed data structures
    - Read-only: Never modifies groups; reconciliation is StreakEngine's job
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_resolve_date, dt_yesterday_iso
from .streak_engine import StreakEngine

if TYPE_CHECKING:
    from collections.abc import Iterable
    from zoneinfo import ZoneInfo

    from ..type_defs import GroupData, GroupSummary, OverviewStats


class StatisticsEngine:
    """Engine for per-group and collection-wide statistics.

    Example:
        summary = StatisticsEngine.group_today_summary(group)
        # {"completed_today": 2, "threshold": 3, "goal_met": False, ...}
    """

    # ────────────────────────────────────────────────────────────────
    # Per-Group
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def group_today_summary(
        group: GroupData,
        reference_date: date | datetime | str | None = None,
        tz: ZoneInfo | None = None,
    ) -> GroupSummary:
        """Summarize a group's progress toward today's goal.

        `progress` is the completed/threshold ratio capped at 1.0.
        `streak_alive` is True while the streak can still be continued, i.e.
        the last streak day is today or yesterday.
        """
        today = dt_resolve_date(reference_date, tz)
        today_iso = today.isoformat()
        yesterday_iso = dt_yesterday_iso(today, tz)

        tasks = group.get(const.DATA_GROUP_TASKS) or []
        threshold = StreakEngine.clamp_threshold(
            group.get(const.DATA_GROUP_STREAK_THRESHOLD)
        )
        completed_today = StreakEngine.count_completed_on(tasks, today_iso, tz)
        streak = group.get(const.DATA_GROUP_STREAK) or const.DEFAULT_ZERO
        last_streak_date = group.get(const.DATA_GROUP_LAST_STREAK_DATE)

        return {
            const.STAT_COMPLETED_TODAY: completed_today,
            const.STAT_THRESHOLD: threshold,
            const.STAT_GOAL_MET: StreakEngine.qualifies(completed_today, threshold),
            const.STAT_PROGRESS: min(1.0, completed_today / threshold),
            const.STAT_TOTAL_TASKS: len(tasks),
            const.STAT_STREAK: streak,
            const.STAT_STREAK_ALIVE: last_streak_date in (today_iso, yesterday_iso),
        }

    # ────────────────────────────────────────────────────────────────
    # Collection-Wide
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def overview(
        groups: Iterable[GroupData],
        reference_date: date | datetime | str | None = None,
        tz: ZoneInfo | None = None,
    ) -> OverviewStats:
        """Aggregate statistics over all groups.

        Returns:
            Dict with total_groups, total_tasks, completed_today,
            goals_met_today, total_streaks, active_streaks, longest_streak.
        """
        today = dt_resolve_date(reference_date, tz)
        stats: dict[str, Any] = {
            const.STAT_TOTAL_GROUPS: 0,
            const.STAT_TOTAL_TASKS: 0,
            const.STAT_COMPLETED_TODAY: 0,
            const.STAT_GOALS_MET_TODAY: 0,
            const.STAT_TOTAL_STREAKS: 0,
            const.STAT_ACTIVE_STREAKS: 0,
            const.STAT_LONGEST_STREAK: 0,
        }

        for group in groups:
            summary = StatisticsEngine.group_today_summary(group, today, tz)
            streak = summary[const.STAT_STREAK]
            stats[const.STAT_TOTAL_GROUPS] += 1
            stats[const.STAT_TOTAL_TASKS] += summary[const.STAT_TOTAL_TASKS]
            stats[const.STAT_COMPLETED_TODAY] += summary[const.STAT_COMPLETED_TODAY]
            if summary[const.STAT_GOAL_MET]:
                stats[const.STAT_GOALS_MET_TODAY] += 1
            stats[const.STAT_TOTAL_STREAKS] += streak
            if streak > 0:
                stats[const.STAT_ACTIVE_STREAKS] += 1
            stats[const.STAT_LONGEST_STREAK] = max(
                stats[const.STAT_LONGEST_STREAK], streak
            )

        return stats

    @staticmethod
    def leaderboard(groups: Iterable[GroupData]) -> list[dict[str, Any]]:
        """Return groups with an active streak, longest first.

        Ties keep the original group order.
        """
        ranked = [
            {
                const.ATTR_GROUP_ID: group.get(const.DATA_GROUP_ID),
                const.ATTR_GROUP_NAME: group.get(const.DATA_GROUP_NAME),
                const.STAT_STREAK: group.get(const.DATA_GROUP_STREAK) or 0,
            }
            for group in groups
            if (group.get(const.DATA_GROUP_STREAK) or 0) > 0
        ]
        ranked.sort(key=lambda item: item[const.STAT_STREAK], reverse=True)
        return ranked
