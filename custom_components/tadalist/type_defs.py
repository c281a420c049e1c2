"""Type definitions for TaDa List data structures.

All stored records have fixed keys, so they are described with TypedDicts.
Engine summaries are plain `dict[str, Any]` because their keys come from
`const.STAT_*` constants.

IMPORTANT: This file must NOT import from coordinator.py, *helpers.py, or
any file that imports coordinator to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime coercion of stored records
lives in data_builders.normalize_*.
"""

from typing import Any, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

GroupId = str  # UUID string
TaskId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Stored records
# =============================================================================


class TaskData(TypedDict):
    """A single task owned by a group."""

    id: TaskId
    title: str
    completed: bool
    created_at: ISODatetime
    completed_at: ISODatetime | None  # None while not completed


class DailyProgressData(TypedDict):
    """Per-day completion record used for streak history.

    At most one entry per date per group.
    """

    date: ISODate
    completed_tasks: int
    streak_earned: bool


class GroupData(TypedDict):
    """A named group of tasks with its own daily goal and streak."""

    id: GroupId
    name: str
    tasks: list[TaskData]
    streak: int  # >= 0
    streak_threshold: int  # >= 1
    created_at: ISODatetime
    last_streak_date: ISODate | None
    daily_progress: list[DailyProgressData]


class StorageMeta(TypedDict):
    """Storage metadata section."""

    schema_version: int


class StorageData(TypedDict):
    """Top-level persisted structure."""

    meta: StorageMeta
    groups: list[GroupData]


# =============================================================================
# Engine output
# =============================================================================

GroupSummary = dict[str, Any]  # statistics_engine.group_today_summary
OverviewStats = dict[str, Any]  # statistics_engine.overview
