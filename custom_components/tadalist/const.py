# File: const.py
"""Constants for the TaDa List integration.

This file centralizes storage keys, defaults, service names, event names,
translation keys and platform identifiers for consistency across the
integration.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
TADALIST_TITLE = "TaDa List"

# Integration Domain
DOMAIN = "tadalist"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "tadalist_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Update Interval (minutes) - sensors recompute "today" derived values
DEFAULT_UPDATE_INTERVAL = 15

# Midnight rollover
DEFAULT_DAILY_RESET_TIME = {"hour": 0, "minute": 0, "second": 0}

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_ZERO = 0
DEFAULT_STREAK_THRESHOLD = 1
MIN_STREAK_THRESHOLD = 1
DEFAULT_PROGRESS_RETENTION_DAYS = 30
SENTINEL_EMPTY = ""

# Number of daily progress entries exposed in sensor attributes
SENSOR_RECENT_PROGRESS_DAYS = 7

# ------------------------------------------------------------------------------------------------
# Data Keys (storage)
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_GROUPS = "groups"

# Group
DATA_GROUP_ID = "id"
DATA_GROUP_NAME = "name"
DATA_GROUP_TASKS = "tasks"
DATA_GROUP_STREAK = "streak"
DATA_GROUP_STREAK_THRESHOLD = "streak_threshold"
DATA_GROUP_CREATED_AT = "created_at"
DATA_GROUP_LAST_STREAK_DATE = "last_streak_date"
DATA_GROUP_DAILY_PROGRESS = "daily_progress"

# Task
DATA_TASK_ID = "id"
DATA_TASK_TITLE = "title"
DATA_TASK_COMPLETED = "completed"
DATA_TASK_CREATED_AT = "created_at"
DATA_TASK_COMPLETED_AT = "completed_at"

# Daily progress
DATA_PROGRESS_DATE = "date"
DATA_PROGRESS_COMPLETED_TASKS = "completed_tasks"
DATA_PROGRESS_STREAK_EARNED = "streak_earned"

# Legacy keys used by the mobile app export (camelCase -> storage key)
LEGACY_GROUP_KEY_MAP = {
    "streakThreshold": DATA_GROUP_STREAK_THRESHOLD,
    "createdAt": DATA_GROUP_CREATED_AT,
    "lastStreakDate": DATA_GROUP_LAST_STREAK_DATE,
    "dailyProgress": DATA_GROUP_DAILY_PROGRESS,
}
LEGACY_TASK_KEY_MAP = {
    "createdAt": DATA_TASK_CREATED_AT,
    "completedAt": DATA_TASK_COMPLETED_AT,
}
LEGACY_PROGRESS_KEY_MAP = {
    "completedTasks": DATA_PROGRESS_COMPLETED_TASKS,
    "streakEarned": DATA_PROGRESS_STREAK_EARNED,
}

# ------------------------------------------------------------------------------------------------
# Statistics keys (engine output, sensor attributes)
# ------------------------------------------------------------------------------------------------
STAT_COMPLETED_TODAY = "completed_today"
STAT_THRESHOLD = "threshold"
STAT_GOAL_MET = "goal_met"
STAT_PROGRESS = "progress"
STAT_TOTAL_TASKS = "total_tasks"
STAT_STREAK = "streak"
STAT_STREAK_ALIVE = "streak_alive"
STAT_TOTAL_GROUPS = "total_groups"
STAT_GOALS_MET_TODAY = "goals_met_today"
STAT_TOTAL_STREAKS = "total_streaks"
STAT_ACTIVE_STREAKS = "active_streaks"
STAT_LONGEST_STREAK = "longest_streak"

# ------------------------------------------------------------------------------------------------
# Sensor Attributes
# ------------------------------------------------------------------------------------------------
ATTR_GROUP_ID = "group_id"
ATTR_GROUP_NAME = "group_name"
ATTR_STREAK_THRESHOLD = "streak_threshold"
ATTR_LAST_STREAK_DATE = "last_streak_date"
ATTR_COMPLETED_TODAY = "completed_today"
ATTR_GOAL_MET = "goal_met"
ATTR_STREAK_ALIVE = "streak_alive"
ATTR_TOTAL_TASKS = "total_tasks"
ATTR_RECENT_PROGRESS = "recent_progress"
ATTR_LEADERBOARD = "leaderboard"

# Sensor unique_id suffixes
SENSOR_SUFFIX_GROUP_STREAK = "_group_streak"
SENSOR_SUFFIX_GROUP_TODAY_PROGRESS = "_group_today_progress"
SENSOR_SUFFIX_OVERVIEW = "_overview"

# Translation keys (entities)
TRANS_KEY_SENSOR_GROUP_STREAK = "group_streak"
TRANS_KEY_SENSOR_GROUP_TODAY_PROGRESS = "group_today_progress"
TRANS_KEY_SENSOR_OVERVIEW = "overview"

# Icons
ICON_STREAK = "mdi:fire"
ICON_TODAY_PROGRESS = "mdi:progress-check"
ICON_OVERVIEW = "mdi:format-list-checks"

# Units
UNIT_DAYS = "days"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_GROUP = "add_group"
SERVICE_DELETE_GROUP = "delete_group"
SERVICE_RENAME_GROUP = "rename_group"
SERVICE_UPDATE_STREAK_THRESHOLD = "update_streak_threshold"
SERVICE_RESET_GROUP = "reset_group"
SERVICE_ADD_TASK = "add_task"
SERVICE_TOGGLE_TASK = "toggle_task"
SERVICE_DELETE_TASK = "delete_task"

# Service fields
FIELD_GROUP_ID = "group_id"
FIELD_GROUP_NAME = "group_name"
FIELD_NAME = "name"
FIELD_STREAK_THRESHOLD = "streak_threshold"
FIELD_TASK_ID = "task_id"
FIELD_TASK_TITLE = "task_title"
FIELD_TITLE = "title"

# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
# Home Assistant bus events (automations)
EVENT_DAILY_GOAL_REACHED = f"{DOMAIN}_daily_goal_reached"
EVENT_DAILY_GOAL_REVOKED = f"{DOMAIN}_daily_goal_revoked"

EVENT_DATA_GROUP_ID = "group_id"
EVENT_DATA_GROUP_NAME = "group_name"
EVENT_DATA_STREAK = "streak"
EVENT_DATA_COMPLETED_TODAY = "completed_today"
EVENT_DATA_THRESHOLD = "threshold"

# Instance-scoped dispatcher signals (manager -> platforms)
SIGNAL_SUFFIX_GROUP_ADDED = "group_added"
SIGNAL_SUFFIX_GROUP_DELETED = "group_deleted"

# ------------------------------------------------------------------------------------------------
# Errors / Translation keys (exceptions)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_GROUP_NOT_FOUND = "group_not_found"
TRANS_KEY_ERROR_TASK_NOT_FOUND = "task_not_found"
TRANS_KEY_ERROR_INVALID_GROUP_NAME = "invalid_group_name"
TRANS_KEY_ERROR_INVALID_TASK_TITLE = "invalid_task_title"
TRANS_KEY_ERROR_GROUP_REFERENCE_REQUIRED = "group_reference_required"
TRANS_KEY_ERROR_TASK_REFERENCE_REQUIRED = "task_reference_required"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

MSG_NO_ENTRY_FOUND = "No TaDa List entry found"
