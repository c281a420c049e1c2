"""Entity lifecycle management helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults
- Business logic validation (blank names/titles)
- Complete entity structure building
- Coercion of stored records loaded from disk

### Build Functions
`build_group()` and `build_task()`:
- Take user_input with DATA_* keys
- Generate an id (UUID) for new entities
- Set timestamps (created_at)
- Apply field defaults
- Return a complete entity dict ready for storage

### Normalize Functions
`normalize_group()`, `normalize_task()` and `normalize_progress()` accept
whatever was found in storage (including the camelCase export format of the
mobile app) and return records with every field present and well typed.
Missing or broken fields are repaired one by one instead of rejecting the
whole record.

Consumers:
- managers/group_manager.py (group/task creation, rename)
- coordinator.py (load-time normalization)

See Also:
- type_defs.py: TypedDict definitions for type safety
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import uuid

from . import const
from .engines.streak_engine import StreakEngine
from .type_defs import DailyProgressData, GroupData, TaskData
from .utils.dt_utils import dt_now_iso, dt_parse_date, dt_to_utc_iso

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_list_field(value: Any) -> list[Any]:
    """Normalize a field that should be a list.

    None and non-list values become an empty list.
    """
    if isinstance(value, list):
        return value
    return []


def _rename_legacy_keys(
    raw: Mapping[str, Any], key_map: Mapping[str, str]
) -> dict[str, Any]:
    """Return a copy of `raw` with legacy keys mapped to storage keys.

    A storage key that is already present wins over its legacy alias.
    """
    data = dict(raw)
    for legacy_key, data_key in key_map.items():
        if legacy_key in data:
            legacy_value = data.pop(legacy_key)
            data.setdefault(data_key, legacy_value)
    return data


def _normalize_non_negative_int(value: Any, default: int = 0) -> int:
    """Return `value` as an int >= 0, or `default` if it isn't numeric."""
    if isinstance(value, bool):
        return default
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return default


def _normalize_name(value: Any) -> str:
    """Return a stripped string for name/title fields."""
    if value is None:
        return const.SENTINEL_EMPTY
    return str(value).strip()


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Raised when business logic validation fails in entity creation or update.
    The manager translates it into a HomeAssistantError for service callers.

    Attributes:
        field: The DATA_* constant identifying the field that failed
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise EntityValidationError(
            field=const.DATA_GROUP_NAME,
            translation_key=const.TRANS_KEY_ERROR_INVALID_GROUP_NAME,
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError."""
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(translation_key)


# ==============================================================================
# GROUPS
# ==============================================================================


def build_group(
    user_input: dict[str, Any],
    existing: GroupData | None = None,
) -> GroupData:
    """Build group data for create or update operations.

    One function handles both create (existing=None) and update
    (existing=GroupData). Update mode only touches the fields given in
    `user_input`; streak state is left to StreakEngine.

    Args:
        user_input: Data with DATA_GROUP_* keys (may have missing fields)
        existing: None for create, existing GroupData for update

    Returns:
        Complete GroupData ready for storage

    Raises:
        EntityValidationError: If the name is empty or whitespace

    Examples:
        # CREATE mode
        group = build_group({DATA_GROUP_NAME: "Morning", DATA_GROUP_STREAK_THRESHOLD: 2})

        # UPDATE mode (rename)
        group = build_group({DATA_GROUP_NAME: "Evening"}, existing=group)
    """
    is_create = existing is None

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    name = _normalize_name(get_field(const.DATA_GROUP_NAME, const.SENTINEL_EMPTY))
    if (is_create or const.DATA_GROUP_NAME in user_input) and not name:
        raise EntityValidationError(
            field=const.DATA_GROUP_NAME,
            translation_key=const.TRANS_KEY_ERROR_INVALID_GROUP_NAME,
        )

    threshold = StreakEngine.clamp_threshold(
        get_field(const.DATA_GROUP_STREAK_THRESHOLD, const.DEFAULT_STREAK_THRESHOLD)
    )

    if existing is None:
        return GroupData(
            id=str(uuid.uuid4()),
            name=name,
            tasks=[],
            streak=const.DEFAULT_ZERO,
            streak_threshold=threshold,
            created_at=dt_now_iso(),
            last_streak_date=None,
            daily_progress=[],
        )

    group: GroupData = {**existing}  # type: ignore[typeddict-item]
    group[const.DATA_GROUP_NAME] = name
    group[const.DATA_GROUP_STREAK_THRESHOLD] = threshold
    return group


def build_task(user_input: dict[str, Any]) -> TaskData:
    """Build a new, not yet completed task.

    Raises:
        EntityValidationError: If the title is empty or whitespace
    """
    title = _normalize_name(user_input.get(const.DATA_TASK_TITLE))
    if not title:
        raise EntityValidationError(
            field=const.DATA_TASK_TITLE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TASK_TITLE,
        )

    return TaskData(
        id=str(uuid.uuid4()),
        title=title,
        completed=False,
        created_at=dt_now_iso(),
        completed_at=None,
    )


# ==============================================================================
# STORED RECORD NORMALIZATION
# ==============================================================================


def normalize_task(raw: Mapping[str, Any]) -> TaskData:
    """Coerce a stored task record into a complete TaskData.

    - Missing id gets a fresh UUID
    - Unparseable created_at becomes now
    - Unparseable completed_at becomes None
    - completed_at is cleared on tasks that aren't completed
    """
    data = _rename_legacy_keys(raw, const.LEGACY_TASK_KEY_MAP)
    task_id = data.get(const.DATA_TASK_ID) or str(uuid.uuid4())

    created_at = dt_to_utc_iso(data.get(const.DATA_TASK_CREATED_AT))
    if created_at is None:
        const.LOGGER.warning(
            "Task '%s' has invalid created_at '%s', using now",
            task_id,
            data.get(const.DATA_TASK_CREATED_AT),
        )
        created_at = dt_now_iso()

    completed = bool(data.get(const.DATA_TASK_COMPLETED, False))
    completed_at = (
        dt_to_utc_iso(data.get(const.DATA_TASK_COMPLETED_AT)) if completed else None
    )
    if completed and completed_at is None:
        const.LOGGER.warning(
            "Completed task '%s' has invalid completed_at '%s'",
            task_id,
            data.get(const.DATA_TASK_COMPLETED_AT),
        )

    return TaskData(
        id=str(task_id),
        title=_normalize_name(data.get(const.DATA_TASK_TITLE)),
        completed=completed,
        created_at=created_at,
        completed_at=completed_at,
    )


def normalize_progress(raw: Mapping[str, Any]) -> DailyProgressData | None:
    """Coerce a stored daily progress record.

    Returns:
        DailyProgressData, or None when the date is unusable.
    """
    data = _rename_legacy_keys(raw, const.LEGACY_PROGRESS_KEY_MAP)
    day = dt_parse_date(data.get(const.DATA_PROGRESS_DATE))
    if day is None:
        const.LOGGER.warning(
            "Dropping daily progress entry with invalid date '%s'",
            data.get(const.DATA_PROGRESS_DATE),
        )
        return None

    return DailyProgressData(
        date=day.isoformat(),
        completed_tasks=_normalize_non_negative_int(
            data.get(const.DATA_PROGRESS_COMPLETED_TASKS)
        ),
        streak_earned=bool(data.get(const.DATA_PROGRESS_STREAK_EARNED, False)),
    )


def normalize_group(raw: Mapping[str, Any]) -> GroupData:
    """Coerce a stored group record into a complete GroupData.

    Records written by older versions (or the mobile app export) may lack
    `streak_threshold` or `daily_progress`; they get the defaults (1 and an
    empty list). Duplicate progress dates collapse into one entry, the last
    one wins. Task and progress records that are not mappings are dropped.
    """
    data = _rename_legacy_keys(raw, const.LEGACY_GROUP_KEY_MAP)
    group_id = data.get(const.DATA_GROUP_ID) or str(uuid.uuid4())

    tasks: list[TaskData] = []
    for raw_task in _normalize_list_field(data.get(const.DATA_GROUP_TASKS)):
        if not isinstance(raw_task, Mapping):
            const.LOGGER.warning(
                "Dropping malformed task in group '%s': %r",
                group_id,
                raw_task,
            )
            continue
        tasks.append(normalize_task(raw_task))

    progress_by_date: dict[str, DailyProgressData] = {}
    for raw_entry in _normalize_list_field(data.get(const.DATA_GROUP_DAILY_PROGRESS)):
        if not isinstance(raw_entry, Mapping):
            const.LOGGER.warning(
                "Dropping malformed progress entry in group '%s': %r",
                group_id,
                raw_entry,
            )
            continue
        entry = normalize_progress(raw_entry)
        if entry is not None:
            # Re-insert so the surviving entry keeps the position of the last one
            progress_by_date.pop(entry[const.DATA_PROGRESS_DATE], None)
            progress_by_date[entry[const.DATA_PROGRESS_DATE]] = entry

    created_at = dt_to_utc_iso(data.get(const.DATA_GROUP_CREATED_AT))
    if created_at is None:
        const.LOGGER.warning(
            "Group '%s' has invalid created_at '%s', using now",
            group_id,
            data.get(const.DATA_GROUP_CREATED_AT),
        )
        created_at = dt_now_iso()

    last_streak_day = dt_parse_date(data.get(const.DATA_GROUP_LAST_STREAK_DATE))

    return GroupData(
        id=str(group_id),
        name=_normalize_name(data.get(const.DATA_GROUP_NAME)),
        tasks=tasks,
        streak=_normalize_non_negative_int(data.get(const.DATA_GROUP_STREAK)),
        streak_threshold=StreakEngine.clamp_threshold(
            data.get(
                const.DATA_GROUP_STREAK_THRESHOLD, const.DEFAULT_STREAK_THRESHOLD
            )
        ),
        created_at=created_at,
        last_streak_date=last_streak_day.isoformat() if last_streak_day else None,
        daily_progress=list(progress_by_date.values()),
    )


def normalize_groups(raw_groups: Any) -> list[GroupData]:
    """Normalize a list of stored group records, dropping non-mappings."""
    groups: list[GroupData] = []
    for raw_group in _normalize_list_field(raw_groups):
        if not isinstance(raw_group, Mapping):
            const.LOGGER.warning("Dropping malformed group record: %r", raw_group)
            continue
        groups.append(normalize_group(raw_group))
    return groups
