# File: helpers/entity_helpers.py
"""Entity registry and lookup helper functions for TaDa List.

Functions that interact with Home Assistant's entity registry, build
instance-scoped signal names, and resolve groups/tasks from service input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_registry import (
    async_entries_for_config_entry,
    async_get as async_get_entity_registry,
)

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import TadaListDataCoordinator
    from ..type_defs import GroupData


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'tadalist_{entry_id}_{suffix}'

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_GROUP_ADDED)
        'tadalist_abc123_group_added'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Entity Registry
# ==============================================================================


def remove_entities_by_item_id(
    hass: HomeAssistant,
    entry_id: str,
    item_id: str,
) -> int:
    """Remove all entities whose unique_id references the given item_id.

    Called when deleting groups. Unique ids look like
    `{entry_id}_{group_id}_group_streak`, so the id is matched with its
    delimiters.

    Returns:
        Count of removed entities.
    """
    ent_reg = async_get_entity_registry(hass)
    prefix = f"{entry_id}_"
    removed_count = 0

    for entity_entry in async_entries_for_config_entry(ent_reg, entry_id):
        unique_id = str(entity_entry.unique_id)
        if not unique_id.startswith(prefix):
            continue
        if f"_{item_id}_" in unique_id or unique_id.endswith(f"_{item_id}"):
            ent_reg.async_remove(entity_entry.entity_id)
            removed_count += 1
            const.LOGGER.debug(
                "Removed entity %s (uid: %s) for deleted item %s",
                entity_entry.entity_id,
                unique_id,
                item_id,
            )

    if removed_count > 0:
        const.LOGGER.info(
            "Removed %d entities for deleted item %s", removed_count, item_id
        )
    return removed_count


# ==============================================================================
# Lookups
# ==============================================================================


def get_first_tadalist_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first loaded TaDa List config entry."""
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state.name == "LOADED":
            return entry.entry_id
    return None


def get_group_id_by_name(
    coordinator: TadaListDataCoordinator, group_name: str
) -> str | None:
    """Look up a group's id by its name (case-insensitive, trimmed)."""
    wanted = group_name.strip().casefold()
    for group in coordinator.groups_data:
        if str(group.get(const.DATA_GROUP_NAME, "")).strip().casefold() == wanted:
            return group[const.DATA_GROUP_ID]
    return None


def resolve_group_id(
    coordinator: TadaListDataCoordinator,
    group_id: str | None = None,
    group_name: str | None = None,
) -> str:
    """Return a group id from service input (id wins over name).

    Raises:
        HomeAssistantError: If neither is given or the group doesn't exist.
    """
    if group_id:
        if coordinator.get_group(group_id) is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_GROUP_NOT_FOUND,
                translation_placeholders={"name": group_id},
            )
        return group_id

    if not group_name:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_GROUP_REFERENCE_REQUIRED,
        )

    found_id = get_group_id_by_name(coordinator, group_name)
    if found_id is None:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_GROUP_NOT_FOUND,
            translation_placeholders={"name": group_name},
        )
    return found_id


def resolve_task_id(
    group: GroupData,
    task_id: str | None = None,
    task_title: str | None = None,
) -> str:
    """Return a task id within `group` from service input (id wins over title).

    When several tasks share a title, the first one is used.

    Raises:
        HomeAssistantError: If neither is given or no task matches.
    """
    tasks: list[Any] = group.get(const.DATA_GROUP_TASKS) or []
    if not task_id and not task_title:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_TASK_REFERENCE_REQUIRED,
        )

    for task in tasks:
        if task_id and task.get(const.DATA_TASK_ID) == task_id:
            return task_id
        if (
            not task_id
            and task_title
            and str(task.get(const.DATA_TASK_TITLE, "")).strip().casefold()
            == task_title.strip().casefold()
        ):
            return task[const.DATA_TASK_ID]

    raise HomeAssistantError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_TASK_NOT_FOUND,
        translation_placeholders={
            "name": task_id or task_title or const.SENTINEL_EMPTY,
            "group": str(group.get(const.DATA_GROUP_NAME, "")),
        },
    )
