# File: services.py
"""Defines custom services for the TaDa List integration.

These services allow direct actions through scripts, automations and
dashboards. Groups are addressed by `group_id` or `group_name`, tasks by
`task_id` or `task_title`.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import TadaListDataCoordinator
from .helpers import entity_helpers as eh

# --- Service Schemas ---
_GROUP_REFERENCE = {
    vol.Optional(const.FIELD_GROUP_ID): cv.string,
    vol.Optional(const.FIELD_GROUP_NAME): cv.string,
}

_TASK_REFERENCE = {
    **_GROUP_REFERENCE,
    vol.Optional(const.FIELD_TASK_ID): cv.string,
    vol.Optional(const.FIELD_TASK_TITLE): cv.string,
}

ADD_GROUP_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(
            const.FIELD_STREAK_THRESHOLD, default=const.DEFAULT_STREAK_THRESHOLD
        ): vol.Coerce(int),
    }
)

DELETE_GROUP_SCHEMA = vol.Schema(_GROUP_REFERENCE)

RENAME_GROUP_SCHEMA = vol.Schema(
    {
        **_GROUP_REFERENCE,
        vol.Required(const.FIELD_NAME): cv.string,
    }
)

UPDATE_STREAK_THRESHOLD_SCHEMA = vol.Schema(
    {
        **_GROUP_REFERENCE,
        vol.Required(const.FIELD_STREAK_THRESHOLD): vol.Coerce(int),
    }
)

RESET_GROUP_SCHEMA = vol.Schema(_GROUP_REFERENCE)

ADD_TASK_SCHEMA = vol.Schema(
    {
        **_GROUP_REFERENCE,
        vol.Required(const.FIELD_TITLE): cv.string,
    }
)

TOGGLE_TASK_SCHEMA = vol.Schema(_TASK_REFERENCE)

DELETE_TASK_SCHEMA = vol.Schema(_TASK_REFERENCE)


def _get_coordinator(hass: HomeAssistant, service: str) -> TadaListDataCoordinator:
    """Return the coordinator of the loaded entry.

    Raises:
        HomeAssistantError: If no TaDa List entry is loaded
    """
    entry_id = eh.get_first_tadalist_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def _resolve_group(
    coordinator: TadaListDataCoordinator, data: dict[str, Any]
) -> str:
    """Return the group id addressed by a service call."""
    return eh.resolve_group_id(
        coordinator,
        group_id=data.get(const.FIELD_GROUP_ID),
        group_name=data.get(const.FIELD_GROUP_NAME),
    )


def _resolve_task(
    coordinator: TadaListDataCoordinator, data: dict[str, Any]
) -> tuple[str, str]:
    """Return (group_id, task_id) addressed by a service call."""
    group_id = _resolve_group(coordinator, data)
    group = coordinator.get_group(group_id)
    task_id = eh.resolve_task_id(
        group,  # type: ignore[arg-type]
        task_id=data.get(const.FIELD_TASK_ID),
        task_title=data.get(const.FIELD_TASK_TITLE),
    )
    return group_id, task_id


def async_setup_services(hass: HomeAssistant) -> None:
    """Register TaDa List services."""

    async def handle_add_group(call: ServiceCall) -> ServiceResponse:
        """Handle creating a group."""
        coordinator = _get_coordinator(hass, const.SERVICE_ADD_GROUP)
        group_id = await coordinator.group_manager.add_group(
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_STREAK_THRESHOLD],
        )
        return {const.FIELD_GROUP_ID: group_id}

    async def handle_delete_group(call: ServiceCall) -> None:
        """Handle deleting a group."""
        coordinator = _get_coordinator(hass, const.SERVICE_DELETE_GROUP)
        group_id = _resolve_group(coordinator, call.data)
        await coordinator.group_manager.delete_group(group_id)

    async def handle_rename_group(call: ServiceCall) -> None:
        """Handle renaming a group."""
        coordinator = _get_coordinator(hass, const.SERVICE_RENAME_GROUP)
        group_id = _resolve_group(coordinator, call.data)
        await coordinator.group_manager.rename_group(
            group_id, call.data[const.FIELD_NAME]
        )

    async def handle_update_streak_threshold(call: ServiceCall) -> None:
        """Handle changing a group's daily goal."""
        coordinator = _get_coordinator(hass, const.SERVICE_UPDATE_STREAK_THRESHOLD)
        group_id = _resolve_group(coordinator, call.data)
        await coordinator.group_manager.update_streak_threshold(
            group_id, call.data[const.FIELD_STREAK_THRESHOLD]
        )

    async def handle_reset_group(call: ServiceCall) -> None:
        """Handle resetting a group's streak and completions."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_GROUP)
        group_id = _resolve_group(coordinator, call.data)
        await coordinator.group_manager.reset_group(group_id)

    async def handle_add_task(call: ServiceCall) -> ServiceResponse:
        """Handle adding a task to a group."""
        coordinator = _get_coordinator(hass, const.SERVICE_ADD_TASK)
        group_id = _resolve_group(coordinator, call.data)
        task_id = await coordinator.group_manager.add_task(
            group_id, call.data[const.FIELD_TITLE]
        )
        return {const.FIELD_GROUP_ID: group_id, const.FIELD_TASK_ID: task_id}

    async def handle_toggle_task(call: ServiceCall) -> None:
        """Handle toggling a task's completion."""
        coordinator = _get_coordinator(hass, const.SERVICE_TOGGLE_TASK)
        group_id, task_id = _resolve_task(coordinator, call.data)
        await coordinator.group_manager.toggle_task(group_id, task_id)

    async def handle_delete_task(call: ServiceCall) -> None:
        """Handle deleting a task."""
        coordinator = _get_coordinator(hass, const.SERVICE_DELETE_TASK)
        group_id, task_id = _resolve_task(coordinator, call.data)
        await coordinator.group_manager.delete_task(group_id, task_id)

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_GROUP,
        handle_add_group,
        schema=ADD_GROUP_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_GROUP,
        handle_delete_group,
        schema=DELETE_GROUP_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RENAME_GROUP,
        handle_rename_group,
        schema=RENAME_GROUP_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_STREAK_THRESHOLD,
        handle_update_streak_threshold,
        schema=UPDATE_STREAK_THRESHOLD_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_GROUP,
        handle_reset_group,
        schema=RESET_GROUP_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_TASK,
        handle_add_task,
        schema=ADD_TASK_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_TOGGLE_TASK,
        handle_toggle_task,
        schema=TOGGLE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_TASK,
        handle_delete_task,
        schema=DELETE_TASK_SCHEMA,
    )

    const.LOGGER.info("INFO: TaDa List services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister TaDa List services when unloading the integration."""
    services = [
        const.SERVICE_ADD_GROUP,
        const.SERVICE_DELETE_GROUP,
        const.SERVICE_RENAME_GROUP,
        const.SERVICE_UPDATE_STREAK_THRESHOLD,
        const.SERVICE_RESET_GROUP,
        const.SERVICE_ADD_TASK,
        const.SERVICE_TOGGLE_TASK,
        const.SERVICE_DELETE_TASK,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: TaDa List services have been unregistered")
