# File: sensor.py
"""Sensors for the TaDa List integration.

Sensors Defined in This File (3):

# Group-Specific Sensors (2)
01. GroupStreakSensor
02. GroupTodayProgressSensor

# System-Level Sensors (1)
03. SystemOverviewSensor

Group sensors are created at setup for every stored group and added on the
fly when a group is created; deleting a group removes them from the entity
registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.const import PERCENTAGE
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.util import slugify

from . import const
from .engines.statistics_engine import StatisticsEngine
from .entity import TadaListCoordinatorEntity
from .helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import TadaListDataCoordinator
    from .type_defs import GroupData


def _group_sensors(
    coordinator: TadaListDataCoordinator, entry: ConfigEntry, group: GroupData
) -> list[SensorEntity]:
    """Build the sensors of one group."""
    group_id = group[const.DATA_GROUP_ID]
    group_name = group[const.DATA_GROUP_NAME]
    return [
        GroupStreakSensor(coordinator, entry, group_id, group_name),
        GroupTodayProgressSensor(coordinator, entry, group_id, group_name),
    ]


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for TaDa List integration."""
    coordinator: TadaListDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    entities: list[SensorEntity] = [SystemOverviewSensor(coordinator, entry)]
    for group in coordinator.groups_data:
        entities.extend(_group_sensors(coordinator, entry, group))
    async_add_entities(entities)

    @callback
    def _async_add_group(payload: dict[str, Any]) -> None:
        """Add sensors for a newly created group."""
        group = coordinator.get_group(payload["group_id"])
        if group is None:
            return
        async_add_entities(_group_sensors(coordinator, entry, group))

    entry.async_on_unload(
        async_dispatcher_connect(
            hass,
            get_event_signal(entry.entry_id, const.SIGNAL_SUFFIX_GROUP_ADDED),
            _async_add_group,
        )
    )


# ------------------------------------------------------------------------------------------
# GROUP SENSORS
# ------------------------------------------------------------------------------------------


class _GroupSensorBase(TadaListCoordinatorEntity, SensorEntity):
    """Shared plumbing for sensors bound to one group."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: TadaListDataCoordinator,
        entry: ConfigEntry,
        group_id: str,
        group_name: str,
        uid_suffix: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._group_id = group_id
        self._attr_unique_id = f"{entry.entry_id}_{group_id}{uid_suffix}"
        self._attr_translation_placeholders = {"group_name": group_name}
        self.entity_id = f"sensor.{const.DOMAIN}_{slugify(group_name)}{uid_suffix}"

    @property
    def _group(self) -> GroupData | None:
        return self.coordinator.get_group(self._group_id)

    @property
    def available(self) -> bool:
        """Unavailable once the group is gone."""
        return super().available and self._group is not None

    @callback
    def _handle_coordinator_update(self) -> None:
        """Handle updated data from the coordinator."""
        # Keep the translated name in step with group renames
        group = self._group
        if group is not None:
            group_name = group[const.DATA_GROUP_NAME]
            if group_name != self._attr_translation_placeholders.get("group_name"):
                self._attr_translation_placeholders = {"group_name": group_name}
                # Entity caches both properties
                self.__dict__.pop("translation_placeholders", None)
                self.__dict__.pop("name", None)
        super()._handle_coordinator_update()


class GroupStreakSensor(_GroupSensorBase):
    """Sensor for a group's current streak in days.

    Attributes carry today's progress and the most recent daily history so a
    dashboard can render the group without extra calls.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_GROUP_STREAK
    _attr_icon = const.ICON_STREAK
    _attr_native_unit_of_measurement = const.UNIT_DAYS
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: TadaListDataCoordinator,
        entry: ConfigEntry,
        group_id: str,
        group_name: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, entry, group_id, group_name, const.SENSOR_SUFFIX_GROUP_STREAK
        )

    @property
    def native_value(self) -> int | None:
        """Return the group's streak."""
        group = self._group
        if group is None:
            return None
        return group.get(const.DATA_GROUP_STREAK, const.DEFAULT_ZERO)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose today's summary and recent daily progress."""
        group = self._group
        if group is None:
            return {}
        summary = StatisticsEngine.group_today_summary(group)
        recent = sorted(
            group.get(const.DATA_GROUP_DAILY_PROGRESS) or [],
            key=lambda entry: entry[const.DATA_PROGRESS_DATE],
            reverse=True,
        )[: const.SENSOR_RECENT_PROGRESS_DAYS]
        return {
            const.ATTR_GROUP_ID: self._group_id,
            const.ATTR_GROUP_NAME: group.get(const.DATA_GROUP_NAME),
            const.ATTR_STREAK_THRESHOLD: summary[const.STAT_THRESHOLD],
            const.ATTR_LAST_STREAK_DATE: group.get(const.DATA_GROUP_LAST_STREAK_DATE),
            const.ATTR_COMPLETED_TODAY: summary[const.STAT_COMPLETED_TODAY],
            const.ATTR_GOAL_MET: summary[const.STAT_GOAL_MET],
            const.ATTR_STREAK_ALIVE: summary[const.STAT_STREAK_ALIVE],
            const.ATTR_TOTAL_TASKS: summary[const.STAT_TOTAL_TASKS],
            const.ATTR_RECENT_PROGRESS: recent,
        }


class GroupTodayProgressSensor(_GroupSensorBase):
    """Sensor for progress toward today's goal, as a percentage (capped at 100)."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_GROUP_TODAY_PROGRESS
    _attr_icon = const.ICON_TODAY_PROGRESS
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: TadaListDataCoordinator,
        entry: ConfigEntry,
        group_id: str,
        group_name: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator,
            entry,
            group_id,
            group_name,
            const.SENSOR_SUFFIX_GROUP_TODAY_PROGRESS,
        )

    @property
    def native_value(self) -> int | None:
        """Return today's progress percentage."""
        group = self._group
        if group is None:
            return None
        summary = StatisticsEngine.group_today_summary(group)
        return round(summary[const.STAT_PROGRESS] * 100)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the raw counts behind the percentage."""
        group = self._group
        if group is None:
            return {}
        summary = StatisticsEngine.group_today_summary(group)
        return {
            const.ATTR_GROUP_ID: self._group_id,
            const.ATTR_COMPLETED_TODAY: summary[const.STAT_COMPLETED_TODAY],
            const.ATTR_STREAK_THRESHOLD: summary[const.STAT_THRESHOLD],
            const.ATTR_GOAL_MET: summary[const.STAT_GOAL_MET],
        }


# ------------------------------------------------------------------------------------------
# SYSTEM SENSORS
# ------------------------------------------------------------------------------------------


class SystemOverviewSensor(TadaListCoordinatorEntity, SensorEntity):
    """Sensor summarizing all groups; state is the number of active streaks."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_OVERVIEW
    _attr_icon = const.ICON_OVERVIEW
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self, coordinator: TadaListDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_SUFFIX_OVERVIEW}"
        self.entity_id = f"sensor.{const.DOMAIN}{const.SENSOR_SUFFIX_OVERVIEW}"

    @property
    def native_value(self) -> int:
        """Return the number of groups with an active streak."""
        stats = StatisticsEngine.overview(self.coordinator.groups_data)
        return stats[const.STAT_ACTIVE_STREAKS]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose collection totals and the streak leaderboard."""
        attributes: dict[str, Any] = dict(
            StatisticsEngine.overview(self.coordinator.groups_data)
        )
        attributes[const.ATTR_LEADERBOARD] = StatisticsEngine.leaderboard(
            self.coordinator.groups_data
        )
        return attributes
