# File: coordinator.py
"""Coordinator for the TaDa List integration.

Holds the in-memory group collection, publishes changes to the sensor
platform and schedules persistence. All mutations go through GroupManager.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const, data_builders as db
from .engines.streak_engine import StreakEngine
from .managers.group_manager import GroupManager
from .utils.dt_utils import dt_today_iso

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import TadaListStore
    from .type_defs import GroupData


class TadaListDataCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for TaDa List integration.

    Explicit state container for the group collection. Every state change is
    published via `async_set_updated_data` before the store write is
    scheduled; a failed write never rolls back memory.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: TadaListStore,
    ) -> None:
        """Initialize the TadaListDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.store = store
        self._data: dict[str, Any] = {}
        self.group_manager = GroupManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update.

        Nothing is fetched; sensors recompute today's values from memory.
        """
        return self._data

    async def async_config_entry_first_refresh(self) -> None:
        """Load from storage, normalize and reconcile records, register the rollover."""
        stored = self.store.data
        # Catch up on any day boundaries missed while stopped
        today_iso = dt_today_iso()
        self._data = {
            const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
            const.DATA_GROUPS: [
                StreakEngine.reconcile(group, today_iso)
                for group in db.normalize_groups(self.store.get_groups())
            ],
        }

        stored_version = (stored.get(const.DATA_META) or {}).get(
            const.DATA_META_SCHEMA_VERSION, const.DEFAULT_ZERO
        )
        if stored_version != const.SCHEMA_VERSION:
            const.LOGGER.info(
                "Storage schema version %s updated to %s",
                stored_version,
                const.SCHEMA_VERSION,
            )

        const.LOGGER.debug(
            "Coordinator loaded %s groups", len(self._data[const.DATA_GROUPS])
        )

        await self.group_manager.async_setup()

        # Register midnight rollover
        self.config_entry.async_on_unload(
            async_track_time_change(
                self.hass, self._async_handle_midnight, **const.DEFAULT_DAILY_RESET_TIME
            )
        )

        self._persist()
        await super().async_config_entry_first_refresh()

    async def _async_handle_midnight(self, now: datetime) -> None:
        """Reconcile every group when the local day changes."""
        const.LOGGER.debug("Midnight rollover at %s", now)
        await self.group_manager.reconcile_all()

    # -------------------------------------------------------------------------------------
    # State Access
    # -------------------------------------------------------------------------------------

    @property
    def groups_data(self) -> list[GroupData]:
        """Return the ordered group list."""
        return self._data.setdefault(const.DATA_GROUPS, [])

    def get_group(self, group_id: str) -> GroupData | None:
        """Return a stored group by id, or None."""
        for group in self.groups_data:
            if group[const.DATA_GROUP_ID] == group_id:
                return group
        return None

    def replace_group(self, group: GroupData) -> None:
        """Store `group`, replacing the entry with the same id or appending."""
        groups = self.groups_data
        for index, existing in enumerate(groups):
            if existing[const.DATA_GROUP_ID] == group[const.DATA_GROUP_ID]:
                groups[index] = group
                return
        groups.append(group)

    def remove_group(self, group_id: str) -> None:
        """Remove a group from the collection."""
        self._data[const.DATA_GROUPS] = [
            group
            for group in self.groups_data
            if group[const.DATA_GROUP_ID] != group_id
        ]

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.store.set_data(self._data)
        self.hass.add_job(self.store.async_save)

    def _persist_and_update(self) -> None:
        """Publish the new state to listeners and schedule the save."""
        self.async_set_updated_data(self._data)
        self._persist()
