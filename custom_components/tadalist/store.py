# File: store.py
"""Handles persistent data storage for the TaDa List integration.

Uses Home Assistant's Storage helper to save and load task groups, ensuring
tasks, streaks and daily progress survive restarts. The blob is read once at
startup and written after every mutation; nothing else touches the disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class TadaListStore:
    """Handles persistent storage operations for TaDa List data.

    Thin wrapper around Home Assistant's Store API for loading, saving, and
    accessing the group collection.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        Returns:
            dict: Default structure with meta and an empty group list.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
            },
            const.DATA_GROUPS: [],
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, or it can't be read, initializes with an empty
        structure. A bare list (legacy export) is wrapped as the group list.
        """
        const.LOGGER.debug("DEBUG: TadaListStore: Loading data from storage")
        try:
            existing_data = await self._store.async_load()
        except (HomeAssistantError, OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to load storage %s: %s. Starting with an empty list",
                self._storage_key,
                err,
            )
            self._data = TadaListStore.get_default_structure()
            return

        if existing_data is None:
            # No existing data, create a new default structure.
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = TadaListStore.get_default_structure()
        elif isinstance(existing_data, list):
            const.LOGGER.info(
                "INFO: Found legacy group list in storage (%s groups)",
                len(existing_data),
            )
            self._data = TadaListStore.get_default_structure()
            self._data[const.DATA_GROUPS] = existing_data
        elif isinstance(existing_data, dict):
            self._data = existing_data
            self._data.setdefault(const.DATA_GROUPS, [])
            self._data.setdefault(
                const.DATA_META,
                {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
            )
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s groups",
                len(self._data[const.DATA_GROUPS] or []),
            )
        else:
            const.LOGGER.error(
                "ERROR: Unexpected storage content type %s. Starting with an empty list",
                type(existing_data).__name__,
            )
            self._data = TadaListStore.get_default_structure()

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_groups(self) -> list[Any]:
        """Return the raw group list from the in-memory cache."""
        groups = self._data.get(const.DATA_GROUPS)
        return groups if isinstance(groups, list) else []

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        const.LOGGER.debug(
            "DEBUG: Store set_data called with %s groups",
            len(new_data.get(const.DATA_GROUPS, [])),
        )
        self._data = new_data

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = TadaListStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
