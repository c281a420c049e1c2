"""Shared fixtures for TaDa List tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.tadalist.const import (
    COORDINATOR,
    DATA_GROUPS,
    DATA_META,
    DATA_META_SCHEMA_VERSION,
    DOMAIN,
    SCHEMA_VERSION,
    TADALIST_TITLE,
)
from custom_components.tadalist.coordinator import TadaListDataCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=TADALIST_TITLE,
        data={},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return mock storage data structure (no groups)."""
    return {
        DATA_META: {DATA_META_SCHEMA_VERSION: SCHEMA_VERSION},
        DATA_GROUPS: [],
    }


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the TaDa List integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> TadaListDataCoordinator:
    """Return the coordinator of the set up integration."""
    return hass.data[DOMAIN][init_integration.entry_id][COORDINATOR]


def make_task(
    task_id: str,
    title: str = "Task",
    completed_at: str | None = None,
) -> dict[str, Any]:
    """Build a stored task record; completed when `completed_at` is given."""
    return {
        "id": task_id,
        "title": title,
        "completed": completed_at is not None,
        "created_at": "2026-01-01T08:00:00+00:00",
        "completed_at": completed_at,
    }


def make_group(
    group_id: str = "group_1",
    name: str = "Morning",
    *,
    tasks: list[dict[str, Any]] | None = None,
    streak: int = 0,
    threshold: int = 1,
    last_streak_date: str | None = None,
    daily_progress: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a stored group record."""
    return {
        "id": group_id,
        "name": name,
        "tasks": tasks or [],
        "streak": streak,
        "streak_threshold": threshold,
        "created_at": "2026-01-01T08:00:00+00:00",
        "last_streak_date": last_streak_date,
        "daily_progress": daily_progress or [],
    }


def make_progress(day: str, completed: int = 1, earned: bool = True) -> dict[str, Any]:
    """Build a daily progress entry."""
    return {"date": day, "completed_tasks": completed, "streak_earned": earned}
