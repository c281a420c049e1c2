"""Direct unit tests for TadaListStore.

Covers loading (fresh, existing, legacy and broken storage), saving with
error logging, and deleting the storage file.
"""

# pylint: disable=protected-access  # Accessing _store and _data for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names
# pylint: disable=unused-argument  # hass fixture sets up the event loop

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.tadalist import const
from custom_components.tadalist.store import TadaListStore

from .conftest import make_group


@pytest.fixture
def store(hass: HomeAssistant) -> TadaListStore:
    """Return a store instance."""
    return TadaListStore(hass)


async def test_async_initialize_creates_default_structure(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """No stored data gives an empty group list."""
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()

    assert store.data == TadaListStore.get_default_structure()
    assert store.get_groups() == []


async def test_async_initialize_loads_existing_data(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """Stored data is used as-is."""
    existing = {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_GROUPS: [make_group()],
    }
    with patch.object(store._store, "async_load", return_value=existing):
        await store.async_initialize()

    assert store.get_groups() == [make_group()]


async def test_async_initialize_fills_missing_keys(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """A dict without meta or groups gets both."""
    with patch.object(store._store, "async_load", return_value={}):
        await store.async_initialize()

    assert store.data[const.DATA_GROUPS] == []
    assert store.data[const.DATA_META][const.DATA_META_SCHEMA_VERSION] == (
        const.SCHEMA_VERSION
    )


async def test_async_initialize_wraps_legacy_list(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """A bare list of groups is accepted."""
    with patch.object(store._store, "async_load", return_value=[make_group()]):
        await store.async_initialize()

    assert store.get_groups() == [make_group()]
    assert const.DATA_META in store.data


@pytest.mark.parametrize(
    "error", [HomeAssistantError("corrupt"), OSError("io"), ValueError("json")]
)
async def test_async_initialize_load_failure_starts_empty(
    hass: HomeAssistant, store: TadaListStore, error: Exception, caplog
) -> None:
    """Unreadable storage is logged and replaced by an empty list."""
    with patch.object(store._store, "async_load", side_effect=error):
        await store.async_initialize()

    assert store.get_groups() == []
    assert "Failed to load storage" in caplog.text


async def test_async_initialize_unexpected_type(
    hass: HomeAssistant, store: TadaListStore, caplog
) -> None:
    """Scalar storage content is rejected."""
    with patch.object(store._store, "async_load", return_value="oops"):
        await store.async_initialize()

    assert store.get_groups() == []
    assert "Unexpected storage content type" in caplog.text


async def test_get_groups_with_broken_groups_field(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """A non-list groups field reads as empty."""
    store.set_data({const.DATA_GROUPS: {"not": "a list"}})
    assert store.get_groups() == []


async def test_async_save_writes_data(
    hass: HomeAssistant, store: TadaListStore
) -> None:
    """async_save hands the in-memory data to the HA store."""
    store.set_data({const.DATA_GROUPS: [make_group()]})
    with patch.object(store._store, "async_save", new=AsyncMock()) as mock_save:
        await store.async_save()

    mock_save.assert_awaited_once_with({const.DATA_GROUPS: [make_group()]})


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (OSError("disk full"), "file system error"),
        (TypeError("set"), "non-serializable data"),
        (ValueError("nan"), "invalid data format"),
    ],
)
async def test_async_save_errors_are_logged(
    hass: HomeAssistant, store: TadaListStore, error: Exception, message: str, caplog
) -> None:
    """Save failures are logged, not raised."""
    with patch.object(store._store, "async_save", side_effect=error):
        await store.async_save()

    assert message in caplog.text


async def test_async_delete_storage(hass: HomeAssistant, store: TadaListStore) -> None:
    """Deleting removes the file and resets memory."""
    store.set_data({const.DATA_GROUPS: [make_group()]})
    with patch.object(store._store, "async_remove", new=AsyncMock()) as mock_remove:
        await store.async_delete_storage()

    mock_remove.assert_awaited_once()
    assert store.get_groups() == []


async def test_async_delete_storage_error_is_logged(
    hass: HomeAssistant, store: TadaListStore, caplog
) -> None:
    """A failed removal is logged."""
    with patch.object(store._store, "async_remove", side_effect=OSError("perm")):
        await store.async_delete_storage()

    assert "Failed to remove storage file" in caplog.text
