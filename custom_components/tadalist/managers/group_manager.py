"""Group Manager - group and task lifecycle with streak reconciliation.

This manager handles every mutation of the group collection:
- Groups: add, delete, rename, change streak threshold, reset
- Tasks: add, toggle completion, delete
- Midnight rollover: reconcile all groups for the new day

ARCHITECTURE:
- GroupManager applies the structural change to a copy of the group
- StreakEngine.reconcile() derives streak, last streak date and daily progress
- Coordinator stores the new group, publishes it and schedules persistence

Event Flow:
    GroupManager.toggle_task() -> StreakEngine.reconcile() -> coordinator
                                        |
        bus: tadalist_daily_goal_reached / tadalist_daily_goal_revoked
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .. import const, data_builders as db
from ..engines.streak_engine import StreakEngine
from ..helpers.entity_helpers import remove_entities_by_item_id
from ..utils.dt_utils import dt_now_iso, dt_today_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import TadaListDataCoordinator
    from ..type_defs import GroupData, TaskData


class GroupManager(BaseManager):
    """Manager for groups, tasks and their streaks.

    Responsibilities:
    - Validate and apply group/task mutations
    - Run streak reconciliation after every structural change
    - Fire bus events when today's goal is reached or revoked
    - Announce group creation/deletion to the platforms

    NOT responsible for:
    - Streak rules (StreakEngine)
    - Direct storage persistence (delegated to coordinator)
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: TadaListDataCoordinator
    ) -> None:
        """Initialize the GroupManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the GroupManager.

        Removes registry entities of deleted groups.
        """
        self.listen(const.SIGNAL_SUFFIX_GROUP_DELETED, self._on_group_deleted)
        const.LOGGER.debug("GroupManager initialized")

    @callback
    def _on_group_deleted(self, payload: dict[str, Any]) -> None:
        """Remove the entities of a deleted group."""
        remove_entities_by_item_id(self.hass, self.entry_id, payload["group_id"])

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get_group_copy(self, group_id: str) -> GroupData:
        """Return a deep copy of a stored group.

        Raises:
            HomeAssistantError: If the group doesn't exist
        """
        group = self.coordinator.get_group(group_id)
        if group is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_GROUP_NOT_FOUND,
                translation_placeholders={"name": group_id},
            )
        return copy.deepcopy(group)

    @staticmethod
    def _get_task(group: GroupData, task_id: str) -> TaskData:
        """Return a task of `group` by id.

        Raises:
            HomeAssistantError: If the task doesn't exist in the group
        """
        for task in group[const.DATA_GROUP_TASKS]:
            if task[const.DATA_TASK_ID] == task_id:
                return task
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_TASK_NOT_FOUND,
            translation_placeholders={
                "name": task_id,
                "group": group[const.DATA_GROUP_NAME],
            },
        )

    @staticmethod
    def _today_earned(group: GroupData | None, today_iso: str) -> bool:
        """Return True if `group` has today's progress entry marked earned."""
        if group is None:
            return False
        entry = StreakEngine.get_progress_entry(
            group.get(const.DATA_GROUP_DAILY_PROGRESS) or [], today_iso
        )
        return bool(entry and entry.get(const.DATA_PROGRESS_STREAK_EARNED))

    def _fire_goal_transition(
        self, before: GroupData | None, after: GroupData, today_iso: str
    ) -> None:
        """Fire a bus event when today's goal flips."""
        was_earned = self._today_earned(before, today_iso)
        is_earned = self._today_earned(after, today_iso)
        if was_earned == is_earned:
            return

        entry = StreakEngine.get_progress_entry(
            after[const.DATA_GROUP_DAILY_PROGRESS], today_iso
        )
        event_type = (
            const.EVENT_DAILY_GOAL_REACHED if is_earned else const.EVENT_DAILY_GOAL_REVOKED
        )
        event_data = {
            const.EVENT_DATA_GROUP_ID: after[const.DATA_GROUP_ID],
            const.EVENT_DATA_GROUP_NAME: after[const.DATA_GROUP_NAME],
            const.EVENT_DATA_STREAK: after[const.DATA_GROUP_STREAK],
            const.EVENT_DATA_COMPLETED_TODAY: (
                entry[const.DATA_PROGRESS_COMPLETED_TASKS] if entry else 0
            ),
            const.EVENT_DATA_THRESHOLD: after[const.DATA_GROUP_STREAK_THRESHOLD],
        }
        const.LOGGER.info(
            "Group '%s' daily goal %s (streak %s)",
            after[const.DATA_GROUP_NAME],
            "reached" if is_earned else "revoked",
            after[const.DATA_GROUP_STREAK],
        )
        self.hass.bus.async_fire(event_type, event_data)

    def _commit(self, group: GroupData, *, reconcile: bool = True) -> GroupData:
        """Reconcile, store, publish and persist a mutated group.

        Args:
            group: Group copy after the structural change
            reconcile: False for changes that don't affect streaks (rename)

        Returns:
            The stored group.
        """
        today_iso = dt_today_iso()
        before = self.coordinator.get_group(group[const.DATA_GROUP_ID])
        if reconcile:
            group = StreakEngine.reconcile(group, today_iso)
        self.coordinator.replace_group(group)
        if reconcile:
            self._fire_goal_transition(before, group, today_iso)
        self.coordinator._persist_and_update()
        return group

    @staticmethod
    def _to_ha_error(err: db.EntityValidationError) -> HomeAssistantError:
        """Translate a builder validation error for service callers."""
        return HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=err.translation_key,
            translation_placeholders=err.placeholders,
        )

    # =========================================================================
    # Public API: Groups
    # =========================================================================

    async def add_group(
        self, name: str, threshold: Any = const.DEFAULT_STREAK_THRESHOLD
    ) -> str:
        """Create a group and return its id.

        Raises:
            HomeAssistantError: If the name is blank
        """
        try:
            group = db.build_group(
                {
                    const.DATA_GROUP_NAME: name,
                    const.DATA_GROUP_STREAK_THRESHOLD: threshold,
                }
            )
        except db.EntityValidationError as err:
            raise self._to_ha_error(err) from err

        group = self._commit(group)
        group_id = group[const.DATA_GROUP_ID]
        const.LOGGER.info(
            "Added group '%s' (%s) with threshold %s",
            group[const.DATA_GROUP_NAME],
            group_id,
            group[const.DATA_GROUP_STREAK_THRESHOLD],
        )
        self.emit(const.SIGNAL_SUFFIX_GROUP_ADDED, group_id=group_id)
        return group_id

    async def delete_group(self, group_id: str) -> None:
        """Delete a group with all its tasks and history."""
        group = self._get_group_copy(group_id)
        self.coordinator.remove_group(group_id)
        self.coordinator._persist_and_update()
        const.LOGGER.info(
            "Deleted group '%s' (%s)", group[const.DATA_GROUP_NAME], group_id
        )
        self.emit(const.SIGNAL_SUFFIX_GROUP_DELETED, group_id=group_id)

    async def rename_group(self, group_id: str, name: str) -> None:
        """Rename a group. Streak state is not touched."""
        group = self._get_group_copy(group_id)
        try:
            group = db.build_group({const.DATA_GROUP_NAME: name}, existing=group)
        except db.EntityValidationError as err:
            raise self._to_ha_error(err) from err
        self._commit(group, reconcile=False)
        const.LOGGER.debug("Renamed group %s to '%s'", group_id, name)

    async def update_streak_threshold(self, group_id: str, threshold: Any) -> None:
        """Change a group's daily goal; today is re-evaluated immediately."""
        group = self._get_group_copy(group_id)
        group[const.DATA_GROUP_STREAK_THRESHOLD] = StreakEngine.clamp_threshold(
            threshold
        )
        self._commit(group)
        const.LOGGER.debug(
            "Group %s threshold set to %s",
            group_id,
            group[const.DATA_GROUP_STREAK_THRESHOLD],
        )

    async def reset_group(self, group_id: str) -> None:
        """Clear streak, history and every task completion of a group."""
        group = self._get_group_copy(group_id)
        group[const.DATA_GROUP_STREAK] = const.DEFAULT_ZERO
        group[const.DATA_GROUP_LAST_STREAK_DATE] = None
        group[const.DATA_GROUP_DAILY_PROGRESS] = []
        for task in group[const.DATA_GROUP_TASKS]:
            task[const.DATA_TASK_COMPLETED] = False
            task[const.DATA_TASK_COMPLETED_AT] = None
        self._commit(group)
        const.LOGGER.info("Reset group '%s'", group[const.DATA_GROUP_NAME])

    # =========================================================================
    # Public API: Tasks
    # =========================================================================

    async def add_task(self, group_id: str, title: str) -> str:
        """Add a task to a group and return the task id.

        Raises:
            HomeAssistantError: If the group doesn't exist or the title is blank
        """
        group = self._get_group_copy(group_id)
        try:
            task = db.build_task({const.DATA_TASK_TITLE: title})
        except db.EntityValidationError as err:
            raise self._to_ha_error(err) from err
        group[const.DATA_GROUP_TASKS].append(task)
        self._commit(group)
        const.LOGGER.debug(
            "Added task '%s' to group '%s'",
            task[const.DATA_TASK_TITLE],
            group[const.DATA_GROUP_NAME],
        )
        return task[const.DATA_TASK_ID]

    async def toggle_task(self, group_id: str, task_id: str) -> bool:
        """Flip a task's completion state.

        Returns:
            The new completed state.
        """
        group = self._get_group_copy(group_id)
        task = self._get_task(group, task_id)
        completed = not task[const.DATA_TASK_COMPLETED]
        task[const.DATA_TASK_COMPLETED] = completed
        task[const.DATA_TASK_COMPLETED_AT] = dt_now_iso() if completed else None
        self._commit(group)
        const.LOGGER.debug(
            "Task '%s' in group '%s' is now %s",
            task[const.DATA_TASK_TITLE],
            group[const.DATA_GROUP_NAME],
            "completed" if completed else "open",
        )
        return completed

    async def delete_task(self, group_id: str, task_id: str) -> None:
        """Remove a task from a group."""
        group = self._get_group_copy(group_id)
        task = self._get_task(group, task_id)
        group[const.DATA_GROUP_TASKS] = [
            t for t in group[const.DATA_GROUP_TASKS] if t is not task
        ]
        self._commit(group)
        const.LOGGER.debug(
            "Deleted task '%s' from group '%s'",
            task[const.DATA_TASK_TITLE],
            group[const.DATA_GROUP_NAME],
        )

    # =========================================================================
    # Public API: Rollover
    # =========================================================================

    async def reconcile_all(self) -> None:
        """Reconcile every group for the current day.

        Creates today's progress entries and prunes the history window.
        """
        today_iso = dt_today_iso()
        for group in list(self.coordinator.groups_data):
            new_group = StreakEngine.reconcile(group, today_iso)
            self.coordinator.replace_group(new_group)
            self._fire_goal_transition(group, new_group, today_iso)
        self.coordinator._persist_and_update()
        const.LOGGER.debug(
            "Reconciled %s groups for %s",
            len(self.coordinator.groups_data),
            today_iso,
        )
