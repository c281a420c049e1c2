# File: config_flow.py
"""Config flow for the TaDa List integration.

Single step, single instance: groups and tasks are managed through services,
so the entry carries no configuration.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from . import const


class TadaListConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for TaDa List."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Confirm setup; only one TaDa List entry may exist."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            const.LOGGER.info("INFO: Creating TaDa List config entry")
            return self.async_create_entry(title=const.TADALIST_TITLE, data={})

        return self.async_show_form(step_id="user", data_schema=vol.Schema({}))
