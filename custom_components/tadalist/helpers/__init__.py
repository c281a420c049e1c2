# File: helpers/__init__.py
"""Home Assistant-bound helper functions for TaDa List.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entity_helpers: Signal names, group/task lookups, entity registry cleanup

Usage:
    from .helpers import entity_helpers as eh
"""

from . import entity_helpers

__all__ = ["entity_helpers"]
