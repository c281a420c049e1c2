# File: utils/__init__.py
"""Pure Python utilities for TaDa List.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

NO `homeassistant.*` imports allowed in this module.

Submodules:
    - dt_utils: Calendar-day identifiers, timestamp parsing, day arithmetic

Usage:
    from .utils import dt_utils
    from .utils.dt_utils import are_consecutive_days
"""

from . import dt_utils

__all__ = ["dt_utils"]
