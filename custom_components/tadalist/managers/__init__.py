"""Managers for TaDa List integration.

Managers own the mutating operations; engines do the pure computation and the
coordinator holds the state.
- group_manager: Group and task lifecycle, streak reconciliation
"""

from .base_manager import BaseManager
from .group_manager import GroupManager

__all__ = [
    "BaseManager",
    "GroupManager",
]
