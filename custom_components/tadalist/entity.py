"""Base entity classes for TaDa List integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import TadaListDataCoordinator


class TadaListCoordinatorEntity(CoordinatorEntity[TadaListDataCoordinator]):
    """Base entity class for TaDa List sensors with typed coordinator access."""

    @property
    def coordinator(self) -> TadaListDataCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: TadaListDataCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
