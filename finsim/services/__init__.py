"""Application services."""

from .simulation_service import SECTIONS, SimulationService

__all__ = ["SECTIONS", "SimulationService"]
