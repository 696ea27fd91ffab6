"""Simulation wiring for the smart room.

This module provides:
- MonitoringService: Reading history and strategy dispatch
- PeriodicScheduler: Fixed-rate sensor polling
- SmartRoom: Facade wiring sensors, devices and strategies
- Factory functions for building rooms from configuration
- CSV report export and summaries
"""

from smartroom.simulation.factory import (
    create_room_from_config,
    ensure_components_registered,
)
from smartroom.simulation.monitoring import MonitoringService
from smartroom.simulation.report import export_csv, load_csv, summarize
from smartroom.simulation.room import SmartRoom
from smartroom.simulation.scheduler import PeriodicScheduler

__all__ = [
    "MonitoringService",
    "PeriodicScheduler",
    "SmartRoom",
    "create_room_from_config",
    "ensure_components_registered",
    "export_csv",
    "load_csv",
    "summarize",
]
