"""Core module for the smart room simulation.

This module provides the foundational classes for the simulation:
- Base classes for components (sensors, devices, strategies)
- Readings and the shared latest-value table
- Configuration loading and validation
- Component registry for creation by type name
- Event system for observability
"""

from smartroom.core.base import (
    ActionStrategy,
    Component,
    Device,
    Sensor,
    SensorObserver,
    SimulatedSensor,
)
from smartroom.core.events import Event, EventBus, EventType, get_event_bus
from smartroom.core.registry import (
    UnknownComponentError,
    get_registry,
    register_component,
)
from smartroom.core.state import LatestValueTable, MeasurementType, SensorReading

__all__ = [
    # Base classes
    "Component",
    "Sensor",
    "SensorObserver",
    "SimulatedSensor",
    "Device",
    "ActionStrategy",
    # State
    "MeasurementType",
    "SensorReading",
    "LatestValueTable",
    # Registry
    "register_component",
    "get_registry",
    "UnknownComponentError",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
]
