"""Sensor components for the smart room.

This module provides the simulated sensors and the decorators that can
wrap them.
"""

from smartroom.components.sensors.decorators import (
    LoggingSensorDecorator,
    SensorDecorator,
    SmoothingSensorDecorator,
)
from smartroom.components.sensors.luminosity import LuminositySensor
from smartroom.components.sensors.presence import PresenceSensor
from smartroom.components.sensors.temperature import TemperatureSensor

__all__ = [
    "TemperatureSensor",
    "PresenceSensor",
    "LuminositySensor",
    "SensorDecorator",
    "SmoothingSensorDecorator",
    "LoggingSensorDecorator",
]
