"""Smart room components.

This module provides concrete implementations of sensors, sensor
decorators and devices.
"""

from smartroom.components.devices import Fan, Light
from smartroom.components.sensors import (
    LoggingSensorDecorator,
    LuminositySensor,
    PresenceSensor,
    SensorDecorator,
    SmoothingSensorDecorator,
    TemperatureSensor,
)

__all__ = [
    # Sensors
    "TemperatureSensor",
    "PresenceSensor",
    "LuminositySensor",
    # Decorators
    "SensorDecorator",
    "SmoothingSensorDecorator",
    "LoggingSensorDecorator",
    # Devices
    "Light",
    "Fan",
]
