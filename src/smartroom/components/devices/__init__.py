"""Device components for the smart room."""

from smartroom.components.devices.fan import Fan
from smartroom.components.devices.light import Light

__all__ = [
    "Light",
    "Fan",
]
