"""Light device implementation."""

from __future__ import annotations

from smartroom.core.base import Device
from smartroom.core.registry import register_component


@register_component("device", "light")
class Light(Device):
    """Room light switched by the presence/luminosity strategy."""
