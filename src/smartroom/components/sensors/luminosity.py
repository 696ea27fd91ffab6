"""Luminosity sensor implementation."""

from __future__ import annotations

from smartroom.core.base import SimulatedSensor
from smartroom.core.registry import register_component
from smartroom.core.state import MeasurementType


@register_component("sensor", "luminosity")
class LuminositySensor(SimulatedSensor):
    """Ambient light sensor.

    Produces illuminance values uniformly distributed between 50 and 600 lux.
    """

    MEASUREMENT_TYPE = MeasurementType.LUMINOSITY

    def _generate(self) -> float:
        low, high = self.MEASUREMENT_TYPE.value_range
        return float(self.rng.uniform(low, high))
