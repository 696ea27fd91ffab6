"""Temperature sensor implementation."""

from __future__ import annotations

from smartroom.core.base import SimulatedSensor
from smartroom.core.registry import register_component
from smartroom.core.state import MeasurementType


@register_component("sensor", "temperature")
class TemperatureSensor(SimulatedSensor):
    """Air temperature sensor.

    Produces values uniformly distributed between 20 and 35 C.
    """

    MEASUREMENT_TYPE = MeasurementType.TEMPERATURE

    def _generate(self) -> float:
        low, high = self.MEASUREMENT_TYPE.value_range
        return float(self.rng.uniform(low, high))
