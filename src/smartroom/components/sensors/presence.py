"""Presence sensor implementation."""

from __future__ import annotations

from smartroom.core.base import SimulatedSensor
from smartroom.core.registry import register_component
from smartroom.core.state import MeasurementType


@register_component("sensor", "presence")
class PresenceSensor(SimulatedSensor):
    """Occupancy sensor.

    Reports 1.0 when presence is detected and 0.0 otherwise, each with
    equal probability.
    """

    MEASUREMENT_TYPE = MeasurementType.PRESENCE

    def _generate(self) -> float:
        return 1.0 if self.rng.random() < 0.5 else 0.0
