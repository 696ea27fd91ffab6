"""Threshold cooling strategy."""

from __future__ import annotations

from smartroom.core.base import ActionStrategy, Device
from smartroom.core.registry import register_component
from smartroom.core.state import MeasurementType, SensorReading


@register_component("strategy", "cooling")
class CoolingStrategy(ActionStrategy):
    """Runs the fan while the temperature is at or above a threshold.

    There is no deadband: every temperature reading decides the fan
    state afresh, so readings hovering around the threshold make the fan
    cycle.

    Attributes:
        fan: Device switched by this strategy.
        temp_threshold: Temperature in C at which the fan turns on.
    """

    SUBJECT = MeasurementType.TEMPERATURE

    def __init__(
        self,
        name: str = "cooling",
        *,
        fan: Device,
        temp_threshold: float = 27.0,
        enabled: bool = True,
    ) -> None:
        """Initialize cooling strategy.

        Args:
            name: Unique identifier.
            fan: Fan to switch.
            temp_threshold: Switching temperature in C.
            enabled: Whether the strategy is active.
        """
        super().__init__(name, enabled=enabled)
        self._fan = fan
        self._temp_threshold = temp_threshold

    @property
    def fan(self) -> Device:
        """Device switched by this strategy."""
        return self._fan

    @property
    def temp_threshold(self) -> float:
        """Switching temperature in C."""
        return self._temp_threshold

    def _evaluate(self, reading: SensorReading) -> None:
        if reading.value >= self._temp_threshold:
            self._fan.on()
        else:
            self._fan.off()
