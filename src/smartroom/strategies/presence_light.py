"""Presence-driven lighting strategy."""

from __future__ import annotations

import logging
from collections.abc import Callable

from smartroom.core.base import ActionStrategy, Device
from smartroom.core.registry import register_component
from smartroom.core.state import MeasurementType, SensorReading

logger = logging.getLogger(__name__)


@register_component("strategy", "presence_light")
class PresenceLightStrategy(ActionStrategy):
    """Turns the light on when someone is present and the room is dark.

    Acts only on presence readings. The light is driven to a definite
    state on every presence reading:
    - ON when presence is detected (value >= 1.0) and the latest
      luminosity is below the threshold
    - OFF otherwise, including when luminosity equals the threshold

    Attributes:
        light: Device switched by this strategy.
        lux_threshold: Luminosity below which the room counts as dark.
    """

    SUBJECT = MeasurementType.PRESENCE

    def __init__(
        self,
        name: str = "presence_light",
        *,
        light: Device,
        latest_luminosity: Callable[[], float],
        lux_threshold: float = 200.0,
        enabled: bool = True,
    ) -> None:
        """Initialize presence light strategy.

        Args:
            name: Unique identifier.
            light: Light to switch.
            latest_luminosity: Supplier of the most recent luminosity value.
            lux_threshold: Darkness threshold in lux.
            enabled: Whether the strategy is active.
        """
        super().__init__(name, enabled=enabled)
        self._light = light
        self._latest_luminosity = latest_luminosity
        self._lux_threshold = lux_threshold

    @property
    def light(self) -> Device:
        """Device switched by this strategy."""
        return self._light

    @property
    def lux_threshold(self) -> float:
        """Darkness threshold in lux."""
        return self._lux_threshold

    def _evaluate(self, reading: SensorReading) -> None:
        lux = self._latest_luminosity()
        if reading.value >= 1.0 and lux < self._lux_threshold:
            self._light.on()
        else:
            self._light.off()
        logger.debug(
            "%s: presence=%.0f lux=%.1f -> %s",
            self.name,
            reading.value,
            lux,
            "on" if self._light.is_on else "off",
        )
