"""Fan device implementation."""

from __future__ import annotations

from smartroom.core.base import Device
from smartroom.core.registry import register_component


@register_component("device", "fan")
class Fan(Device):
    """Room fan switched by the cooling strategy.

    Besides on/off, the fan keeps a speed level that is applied whenever
    it runs.

    Attributes:
        speed: Current speed level (1 to MAX_SPEED).
    """

    MAX_SPEED = 3

    def __init__(self, name: str, *, speed: int = 1, enabled: bool = True) -> None:
        """Initialize fan.

        Args:
            name: Unique identifier.
            speed: Initial speed level.
            enabled: Whether the device is active.
        """
        super().__init__(name, enabled=enabled)
        self._speed = 1
        self.speed = speed

    @property
    def speed(self) -> int:
        """Current speed level."""
        return self._speed

    @speed.setter
    def speed(self, value: int) -> None:
        """Set speed level."""
        if not 1 <= value <= self.MAX_SPEED:
            msg = f"Fan speed must be between 1 and {self.MAX_SPEED}, got {value}"
            raise ValueError(msg)
        self._speed = value

    @property
    def status(self) -> str:
        """Human-readable status including speed."""
        if self.is_on:
            return f"{super().status} (speed {self._speed})"
        return super().status

    def reset(self) -> None:
        """Turn off and return to the lowest speed."""
        super().reset()
        self._speed = 1
