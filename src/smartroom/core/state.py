"""Readings and shared state for the smart room simulation.

This module defines the data structures that flow through the
notification pipeline:

- MeasurementType: The kinds of quantity a sensor can measure
- SensorReading: One immutable, timestamped sample
- LatestValueTable: Per-measurement cache of the most recent value
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from smartroom.core.base import Sensor


class MeasurementType(str, Enum):
    """Quantities measured by the room sensors."""

    TEMPERATURE = "temperature"
    PRESENCE = "presence"
    LUMINOSITY = "luminosity"

    @property
    def unit(self) -> str:
        """Unit symbol used when displaying values."""
        return _UNITS[self]

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.capitalize()

    @property
    def value_range(self) -> tuple[float, float]:
        """(min, max) range produced by the simulated sensors."""
        return _RANGES[self]

    @classmethod
    def parse(cls, name: str | MeasurementType) -> MeasurementType:
        """Resolve a measurement type from its name or a legacy alias.

        Args:
            name: Type name, case-insensitive (e.g. "Temperature", "lux").

        Returns:
            The matching MeasurementType.

        Raises:
            ValueError: If the name is not recognized.
        """
        if isinstance(name, MeasurementType):
            return name

        normalized = str(name).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member

        alias = _ALIASES.get(normalized)
        if alias is None:
            msg = f"Unknown measurement type: {name!r}"
            raise ValueError(msg)
        return alias


_UNITS: dict[MeasurementType, str] = {
    MeasurementType.TEMPERATURE: "C",
    MeasurementType.PRESENCE: "",
    MeasurementType.LUMINOSITY: "lux",
}

_RANGES: dict[MeasurementType, tuple[float, float]] = {
    MeasurementType.TEMPERATURE: (20.0, 35.0),
    MeasurementType.PRESENCE: (0.0, 1.0),
    MeasurementType.LUMINOSITY: (50.0, 600.0),
}

# Legacy names still accepted in configuration files
_ALIASES: dict[str, MeasurementType] = {
    "temp": MeasurementType.TEMPERATURE,
    "temperatura": MeasurementType.TEMPERATURE,
    "presenca": MeasurementType.PRESENCE,
    "motion": MeasurementType.PRESENCE,
    "movimento": MeasurementType.PRESENCE,
    "luminosidade": MeasurementType.LUMINOSITY,
    "light": MeasurementType.LUMINOSITY,
    "luz": MeasurementType.LUMINOSITY,
    "lux": MeasurementType.LUMINOSITY,
}


@dataclass(frozen=True)
class SensorReading:
    """One timestamped sample produced by a sensor.

    Readings are created fresh on every read and never modified afterwards;
    derived readings (e.g. smoothed values) are new instances.

    Attributes:
        sensor_id: Name of the sensor that produced the reading.
        measurement_type: What was measured.
        value: Measured value in the unit of the measurement type.
        timestamp: When the reading was taken (UTC).
    """

    sensor_id: str
    measurement_type: MeasurementType
    value: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Normalize the measurement type and value."""
        if not isinstance(self.measurement_type, MeasurementType):
            object.__setattr__(
                self, "measurement_type", MeasurementType.parse(self.measurement_type)
            )
        object.__setattr__(self, "value", float(self.value))

    def with_value(self, value: float) -> SensorReading:
        """Return a copy carrying a different value.

        Sensor id, measurement type and timestamp are preserved.
        """
        return replace(self, value=value)

    def to_dict(self) -> dict[str, Any]:
        """Convert reading to a dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "sensor_id": self.sensor_id,
            "type": self.measurement_type.value,
            "value": self.value,
        }

    def __str__(self) -> str:
        unit = self.measurement_type.unit
        suffix = f" {unit}" if unit else ""
        return (
            f"[{self.timestamp.isoformat()}] {self.sensor_id} "
            f"{self.measurement_type.value}={self.value:.2f}{suffix}"
        )


class LatestValueTable:
    """Most recent value per measurement type, shared across sensors.

    The table is a sensor observer: register it on every sensor whose
    values other components need to consult. Updates and lookups are
    serialized with a lock so sensors read from different threads do
    not lose updates.
    """

    def __init__(self) -> None:
        self._values: dict[MeasurementType, float] = {}
        self._lock = threading.Lock()

    def update(self, source: Sensor, reading: SensorReading) -> None:
        """Record the value of a freshly produced reading."""
        del source  # Keyed by measurement type only
        with self._lock:
            self._values[reading.measurement_type] = reading.value

    def get(
        self, measurement_type: MeasurementType | str, default: float = 0.0
    ) -> float:
        """Latest value for a measurement type, or default if none seen yet."""
        key = MeasurementType.parse(measurement_type)
        with self._lock:
            return self._values.get(key, default)

    def latest_of(
        self, measurement_type: MeasurementType | str, default: float = 0.0
    ) -> Callable[[], float]:
        """Return a supplier that looks up the latest value on each call."""
        key = MeasurementType.parse(measurement_type)
        return lambda: self.get(key, default)

    def snapshot(self) -> dict[MeasurementType, float]:
        """Copy of the current table."""
        with self._lock:
            return dict(self._values)

    def clear(self) -> None:
        """Forget all recorded values."""
        with self._lock:
            self._values.clear()

    def __contains__(self, measurement_type: object) -> bool:
        try:
            key = MeasurementType.parse(measurement_type)  # type: ignore[arg-type]
        except ValueError:
            return False
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
