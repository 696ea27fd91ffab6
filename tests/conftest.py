"""Shared pytest fixtures for smartroom tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import numpy as np
import pytest

from smartroom.components.devices import Fan, Light
from smartroom.core.base import Sensor, SimulatedSensor
from smartroom.core.events import reset_event_bus
from smartroom.core.registry import reset_registry
from smartroom.core.state import MeasurementType, SensorReading
from smartroom.simulation.factory import ensure_components_registered

ReadingFactory = Callable[..., SensorReading]

# =============================================================================
# Autouse fixtures for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_global_state() -> None:
    """Reset global singletons before each test for isolation.

    This fixture runs automatically before each test to ensure:
    - Event bus is cleared of handlers and history
    - Component registry holds exactly the built-in components
    """
    reset_event_bus()
    reset_registry()
    ensure_components_registered()


# =============================================================================
# Random number generator fixtures
# =============================================================================


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random generator for reproducible tests."""
    return np.random.default_rng(42)


# =============================================================================
# Test doubles
# =============================================================================


class ScriptedSensor(SimulatedSensor):
    """Sensor returning a fixed sequence of values, for exact assertions."""

    def __init__(
        self,
        name: str,
        values: list[float],
        measurement_type: MeasurementType = MeasurementType.TEMPERATURE,
    ) -> None:
        super().__init__(name, seed=0)
        self._values = list(values)
        self._index = 0
        self.MEASUREMENT_TYPE = measurement_type

    def _generate(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


class RecordingObserver:
    """Observer that remembers every notification it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[Sensor, SensorReading]] = []

    def update(self, source: Sensor, reading: SensorReading) -> None:
        self.calls.append((source, reading))

    @property
    def readings(self) -> list[SensorReading]:
        return [reading for _, reading in self.calls]

    @property
    def values(self) -> list[float]:
        return [reading.value for _, reading in self.calls]


@pytest.fixture
def recorder() -> RecordingObserver:
    """Fresh recording observer."""
    return RecordingObserver()


@pytest.fixture
def scripted_sensor() -> ScriptedSensor:
    """Temperature sensor producing 10, 20, 30, 40, 50, ..."""
    return ScriptedSensor("T1", [10.0, 20.0, 30.0, 40.0, 50.0])


# =============================================================================
# Reading and device fixtures
# =============================================================================


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed UTC timestamp."""
    return datetime(2025, 6, 21, 12, 0, tzinfo=UTC)


def make_reading(
    measurement_type: MeasurementType | str,
    value: float,
    sensor_id: str = "S1",
    timestamp: datetime | None = None,
) -> SensorReading:
    """Build a reading with an optional explicit timestamp."""
    if timestamp is None:
        return SensorReading(sensor_id, MeasurementType.parse(measurement_type), value)
    return SensorReading(
        sensor_id, MeasurementType.parse(measurement_type), value, timestamp
    )


@pytest.fixture
def light() -> Light:
    """A light in the off state."""
    return Light("L1")


@pytest.fixture
def fan() -> Fan:
    """A fan in the off state."""
    return Fan("F1")


@pytest.fixture
def scripted_sensor_cls() -> type[ScriptedSensor]:
    """The scripted sensor class, for tests that need several instances."""
    return ScriptedSensor


@pytest.fixture
def reading_factory() -> ReadingFactory:
    """Factory building readings: reading_factory(type, value, sensor_id, ts)."""
    return make_reading
