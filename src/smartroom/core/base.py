"""Base protocols and abstract classes for smart room components.

This module defines the core abstractions every component builds on:
- Component: Base class for named simulation components
- SensorObserver: Protocol for listeners notified of new readings
- Sensor: Capability set shared by concrete sensors and sensor decorators
- SimulatedSensor: Sensor that generates randomized readings
- Device: On/off actuator driven by strategies
- ActionStrategy: Rule mapping readings to device actions
"""

from __future__ import annotations

import logging
import threading
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from smartroom.core.events import emit_device_switched
from smartroom.core.state import MeasurementType, SensorReading

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from numpy.random import Generator


class Component(ABC):
    """Base class for all smart room components.

    Attributes:
        name: Unique identifier for this component.
        enabled: Whether this component is active.
    """

    def __init__(self, name: str, *, enabled: bool = True) -> None:
        """Initialize component.

        Args:
            name: Unique identifier for this component.
            enabled: Whether this component is active. Defaults to True.
        """
        self._name = name
        self._enabled = enabled

    @property
    def name(self) -> str:
        """Unique identifier for this component."""
        return self._name

    @property
    def enabled(self) -> bool:
        """Whether this component is active."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Set component enabled state."""
        self._enabled = value

    def reset(self) -> None:  # noqa: B027
        """Reset component to initial state.

        Override in subclasses that maintain internal state.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


@runtime_checkable
class SensorObserver(Protocol):
    """Listener notified synchronously whenever a sensor produces a reading."""

    def update(self, source: Sensor, reading: SensorReading) -> None:
        """Handle a new reading from source."""
        ...


class Sensor(Component):
    """Capability set of anything that can be read like a sensor.

    Implemented by concrete sensors and by decorators wrapping them, so
    callers never need to know whether a sensor is decorated.
    """

    @property
    @abstractmethod
    def measurement_type(self) -> MeasurementType:
        """Quantity measured by this sensor."""

    @property
    @abstractmethod
    def last_reading(self) -> SensorReading | None:
        """Most recent reading, or None before the first read."""

    @abstractmethod
    def read(self, *, notify: bool = True) -> SensorReading:
        """Produce a fresh reading.

        Args:
            notify: Whether registered observers are notified before the
                reading is returned. Decorators pass False when they publish
                a derived reading in place of the raw one.

        Returns:
            The new reading.
        """

    @abstractmethod
    def add_observer(self, observer: SensorObserver) -> None:
        """Register an observer. Registering twice has no extra effect."""

    @abstractmethod
    def remove_observer(self, observer: SensorObserver) -> None:
        """Deregister an observer. Unknown observers are ignored."""

    @abstractmethod
    def notify_observers(self, reading: SensorReading) -> None:
        """Deliver reading to every registered observer in registration order."""


class SimulatedSensor(Sensor):
    """Sensor that generates randomized values.

    Observers are held by weak reference: the sensor never keeps an
    observer alive. Subclasses implement _generate() and set the
    MEASUREMENT_TYPE class attribute.

    Attributes:
        rng: Random number generator for value generation.
    """

    MEASUREMENT_TYPE: MeasurementType

    def __init__(
        self,
        name: str,
        *,
        enabled: bool = True,
        rng: Generator | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize sensor.

        Args:
            name: Unique identifier for this sensor.
            enabled: Whether this sensor is polled by the scheduler.
            rng: NumPy random generator for reproducible simulations.
                If None and seed is provided, creates a new generator.
                If both None, creates a default generator (non-deterministic).
            seed: Seed for creating a new random generator if rng is None.
        """
        super().__init__(name, enabled=enabled)
        self._observers: list[weakref.ref[SensorObserver]] = []
        self._observers_lock = threading.Lock()
        self._last_reading: SensorReading | None = None

        if rng is not None:
            self._rng = rng
        elif seed is not None:
            self._rng = np.random.default_rng(seed)
        else:
            self._rng = np.random.default_rng()
            logger.debug(
                "Sensor '%s' using non-deterministic RNG (no seed provided)", name
            )

    @property
    def measurement_type(self) -> MeasurementType:
        """Quantity measured by this sensor."""
        return self.MEASUREMENT_TYPE

    @property
    def last_reading(self) -> SensorReading | None:
        """Most recent reading, or None before the first read."""
        return self._last_reading

    @property
    def rng(self) -> Generator:
        """Random number generator for value generation."""
        return self._rng

    @property
    def observers(self) -> list[SensorObserver]:
        """Currently registered observers that are still alive."""
        with self._observers_lock:
            refs = list(self._observers)
        return [obs for ref in refs if (obs := ref()) is not None]

    @abstractmethod
    def _generate(self) -> float:
        """Generate a raw value within the sensor's range."""

    def read(self, *, notify: bool = True) -> SensorReading:
        """Generate a reading, notify observers, then return it."""
        reading = SensorReading(
            sensor_id=self.name,
            measurement_type=self.MEASUREMENT_TYPE,
            value=self._generate(),
        )
        self._last_reading = reading
        if notify:
            self.notify_observers(reading)
        return reading

    def add_observer(self, observer: SensorObserver) -> None:
        """Register an observer (weakly referenced)."""
        with self._observers_lock:
            if any(ref() is observer for ref in self._observers):
                return
            self._observers.append(weakref.ref(observer))

    def remove_observer(self, observer: SensorObserver) -> None:
        """Deregister an observer; unknown observers are ignored."""
        with self._observers_lock:
            self._observers = [ref for ref in self._observers if ref() is not observer]

    def notify_observers(self, reading: SensorReading) -> None:
        """Deliver reading to observers in registration order.

        Exceptions raised by an observer propagate to the caller and skip
        the observers registered after it.
        """
        with self._observers_lock:
            self._observers = [ref for ref in self._observers if ref() is not None]
            refs = list(self._observers)

        for ref in refs:
            observer = ref()
            if observer is not None:
                observer.update(self, reading)

    def reset(self) -> None:
        """Forget the last reading."""
        self._last_reading = None


class Device(Component):
    """Named on/off actuator (light, fan).

    Attributes:
        is_on: Current state.
        switch_count: Number of actual state transitions since creation.
    """

    def __init__(self, name: str, *, enabled: bool = True) -> None:
        """Initialize device in the off state."""
        super().__init__(name, enabled=enabled)
        self._on = False
        self._switch_count = 0
        self._lock = threading.Lock()

    @property
    def device_type(self) -> str:
        """Short type name used in status strings."""
        return type(self).__name__.lower()

    @property
    def is_on(self) -> bool:
        """Whether the device is currently on."""
        return self._on

    @property
    def switch_count(self) -> int:
        """Number of on/off transitions."""
        return self._switch_count

    @property
    def status(self) -> str:
        """Human-readable status."""
        return f"{self.device_type} {self.name}: {'ON' if self._on else 'OFF'}"

    def on(self) -> None:
        """Turn the device on. Idempotent."""
        self._set(True)

    def off(self) -> None:
        """Turn the device off. Idempotent."""
        self._set(False)

    def _set(self, value: bool) -> None:
        with self._lock:
            changed = self._on != value
            self._on = value
            if changed:
                self._switch_count += 1

        if changed:
            logger.debug("Device '%s' switched %s", self.name, "on" if value else "off")
            emit_device_switched(self.name, is_on=value)

    def reset(self) -> None:
        """Return to the off state and clear the switch counter."""
        with self._lock:
            self._on = False
            self._switch_count = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, on={self._on})"


class ActionStrategy(Component):
    """Rule evaluated for every reading seen by the monitoring service.

    Each strategy has a subject measurement type. Readings of any other
    type, and all readings while the strategy is disabled, are ignored.
    """

    SUBJECT: MeasurementType

    @property
    def subject(self) -> MeasurementType:
        """Measurement type this strategy reacts to."""
        return self.SUBJECT

    def apply(self, reading: SensorReading) -> None:
        """Evaluate the strategy against a reading.

        Args:
            reading: Reading delivered by the monitoring service.
        """
        if not self.enabled or reading.measurement_type != self.SUBJECT:
            return
        self._evaluate(reading)

    @abstractmethod
    def _evaluate(self, reading: SensorReading) -> None:
        """Act on a reading of the subject type."""
