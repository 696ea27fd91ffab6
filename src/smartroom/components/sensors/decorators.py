"""Sensor decorators that alter or augment a sensor's read() behavior.

A decorator wraps exactly one delegate sensor and forwards identity and
observer registration to it, so observers registered before or after
wrapping keep firing. Decorators can wrap other decorators; the chain
is checked for cycles when it is built.
"""

from __future__ import annotations

import logging
from collections import deque

from smartroom.core.base import Sensor, SensorObserver
from smartroom.core.events import emit_sensor_reading
from smartroom.core.state import MeasurementType, SensorReading

logger = logging.getLogger(__name__)


class SensorDecorator(Sensor):
    """Base class for sensor wrappers.

    Attributes:
        delegate: The wrapped sensor (read-only).
    """

    def __init__(self, delegate: Sensor) -> None:
        """Wrap a sensor.

        Args:
            delegate: Sensor or decorator to wrap.

        Raises:
            TypeError: If delegate is not a Sensor.
            ValueError: If wrapping delegate would create a cycle.
        """
        if not isinstance(delegate, Sensor):
            msg = f"Can only decorate a Sensor, got {type(delegate).__name__}"
            raise TypeError(msg)

        node: Sensor | None = delegate
        while node is not None:
            if node is self:
                msg = f"Decorating '{delegate.name}' would create a cycle"
                raise ValueError(msg)
            node = node.delegate if isinstance(node, SensorDecorator) else None

        super().__init__(delegate.name, enabled=delegate.enabled)
        self._delegate = delegate

    @property
    def delegate(self) -> Sensor:
        """The wrapped sensor."""
        return self._delegate

    @property
    def root(self) -> Sensor:
        """The innermost, undecorated sensor."""
        node = self._delegate
        while isinstance(node, SensorDecorator):
            node = node.delegate
        return node

    def chain(self) -> list[Sensor]:
        """All sensors in the chain, outermost first."""
        nodes: list[Sensor] = [self]
        node = self._delegate
        while isinstance(node, SensorDecorator):
            nodes.append(node)
            node = node.delegate
        nodes.append(node)
        return nodes

    @property
    def name(self) -> str:
        """Identity of the wrapped sensor."""
        return self._delegate.name

    @property
    def enabled(self) -> bool:
        """Enabled state of the wrapped sensor."""
        return self._delegate.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Enable or disable the wrapped sensor."""
        self._delegate.enabled = value

    @property
    def measurement_type(self) -> MeasurementType:
        """Quantity measured by the wrapped sensor."""
        return self._delegate.measurement_type

    @property
    def last_reading(self) -> SensorReading | None:
        """Most recent reading of the wrapped sensor."""
        return self._delegate.last_reading

    def add_observer(self, observer: SensorObserver) -> None:
        """Register on the wrapped sensor."""
        self._delegate.add_observer(observer)

    def remove_observer(self, observer: SensorObserver) -> None:
        """Deregister from the wrapped sensor."""
        self._delegate.remove_observer(observer)

    def notify_observers(self, reading: SensorReading) -> None:
        """Notify the wrapped sensor's observers."""
        self._delegate.notify_observers(reading)

    def read(self, *, notify: bool = True) -> SensorReading:
        """Read through to the wrapped sensor unchanged."""
        return self._delegate.read(notify=notify)

    def reset(self) -> None:
        """Reset the whole chain."""
        self._delegate.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._delegate!r})"


class SmoothingSensorDecorator(SensorDecorator):
    """Moving-average filter over the last ``window`` raw values.

    The raw reading is consumed internally: observers only ever see the
    smoothed reading, which keeps the raw reading's id, type and timestamp.
    """

    def __init__(self, delegate: Sensor, window: int) -> None:
        """Initialize smoothing decorator.

        Args:
            delegate: Sensor to smooth.
            window: Number of raw values averaged, at least 1.

        Raises:
            ValueError: If window is less than 1.
        """
        if window < 1:
            msg = f"Smoothing window must be >= 1, got {window}"
            raise ValueError(msg)
        super().__init__(delegate)
        self._window = window
        self._values: deque[float] = deque(maxlen=window)

    @property
    def window(self) -> int:
        """Number of raw values averaged."""
        return self._window

    @property
    def buffered_values(self) -> list[float]:
        """Raw values currently in the averaging window, oldest first."""
        return list(self._values)

    def read(self, *, notify: bool = True) -> SensorReading:
        """Read the delegate, average the window and publish the result."""
        raw = self._delegate.read(notify=False)
        self._values.append(raw.value)
        smoothed = raw.with_value(sum(self._values) / len(self._values))

        if notify:
            self.notify_observers(smoothed)
        return smoothed

    def reset(self) -> None:
        """Empty the averaging window and reset the chain."""
        self._values.clear()
        super().reset()


class LoggingSensorDecorator(SensorDecorator):
    """Records every reading passing through, without altering it.

    Readings are written to a logger and published as sensor reading
    events. This layer never notifies observers itself.
    """

    def __init__(
        self,
        delegate: Sensor,
        *,
        logger: logging.Logger | None = None,
        level: int = logging.INFO,
    ) -> None:
        """Initialize logging decorator.

        Args:
            delegate: Sensor to log.
            logger: Logger to write to. Defaults to this module's logger.
            level: Log level for reading records.
        """
        super().__init__(delegate)
        self._logger = logger or logging.getLogger(__name__)
        self._level = level

    def read(self, *, notify: bool = True) -> SensorReading:
        """Read the delegate and record the reading."""
        reading = self._delegate.read(notify=notify)
        self._logger.log(self._level, "[LOG] %s", reading)
        emit_sensor_reading(
            reading.sensor_id, reading.measurement_type.value, reading.value
        )
        return reading
