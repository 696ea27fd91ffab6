"""Monitoring service: reading history and strategy dispatch.

The service observes any number of sensors. Every reading it receives is
appended to an append-only history and then handed to each registered
strategy, in registration order, on the notifying thread.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from smartroom.core.events import EventType, get_event_bus
from smartroom.core.state import MeasurementType, SensorReading

if TYPE_CHECKING:
    from smartroom.core.base import ActionStrategy, Sensor

logger = logging.getLogger(__name__)


class MonitoringService:
    """Observer that records readings and applies strategies.

    Strategy faults are fail-fast by default: an exception raised by a
    strategy propagates out of the notifying sensor's read(), so later
    strategies (and observers registered after this service) do not see
    that reading. With ``isolate_strategy_errors=True`` each fault is
    logged and published as a strategy error event instead, and the
    remaining strategies still run.

    Attributes:
        isolate_strategy_errors: Whether strategy faults are contained.
    """

    def __init__(self, *, isolate_strategy_errors: bool = False) -> None:
        """Initialize monitoring service.

        Args:
            isolate_strategy_errors: Catch and log strategy faults instead of
                propagating them.
        """
        self._history: list[SensorReading] = []
        self._strategies: list[ActionStrategy] = []
        self._lock = threading.Lock()
        self._isolate = isolate_strategy_errors

    @property
    def isolate_strategy_errors(self) -> bool:
        """Whether strategy faults are contained."""
        return self._isolate

    @property
    def strategies(self) -> list[ActionStrategy]:
        """Registered strategies in evaluation order."""
        with self._lock:
            return list(self._strategies)

    def register_strategy(self, strategy: ActionStrategy) -> None:
        """Append a strategy to the evaluation order."""
        with self._lock:
            self._strategies.append(strategy)

    def remove_strategy(self, strategy: ActionStrategy) -> bool:
        """Remove a strategy.

        Returns:
            True if the strategy was registered.
        """
        with self._lock:
            if strategy in self._strategies:
                self._strategies.remove(strategy)
                return True
        return False

    def update(self, source: Sensor, reading: SensorReading) -> None:
        """Record a reading and apply every strategy to it.

        Args:
            source: Sensor that produced the reading.
            reading: The new reading.
        """
        with self._lock:
            self._history.append(reading)
            strategies = list(self._strategies)

        logger.debug("Reading from %s: %s", source.name, reading)

        for strategy in strategies:
            if not self._isolate:
                strategy.apply(reading)
                continue
            try:
                strategy.apply(reading)
            except Exception as e:
                logger.exception(
                    "Strategy '%s' failed on reading from %s",
                    strategy.name,
                    reading.sensor_id,
                )
                get_event_bus().emit_simple(
                    EventType.STRATEGY_ERROR,
                    source=strategy.name,
                    message=f"Strategy '{strategy.name}' failed: {e}",
                    sensor_id=reading.sensor_id,
                    error=str(e),
                )

    def history(self) -> tuple[SensorReading, ...]:
        """Point-in-time snapshot of the history.

        The snapshot is immutable and does not reflect later readings.
        """
        with self._lock:
            return tuple(self._history)

    def history_for(
        self,
        sensor_id: str | None = None,
        measurement_type: MeasurementType | str | None = None,
    ) -> list[SensorReading]:
        """History filtered by sensor id and/or measurement type."""
        wanted = (
            MeasurementType.parse(measurement_type)
            if measurement_type is not None
            else None
        )
        return [
            r
            for r in self.history()
            if (sensor_id is None or r.sensor_id == sensor_id)
            and (wanted is None or r.measurement_type == wanted)
        ]

    def clear_history(self) -> None:
        """Drop all recorded readings."""
        with self._lock:
            self._history.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)
