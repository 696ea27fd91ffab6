"""Smart room facade.

The facade wires the simulation together:
1. Sensors and devices are created by type name through the registry
2. Every sensor notifies the latest-value table, then the monitoring service
3. The monitoring service records history and applies strategies
4. A periodic scheduler polls all sensors
5. History is exported as a CSV report
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Any, cast

# Import component packages to populate the registry at import time
import smartroom.components  # noqa: F401
import smartroom.strategies  # noqa: F401
from smartroom.components.sensors.decorators import (
    LoggingSensorDecorator,
    SmoothingSensorDecorator,
)
from smartroom.core.base import ActionStrategy, Device, Sensor
from smartroom.core.registry import get_registry
from smartroom.core.state import LatestValueTable, MeasurementType, SensorReading
from smartroom.simulation.monitoring import MonitoringService
from smartroom.simulation.report import export_csv
from smartroom.simulation.scheduler import PeriodicScheduler

logger = logging.getLogger(__name__)


def resolve_sensor_type(sensor_type: str) -> str:
    """Map a sensor type name or legacy alias to its registered name.

    "temp", "motion" and "lux" resolve to "temperature", "presence" and
    "luminosity". Names that are not measurement types are returned
    unchanged so custom registered sensors still resolve.
    """
    try:
        return MeasurementType.parse(sensor_type).value
    except ValueError:
        return sensor_type


class SmartRoom:
    """Facade over sensors, devices, strategies and the scheduler.

    Sensors are polled in the order they were added. When a sensor is
    decorated through decorate_sensor(), the outermost decorator becomes
    the polled sensor for that id.

    Usage:
        with SmartRoom() as room:
            room.add_device("fan", "F1")
            room.add_sensor("temperature", "T1")
            room.add_strategy(CoolingStrategy(fan=room.device("F1")))
            room.schedule_read_all(500)
            ...
            room.export_csv("out/report.csv")
    """

    def __init__(
        self,
        *,
        isolate_strategy_errors: bool = False,
        seed: int | None = None,
    ) -> None:
        """Initialize an empty room.

        Args:
            isolate_strategy_errors: Contain strategy faults instead of
                propagating them out of sensor reads.
            seed: Base seed for sensor generators. Each sensor gets
                seed + its insertion index.
        """
        self._sensors: dict[str, Sensor] = {}
        self._devices: dict[str, Device] = {}
        self._latest = LatestValueTable()
        self._monitoring = MonitoringService(
            isolate_strategy_errors=isolate_strategy_errors
        )
        self._scheduler: PeriodicScheduler | None = None
        self._seed = seed

    @property
    def monitoring(self) -> MonitoringService:
        """The monitoring service observing every sensor."""
        return self._monitoring

    @property
    def latest_values(self) -> LatestValueTable:
        """Latest value per measurement type."""
        return self._latest

    @property
    def sensors(self) -> dict[str, Sensor]:
        """Polled sensors keyed by id, in polling order."""
        return dict(self._sensors)

    @property
    def devices(self) -> dict[str, Device]:
        """Devices keyed by id."""
        return dict(self._devices)

    @property
    def scheduler(self) -> PeriodicScheduler | None:
        """The active scheduler, if any."""
        return self._scheduler

    def add_sensor(self, sensor_type: str, sensor_id: str, **kwargs: Any) -> Sensor:
        """Create a sensor by type name and wire it into the room.

        Args:
            sensor_type: Registered type or alias ("temperature", "temp", ...).
            sensor_id: Unique sensor id.
            **kwargs: Extra constructor arguments (e.g. seed).

        Returns:
            The new sensor.

        Raises:
            UnknownComponentError: If the type is not registered.
            ValueError: If the id is already used.
        """
        if sensor_id in self._sensors:
            msg = f"Sensor '{sensor_id}' already exists"
            raise ValueError(msg)

        if self._seed is not None and "seed" not in kwargs and "rng" not in kwargs:
            kwargs["seed"] = self._seed + len(self._sensors)

        sensor = cast(
            Sensor,
            get_registry().create(
                "sensor", resolve_sensor_type(sensor_type), sensor_id, **kwargs
            ),
        )
        return self.register_sensor(sensor)

    def register_sensor(self, sensor: Sensor) -> Sensor:
        """Wire an existing sensor (possibly decorated) into the room.

        Raises:
            ValueError: If a sensor with the same id is already registered.
        """
        if sensor.name in self._sensors:
            msg = f"Sensor '{sensor.name}' already exists"
            raise ValueError(msg)

        # The table must see a reading before strategies consult it
        sensor.add_observer(self._latest)
        sensor.add_observer(self._monitoring)
        self._sensors[sensor.name] = sensor
        logger.debug("Added sensor %r", sensor)
        return sensor

    def decorate_sensor(
        self,
        sensor_id: str,
        *,
        smoothing_window: int | None = None,
        logging: bool = False,
    ) -> Sensor:
        """Wrap a registered sensor with decorators.

        Smoothing is applied first and logging outermost, so logs show
        smoothed values. The resulting chain is what the scheduler polls.

        Returns:
            The outermost sensor of the chain.
        """
        sensor = self.sensor(sensor_id)
        if smoothing_window is not None:
            sensor = SmoothingSensorDecorator(sensor, smoothing_window)
        if logging:
            sensor = LoggingSensorDecorator(sensor)
        self._sensors[sensor_id] = sensor
        return sensor

    def add_device(self, device_type: str, device_id: str, **kwargs: Any) -> Device:
        """Create a device by type name.

        Raises:
            UnknownComponentError: If the type is not registered.
            ValueError: If the id is already used.
        """
        if device_id in self._devices:
            msg = f"Device '{device_id}' already exists"
            raise ValueError(msg)

        device = cast(
            Device, get_registry().create("device", device_type, device_id, **kwargs)
        )
        self._devices[device_id] = device
        logger.debug("Added device %r", device)
        return device

    def add_strategy(self, strategy: ActionStrategy) -> ActionStrategy:
        """Register a strategy with the monitoring service."""
        self._monitoring.register_strategy(strategy)
        return strategy

    def sensor(self, sensor_id: str) -> Sensor:
        """Polled sensor by id.

        Raises:
            KeyError: If no such sensor exists.
        """
        try:
            return self._sensors[sensor_id]
        except KeyError:
            msg = f"Unknown sensor: {sensor_id}"
            raise KeyError(msg) from None

    def device(self, device_id: str) -> Device:
        """Device by id.

        Raises:
            KeyError: If no such device exists.
        """
        try:
            return self._devices[device_id]
        except KeyError:
            msg = f"Unknown device: {device_id}"
            raise KeyError(msg) from None

    def latest_of(
        self, measurement_type: MeasurementType | str
    ) -> Callable[[], float]:
        """Supplier of the latest value of a measurement type (0.0 if unseen)."""
        return self._latest.latest_of(measurement_type)

    def read_all(self) -> list[SensorReading]:
        """Read every enabled sensor once, in polling order."""
        return [sensor.read() for sensor in list(self._sensors.values()) if sensor.enabled]

    def schedule_read_all(self, interval_ms: float) -> PeriodicScheduler:
        """Start polling every sensor at a fixed rate.

        Raises:
            RuntimeError: If a schedule is already running.
        """
        if self._scheduler is not None and self._scheduler.is_running:
            msg = "Sensors are already being polled"
            raise RuntimeError(msg)

        self._scheduler = PeriodicScheduler(
            self.read_all, interval_ms, name="smartroom-poller"
        )
        self._scheduler.start()
        return self._scheduler

    def stop(self) -> None:
        """Stop polling; an in-flight poll completes first."""
        if self._scheduler is not None:
            self._scheduler.stop()

    def history(self) -> tuple[SensorReading, ...]:
        """Snapshot of every reading recorded so far."""
        return self._monitoring.history()

    def export_csv(self, path: str | Path) -> Path:
        """Export the history as a CSV report."""
        return export_csv(self.history(), path)

    def close(self) -> None:
        """Release the scheduler."""
        self.stop()

    def __enter__(self) -> SmartRoom:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
