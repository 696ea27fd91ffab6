"""Tests for building rooms from configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from smartroom.components.devices import Fan
from smartroom.components.sensors import (
    LoggingSensorDecorator,
    LuminositySensor,
    PresenceSensor,
    SmoothingSensorDecorator,
    TemperatureSensor,
)
from smartroom.core.config import (
    DeviceConfig,
    RoomConfig,
    SensorConfig,
    StrategyConfig,
    default_config,
    load_config,
    save_config,
)
from smartroom.core.registry import UnknownComponentError, get_registry, reset_registry
from smartroom.simulation.factory import (
    create_room_from_config,
    ensure_components_registered,
)
from smartroom.strategies import CoolingStrategy, PresenceLightStrategy


class TestEnsureComponentsRegistered:
    """Tests for re-registration after a registry reset."""

    def test_restores_builtins(self) -> None:
        """All built-in types come back after a reset."""
        reset_registry()
        ensure_components_registered()

        assert set(get_registry().list_types("sensor")) == {
            "temperature",
            "presence",
            "luminosity",
        }
        assert get_registry().get("strategy", "cooling") is CoolingStrategy

    def test_idempotent(self) -> None:
        """Calling twice is harmless."""
        ensure_components_registered()
        ensure_components_registered()
        assert len(get_registry().list_types("device")) == 2


class TestCreateRoomFromConfig:
    """Tests for create_room_from_config."""

    def test_default_room(self) -> None:
        """The demo room is fully wired."""
        room = create_room_from_config(default_config())

        assert list(room.sensors) == ["T1", "LU1", "P1"]
        assert list(room.devices) == ["L1", "F1"]
        strategies = room.monitoring.strategies
        assert isinstance(strategies[0], PresenceLightStrategy)
        assert isinstance(strategies[1], CoolingStrategy)
        assert strategies[0].light is room.device("L1")
        assert strategies[1].fan is room.device("F1")
        assert strategies[1].temp_threshold == 27.0

    def test_decorators_applied(self) -> None:
        """Configured decorators wrap the sensor, logging outermost."""
        room = create_room_from_config(default_config())

        temp = room.sensor("T1")
        assert isinstance(temp, LoggingSensorDecorator)
        assert isinstance(temp.delegate, SmoothingSensorDecorator)
        assert temp.delegate.window == 3

    def test_polling_produces_one_reading_per_sensor(self) -> None:
        """A decorated sensor still contributes one reading per poll."""
        room = create_room_from_config(default_config().model_copy(update={"seed": 9}))

        room.read_all()
        room.read_all()

        assert len(room.history()) == 6

    def test_disabled_entries_skipped(self) -> None:
        """Disabled sensors, devices and strategies are not created."""
        config = RoomConfig(
            sensors=[
                SensorConfig(type="temperature", name="T1"),
                SensorConfig(type="presence", name="P1", enabled=False),
            ],
            devices=[
                DeviceConfig(type="fan", name="F1"),
                DeviceConfig(type="light", name="L1", enabled=False),
            ],
            strategies=[
                StrategyConfig(type="cooling", name="c", device="F1", threshold=25.0),
                StrategyConfig(
                    type="cooling", name="off", device="F1", threshold=30.0, enabled=False
                ),
            ],
        )

        room = create_room_from_config(config)

        assert list(room.sensors) == ["T1"]
        assert list(room.devices) == ["F1"]
        assert len(room.monitoring.strategies) == 1

    def test_isolation_flag(self) -> None:
        """The fault policy is passed to the monitoring service."""
        config = RoomConfig(isolate_strategy_errors=True)
        room = create_room_from_config(config)
        assert room.monitoring.isolate_strategy_errors is True

    def test_unknown_sensor_type(self) -> None:
        """Unknown sensor types fail the build."""
        config = RoomConfig(sensors=[SensorConfig(type="humidity", name="H1")])

        with pytest.raises(UnknownComponentError, match="humidity"):
            create_room_from_config(config)

    def test_sensor_type_aliases(self) -> None:
        """Legacy type names build the matching sensors."""
        config = RoomConfig(
            sensors=[
                SensorConfig(type="temp", name="T1"),
                SensorConfig(type="motion", name="P1"),
                SensorConfig(type="lux", name="LU1"),
            ]
        )

        room = create_room_from_config(config)

        assert isinstance(room.sensor("T1"), TemperatureSensor)
        assert isinstance(room.sensor("P1"), PresenceSensor)
        assert isinstance(room.sensor("LU1"), LuminositySensor)

    def test_fan_speed_applied(self) -> None:
        """A configured speed is set on the fan."""
        config = RoomConfig(
            devices=[
                DeviceConfig(type="fan", name="F1", speed=3),
                DeviceConfig(type="fan", name="F2"),
            ]
        )

        room = create_room_from_config(config)

        fast, default = room.device("F1"), room.device("F2")
        assert isinstance(fast, Fan)
        assert isinstance(default, Fan)
        assert fast.speed == 3
        assert default.speed == 1

    def test_speed_rejected_for_non_fan(self) -> None:
        """Only fans accept a speed."""
        config = RoomConfig(devices=[DeviceConfig(type="light", name="L1", speed=2)])

        with pytest.raises(ValueError, match="does not support a speed"):
            create_room_from_config(config)

    def test_unknown_strategy_type(self) -> None:
        """Unknown strategy types fail the build."""
        config = RoomConfig(
            devices=[DeviceConfig(type="fan", name="F1")],
            strategies=[
                StrategyConfig(type="heating", name="h", device="F1", threshold=18.0)
            ],
        )

        with pytest.raises(UnknownComponentError):
            create_room_from_config(config)

    def test_unknown_device_reference(self) -> None:
        """Strategies must refer to a configured device."""
        config = RoomConfig(
            strategies=[
                StrategyConfig(type="cooling", name="c", device="F9", threshold=27.0)
            ],
        )

        with pytest.raises(ValueError, match="unknown device 'F9'"):
            create_room_from_config(config)

    def test_from_yaml_file(self, tmp_path: Path) -> None:
        """A saved configuration builds the same room."""
        path = tmp_path / "room.yaml"
        save_config(default_config(), path)

        room = create_room_from_config(load_config(path))

        assert len(room.sensors) == 3
        assert len(room.monitoring.strategies) == 2
