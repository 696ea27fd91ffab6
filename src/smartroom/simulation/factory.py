"""Factory functions for building a room from configuration.

This module bridges YAML/JSON configuration files and component
instantiation. The main entry point is `create_room_from_config()`, which
returns a fully wired SmartRoom ready to poll.
"""

from __future__ import annotations

import logging

from smartroom.components.devices import Fan, Light
from smartroom.components.sensors import (
    LuminositySensor,
    PresenceSensor,
    TemperatureSensor,
)
from smartroom.core.base import ActionStrategy, Component
from smartroom.core.config import (
    DeviceConfig,
    RoomConfig,
    SensorConfig,
    StrategyConfig,
)
from smartroom.core.registry import get_registry
from smartroom.core.state import MeasurementType
from smartroom.simulation.room import SmartRoom
from smartroom.strategies import CoolingStrategy, PresenceLightStrategy

logger = logging.getLogger(__name__)

# Component classes for re-registration after registry reset
_COMPONENT_CLASSES: list[type[Component]] = [
    TemperatureSensor,
    PresenceSensor,
    LuminositySensor,
    Light,
    Fan,
    PresenceLightStrategy,
    CoolingStrategy,
]


def ensure_components_registered() -> None:
    """Ensure all built-in components are registered in the registry.

    This is useful after reset_registry() to re-register components.
    """
    registry = get_registry()
    for cls in _COMPONENT_CLASSES:
        category, component_type = cls.component_key  # type: ignore[attr-defined]
        registry.register(category, component_type, cls)


def create_room_from_config(config: RoomConfig) -> SmartRoom:
    """Create a fully wired SmartRoom from a RoomConfig.

    Components are created in dependency order:
    1. Devices
    2. Sensors, wrapped with their configured decorators
    3. Strategies, bound to their devices

    Disabled entries are skipped.

    Args:
        config: Validated RoomConfig object (from load_config or direct).

    Returns:
        SmartRoom ready to poll.

    Raises:
        UnknownComponentError: If a component type is not registered.
        ValueError: If a strategy refers to an unknown device, or a speed is
            configured for a device other than a fan.
    """
    ensure_components_registered()

    room = SmartRoom(
        isolate_strategy_errors=config.isolate_strategy_errors,
        seed=config.seed,
    )

    for device_cfg in config.devices:
        if device_cfg.enabled:
            _add_device(room, device_cfg)

    for sensor_cfg in config.sensors:
        if sensor_cfg.enabled:
            _add_sensor(room, sensor_cfg)

    for strategy_cfg in config.strategies:
        if strategy_cfg.enabled:
            room.add_strategy(_create_strategy(room, strategy_cfg))

    logger.info(
        "Built room '%s': %d sensors, %d devices, %d strategies",
        config.name,
        len(room.sensors),
        len(room.devices),
        len(room.monitoring.strategies),
    )
    return room


def _add_device(room: SmartRoom, device_cfg: DeviceConfig) -> None:
    """Create a device, applying the fan speed when configured."""
    if device_cfg.speed is None:
        room.add_device(device_cfg.type, device_cfg.name)
        return

    device_class = get_registry().get("device", device_cfg.type)
    if not issubclass(device_class, Fan):
        msg = (
            f"Device '{device_cfg.name}' of type '{device_cfg.type}' "
            "does not support a speed"
        )
        raise ValueError(msg)
    room.add_device(device_cfg.type, device_cfg.name, speed=device_cfg.speed)


def _add_sensor(room: SmartRoom, sensor_cfg: SensorConfig) -> None:
    """Create a sensor and apply its decorators."""
    room.add_sensor(sensor_cfg.type, sensor_cfg.name)
    if sensor_cfg.smoothing_window is not None or sensor_cfg.logging:
        room.decorate_sensor(
            sensor_cfg.name,
            smoothing_window=sensor_cfg.smoothing_window,
            logging=sensor_cfg.logging,
        )


def _create_strategy(room: SmartRoom, strategy_cfg: StrategyConfig) -> ActionStrategy:
    """Create a strategy bound to its configured device.

    Args:
        room: Room holding the devices.
        strategy_cfg: Strategy configuration.

    Returns:
        Instantiated strategy.
    """
    if strategy_cfg.device not in room.devices:
        msg = (
            f"Strategy '{strategy_cfg.name}' refers to unknown device "
            f"'{strategy_cfg.device}'"
        )
        raise ValueError(msg)

    device = room.device(strategy_cfg.device)
    strategy_class = get_registry().get("strategy", strategy_cfg.type)

    if issubclass(strategy_class, PresenceLightStrategy):
        return strategy_class(
            strategy_cfg.name,
            light=device,
            latest_luminosity=room.latest_of(MeasurementType.LUMINOSITY),
            lux_threshold=strategy_cfg.threshold,
        )
    if issubclass(strategy_class, CoolingStrategy):
        return strategy_class(
            strategy_cfg.name,
            fan=device,
            temp_threshold=strategy_cfg.threshold,
        )

    msg = f"No configuration binding for strategy type '{strategy_cfg.type}'"
    raise ValueError(msg)
