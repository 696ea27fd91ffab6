"""Pydantic configuration models for the smart room.

This module defines the configuration schema for a room using Pydantic v2
models. Configuration can be loaded from YAML or JSON files.

The configuration hierarchy:
- RoomConfig (top-level)
  - SensorConfig[]
  - DeviceConfig[]
  - StrategyConfig[]
  - OutputConfig
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SensorConfig(BaseModel):
    """Sensor configuration, including optional decorators."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(description="Sensor type from registry")
    name: str = Field(description="Unique sensor id")
    smoothing_window: Annotated[int, Field(ge=1)] | None = Field(
        default=None, description="Moving-average window; None disables smoothing"
    )
    logging: bool = Field(default=False, description="Log every reading")
    enabled: bool = True


class DeviceConfig(BaseModel):
    """Device configuration."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(description="Device type from registry")
    name: str = Field(description="Unique device id")
    speed: Annotated[int, Field(ge=1, le=3)] | None = Field(
        default=None, description="Initial fan speed; only valid for fans"
    )
    enabled: bool = True


class StrategyConfig(BaseModel):
    """Strategy configuration."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(description="Strategy type from registry")
    name: str = Field(description="Unique strategy name")
    device: str = Field(description="Id of the device driven by this strategy")
    threshold: float = Field(description="Lux or temperature threshold")
    enabled: bool = True


class OutputConfig(BaseModel):
    """Report output configuration."""

    csv_path: str = "out/report.csv"
    enabled: bool = True


def _ensure_unique(items: list[Any]) -> list[Any]:
    names = [item.name for item in items]
    if len(names) != len(set(names)):
        duplicates = {n for n in names if names.count(n) > 1}
        msg = f"Duplicate component names: {duplicates}"
        raise ValueError(msg)
    return items


class RoomConfig(BaseModel):
    """Top-level room configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="Smart Room")
    interval_ms: Annotated[int, Field(gt=0)] = 500
    duration: Annotated[float, Field(gt=0)] = 3.0  # seconds
    seed: int | None = None
    isolate_strategy_errors: bool = False

    sensors: list[SensorConfig] = Field(default_factory=list)
    devices: list[DeviceConfig] = Field(default_factory=list)
    strategies: list[StrategyConfig] = Field(default_factory=list)

    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("sensors", "devices", "strategies", mode="after")
    @classmethod
    def validate_unique_names(cls, v: list[Any]) -> list[Any]:
        """Ensure all component names are unique within their category."""
        return _ensure_unique(v)


def default_config() -> RoomConfig:
    """The demo room: three sensors, a light, a fan and two strategies."""
    return RoomConfig(
        name="Demo Room",
        interval_ms=500,
        duration=3.0,
        sensors=[
            SensorConfig(type="temperature", name="T1", smoothing_window=3, logging=True),
            SensorConfig(type="luminosity", name="LU1"),
            SensorConfig(type="presence", name="P1"),
        ],
        devices=[
            DeviceConfig(type="light", name="L1"),
            DeviceConfig(type="fan", name="F1"),
        ],
        strategies=[
            StrategyConfig(
                type="presence_light", name="presence_light", device="L1", threshold=200.0
            ),
            StrategyConfig(type="cooling", name="cooling", device="F1", threshold=27.0),
        ],
    )


def load_config(path: str | Path) -> RoomConfig:
    """Load room configuration from YAML or JSON file.

    Args:
        path: Path to configuration file.

    Returns:
        Validated RoomConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If configuration is invalid.
    """
    path = Path(path)

    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return RoomConfig.model_validate(data)


def save_config(config: RoomConfig, path: str | Path) -> None:
    """Save room configuration to YAML or JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with path.open("w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def validate_config(data: dict[str, Any]) -> RoomConfig:
    """Validate configuration data without loading from file."""
    return RoomConfig.model_validate(data)
