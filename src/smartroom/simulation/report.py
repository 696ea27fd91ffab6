"""CSV reports of reading history.

The report format is one header row followed by one row per reading:

    timestamp,sensorId,type,value
    2025-06-21T12:00:00.000000+00:00,T1,temperature,24.37

Values are written with two decimals.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import numpy as np

from smartroom.core.events import EventType, get_event_bus
from smartroom.core.state import MeasurementType, SensorReading

logger = logging.getLogger(__name__)

CSV_HEADER: tuple[str, ...] = ("timestamp", "sensorId", "type", "value")


def export_csv(readings: Iterable[SensorReading], path: str | Path) -> Path:
    """Write readings to a CSV file.

    Parent directories are created as needed.

    Args:
        readings: Readings in the order they should appear.
        path: Output file path.

    Returns:
        The path written.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    rows = 0
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for reading in readings:
            writer.writerow(
                [
                    reading.timestamp.isoformat(),
                    reading.sensor_id,
                    reading.measurement_type.value,
                    f"{reading.value:.2f}",
                ]
            )
            rows += 1

    logger.info("Exported %d readings to %s", rows, path)
    get_event_bus().emit_simple(
        EventType.REPORT_EXPORTED,
        source="report",
        message=f"Exported {rows} readings to {path}",
        path=str(path),
        rows=rows,
    )
    return path


def load_csv(path: str | Path) -> list[SensorReading]:
    """Parse a CSV report back into readings.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the header or a row is malformed.
    """
    path = Path(path)

    with path.open(newline="") as f:
        reader = csv.DictReader(f)
        if tuple(reader.fieldnames or ()) != CSV_HEADER:
            msg = f"Unexpected CSV header in {path}: {reader.fieldnames}"
            raise ValueError(msg)

        readings: list[SensorReading] = []
        for line_no, row in enumerate(reader, start=2):
            try:
                readings.append(
                    SensorReading(
                        sensor_id=row["sensorId"],
                        measurement_type=MeasurementType.parse(row["type"]),
                        value=float(row["value"]),
                        timestamp=datetime.fromisoformat(row["timestamp"]),
                    )
                )
            except (TypeError, ValueError) as e:
                msg = f"Invalid row {line_no} in {path}: {e}"
                raise ValueError(msg) from e

    return readings


@dataclass
class SensorSummary:
    """Aggregate statistics for one sensor.

    Attributes:
        sensor_id: Sensor name.
        measurement_type: What the sensor measures.
        count: Number of readings.
        minimum: Smallest value.
        maximum: Largest value.
        mean: Arithmetic mean.
    """

    sensor_id: str
    measurement_type: MeasurementType
    count: int
    minimum: float
    maximum: float
    mean: float


def summarize(readings: Iterable[SensorReading]) -> list[SensorSummary]:
    """Per-sensor statistics, in order of first appearance."""
    grouped: dict[str, list[SensorReading]] = {}
    for reading in readings:
        grouped.setdefault(reading.sensor_id, []).append(reading)

    summaries: list[SensorSummary] = []
    for sensor_id, group in grouped.items():
        values = np.array([r.value for r in group], dtype=float)
        summaries.append(
            SensorSummary(
                sensor_id=sensor_id,
                measurement_type=group[0].measurement_type,
                count=len(group),
                minimum=float(values.min()),
                maximum=float(values.max()),
                mean=float(values.mean()),
            )
        )
    return summaries
