"""Tests for readings and shared state."""

from __future__ import annotations

import dataclasses
import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from smartroom.core.state import LatestValueTable, MeasurementType, SensorReading

if TYPE_CHECKING:
    from conftest import ReadingFactory, ScriptedSensor


class TestMeasurementType:
    """Tests for MeasurementType enum."""

    def test_values(self) -> None:
        """Enum values match the type names used in reports."""
        assert MeasurementType.TEMPERATURE.value == "temperature"
        assert MeasurementType.PRESENCE.value == "presence"
        assert MeasurementType.LUMINOSITY.value == "luminosity"

    def test_units(self) -> None:
        """Each type knows its unit."""
        assert MeasurementType.TEMPERATURE.unit == "C"
        assert MeasurementType.PRESENCE.unit == ""
        assert MeasurementType.LUMINOSITY.unit == "lux"

    def test_ranges(self) -> None:
        """Simulated ranges."""
        assert MeasurementType.TEMPERATURE.value_range == (20.0, 35.0)
        assert MeasurementType.PRESENCE.value_range == (0.0, 1.0)
        assert MeasurementType.LUMINOSITY.value_range == (50.0, 600.0)

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("temperature", MeasurementType.TEMPERATURE),
            ("  Temperature ", MeasurementType.TEMPERATURE),
            ("temperatura", MeasurementType.TEMPERATURE),
            ("presenca", MeasurementType.PRESENCE),
            ("motion", MeasurementType.PRESENCE),
            ("LUX", MeasurementType.LUMINOSITY),
            ("luminosidade", MeasurementType.LUMINOSITY),
        ],
    )
    def test_parse(self, name: str, expected: MeasurementType) -> None:
        """Names and legacy aliases resolve case-insensitively."""
        assert MeasurementType.parse(name) is expected

    def test_parse_member_passthrough(self) -> None:
        """Parsing a member returns it unchanged."""
        assert MeasurementType.parse(MeasurementType.PRESENCE) is MeasurementType.PRESENCE

    def test_parse_unknown(self) -> None:
        """Unknown names are rejected."""
        with pytest.raises(ValueError, match="Unknown measurement type"):
            MeasurementType.parse("humidity")


class TestSensorReading:
    """Tests for SensorReading dataclass."""

    def test_creation(self) -> None:
        """Create reading with all fields."""
        ts = datetime(2025, 6, 21, 12, 0, tzinfo=UTC)
        reading = SensorReading("T1", MeasurementType.TEMPERATURE, 24.5, ts)

        assert reading.sensor_id == "T1"
        assert reading.measurement_type is MeasurementType.TEMPERATURE
        assert reading.value == 24.5
        assert reading.timestamp == ts

    def test_default_timestamp_is_now_utc(self) -> None:
        """Timestamp defaults to creation time in UTC."""
        before = datetime.now(UTC)
        reading = SensorReading("T1", MeasurementType.TEMPERATURE, 24.5)
        after = datetime.now(UTC)

        assert before <= reading.timestamp <= after
        assert reading.timestamp.tzinfo is not None

    def test_type_from_string(self) -> None:
        """String measurement types are normalized to the enum."""
        reading = SensorReading("P1", "presence", 1)  # type: ignore[arg-type]
        assert reading.measurement_type is MeasurementType.PRESENCE
        assert isinstance(reading.value, float)

    def test_immutable(self) -> None:
        """Readings cannot be modified."""
        reading = SensorReading("T1", MeasurementType.TEMPERATURE, 24.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            reading.value = 30.0  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            reading.timestamp = datetime.now(UTC)  # type: ignore[misc]

    def test_with_value_preserves_identity(self) -> None:
        """with_value keeps id, type and timestamp."""
        reading = SensorReading("T1", MeasurementType.TEMPERATURE, 24.5)
        derived = reading.with_value(26.0)

        assert derived is not reading
        assert derived.value == 26.0
        assert derived.sensor_id == reading.sensor_id
        assert derived.measurement_type == reading.measurement_type
        assert derived.timestamp == reading.timestamp
        assert reading.value == 24.5

    def test_to_dict(self) -> None:
        """Serialize to dictionary."""
        ts = datetime(2025, 6, 21, 12, 0, tzinfo=UTC)
        reading = SensorReading("LU1", MeasurementType.LUMINOSITY, 120.0, ts)

        assert reading.to_dict() == {
            "timestamp": ts.isoformat(),
            "sensor_id": "LU1",
            "type": "luminosity",
            "value": 120.0,
        }

    def test_str(self) -> None:
        """String form includes id, type, value and unit."""
        reading = SensorReading("LU1", MeasurementType.LUMINOSITY, 120.0)
        text = str(reading)
        assert "LU1" in text
        assert "luminosity=120.00 lux" in text


class TestLatestValueTable:
    """Tests for LatestValueTable."""

    def test_default_when_unseen(self) -> None:
        """Unseen types return the default."""
        table = LatestValueTable()
        assert table.get(MeasurementType.LUMINOSITY) == 0.0
        assert table.get("luminosity", default=-1.0) == -1.0
        assert MeasurementType.LUMINOSITY not in table

    def test_update_records_latest(
        self, reading_factory: ReadingFactory, scripted_sensor: ScriptedSensor
    ) -> None:
        """Each update replaces the value for its type."""
        table = LatestValueTable()
        table.update(scripted_sensor, reading_factory("luminosity", 100.0))
        table.update(scripted_sensor, reading_factory("luminosity", 300.0))
        table.update(scripted_sensor, reading_factory("temperature", 25.0))

        assert table.get("luminosity") == 300.0
        assert table.get(MeasurementType.TEMPERATURE) == 25.0
        assert len(table) == 2
        assert "luminosity" in table

    def test_latest_of_is_live(
        self, reading_factory: ReadingFactory, scripted_sensor: ScriptedSensor
    ) -> None:
        """Suppliers see values recorded after they were created."""
        table = LatestValueTable()
        supplier = table.latest_of("luminosity")
        assert supplier() == 0.0

        table.update(scripted_sensor, reading_factory("luminosity", 420.0))
        assert supplier() == 420.0

    def test_snapshot_is_copy(
        self, reading_factory: ReadingFactory, scripted_sensor: ScriptedSensor
    ) -> None:
        """Snapshots do not change with the table."""
        table = LatestValueTable()
        table.update(scripted_sensor, reading_factory("presence", 1.0))
        snapshot = table.snapshot()
        table.update(scripted_sensor, reading_factory("presence", 0.0))

        assert snapshot == {MeasurementType.PRESENCE: 1.0}
        table.clear()
        assert len(table) == 0

    def test_concurrent_updates(
        self, reading_factory: ReadingFactory, scripted_sensor: ScriptedSensor
    ) -> None:
        """Updates from several threads leave a consistent table."""
        table = LatestValueTable()
        types = list(MeasurementType)

        def worker(measurement_type: MeasurementType) -> None:
            for i in range(500):
                table.update(scripted_sensor, reading_factory(measurement_type, float(i)))

        threads = [threading.Thread(target=worker, args=(t,)) for t in types]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert table.snapshot() == {t: 499.0 for t in types}
