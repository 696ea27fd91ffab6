#!/usr/bin/env python3
"""Basic smart room example.

This script wires a room by hand: two devices, three sensors, a decorated
temperature chain sampled alongside the scheduler, and the two built-in
strategies. The history is exported to out/report.csv.

Run with: python examples/basic_room.py
"""

import logging
import time
from pathlib import Path

from smartroom.components.sensors import (
    LoggingSensorDecorator,
    SmoothingSensorDecorator,
)
from smartroom.core.events import EventType, get_event_bus
from smartroom.simulation import SmartRoom
from smartroom.strategies import CoolingStrategy, PresenceLightStrategy


def main() -> None:
    """Run the demo room for a few seconds."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    switches: list[str] = []
    get_event_bus().subscribe(
        EventType.DEVICE_SWITCHED, lambda event: switches.append(event.message)
    )

    with SmartRoom(seed=42) as room:
        light = room.add_device("light", "L1")
        fan = room.add_device("fan", "F1")

        temp = room.add_sensor("temperature", "T1")
        room.add_sensor("luminosity", "LU1")
        room.add_sensor("presence", "P1")

        # Sampled manually, in parallel with the scheduled reads
        logged_temp = LoggingSensorDecorator(SmoothingSensorDecorator(temp, 3))

        room.add_strategy(
            PresenceLightStrategy(
                light=light,
                latest_luminosity=room.latest_of("luminosity"),
                lux_threshold=200.0,
            )
        )
        room.add_strategy(CoolingStrategy(fan=fan, temp_threshold=27.0))

        room.schedule_read_all(500)

        for _ in range(10):
            logged_temp.read()
            time.sleep(0.3)

        time.sleep(3)
        room.stop()

        out = room.export_csv(Path("out") / "report.csv")

    print(f"Report exported to: {out.resolve()}")
    print(f"Readings recorded: {len(room.history())}")
    print(f"Light is on: {light.is_on}")
    print(f"Fan is on: {fan.is_on}")
    print(f"Device switches: {len(switches)}")


if __name__ == "__main__":
    main()
