"""Event system for the smart room simulation.

This module provides a small pub/sub event bus used to publish what
happens in the room without coupling components to their consumers.

Events can be used for:
- Logging sensor readings seen by a logging decorator
- Tracking device switches
- Reporting isolated strategy faults and scheduler errors
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict, deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Standard event types for the smart room."""

    # Sensors
    SENSOR_READING = "sensor.reading"

    # Devices
    DEVICE_SWITCHED = "device.switched"

    # Strategies
    STRATEGY_ERROR = "strategy.error"

    # Scheduler lifecycle
    SCHEDULER_START = "scheduler.start"
    SCHEDULER_STOP = "scheduler.stop"
    SCHEDULER_TICK_ERROR = "scheduler.tick_error"

    # Reports
    REPORT_EXPORTED = "report.exported"

    # Custom events
    CUSTOM = "custom"


def _event_key(event_type: EventType | str) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type


@dataclass
class Event:
    """An event in the room.

    Attributes:
        event_type: Type of event.
        timestamp: When the event occurred.
        source: Name of the component that generated the event.
        data: Event-specific data payload.
        message: Human-readable description of the event.
    """

    event_type: EventType | str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    source: str = "system"
    data: dict[str, Any] = field(default_factory=dict)
    message: str = ""

    def __str__(self) -> str:
        """String representation of the event."""
        return (
            f"[{self.timestamp.isoformat()}] {_event_key(self.event_type)} "
            f"from {self.source}: {self.message}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": _event_key(self.event_type),
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "data": self.data,
            "message": self.message,
        }


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus for pub/sub messaging.

    Subscriptions and history are guarded by a lock because sensors may be
    read from the scheduler thread and from callers' threads at the same
    time. Handlers run outside the lock on the emitting thread.
    """

    def __init__(self, *, max_history: int = 1000) -> None:
        """Initialize event bus.

        Args:
            max_history: Maximum number of events to keep in history.
        """
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: Type of events to subscribe to.
            handler: Callback invoked when an event of that type is emitted.
        """
        key = _event_key(event_type)
        with self._lock:
            if handler not in self._handlers[key]:
                self._handlers[key].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self.subscribe("*", handler)

    def unsubscribe(self, event_type: EventType | str, handler: EventHandler) -> bool:
        """Unsubscribe from events.

        Returns:
            True if handler was found and removed.
        """
        key = _event_key(event_type)
        with self._lock:
            if handler in self._handlers[key]:
                self._handlers[key].remove(handler)
                return True
        return False

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers.

        Handler exceptions are logged but do not prevent other handlers from
        being called.
        """
        event_key = _event_key(event.event_type)
        with self._lock:
            self._history.append(event)
            handlers = [*self._handlers[event_key], *self._handlers["*"]]

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                handler_name = getattr(handler, "__name__", str(handler))
                logger.exception(
                    "Event handler '%s' failed processing %s event from %s",
                    handler_name,
                    event_key,
                    event.source,
                )

    def emit_simple(
        self,
        event_type: EventType | str,
        source: str,
        message: str = "",
        **data: Any,
    ) -> Event:
        """Emit an event with simpler syntax.

        Returns:
            The emitted event.
        """
        event = Event(event_type=event_type, source=source, message=message, data=data)
        self.emit(event)
        return event

    def _iter_history_filtered(
        self,
        events: list[Event],
        event_type: EventType | str | None,
        source: str | None,
    ) -> Iterator[Event]:
        type_key = _event_key(event_type) if event_type is not None else None
        for event in events:
            if type_key is not None and _event_key(event.event_type) != type_key:
                continue
            if source is not None and event.source != source:
                continue
            yield event

    def get_history(
        self,
        event_type: EventType | str | None = None,
        source: str | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """Get event history with optional filtering.

        Args:
            event_type: Filter by event type.
            source: Filter by source.
            limit: Maximum number of events to return.

        Returns:
            List of events matching filters (most recent last).
        """
        with self._lock:
            events = list(self._history)

        filtered = list(self._iter_history_filtered(events, event_type, source))
        if limit is not None:
            return filtered[-limit:]
        return filtered

    def clear_history(self) -> None:
        """Clear event history."""
        with self._lock:
            self._history.clear()

    def clear_handlers(self) -> None:
        """Remove all event handlers."""
        with self._lock:
            self._handlers.clear()

    def clear(self) -> None:
        """Clear both history and handlers."""
        self.clear_history()
        self.clear_handlers()


# Global event bus instance
_global_bus: EventBus | None = None
_global_bus_lock = threading.Lock()


def get_event_bus() -> EventBus:
    """Get the global event bus, creating it on first call."""
    global _global_bus
    with _global_bus_lock:
        if _global_bus is None:
            _global_bus = EventBus()
        return _global_bus


def reset_event_bus() -> None:
    """Reset the global event bus.

    Primarily useful for testing.
    """
    global _global_bus
    with _global_bus_lock:
        _global_bus = None


def emit_sensor_reading(
    sensor_name: str,
    measurement_type: str,
    value: float,
) -> Event:
    """Publish a sensor reading on the global bus."""
    return get_event_bus().emit_simple(
        EventType.SENSOR_READING,
        source=sensor_name,
        message=f"Reading from {sensor_name}",
        measurement_type=measurement_type,
        value=value,
    )


def emit_device_switched(device_name: str, *, is_on: bool) -> Event:
    """Publish a device state change on the global bus."""
    state = "on" if is_on else "off"
    return get_event_bus().emit_simple(
        EventType.DEVICE_SWITCHED,
        source=device_name,
        message=f"{device_name} switched {state}",
        is_on=is_on,
    )
