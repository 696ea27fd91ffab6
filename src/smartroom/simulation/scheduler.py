"""Periodic scheduler driving sensor polling.

A single background thread runs a task at a fixed rate. Stopping the
scheduler prevents any further tick from starting; a tick already in
progress is allowed to finish.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from types import TracebackType

from smartroom.core.events import EventType, get_event_bus

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """Fixed-rate timer running a task on a daemon thread.

    The first tick runs immediately after start(). Later ticks are
    scheduled relative to the start time, so a slow tick shortens the
    following wait instead of drifting the schedule.

    Attributes:
        interval_ms: Period between tick starts in milliseconds.
        tick_count: Number of ticks started so far.
    """

    def __init__(
        self,
        task: Callable[[], object],
        interval_ms: float,
        *,
        name: str = "scheduler",
    ) -> None:
        """Initialize scheduler.

        Args:
            task: Callable invoked on every tick.
            interval_ms: Period in milliseconds, must be positive.
            name: Name used for the thread, logs and events.

        Raises:
            ValueError: If interval_ms is not positive.
        """
        if interval_ms <= 0:
            msg = f"Interval must be positive, got {interval_ms} ms"
            raise ValueError(msg)

        self._task = task
        self._interval = interval_ms / 1000.0
        self._interval_ms = interval_ms
        self._name = name
        self._stop_event = threading.Event()
        self._tick_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._tick_count = 0

    @property
    def interval_ms(self) -> float:
        """Period between tick starts in milliseconds."""
        return self._interval_ms

    @property
    def tick_count(self) -> int:
        """Number of ticks started so far."""
        return self._tick_count

    @property
    def is_running(self) -> bool:
        """Whether the timer thread is active."""
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self) -> None:
        """Start ticking.

        Raises:
            RuntimeError: If the scheduler is already running, or a
                previous run is still finishing its last tick.
        """
        if self._thread is not None and self._thread.is_alive():
            msg = f"Scheduler '{self._name}' is already running"
            raise RuntimeError(msg)

        # Each run owns its stop event so a finishing thread never resumes
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name=self._name, daemon=True
        )
        self._thread.start()
        logger.info("Scheduler '%s' started (every %s ms)", self._name, self._interval_ms)
        get_event_bus().emit_simple(
            EventType.SCHEDULER_START,
            source=self._name,
            message=f"Scheduler started every {self._interval_ms} ms",
            interval_ms=self._interval_ms,
        )

    def stop(self, timeout: float | None = None) -> None:
        """Stop ticking.

        No tick starts after this call returns. An in-flight tick is
        waited for, not interrupted. If the wait times out, the thread
        is kept and start() refuses to run until it has exited.

        Args:
            timeout: Maximum seconds to wait for an in-flight tick.
        """
        already_stopped = self._stop_event.is_set()
        self._stop_event.set()
        thread = self._thread

        # Called from inside a tick: the tick finishes after we return
        if thread is not None and thread is not threading.current_thread():
            # A tick that already started holds the lock until it completes
            acquired = self._tick_lock.acquire(
                timeout=-1 if timeout is None else timeout
            )
            if acquired:
                self._tick_lock.release()
            thread.join(timeout=timeout)

        if thread is not None and not already_stopped:
            logger.info(
                "Scheduler '%s' stopped after %d ticks", self._name, self._tick_count
            )
            get_event_bus().emit_simple(
                EventType.SCHEDULER_STOP,
                source=self._name,
                message=f"Scheduler stopped after {self._tick_count} ticks",
                ticks=self._tick_count,
            )

        if thread is None or not thread.is_alive():
            self._thread = None
        elif thread is not threading.current_thread():
            logger.warning("Scheduler '%s' stop timed out during a tick", self._name)

    def _run(self, stop_event: threading.Event) -> None:
        start = time.monotonic()
        ticks = 0
        while True:
            delay = start + ticks * self._interval - time.monotonic()
            if stop_event.wait(timeout=max(0.0, delay)):
                return

            with self._tick_lock:
                if stop_event.is_set():
                    return
                self._tick_count += 1
                ticks += 1
                self._run_tick()

    def _run_tick(self) -> None:
        try:
            self._task()
        except Exception as e:
            logger.exception("Scheduler '%s' tick %d failed", self._name, self._tick_count)
            get_event_bus().emit_simple(
                EventType.SCHEDULER_TICK_ERROR,
                source=self._name,
                message=f"Tick {self._tick_count} failed: {e}",
                tick=self._tick_count,
                error=str(e),
            )

    def __enter__(self) -> PeriodicScheduler:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
