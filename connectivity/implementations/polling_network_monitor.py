"""
Polling Network Monitor

Fallback monitor for platforms without any usable change notification.
It simply emits a "re-check now" signal on a fixed cadence.

Each start() creates a fresh worker thread with its own stop event, so a
monitor can be stopped and started again without an old thread waking up
and emitting for the new run.
"""

import logging
import threading
from typing import Optional

from connectivity.constants import (
    MONITOR_POLLING_INTERVAL,
    MONITOR_THREAD_JOIN_TIMEOUT,
)
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)


class PollingNetworkMonitor(NetworkMonitorInterface):
    """
    Emits immediately after start(), then every polling_interval seconds.

    Usage:
        monitor = PollingNetworkMonitor(polling_interval=30)
        monitor.status_updated_callback = lambda: print("check now")
        monitor.start()
        ...
        monitor.stop()
    """

    thread_name = "PollingNetworkMonitor"

    def __init__(self, polling_interval: float = MONITOR_POLLING_INTERVAL):
        """
        Initialize polling monitor.

        Args:
            polling_interval: Seconds between two signals

        Raises:
            ValueError: If polling_interval is not positive
        """
        if polling_interval <= 0:
            raise ValueError(
                f"polling_interval must be positive, got {polling_interval}",
            )

        self.logger = logging.getLogger(__name__)
        self.polling_interval = polling_interval
        self.status_updated_callback = None

        self._lock = threading.Lock()
        self._started = False
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        with self._lock:
            if self._started:
                self.logger.debug(f"{self.thread_name} already started")
                return

            self._started = True
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._monitor_loop,
                args=(self._stop_event,),
                daemon=True,
                name=self.thread_name,
            )
            self._thread.start()

        self.logger.info(
            f"{self.thread_name} started (interval: {self.polling_interval}s)",
        )

    def stop(self) -> None:
        with self._lock:
            if not self._started:
                return

            self._started = False
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        # A callback may call stop() from inside the worker thread
        if (
            thread is not None
            and thread is not threading.current_thread()
            and thread.is_alive()
        ):
            thread.join(timeout=MONITOR_THREAD_JOIN_TIMEOUT)

        self.logger.info(f"{self.thread_name} stopped")

    def is_started(self) -> bool:
        return self._started

    def _monitor_loop(self, stop_event: threading.Event) -> None:
        """Worker thread: emit, wait, repeat until stopped."""
        self.logger.debug(f"{self.thread_name} thread started")

        self._emit_unless_stopped(stop_event)
        while not stop_event.wait(self.polling_interval):
            self._emit_unless_stopped(stop_event)

        self.logger.debug(f"{self.thread_name} thread stopped")

    def _emit_unless_stopped(self, stop_event: threading.Event) -> None:
        if stop_event.is_set():
            return

        try:
            self._emit()
        except Exception as e:
            # Never let the worker die because of a consumer bug
            self.logger.error(f"Status callback error: {e}", exc_info=True)
