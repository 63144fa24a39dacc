"""
Mock Network Monitor

Test double for NetworkMonitorInterface.
Mimics an OS monitor: reports once (asynchronously) when started, and lets
tests force a signal whenever they want one.
"""

import logging
import threading

from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)


class MockNetworkMonitor(NetworkMonitorInterface):
    """
    Controllable network monitor for tests.

    Signals (from start() or force_status_update()) are only delivered
    while the monitor is started.
    """

    def __init__(self, emit_on_start: bool = True):
        """
        Initialize mock monitor.

        Args:
            emit_on_start: If True, start() schedules one asynchronous
                          signal like a real OS monitor reporting its
                          initial status
        """
        self.logger = logging.getLogger(__name__)
        self.emit_on_start = emit_on_start
        self.status_updated_callback = None

        self._started = False

        # Counters for assertions
        self.start_count = 0
        self.stop_count = 0
        self.emit_count = 0

    def start(self) -> None:
        self._started = True
        self.start_count += 1
        self.logger.debug("[MOCK] Network monitor started")

        if self.emit_on_start:
            threading.Thread(
                target=self._trigger_callback_if_started,
                daemon=True,
                name="MockNetworkMonitor-start",
            ).start()

    def stop(self) -> None:
        self._started = False
        self.stop_count += 1
        self.logger.debug("[MOCK] Network monitor stopped")

    def is_started(self) -> bool:
        return self._started

    # =========================================================================
    # TESTING HELPER METHODS (not part of NetworkMonitorInterface)
    # =========================================================================

    def force_status_update(self) -> None:
        """Deliver one signal synchronously (ignored while stopped)."""
        self._trigger_callback_if_started()

    def _trigger_callback_if_started(self) -> None:
        if not self._started:
            return

        self.emit_count += 1
        self._emit()
