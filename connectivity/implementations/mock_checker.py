"""
Mock Connectivity Checker

Simulated probe for testing without network access.
Similar to MockNetworkMonitor: working logic, no real I/O.
"""

import logging
import threading
import time
from typing import Callable, Optional

from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityResult,
)

ResponseCallback = Callable[[], ConnectivityResult]


class MockConnectivityChecker(ConnectivityCheckerInterface):
    """
    Controllable probe for tests.

    Outcome resolution, in order:
    1. response_callback() if set (may also raise, to test error handling)
    2. the is_connected flag
    """

    def __init__(
        self,
        is_connected: bool = True,
        delay: float = 0.0,
        response_callback: Optional[ResponseCallback] = None,
    ):
        """
        Initialize mock checker.

        Args:
            is_connected: Outcome returned when no response_callback is set
            delay: Seconds each check takes (simulates network latency)
            response_callback: Optional callable producing the result

        Example:
            # Fast, always online
            checker = MockConnectivityChecker()

            # Slow, offline
            checker = MockConnectivityChecker(is_connected=False, delay=0.5)
        """
        self.logger = logging.getLogger(__name__)
        self.is_connected = is_connected
        self.delay = delay
        self.response_callback = response_callback

        self._lock = threading.Lock()
        self.check_count = 0

    def check_connectivity(self) -> ConnectivityResult:
        with self._lock:
            self.check_count += 1

        if self.delay > 0:
            time.sleep(self.delay)

        callback = self.response_callback
        if callback is not None:
            return callback()

        if self.is_connected:
            return ConnectivityResult(success=True, status_code=204, duration=self.delay)

        return ConnectivityResult(
            success=False,
            error_message="Simulated network error",
            duration=self.delay,
        )

    def describe(self) -> str:
        return "mock connectivity checker"

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def set_connected(self, is_connected: bool) -> None:
        """Switch the simulated outcome (and drop any response_callback)."""
        self.response_callback = None
        self.is_connected = is_connected
        self.logger.debug(f"[MOCK] Connectivity set to {is_connected}")

    def get_check_count(self) -> int:
        with self._lock:
            return self.check_count
