"""
Connectivity Test Configuration and Fixtures

Shared fixtures for connectivity module tests.

Most tests here involve background threads, so assertions about "eventually"
go through wait_until() with a bounded timeout instead of fixed sleeps.
"""

import threading
import time

import pytest

from connectivity.controllers.connectivity_manager import ConnectivityManager
from connectivity.implementations.mock_checker import MockConnectivityChecker
from connectivity.implementations.mock_network_monitor import MockNetworkMonitor
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)
from core.event_bus import EventBus

# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


class SilentNetworkMonitor(NetworkMonitorInterface):
    """Monitor that never emits: only the timer can trigger probes."""

    def __init__(self):
        self.status_updated_callback = None
        self._started = False

    def start(self) -> None:
        self._started = True

    def stop(self) -> None:
        self._started = False

    def is_started(self) -> bool:
        return self._started


@pytest.fixture
def mock_monitor():
    """MockNetworkMonitor that reports once on start, like an OS monitor."""
    monitor = MockNetworkMonitor()
    yield monitor
    monitor.stop()


@pytest.fixture
def silent_monitor():
    """Network monitor that never fires."""
    return SilentNetworkMonitor()


@pytest.fixture
def mock_checker():
    """Instant probe, online by default."""
    return MockConnectivityChecker(is_connected=True)


@pytest.fixture
def event_bus():
    bus = EventBus()
    yield bus
    bus.clear()


# =============================================================================
# MANAGER FIXTURES
# =============================================================================


@pytest.fixture
def make_manager(mock_monitor, mock_checker, event_bus):
    """
    Build ConnectivityManagers and stop them all after the test.

    Usage:
        def test_x(make_manager):
            manager = make_manager(offline_mode_polling_interval=0.5)
    """
    managers = []

    def _make(**kwargs):
        kwargs.setdefault("network_monitor", mock_monitor)
        kwargs.setdefault("connectivity_checker", mock_checker)
        kwargs.setdefault("event_bus", event_bus)
        manager = ConnectivityManager(**kwargs)
        managers.append(manager)
        return manager

    yield _make

    for manager in managers:
        manager.stop()


# =============================================================================
# HELPER FIXTURES
# =============================================================================


class TransitionTracker:
    """Thread-safe recorder for connectivity_changed_callback calls."""

    def __init__(self):
        self._lock = threading.Lock()
        self.values = []

    def __call__(self, is_online: bool) -> None:
        with self._lock:
            self.values.append(is_online)

    def snapshot(self) -> list:
        with self._lock:
            return list(self.values)

    def count(self) -> int:
        with self._lock:
            return len(self.values)


@pytest.fixture
def transitions():
    """Callable to plug into connectivity_changed_callback."""
    return TransitionTracker()


def _wait_until(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_until():
    """
    Poll a predicate until it is true or the timeout expires.

    Usage:
        assert wait_until(lambda: tracker.count() == 1, timeout=2.0)
    """
    return _wait_until


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers.

    Markers let you categorize and selectively run tests:
        pytest -m unit          # Only unit tests
        pytest -m integration   # Only integration tests
        pytest -m "not slow"    # Skip slow tests
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (may be slower)")
    config.addinivalue_line("markers", "slow: Slow tests (use sparingly)")
