"""
Connectivity Factory

Factory pattern for creating network monitors and connectivity checkers.
One place decides which implementation to use; controllers never import
implementations directly.
"""

import logging
from typing import Literal

from connectivity.constants import (
    CONNECTIVITY_CHECK_TIMEOUT,
    CONNECTIVITY_CHECK_URL,
    INTERFACE_POLL_INTERVAL,
    MONITOR_POLLING_INTERVAL,
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)
from connectivity.implementations.http_checker import HttpConnectivityChecker
from connectivity.implementations.interface_network_monitor import (
    InterfaceNetworkMonitor,
)
from connectivity.implementations.mock_checker import MockConnectivityChecker
from connectivity.implementations.mock_network_monitor import MockNetworkMonitor
from connectivity.implementations.polling_network_monitor import (
    PollingNetworkMonitor,
)
from connectivity.implementations.socket_checker import SocketConnectivityChecker
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityError,
)
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)

# Type aliases for better type hints
MonitorMode = Literal["auto", "interface", "polling", "mock"]
CheckerMode = Literal["auto", "http", "socket", "mock"]

MONITOR_MODES = ("auto", "interface", "polling", "mock")
CHECKER_MODES = ("auto", "http", "socket", "mock")


class ConnectivityFactory:
    """
    Factory for creating connectivity components.

    Usage:
        # Auto-detect (interface monitor if the platform supports it)
        monitor = ConnectivityFactory.create_network_monitor()
        checker = ConnectivityFactory.create_checker()

        # Force mock mode (useful for testing)
        monitor = ConnectivityFactory.create_network_monitor(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_network_monitor(
        cls,
        mode: MonitorMode = "auto",
        interface_poll_interval: float = INTERFACE_POLL_INTERVAL,
        polling_interval: float = MONITOR_POLLING_INTERVAL,
    ) -> NetworkMonitorInterface:
        """
        Create a network monitor.

        Args:
            mode: "auto" (detect), "interface" (force interface watcher),
                  "polling" (fixed cadence), "mock" (force simulation)
            interface_poll_interval: Sampling period for the interface monitor
            polling_interval: Cadence of the polling monitor

        Returns:
            NetworkMonitorInterface implementation

        Raises:
            ConnectivityError: If mode="interface" but the platform can't list
                          interfaces
            ValueError: If mode is unknown
        """
        if mode not in MONITOR_MODES:
            raise ValueError(f"Unknown network monitor mode: {mode}")

        if mode == "mock":
            cls._logger.info("Creating Mock network monitor (forced)")
            return MockNetworkMonitor()

        if mode == "polling":
            cls._logger.info("Creating Polling network monitor (forced)")
            return PollingNetworkMonitor(polling_interval=polling_interval)

        if mode == "interface":
            if not InterfaceNetworkMonitor.is_supported():
                raise ConnectivityError(
                    "Interface network monitor requested but this platform "
                    "cannot enumerate network interfaces",
                )
            cls._logger.info("Creating Interface network monitor (forced)")
            return InterfaceNetworkMonitor(poll_interval=interface_poll_interval)

        # mode == "auto" - interface watcher first, polling as fallback
        if InterfaceNetworkMonitor.is_supported():
            cls._logger.info("Creating Interface network monitor (auto-detected)")
            return InterfaceNetworkMonitor(poll_interval=interface_poll_interval)

        cls._logger.warning(
            "Network interfaces not available, using Polling network monitor",
        )
        return PollingNetworkMonitor(polling_interval=polling_interval)

    @classmethod
    def create_checker(
        cls,
        mode: CheckerMode = "auto",
        url: str = CONNECTIVITY_CHECK_URL,
        http_timeout: float = CONNECTIVITY_CHECK_TIMEOUT,
        host: str = NETWORK_CHECK_HOST,
        port: int = NETWORK_CHECK_PORT,
        socket_timeout: float = NETWORK_CHECK_TIMEOUT,
    ) -> ConnectivityCheckerInterface:
        """
        Create a connectivity checker.

        Args:
            mode: "auto"/"http" (HTTP GET), "socket" (TCP connect),
                  "mock" (simulation, always online)
            url: HTTP probe endpoint
            http_timeout: HTTP probe timeout in seconds
            host: TCP probe host
            port: TCP probe port
            socket_timeout: TCP probe timeout in seconds

        Returns:
            ConnectivityCheckerInterface implementation

        Raises:
            ValueError: If mode is unknown
        """
        if mode not in CHECKER_MODES:
            raise ValueError(f"Unknown connectivity checker mode: {mode}")

        if mode == "mock":
            cls._logger.info("Creating Mock connectivity checker (forced)")
            return MockConnectivityChecker()

        if mode == "socket":
            checker = SocketConnectivityChecker(
                host=host,
                port=port,
                timeout=socket_timeout,
            )
        else:
            checker = HttpConnectivityChecker(url=url, timeout=http_timeout)

        cls._logger.info(f"Creating connectivity checker: {checker.describe()}")
        return checker


# Convenience functions for quick creation


def create_network_monitor(force_mock: bool = False) -> NetworkMonitorInterface:
    """
    Quick network monitor creation with simple mock override.

    Args:
        force_mock: If True, always use mock (good for testing)
    """
    mode = "mock" if force_mock else "auto"
    return ConnectivityFactory.create_network_monitor(mode=mode)


def create_connectivity_checker(
    force_mock: bool = False,
) -> ConnectivityCheckerInterface:
    """
    Quick connectivity checker creation with simple mock override.

    Args:
        force_mock: If True, always use mock (good for testing)
    """
    mode = "mock" if force_mock else "auto"
    return ConnectivityFactory.create_checker(mode=mode)
