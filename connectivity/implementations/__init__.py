"""
Connectivity Implementations Package

Concrete network monitors and connectivity checkers (real and mock).
"""

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

__all__ = [
    "HttpConnectivityChecker",
    "InterfaceNetworkMonitor",
    "MockConnectivityChecker",
    "MockNetworkMonitor",
    "PollingNetworkMonitor",
    "SocketConnectivityChecker",
]
