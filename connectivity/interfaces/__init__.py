"""
Connectivity Interfaces Package

Exposes abstract interfaces that define contracts for connectivity components.
"""

from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityError,
    ConnectivityResult,
)
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
    StatusUpdatedCallback,
)

# Public API (sorted alphabetically)
__all__ = [
    "ConnectivityCheckerInterface",
    "ConnectivityError",
    "ConnectivityResult",
    "NetworkMonitorInterface",
    "StatusUpdatedCallback",
]
