"""
Connectivity Module

Tracks whether the process currently has usable network access, combining
network change notifications with adaptive periodic probing.

Layout:
- interfaces/: Abstract base classes (contracts)
- implementations/: Concrete implementations (real and mock)
- controllers/: High-level coordination (ConnectivityManager)
- factory.py: Picks implementations
- config.py: YAML configuration

Public API:
    - ConnectivityManager: Online/offline state machine
    - ConnectivityConfig: YAML-backed configuration
    - ConnectivityFactory: Factory for monitors and checkers
    - NetworkEvent: Event bus names for forced signals and broadcasts

Usage:
    from connectivity import ConnectivityManager
    from core.event_bus import EventBus

    bus = EventBus()
    manager = ConnectivityManager(event_bus=bus)
    manager.connectivity_changed_callback = on_change
    manager.start()
"""

from connectivity.config import ConnectivityConfig
from connectivity.constants import ConnectivityState, NetworkEvent
from connectivity.controllers.connectivity_manager import ConnectivityManager
from connectivity.factory import (
    ConnectivityFactory,
    create_connectivity_checker,
    create_network_monitor,
)
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityError,
    ConnectivityResult,
)
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)

# Public API
__all__ = [
    "ConnectivityCheckerInterface",
    "ConnectivityConfig",
    "ConnectivityError",
    "ConnectivityFactory",
    "ConnectivityManager",
    "ConnectivityResult",
    "ConnectivityState",
    "NetworkEvent",
    "NetworkMonitorInterface",
    "create_connectivity_checker",
    "create_network_monitor",
]
