"""
Core utilities and modules.

Public API:
    - check_internet_connectivity: Check if internet is available
    - get_network_status: Get human-readable network status
    - EventBus: In-process publish/subscribe channel
    - EventBusInterface: Contract for publish/subscribe channels

Usage:
    from core.network import check_internet_connectivity

    if check_internet_connectivity():
        print("Internet available")
"""

from core.event_bus import EventBus, EventBusInterface
from core.network import check_internet_connectivity, get_network_status

__all__ = [
    "EventBus",
    "EventBusInterface",
    "check_internet_connectivity",
    "get_network_status",
]
