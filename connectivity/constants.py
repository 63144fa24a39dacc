"""
Connectivity Constants

Enums, event names and timing values for the connectivity module.

Configuration values (intervals, probe endpoints) live in config/settings.py
and are re-exported here so the rest of the module imports from one place.
"""

from enum import Enum

from config.settings import (
    CONNECTIVITY_CHECK_TIMEOUT,
    CONNECTIVITY_CHECK_URL,
    DEFAULT_OFFLINE_MODE_POLLING_INTERVAL,
    DEFAULT_ONLINE_MODE_POLLING_INTERVAL,
    INTERFACE_POLL_INTERVAL,
    MONITOR_POLLING_INTERVAL,
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)

__all__ = [
    "CONNECTIVITY_CHECK_TIMEOUT",
    "CONNECTIVITY_CHECK_URL",
    "DEFAULT_OFFLINE_MODE_POLLING_INTERVAL",
    "DEFAULT_ONLINE_MODE_POLLING_INTERVAL",
    "HTTP_USER_AGENT",
    "INTERFACE_POLL_INTERVAL",
    "MONITOR_POLLING_INTERVAL",
    "MONITOR_THREAD_JOIN_TIMEOUT",
    "NETWORK_CHECK_HOST",
    "NETWORK_CHECK_PORT",
    "NETWORK_CHECK_TIMEOUT",
    "ConnectivityState",
    "NetworkEvent",
]


# =============================================================================
# BUS EVENTS
# =============================================================================


class NetworkEvent(Enum):
    """
    Event names on the event bus.

    The connectivity manager listens for both (forced state from other
    components) and publishes both (transitions it detected itself).
    """

    OFFLINE = "network_offline"
    ONLINE = "network_online"


class ConnectivityState(Enum):
    """Believed network reachability, for logs and status files"""

    ONLINE = "online"
    OFFLINE = "offline"

    @classmethod
    def from_bool(cls, is_online: bool) -> "ConnectivityState":
        return cls.ONLINE if is_online else cls.OFFLINE


# =============================================================================
# THREADING CONFIGURATION
# =============================================================================

# How long stop() waits for a monitor thread to exit (seconds)
MONITOR_THREAD_JOIN_TIMEOUT = 2.0


# =============================================================================
# HTTP PROBE
# =============================================================================

HTTP_USER_AGENT = "connectivity-monitor/1.0"
