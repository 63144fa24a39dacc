"""
Interface Network Monitor

OS-level change detection without platform specific bindings.

The worker samples the host's network interfaces and local addresses and
emits whenever that snapshot changes (cable unplugged, Wi-Fi joined, VPN
up, DHCP lease renewed with a new address, ...). Like the OS reachability
APIs it stands in for, it also reports once right after start() so the
consumer gets an initial status.

A changed snapshot says nothing about actual reachability; it is only a
hint that a probe is worth running now.
"""

import socket
from typing import Callable, Hashable, Optional, Tuple

from connectivity.constants import INTERFACE_POLL_INTERVAL
from connectivity.implementations.polling_network_monitor import (
    PollingNetworkMonitor,
)

SnapshotProvider = Callable[[], Hashable]


def take_interface_snapshot() -> Tuple[tuple, tuple]:
    """
    Capture the current interface table and local addresses.

    Returns:
        (interfaces, addresses) as sorted tuples, comparable with ==
    """
    try:
        interfaces = tuple(sorted(socket.if_nameindex()))
    except OSError:
        interfaces = ()

    try:
        infos = socket.getaddrinfo(socket.gethostname(), None)
        addresses = tuple(sorted({info[4][0] for info in infos}))
    except OSError:
        # Hostname not resolvable while the network is reconfiguring
        addresses = ()

    return interfaces, addresses


class InterfaceNetworkMonitor(PollingNetworkMonitor):
    """
    Emits once after start(), then only when the interface snapshot changes.

    Usage:
        monitor = InterfaceNetworkMonitor()
        monitor.status_updated_callback = manager_callback
        monitor.start()
    """

    thread_name = "InterfaceNetworkMonitor"

    def __init__(
        self,
        poll_interval: float = INTERFACE_POLL_INTERVAL,
        snapshot_provider: Optional[SnapshotProvider] = None,
    ):
        """
        Initialize interface monitor.

        Args:
            poll_interval: Seconds between two interface samples
            snapshot_provider: Callable returning a comparable snapshot
                              (defaults to take_interface_snapshot, tests
                              inject their own)
        """
        super().__init__(polling_interval=poll_interval)
        self.snapshot_provider = snapshot_provider or take_interface_snapshot

    @staticmethod
    def is_supported() -> bool:
        """
        Check if this platform can enumerate network interfaces.

        Returns:
            True if socket.if_nameindex() works here
        """
        if not hasattr(socket, "if_nameindex"):
            return False
        try:
            socket.if_nameindex()
            return True
        except OSError:
            return False

    def _monitor_loop(self, stop_event) -> None:
        self.logger.debug(f"{self.thread_name} thread started")

        last_snapshot = self._safe_snapshot()
        self._emit_unless_stopped(stop_event)

        while not stop_event.wait(self.polling_interval):
            snapshot = self._safe_snapshot()
            if snapshot == last_snapshot:
                continue

            self.logger.info("Network interfaces changed")
            self.logger.debug(f"Interfaces: {last_snapshot} -> {snapshot}")
            last_snapshot = snapshot
            self._emit_unless_stopped(stop_event)

        self.logger.debug(f"{self.thread_name} thread stopped")

    def _safe_snapshot(self) -> Optional[Hashable]:
        try:
            return self.snapshot_provider()
        except Exception as e:
            self.logger.warning(f"Failed to read network interfaces: {e}")
            return None
