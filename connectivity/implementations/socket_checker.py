"""
Socket Connectivity Checker

Probes reachability with a plain TCP connect (DNS port of a public
resolver by default). Fast and dependency free, and it still works when
HTTP is filtered.
"""

import logging
import time

from connectivity.constants import (
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityResult,
)
from core.network import probe_tcp_endpoint


class SocketConnectivityChecker(ConnectivityCheckerInterface):
    """TCP connect probe built on core.network."""

    def __init__(
        self,
        host: str = NETWORK_CHECK_HOST,
        port: int = NETWORK_CHECK_PORT,
        timeout: float = NETWORK_CHECK_TIMEOUT,
    ):
        if not 0 < port < 65536:
            raise ValueError(f"Invalid port: {port}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.logger = logging.getLogger(__name__)
        self.host = host
        self.port = port
        self.timeout = timeout

    def check_connectivity(self) -> ConnectivityResult:
        start_time = time.time()
        error = probe_tcp_endpoint(self.host, self.port, self.timeout)
        duration = time.time() - start_time

        if error:
            self.logger.debug(f"Connectivity check failed: {error}")
            return ConnectivityResult(
                success=False,
                error_message=error,
                duration=duration,
            )

        return ConnectivityResult(success=True, duration=duration)

    def describe(self) -> str:
        return f"TCP {self.host}:{self.port} (timeout {self.timeout}s)"
