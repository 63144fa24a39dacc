"""
Network Connectivity Checker

Simple utility to check if internet connection is available.
Uses socket connection to external host for reliability.
"""

import logging
import socket
from typing import Optional, Tuple

from config.settings import (
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)


def check_internet_connectivity(
    host: str = NETWORK_CHECK_HOST,
    port: int = NETWORK_CHECK_PORT,
    timeout: float = NETWORK_CHECK_TIMEOUT,
) -> bool:
    """
    Check if internet connection is available.

    Attempts a socket connection to a reliable external host (Google DNS
    by default).

    Args:
        host: Host to connect to
        port: TCP port on that host
        timeout: Connection timeout in seconds

    Returns:
        True if internet is available, False otherwise

    Note:
        - Uses socket.create_connection() for speed and reliability
        - Respects timeout setting
        - Lightweight (~10ms per check when network available)
        - Exceptions are caught and logged at debug level
    """
    return probe_tcp_endpoint(host, port, timeout) is None


def probe_tcp_endpoint(
    host: str,
    port: int,
    timeout: float,
) -> Optional[str]:
    """
    Open (and close) one TCP connection.

    Returns:
        None on success, otherwise a short error description
    """
    logger = logging.getLogger(__name__)

    try:
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.close()
        return None
    except socket.timeout:
        return f"Connection to {host}:{port} timed out after {timeout}s"
    except OSError as e:
        # Network unavailable, connection refused, or DNS lookup failed
        return f"Connection to {host}:{port} failed: {e}"
    except Exception as e:
        logger.debug(f"Unexpected error in connectivity check: {e}")
        return f"Unexpected error: {e}"


def get_network_status() -> Tuple[bool, str]:
    """
    Get human-readable network status.

    Returns:
        Tuple of (is_connected, status_string)

    Example:
        is_connected, status = get_network_status()
        if is_connected:
            print(f"✓ {status}")  # Output: ✓ Internet available
        else:
            print(f"✗ {status}")  # Output: ✗ No internet connection
    """
    is_connected = check_internet_connectivity()
    status = "Internet available" if is_connected else "No internet connection"
    return is_connected, status
