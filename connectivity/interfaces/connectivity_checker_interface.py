"""
Connectivity Checker Interface

Abstract interface for one active reachability probe.
The manager only cares about success vs. failure; everything else in the
result is for logs and diagnostics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ConnectivityResult:
    """
    Result of a single connectivity probe.

    Attributes:
        success: True if the remote endpoint was reachable
        error_message: Error description (if failed)
        status_code: HTTP status code, when the probe is HTTP based
        duration: Time taken by the probe in seconds
    """

    success: bool
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    duration: float = 0.0


class ConnectivityCheckerInterface(ABC):
    """
    Abstract base class for connectivity probes.

    check_connectivity() is BLOCKING (network I/O). Callers that must not
    block run it on a worker thread.

    Implementations must:
    - Return a ConnectivityResult instead of raising for network errors
    - Bound their own runtime with a timeout
    - Be safe to call from several threads at once
    """

    @abstractmethod
    def check_connectivity(self) -> ConnectivityResult:
        """
        Perform one reachability check.

        Returns:
            ConnectivityResult with success flag and details

        Example:
            result = checker.check_connectivity()
            if not result.success:
                print(f"Offline: {result.error_message}")
        """

    @abstractmethod
    def describe(self) -> str:
        """
        Returns:
            Short human readable description of the probe target
        """


class ConnectivityError(RuntimeError):
    """
    Base exception for the connectivity module.

    Probe failures are NOT raised; they are reported as
    ConnectivityResult(success=False). This is for configuration and
    wiring problems.
    """
