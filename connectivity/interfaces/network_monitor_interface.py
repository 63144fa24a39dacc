"""
Network Monitor Interface

Contract for anything that can tell us "the network may have changed".

The signal is deliberately weak: it can be late, duplicated, or coalesced,
and it carries no state. Consumers treat every invocation as "re-check now",
never as "we are online" or "we are offline".
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

StatusUpdatedCallback = Callable[[], None]


class NetworkMonitorInterface(ABC):
    """
    Abstract base class for network change monitors.

    Implementations:
    - Emit by calling status_updated_callback() (no arguments)
    - Only emit between start() and stop()
    - Never emit after stop() has returned
    - Support start() again after stop()

    The callback slot is a plain attribute so the owner can set it at any
    time, before or after start().
    """

    status_updated_callback: Optional[StatusUpdatedCallback] = None

    @abstractmethod
    def start(self) -> None:
        """
        Begin emitting change signals.

        Calling start() on a started monitor is a no-op.
        """

    @abstractmethod
    def stop(self) -> None:
        """
        Stop emitting change signals.

        Calling stop() on a stopped monitor is a no-op.
        """

    @abstractmethod
    def is_started(self) -> bool:
        """
        Returns:
            True between start() and stop()
        """

    def _emit(self) -> None:
        """Invoke the callback slot if one is set."""
        callback = self.status_updated_callback
        if callback is not None:
            callback()
