"""
Event Bus

Small in-process publish/subscribe channel.

Components talk through an injected bus instead of importing each other.
Connectivity uses it both ways: other components post "went offline/online"
events to force a state, and the connectivity manager broadcasts the
transitions it detects.

Delivery is synchronous: publish() calls every subscriber on the caller's
thread, in subscription order, before returning.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Hashable, List, Optional

# Subscribers receive (event_type, data)
EventCallback = Callable[[Hashable, Any], None]


class EventBusInterface(ABC):
    """
    Contract for publish/subscribe channels.

    Anything that can route named events to callbacks can be plugged in
    (in-process bus, test recorder, bridge to MQTT, ...).
    """

    @abstractmethod
    def subscribe(self, event_type: Hashable, callback: EventCallback) -> None:
        """
        Register a callback for an event type.

        Subscribing the same callback twice for the same event is a no-op.

        Args:
            event_type: Event identifier (string or Enum member)
            callback: Called with (event_type, data) for every publish
        """

    @abstractmethod
    def unsubscribe(self, event_type: Hashable, callback: EventCallback) -> None:
        """
        Remove a callback. Unknown callbacks are ignored.

        Args:
            event_type: Event identifier
            callback: Previously subscribed callback
        """

    @abstractmethod
    def publish(self, event_type: Hashable, data: Any = None) -> int:
        """
        Deliver an event to every current subscriber.

        Args:
            event_type: Event identifier
            data: Optional payload passed to subscribers

        Returns:
            Number of subscribers the event was delivered to
        """


class EventBus(EventBusInterface):
    """
    Thread-safe, synchronous in-process event bus.

    A subscriber that raises is logged and skipped; the remaining
    subscribers still receive the event.

    Usage:
        bus = EventBus()
        bus.subscribe(NetworkEvent.OFFLINE, on_offline)
        bus.publish(NetworkEvent.OFFLINE)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.subscribers: Dict[Hashable, List[EventCallback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: Hashable, callback: EventCallback) -> None:
        with self._lock:
            callbacks = self.subscribers.setdefault(event_type, [])
            if callback in callbacks:
                return
            callbacks.append(callback)

        self.logger.debug(f"Subscribed to {_event_name(event_type)}")

    def unsubscribe(self, event_type: Hashable, callback: EventCallback) -> None:
        with self._lock:
            callbacks = self.subscribers.get(event_type)
            if not callbacks or callback not in callbacks:
                return
            callbacks.remove(callback)
            if not callbacks:
                del self.subscribers[event_type]

        self.logger.debug(f"Unsubscribed from {_event_name(event_type)}")

    def publish(self, event_type: Hashable, data: Any = None) -> int:
        # Snapshot so callbacks may (un)subscribe while we deliver
        with self._lock:
            callbacks = list(self.subscribers.get(event_type, []))

        self.logger.debug(
            f"Publishing {_event_name(event_type)} to {len(callbacks)} subscriber(s)",
        )

        for callback in callbacks:
            try:
                callback(event_type, data)
            except Exception as e:
                self.logger.error(
                    f"Subscriber error for {_event_name(event_type)}: {e}",
                    exc_info=True,
                )

        return len(callbacks)

    def subscriber_count(self, event_type: Optional[Hashable] = None) -> int:
        """
        Count subscribers for one event type, or for all of them.
        """
        with self._lock:
            if event_type is not None:
                return len(self.subscribers.get(event_type, []))
            return sum(len(callbacks) for callbacks in self.subscribers.values())

    def clear(self) -> None:
        """Remove every subscription."""
        with self._lock:
            self.subscribers.clear()


def _event_name(event_type: Hashable) -> str:
    return str(getattr(event_type, "value", event_type))
