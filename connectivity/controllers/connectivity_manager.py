"""
Connectivity Manager

Tracks whether this process currently has usable network access.

Two signals feed one boolean belief (is_online):
- Passive: the network monitor says "something may have changed"
- Active: periodic probes of a remote endpoint

Belief changes are reported exactly once per actual change, through the
connectivity_changed_callback slot and as NetworkEvent broadcasts on the
event bus. Other components can also force the belief by publishing
NetworkEvent.OFFLINE / NetworkEvent.ONLINE on the same bus.

State Flow:
    ONLINE  --probe fails / forced OFFLINE-->  OFFLINE
    OFFLINE --probe succeeds / forced ONLINE--> ONLINE

Probe cadence follows the belief: online_mode_polling_interval while
ONLINE, offline_mode_polling_interval while OFFLINE.

Threading:
- start(), stop() and is_online never wait on network I/O
- Probes run on short-lived daemon threads, ticks on threading.Timer
- One RLock serializes belief changes; each change is queued under it
- Notifications are delivered outside that lock, one deliverer at a
  time, in queue order. A transition caused from inside a callback
  (e.g. a subscriber publishing a forced signal) is delivered after the
  one being delivered, so callbacks always arrive in belief order
- stop() delivers what is still queued before it returns
- Every scheduled tick and in-flight probe carries a generation number;
  rescheduling, forced signals and stop() bump it, and stale work is
  dropped when it tries to deliver
"""

import logging
import threading
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, Hashable, Optional, Tuple

from connectivity.constants import (
    DEFAULT_OFFLINE_MODE_POLLING_INTERVAL,
    DEFAULT_ONLINE_MODE_POLLING_INTERVAL,
    ConnectivityState,
    NetworkEvent,
)
from connectivity.factory import (
    ConnectivityFactory,
    create_connectivity_checker,
    create_network_monitor,
)
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityResult,
)
from connectivity.interfaces.network_monitor_interface import (
    NetworkMonitorInterface,
)
from core.event_bus import EventBus, EventBusInterface

ConnectivityChangedCallback = Callable[[bool], None]


class ConnectivityManager:
    """
    Online/offline state machine with adaptive polling.

    Usage:
        manager = ConnectivityManager(
            offline_mode_polling_interval=15,
            online_mode_polling_interval=300,
        )
        manager.connectivity_changed_callback = lambda online: print(online)
        manager.start()
        ...
        if not manager.is_online:
            queue_for_later(request)
        ...
        manager.stop()
    """

    def __init__(
        self,
        network_monitor: Optional[NetworkMonitorInterface] = None,
        connectivity_checker: Optional[ConnectivityCheckerInterface] = None,
        event_bus: Optional[EventBusInterface] = None,
        offline_mode_polling_interval: Optional[float] = None,
        online_mode_polling_interval: Optional[float] = None,
    ):
        """
        Initialize connectivity manager.

        Args:
            network_monitor: Change signal source, or None to auto-create
            connectivity_checker: Probe, or None to auto-create
            event_bus: Bus for forced signals and broadcasts, or None for a
                      private EventBus
            offline_mode_polling_interval: Seconds between probes while
                offline (default: DEFAULT_OFFLINE_MODE_POLLING_INTERVAL)
            online_mode_polling_interval: Seconds between probes while
                online (default: DEFAULT_ONLINE_MODE_POLLING_INTERVAL)

        Raises:
            ValueError: If an interval is not positive
        """
        self.logger = logging.getLogger(__name__)

        # Each interval falls back to its own default, never to the other one
        if offline_mode_polling_interval is None:
            offline_mode_polling_interval = DEFAULT_OFFLINE_MODE_POLLING_INTERVAL
        if online_mode_polling_interval is None:
            online_mode_polling_interval = DEFAULT_ONLINE_MODE_POLLING_INTERVAL

        for name, value in (
            ("offline_mode_polling_interval", offline_mode_polling_interval),
            ("online_mode_polling_interval", online_mode_polling_interval),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        self.offline_mode_polling_interval = float(offline_mode_polling_interval)
        self.online_mode_polling_interval = float(online_mode_polling_interval)

        # Collaborators
        self.network_monitor = network_monitor or create_network_monitor()
        self.connectivity_checker = (
            connectivity_checker or create_connectivity_checker()
        )
        self.event_bus = event_bus or EventBus()

        # Single-slot transition callback, settable at any time
        self.connectivity_changed_callback: Optional[ConnectivityChangedCallback] = None

        # Shared state - guarded by _lock
        self._lock = threading.RLock()
        self._is_online = True  # Optimistic until the first probe says otherwise
        self._is_running = False
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

        # Transitions waiting to be delivered: (is_online, changed_at)
        self._pending: Deque[Tuple[bool, float]] = deque()

        # Held while delivering; never acquired while holding _lock
        self._delivery_lock = threading.RLock()
        self._delivering = False

        # Diagnostics
        self._last_checked_at: Optional[float] = None
        self._last_changed_at: Optional[float] = None
        self._transition_count = 0

        self.network_monitor.status_updated_callback = self._on_network_status_updated

        self.logger.info(
            f"Connectivity Manager initialized "
            f"(offline interval: {self.offline_mode_polling_interval}s, "
            f"online interval: {self.online_mode_polling_interval}s)",
        )

    @classmethod
    def from_config(
        cls,
        config,
        event_bus: Optional[EventBusInterface] = None,
    ) -> "ConnectivityManager":
        """
        Build a manager and its collaborators from a ConnectivityConfig.

        Args:
            config: ConnectivityConfig instance
            event_bus: Shared bus, or None for a private one
        """
        monitor = ConnectivityFactory.create_network_monitor(
            mode=config.monitor_mode,
            interface_poll_interval=config.interface_poll_interval,
            polling_interval=config.monitor_polling_interval,
        )
        checker = ConnectivityFactory.create_checker(
            mode=config.checker_mode,
            url=config.check_url,
            http_timeout=config.check_timeout,
            host=config.check_host,
            port=config.check_port,
            socket_timeout=config.socket_timeout,
        )
        return cls(
            network_monitor=monitor,
            connectivity_checker=checker,
            event_bus=event_bus,
            offline_mode_polling_interval=config.offline_mode_polling_interval,
            online_mode_polling_interval=config.online_mode_polling_interval,
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @property
    def is_online(self) -> bool:
        """Last known belief. True before the first probe."""
        return self._is_online

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def current_polling_interval(self) -> float:
        """Interval the next scheduled probe uses, given the current belief."""
        if self._is_online:
            return self.online_mode_polling_interval
        return self.offline_mode_polling_interval

    def start(self) -> None:
        """
        Start monitoring.

        Subscribes to forced signals, starts the network monitor and runs
        an immediate probe; the first timer tick is scheduled when that
        probe completes. Calling start() while running does nothing.
        """
        with self._lock:
            if self._is_running:
                self.logger.warning("Connectivity Manager already running")
                return

            self._is_running = True

            self.event_bus.subscribe(NetworkEvent.OFFLINE, self._on_forced_signal)
            self.event_bus.subscribe(NetworkEvent.ONLINE, self._on_forced_signal)
            self.network_monitor.start()

            self.logger.info(
                f"Connectivity Manager started "
                f"(probe: {self.connectivity_checker.describe()})",
            )

            self._check_now()

    def stop(self) -> None:
        """
        Stop monitoring.

        Cancels the pending tick, unsubscribes from the bus and stops the
        network monitor. Probes still in flight are discarded when they
        complete. Transitions that happened before stop() are delivered
        before it returns (unless stop() is called from inside a
        callback, in which case the ongoing delivery finishes them).
        Calling stop() when not running does nothing.
        """
        with self._lock:
            if not self._is_running:
                self.logger.debug("Connectivity Manager not running, nothing to stop")
                return

            self._is_running = False
            self._generation += 1
            self._cancel_timer()

            self.event_bus.unsubscribe(NetworkEvent.OFFLINE, self._on_forced_signal)
            self.event_bus.unsubscribe(NetworkEvent.ONLINE, self._on_forced_signal)

        # Waits for a delivery running on another thread
        self._deliver_pending()

        # Outside the lock: the monitor may join a thread that is waiting
        # for the lock inside _on_network_status_updated()
        self.network_monitor.stop()

        with self._lock:
            if self._is_running:
                # start() ran while we were stopping the monitor
                self.network_monitor.start()
                return

        self.logger.info("Connectivity Manager stopped")

    def get_status(self) -> Dict[str, Any]:
        """
        Get detailed manager status.

        Returns:
            Dictionary with belief, lifecycle and polling information
        """
        with self._lock:
            return {
                "is_online": self._is_online,
                "state": ConnectivityState.from_bool(self._is_online).value,
                "is_running": self._is_running,
                "offline_mode_polling_interval": self.offline_mode_polling_interval,
                "online_mode_polling_interval": self.online_mode_polling_interval,
                "current_polling_interval": self.current_polling_interval,
                "last_checked_at": self._last_checked_at,
                "last_changed_at": self._last_changed_at,
                "transition_count": self._transition_count,
            }

    # =========================================================================
    # SIGNAL HANDLERS
    # =========================================================================

    def _on_network_status_updated(self) -> None:
        """Network monitor callback: probe now, never a state assertion."""
        with self._lock:
            if not self._is_running:
                self.logger.debug("Network change signal ignored (not running)")
                return

            self.logger.debug("Network change signal received, probing now")
            self._check_now()

    def _on_forced_signal(self, event_type: Hashable, data: Any = None) -> None:
        """Event bus callback for NetworkEvent.OFFLINE / NetworkEvent.ONLINE."""
        # Our own broadcasts come back through the same subscription
        if isinstance(data, dict) and data.get("source") is self:
            return

        with self._lock:
            if not self._is_running:
                return

            is_online = event_type == NetworkEvent.ONLINE
            self.logger.info(
                f"Forced {ConnectivityState.from_bool(is_online).value} signal received",
            )

            # Supersede the pending tick and any in-flight probe
            self._generation += 1
            self._cancel_timer()

            self._update_state(is_online)
            self._schedule_next_check()

        self._deliver_pending()

    def _on_timer_fired(self, generation: int) -> None:
        """Timer thread: run the scheduled probe if it is still current."""
        with self._lock:
            if not self._is_current(generation):
                return
            self._timer = None

        self._run_check(generation)

    # =========================================================================
    # PROBING AND SCHEDULING
    # =========================================================================

    def _check_now(self) -> None:
        """Run an out-of-band probe, superseding pending work. Caller holds _lock."""
        self._generation += 1
        self._cancel_timer()

        generation = self._generation
        threading.Thread(
            target=self._run_check,
            args=(generation,),
            daemon=True,
            name=f"ConnectivityProbe-{generation}",
        ).start()

    def _run_check(self, generation: int) -> None:
        """Probe (blocking, outside the lock), then apply if still current."""
        with self._lock:
            if not self._is_current(generation):
                return

        result = self._perform_check()

        with self._lock:
            if not self._is_current(generation):
                self.logger.debug(
                    f"Discarding stale probe result (generation {generation})",
                )
                return

            self._last_checked_at = time.time()
            self._update_state(result.success)
            self._schedule_next_check()

        self._deliver_pending()

    def _perform_check(self) -> ConnectivityResult:
        """Call the probe; any exception counts as a failed probe."""
        try:
            result = self.connectivity_checker.check_connectivity()
        except Exception as e:
            self.logger.warning(f"Connectivity check raised: {e}", exc_info=True)
            return ConnectivityResult(success=False, error_message=str(e))

        if not result.success:
            self.logger.debug(f"Connectivity check failed: {result.error_message}")

        return result

    def _schedule_next_check(self) -> None:
        """Arm the timer for the current belief's interval. Caller holds _lock."""
        self._generation += 1
        self._cancel_timer()

        interval = self.current_polling_interval
        timer = threading.Timer(
            interval,
            self._on_timer_fired,
            args=(self._generation,),
        )
        timer.daemon = True
        timer.name = f"ConnectivityTimer-{self._generation}"
        self._timer = timer
        timer.start()

        self.logger.debug(f"Next connectivity check in {interval}s")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _is_current(self, generation: int) -> bool:
        return self._is_running and generation == self._generation

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def _update_state(self, is_online: bool) -> bool:
        """
        Apply a new belief and queue a notification on change.
        Caller holds _lock and calls _deliver_pending() after releasing it.

        Returns:
            True if the belief changed
        """
        if is_online == self._is_online:
            self.logger.debug(
                f"Connectivity unchanged: {ConnectivityState.from_bool(is_online).value}",
            )
            return False

        self._is_online = is_online
        self._last_changed_at = time.time()
        self._transition_count += 1

        state = ConnectivityState.from_bool(is_online)
        self.logger.info(f"Connectivity changed: {state.value}")

        self._pending.append((is_online, self._last_changed_at))
        return True

    def _deliver_pending(self) -> None:
        """
        Deliver queued transitions in order. Must not be called with _lock held.

        Only one thread delivers at a time. A nested call from inside a
        callback returns immediately; the outer loop picks up whatever
        the callback queued.
        """
        with self._delivery_lock:
            if self._delivering:
                return

            self._delivering = True
            try:
                while True:
                    with self._lock:
                        if not self._pending:
                            return
                        is_online, changed_at = self._pending.popleft()

                    self._notify(is_online, changed_at)
            finally:
                self._delivering = False

    def _notify(self, is_online: bool, changed_at: float) -> None:
        """Invoke the callback slot, then broadcast on the bus."""
        callback = self.connectivity_changed_callback
        if callback is not None:
            try:
                callback(is_online)
            except Exception as e:
                # Subscriber bugs must not break the state machine
                self.logger.error(f"Connectivity callback error: {e}", exc_info=True)

        event = NetworkEvent.ONLINE if is_online else NetworkEvent.OFFLINE
        try:
            self.event_bus.publish(
                event,
                {
                    "is_online": is_online,
                    "timestamp": changed_at,
                    "source": self,
                },
            )
        except Exception as e:
            self.logger.error(f"Failed to broadcast {event.value}: {e}", exc_info=True)

    def __repr__(self) -> str:
        state = ConnectivityState.from_bool(self._is_online).value
        return f"ConnectivityManager(state={state}, running={self._is_running})"
