"""
Connectivity Manager Tests

Tests for ConnectivityManager showing:
- Initial belief and lifecycle
- Probe-driven transitions (monitor signal and timer driven)
- Forced signals from the event bus
- Broadcasts and callback de-duplication
- No effects after stop()

To run:
    pytest tests/connectivity/controllers/test_connectivity_manager.py -v
"""

import random
import threading
import time

import pytest

from connectivity.config import ConnectivityConfig
from connectivity.constants import (
    DEFAULT_OFFLINE_MODE_POLLING_INTERVAL,
    DEFAULT_ONLINE_MODE_POLLING_INTERVAL,
    NetworkEvent,
)
from connectivity.controllers.connectivity_manager import ConnectivityManager
from connectivity.implementations.mock_checker import MockConnectivityChecker
from connectivity.implementations.mock_network_monitor import MockNetworkMonitor
from connectivity.implementations.polling_network_monitor import (
    PollingNetworkMonitor,
)
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityResult,
)


def _wait_for_first_probe(manager, wait_until):
    assert wait_until(lambda: manager.get_status()["last_checked_at"] is not None)


# =============================================================================
# INITIALIZATION TESTS
# =============================================================================


@pytest.mark.unit
def test_is_online_before_start(make_manager):
    """Belief is optimistic before anything has been checked."""
    manager = make_manager()

    assert manager.is_online is True
    assert manager.is_running is False


@pytest.mark.unit
def test_intervals_default_independently(make_manager):
    """Supplying one interval never changes the other's default."""
    only_offline = make_manager(offline_mode_polling_interval=0.5)
    only_online = make_manager(online_mode_polling_interval=0.5)

    assert only_offline.offline_mode_polling_interval == 0.5
    assert only_offline.online_mode_polling_interval == DEFAULT_ONLINE_MODE_POLLING_INTERVAL
    assert only_online.online_mode_polling_interval == 0.5
    assert only_online.offline_mode_polling_interval == DEFAULT_OFFLINE_MODE_POLLING_INTERVAL


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        {"offline_mode_polling_interval": 0},
        {"online_mode_polling_interval": -1},
    ],
)
def test_invalid_interval_rejected(make_manager, kwargs):
    """Non-positive intervals are a construction error."""
    with pytest.raises(ValueError):
        make_manager(**kwargs)


@pytest.mark.unit
def test_from_config_builds_collaborators(tmp_path):
    """from_config wires implementations chosen by the config."""
    config = ConnectivityConfig(
        config_path=tmp_path / "missing.yaml",
        overrides={
            "monitor_mode": "mock",
            "checker_mode": "mock",
            "offline_mode_polling_interval": 2,
            "online_mode_polling_interval": 20,
        },
    )

    manager = ConnectivityManager.from_config(config)

    assert isinstance(manager.network_monitor, MockNetworkMonitor)
    assert isinstance(manager.connectivity_checker, MockConnectivityChecker)
    assert manager.offline_mode_polling_interval == 2.0
    assert manager.online_mode_polling_interval == 20.0


# =============================================================================
# LIFECYCLE TESTS
# =============================================================================


@pytest.mark.unit
def test_start_is_idempotent(make_manager, mock_monitor, event_bus):
    """A second start() must not double-subscribe or restart the monitor."""
    manager = make_manager()

    manager.start()
    manager.start()

    assert manager.is_running is True
    assert mock_monitor.start_count == 1
    assert event_bus.subscriber_count(NetworkEvent.OFFLINE) == 1
    assert event_bus.subscriber_count(NetworkEvent.ONLINE) == 1


@pytest.mark.unit
def test_stop_without_start_is_safe(make_manager, mock_monitor):
    """stop() before start() and double stop() are ignored."""
    manager = make_manager()

    manager.stop()
    manager.start()
    manager.stop()
    manager.stop()

    assert manager.is_running is False
    assert mock_monitor.stop_count == 1


@pytest.mark.unit
def test_stop_releases_subscriptions(make_manager, mock_monitor, event_bus):
    """After stop() the manager no longer listens on the bus or the monitor."""
    manager = make_manager()
    manager.start()
    manager.stop()

    assert event_bus.subscriber_count() == 0
    assert mock_monitor.is_started() is False


@pytest.mark.integration
def test_restart_reevaluates_immediately(
    make_manager,
    silent_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """start() after stop() probes right away, without waiting for a tick."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    manager.connectivity_changed_callback = transitions

    manager.start()
    _wait_for_first_probe(manager, wait_until)
    manager.stop()

    mock_checker.set_connected(False)
    manager.start()

    assert wait_until(lambda: transitions.count() == 1, timeout=2.0)
    assert transitions.snapshot() == [False]
    assert manager.is_online is False


# =============================================================================
# PROBE-DRIVEN TRANSITION TESTS
# =============================================================================


@pytest.mark.integration
def test_monitor_signal_drives_transitions(
    make_manager,
    mock_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """
    Both intervals 0.5s:
    - probe keeps succeeding: no callback
    - probe fails + monitor signal: one False
    - probe succeeds + monitor signal: one True
    - after stop: nothing
    """
    manager = make_manager(
        offline_mode_polling_interval=0.5,
        online_mode_polling_interval=0.5,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()

    time.sleep(0.8)
    assert manager.is_online is True
    assert transitions.count() == 0

    mock_checker.set_connected(False)
    mock_monitor.force_status_update()
    assert wait_until(lambda: transitions.count() >= 1, timeout=2.0)
    assert transitions.snapshot() == [False]
    assert manager.is_online is False

    mock_checker.set_connected(True)
    mock_monitor.force_status_update()
    assert wait_until(lambda: transitions.count() >= 2, timeout=2.0)
    assert transitions.snapshot() == [False, True]

    manager.stop()
    mock_checker.set_connected(False)
    mock_monitor.force_status_update()
    time.sleep(1.0)

    assert transitions.snapshot() == [False, True]
    assert manager.is_online is True


@pytest.mark.integration
def test_online_interval_timer_detects_failure(
    make_manager,
    silent_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """With no monitor signals, the online-mode timer finds the outage once."""
    manager = make_manager(
        network_monitor=silent_monitor,
        online_mode_polling_interval=0.5,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()
    _wait_for_first_probe(manager, wait_until)

    mock_checker.set_connected(False)
    assert transitions.count() == 0

    assert wait_until(lambda: transitions.count() >= 1, timeout=5.0)
    time.sleep(0.6)

    assert transitions.snapshot() == [False]
    assert manager.is_online is False


@pytest.mark.integration
def test_offline_interval_timer_detects_recovery(
    make_manager,
    silent_monitor,
    event_bus,
    transitions,
    wait_until,
):
    """Forced offline is synchronous; the offline-mode timer brings it back."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=0.5,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()

    event_bus.publish(NetworkEvent.OFFLINE)
    assert manager.is_online is False

    assert wait_until(lambda: transitions.count() >= 2, timeout=5.0)
    assert transitions.snapshot() == [False, True]
    assert manager.is_online is True


@pytest.mark.unit
def test_checker_exception_counts_as_offline(
    make_manager,
    silent_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """A probe that raises is just a failed probe."""

    def explode():
        raise RuntimeError("transport exploded")

    mock_checker.response_callback = explode
    manager = make_manager(network_monitor=silent_monitor)
    manager.connectivity_changed_callback = transitions
    manager.start()

    assert wait_until(lambda: transitions.count() == 1, timeout=2.0)
    assert transitions.snapshot() == [False]
    assert manager.is_running is True


@pytest.mark.unit
def test_failure_result_details_are_not_surfaced(
    make_manager,
    silent_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """Subscribers only ever see the boolean, whatever the failure kind."""
    mock_checker.response_callback = lambda: ConnectivityResult(
        success=False,
        error_message="HTTP 503",
        status_code=503,
    )
    manager = make_manager(network_monitor=silent_monitor)
    manager.connectivity_changed_callback = transitions
    manager.start()

    assert wait_until(lambda: transitions.count() == 1, timeout=2.0)
    assert transitions.snapshot() == [False]


@pytest.mark.unit
def test_polling_interval_follows_belief(
    make_manager,
    silent_monitor,
    mock_checker,
    wait_until,
):
    """The next tick uses the interval of the current belief."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=30,
        online_mode_polling_interval=300,
    )
    assert manager.current_polling_interval == 300

    mock_checker.set_connected(False)
    manager.start()

    assert wait_until(lambda: manager.is_online is False, timeout=2.0)
    assert manager.current_polling_interval == 30
    assert manager.get_status()["current_polling_interval"] == 30


@pytest.mark.unit
def test_monitor_signal_triggers_probe(
    make_manager,
    silent_monitor,
    mock_checker,
    wait_until,
):
    """Each monitor signal runs one probe immediately."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    manager.start()
    assert wait_until(lambda: mock_checker.get_check_count() == 1)

    silent_monitor.status_updated_callback()

    assert wait_until(lambda: mock_checker.get_check_count() == 2, timeout=2.0)


# =============================================================================
# FORCED SIGNAL TESTS
# =============================================================================


@pytest.mark.unit
def test_forced_signals_are_symmetric(
    make_manager,
    silent_monitor,
    event_bus,
    transitions,
):
    """Forced OFFLINE then ONLINE each fire exactly one callback."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()

    event_bus.publish(NetworkEvent.OFFLINE)
    assert manager.is_online is False
    assert transitions.snapshot() == [False]

    event_bus.publish(NetworkEvent.OFFLINE)
    assert transitions.snapshot() == [False]

    event_bus.publish(NetworkEvent.ONLINE)
    assert manager.is_online is True
    assert transitions.snapshot() == [False, True]


@pytest.mark.unit
def test_forced_signal_ignored_when_not_running(make_manager, event_bus, transitions):
    """Forced signals before start() or after stop() change nothing."""
    manager = make_manager()
    manager.connectivity_changed_callback = transitions

    event_bus.publish(NetworkEvent.OFFLINE)
    assert manager.is_online is True

    manager.start()
    manager.stop()
    event_bus.publish(NetworkEvent.OFFLINE)

    assert manager.is_online is True
    assert transitions.count() == 0


@pytest.mark.integration
def test_forced_signal_discards_in_flight_probe(
    make_manager,
    silent_monitor,
    event_bus,
    transitions,
):
    """A slow probe that started before the forced signal is not applied."""
    slow_checker = MockConnectivityChecker(is_connected=True, delay=0.3)
    manager = make_manager(
        network_monitor=silent_monitor,
        connectivity_checker=slow_checker,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()

    event_bus.publish(NetworkEvent.OFFLINE)
    time.sleep(0.6)

    assert manager.is_online is False
    assert transitions.snapshot() == [False]


# =============================================================================
# BROADCAST TESTS
# =============================================================================


@pytest.mark.unit
def test_transitions_are_broadcast(
    make_manager,
    silent_monitor,
    mock_checker,
    event_bus,
    wait_until,
):
    """Detected transitions are published once on the bus."""
    received = []
    event_bus.subscribe(
        NetworkEvent.OFFLINE,
        lambda event, data: received.append((event, data)),
    )

    mock_checker.set_connected(False)
    manager = make_manager(network_monitor=silent_monitor)
    manager.start()

    assert wait_until(lambda: len(received) == 1, timeout=2.0)
    time.sleep(0.2)

    assert len(received) == 1
    event, data = received[0]
    assert event == NetworkEvent.OFFLINE
    assert data["is_online"] is False
    assert data["source"] is manager


@pytest.mark.unit
def test_callback_error_does_not_break_manager(
    make_manager,
    silent_monitor,
    mock_checker,
    event_bus,
    wait_until,
):
    """A raising callback is logged; state and broadcast still happen."""
    received = []
    event_bus.subscribe(NetworkEvent.OFFLINE, lambda event, data: received.append(data))

    def bad_callback(is_online):
        raise ValueError("subscriber bug")

    mock_checker.set_connected(False)
    manager = make_manager(network_monitor=silent_monitor)
    manager.connectivity_changed_callback = bad_callback
    manager.start()

    assert wait_until(lambda: len(received) == 1, timeout=2.0)
    assert manager.is_online is False
    assert manager.is_running is True


# =============================================================================
# NO EFFECTS AFTER STOP
# =============================================================================


@pytest.mark.integration
def test_in_flight_probe_discarded_after_stop(
    make_manager,
    silent_monitor,
    transitions,
    wait_until,
):
    """A probe still running at stop() never reaches the belief."""
    slow_checker = MockConnectivityChecker(is_connected=False, delay=0.5)
    manager = make_manager(
        network_monitor=silent_monitor,
        connectivity_checker=slow_checker,
    )
    manager.connectivity_changed_callback = transitions

    manager.start()
    # The probe is underway (sleeping inside the checker) before we stop
    assert wait_until(lambda: slow_checker.get_check_count() == 1, timeout=2.0)
    manager.stop()
    time.sleep(1.0)

    assert slow_checker.get_check_count() == 1
    assert manager.is_online is True
    assert transitions.count() == 0
    assert manager.get_status()["last_checked_at"] is None


@pytest.mark.integration
def test_late_monitor_signal_after_stop_is_ignored(
    make_manager,
    silent_monitor,
    mock_checker,
    transitions,
    wait_until,
):
    """A monitor signal delivered after stop() runs no probe."""
    manager = make_manager(network_monitor=silent_monitor)
    manager.connectivity_changed_callback = transitions
    manager.start()
    _wait_for_first_probe(manager, wait_until)
    manager.stop()

    checks = mock_checker.get_check_count()
    mock_checker.set_connected(False)
    silent_monitor.status_updated_callback()
    time.sleep(0.5)

    assert mock_checker.get_check_count() == checks
    assert transitions.count() == 0
    assert manager.is_online is True


@pytest.mark.unit
def test_callback_may_stop_manager(
    make_manager,
    silent_monitor,
    mock_checker,
    wait_until,
):
    """Calling stop() from inside the transition callback does not deadlock."""
    mock_checker.set_connected(False)
    manager = make_manager(network_monitor=silent_monitor)
    manager.connectivity_changed_callback = lambda is_online: manager.stop()
    manager.start()

    assert wait_until(lambda: manager.is_running is False, timeout=2.0)
    assert manager.is_online is False


@pytest.mark.integration
def test_stop_from_callback_does_not_wait_on_monitor(
    make_manager,
    mock_checker,
    wait_until,
):
    """stop() inside a callback returns promptly while the monitor keeps signalling."""
    monitor = PollingNetworkMonitor(polling_interval=0.02)
    stop_durations = []

    def stop_on_change(is_online):
        # Let the monitor thread fire (and want the manager) meanwhile
        time.sleep(0.1)
        started = time.time()
        manager.stop()
        stop_durations.append(time.time() - started)

    mock_checker.set_connected(False)
    manager = make_manager(network_monitor=monitor)
    manager.connectivity_changed_callback = stop_on_change
    manager.start()

    assert wait_until(lambda: len(stop_durations) == 1, timeout=5.0)
    assert stop_durations[0] < 1.0
    assert monitor.is_started() is False
    assert manager.is_running is False


# =============================================================================
# DELIVERY ORDER
# =============================================================================


def _record_own_broadcasts(event_bus, manager):
    """Collect is_online of every broadcast the manager itself publishes."""
    seen = []

    def record(event, data):
        if isinstance(data, dict) and data.get("source") is manager:
            seen.append(data["is_online"])

    event_bus.subscribe(NetworkEvent.OFFLINE, record)
    event_bus.subscribe(NetworkEvent.ONLINE, record)
    return seen


@pytest.mark.unit
def test_transition_caused_by_callback_is_delivered_after(
    make_manager,
    silent_monitor,
    event_bus,
    wait_until,
):
    """A forced signal published from the callback is notified after the current one."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    callbacks = []

    def bounce_back_online(is_online):
        callbacks.append(is_online)
        if not is_online:
            event_bus.publish(NetworkEvent.ONLINE)

    manager.connectivity_changed_callback = bounce_back_online
    broadcasts = _record_own_broadcasts(event_bus, manager)
    manager.start()
    _wait_for_first_probe(manager, wait_until)

    event_bus.publish(NetworkEvent.OFFLINE)

    assert callbacks == [False, True]
    assert broadcasts == [False, True]
    assert manager.is_online is True


@pytest.mark.unit
def test_transition_caused_by_subscriber_is_delivered_after(
    make_manager,
    silent_monitor,
    event_bus,
    transitions,
    wait_until,
):
    """A bus subscriber reacting to a broadcast cannot reorder broadcasts."""
    manager = make_manager(
        network_monitor=silent_monitor,
        offline_mode_polling_interval=60,
        online_mode_polling_interval=60,
    )
    manager.connectivity_changed_callback = transitions

    def bounce_back_online(event, data):
        if isinstance(data, dict) and data.get("source") is manager:
            event_bus.publish(NetworkEvent.ONLINE)

    event_bus.subscribe(NetworkEvent.OFFLINE, bounce_back_online)
    broadcasts = _record_own_broadcasts(event_bus, manager)
    manager.start()
    _wait_for_first_probe(manager, wait_until)

    event_bus.publish(NetworkEvent.OFFLINE)

    assert transitions.snapshot() == [False, True]
    assert broadcasts == [False, True]
    assert broadcasts[-1] == manager.is_online


# =============================================================================
# DE-DUPLICATION UNDER CONCURRENCY
# =============================================================================


@pytest.mark.slow
@pytest.mark.integration
def test_no_consecutive_duplicate_callbacks(make_manager, mock_monitor, transitions):
    """Random outcomes and signal storms never repeat a callback value."""
    rng = random.Random(1234)
    checker = MockConnectivityChecker(
        response_callback=lambda: ConnectivityResult(success=rng.random() < 0.5),
    )
    manager = make_manager(
        connectivity_checker=checker,
        offline_mode_polling_interval=0.02,
        online_mode_polling_interval=0.02,
    )
    manager.connectivity_changed_callback = transitions
    manager.start()

    def storm():
        for _ in range(50):
            mock_monitor.force_status_update()
            time.sleep(0.005)

    threads = [threading.Thread(target=storm) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    time.sleep(0.2)
    manager.stop()
    values = transitions.snapshot()

    beliefs = [True] + values
    assert all(a != b for a, b in zip(beliefs, beliefs[1:]))
    if values:
        assert values[-1] == manager.is_online
    assert manager.get_status()["transition_count"] == len(values)
