"""
Connectivity Service

Long-running process that keeps an eye on network connectivity.

Architecture:
- ConnectivityManager does all the detection work (monitor + probes)
- This service wires it to logging, a JSON status file and signals
- Other processes read the status file; in-process components can share
  the event bus

Status file (atomic JSON, rewritten on every transition and periodically):
    {
        "timestamp": "2025-10-12T18:30:45.123456",
        "state": "online",
        "is_online": true,
        "last_changed_at": ...,
        "transition_count": 3,
        "pid": 1234,
        ...
    }

Usage:
    python connectivity_service.py
    python connectivity_service.py --config config/connectivity.yaml --debug
    python connectivity_service.py --checker socket --monitor polling
"""

import argparse
import json
import logging
import logging.handlers
import os
import signal
import sys
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Hashable, Optional

from config.settings import LOG_FILE, LOG_LEVEL
from connectivity import ConnectivityConfig, ConnectivityManager, NetworkEvent
from connectivity.factory import CHECKER_MODES, MONITOR_MODES
from core.event_bus import EventBus


class ConnectivityService:
    """
    Service wrapper around ConnectivityManager.

    Usage:
        service = ConnectivityService(ConnectivityConfig())
        service.run()  # Blocks until SIGINT/SIGTERM
    """

    def __init__(
        self,
        config: ConnectivityConfig,
        manager: Optional[ConnectivityManager] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Loaded configuration
            manager: Pre-built manager (tests), or None to build from config
            event_bus: Shared bus, or None for a new one
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Connectivity Service...")

        self.config = config
        self.event_bus = event_bus or EventBus()
        self.manager = manager or ConnectivityManager.from_config(
            config,
            event_bus=self.event_bus,
        )

        self.status_file = config.status_file
        self.start_time = time.time()
        self._stop_event = threading.Event()

        # Transition broadcasts come through the bus
        self.event_bus.subscribe(NetworkEvent.OFFLINE, self._on_connectivity_event)
        self.event_bus.subscribe(NetworkEvent.ONLINE, self._on_connectivity_event)

        self.logger.info("Connectivity Service initialized successfully")

    def run(self) -> None:
        """
        Main service loop.

        Starts the manager and rewrites the status file every
        status_write_interval seconds until stop() or a signal.
        """
        self.logger.info("Starting Connectivity Service...")
        self.manager.start()
        self._write_status()

        try:
            while not self._stop_event.wait(self.config.status_write_interval):
                self._write_status()
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Ask run() to return (thread-safe)."""
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        """Register SIGINT/SIGTERM for graceful shutdown (main thread only)."""
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.stop()

    def _on_connectivity_event(self, event_type: Hashable, data=None) -> None:
        """Bus subscriber: log transitions and refresh the status file."""
        # Only transitions detected by our manager, not forced signals
        if not isinstance(data, dict) or data.get("source") is not self.manager:
            return

        if event_type == NetworkEvent.OFFLINE:
            self.logger.warning("Network connection lost")
        else:
            self.logger.info("Network connection restored")

        self._write_status()

    def _write_status(self) -> None:
        """
        Write current status for external monitoring.

        Atomic write (temp file + rename) so readers never see partial JSON.
        """
        try:
            status = self.manager.get_status()
            status.update(
                {
                    "timestamp": datetime.now().isoformat(),
                    "uptime_seconds": time.time() - self.start_time,
                    "pid": os.getpid(),
                },
            )

            self.status_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_file = self.status_file.with_suffix(".tmp")
            tmp_file.write_text(json.dumps(status, indent=2))
            tmp_file.replace(self.status_file)

        except Exception as e:
            # Status file is for monitoring, not critical functionality
            self.logger.warning(f"Failed to write status file: {e}")

    def _shutdown(self) -> None:
        """Graceful shutdown."""
        self.logger.info("Shutting down Connectivity Service...")

        self.manager.stop()
        self.event_bus.unsubscribe(NetworkEvent.OFFLINE, self._on_connectivity_event)
        self.event_bus.unsubscribe(NetworkEvent.ONLINE, self._on_connectivity_event)
        self._write_status()

        self.logger.info("Connectivity Service shutdown complete")


def setup_logging(level: str = LOG_LEVEL, log_file: str = LOG_FILE) -> None:
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    log_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    # File handler with rotation, rotates daily, keeps 7 days
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if /var/log not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "connectivity-service.log"
        logger.warning(
            f"Cannot write to {log_file}, using fallback: {fallback_log}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )

    file_handler.setLevel(level)
    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Monitor network connectivity and report transitions",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: config/connectivity.yaml)",
    )
    parser.add_argument(
        "--monitor",
        choices=MONITOR_MODES,
        default=None,
        help="Network monitor implementation",
    )
    parser.add_argument(
        "--checker",
        choices=CHECKER_MODES,
        default=None,
        help="Connectivity probe implementation",
    )
    parser.add_argument(
        "--status-file",
        default=None,
        help="Where to write the JSON status",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    args = parse_args(argv)

    setup_logging(level="DEBUG" if args.debug else LOG_LEVEL)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Connectivity Service Starting")
    logger.info("=" * 60)

    try:
        config = ConnectivityConfig(
            config_path=args.config,
            overrides={
                "monitor_mode": args.monitor,
                "checker_mode": args.checker,
                "status_file": args.status_file,
            },
        )
        service = ConnectivityService(config)
        service.install_signal_handlers()
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
