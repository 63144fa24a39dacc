#!/usr/bin/env python3
"""
Connectivity Check Script

Run one connectivity probe from the command line, or show what the
running service last reported.

Usage:
    python scripts/check_connectivity.py                 # HTTP probe
    python scripts/check_connectivity.py --checker socket
    python scripts/check_connectivity.py --url https://example.com/health
    python scripts/check_connectivity.py --status        # Read service status file
    python scripts/check_connectivity.py --quick         # Plain TCP check, default host

Exit code:
    0 = online, 1 = offline (or status file missing)
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import CONNECTIVITY_STATUS_FILE
from connectivity.factory import CHECKER_MODES, ConnectivityFactory
from core.network import get_network_status


def run_probe(mode: str, url: str = None, host: str = None, port: int = None) -> bool:
    """
    Run a single probe and print the outcome.

    Returns:
        True if online
    """
    options = {}
    if url:
        options["url"] = url
    if host:
        options["host"] = host
    if port:
        options["port"] = port

    checker = ConnectivityFactory.create_checker(mode=mode, **options)
    print(f"Probing: {checker.describe()}")

    result = checker.check_connectivity()

    if result.success:
        print(f"✅ Online ({result.duration * 1000:.0f} ms)")
    else:
        print(f"❌ Offline: {result.error_message}")

    return result.success


def quick_check() -> bool:
    """
    TCP check against NETWORK_CHECK_HOST, no checker setup.

    Returns:
        True if online
    """
    is_connected, status = get_network_status()

    if is_connected:
        print(f"✅ {status}")
    else:
        print(f"❌ {status}")

    return is_connected


def show_status(status_file: Path) -> bool:
    """
    Print the service status file.

    Returns:
        True if the service believes it is online
    """
    if not status_file.exists():
        print(f"❌ No status file at {status_file} (is the service running?)")
        return False

    try:
        status = json.loads(status_file.read_text())
    except (OSError, ValueError) as e:
        print(f"❌ Cannot read {status_file}: {e}")
        return False

    print(f"State:        {status.get('state')}")
    print(f"Running:      {status.get('is_running')}")
    print(f"Transitions:  {status.get('transition_count')}")
    print(f"Next check:   every {status.get('current_polling_interval')}s")
    print(f"Updated:      {status.get('timestamp')}")

    return bool(status.get("is_online"))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Check network connectivity once",
    )
    parser.add_argument(
        "--checker",
        choices=CHECKER_MODES,
        default="auto",
        help="Probe implementation (default: auto = HTTP)",
    )
    parser.add_argument("--url", help="HTTP probe endpoint")
    parser.add_argument("--host", help="TCP probe host")
    parser.add_argument("--port", type=int, help="TCP probe port")
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show the running service's status instead of probing",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Plain TCP check against the default host",
    )
    parser.add_argument(
        "--status-file",
        type=Path,
        default=Path(CONNECTIVITY_STATUS_FILE),
        help="Service status file",
    )

    args = parser.parse_args()

    if args.status:
        online = show_status(args.status_file)
    elif args.quick:
        online = quick_check()
    else:
        online = run_probe(args.checker, url=args.url, host=args.host, port=args.port)

    sys.exit(0 if online else 1)


if __name__ == "__main__":
    main()
