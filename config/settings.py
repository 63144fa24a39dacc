"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (API keys, credentials) should be in .env, NOT here
- Import these settings in modules: from config.settings import CONNECTIVITY_CHECK_URL
- Every value can be overridden from the environment (or .env file)
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# POLLING CONFIGURATION
# =============================================================================

# Delay between probes while the network is believed to be DOWN (seconds)
# Short, so we notice quickly when connectivity comes back
DEFAULT_OFFLINE_MODE_POLLING_INTERVAL = float(
    os.getenv("CONNECTIVITY_OFFLINE_POLLING_INTERVAL", "60"),
)

# Delay between probes while the network is believed to be UP (seconds)
# Long, the interface monitor catches most drops before the next probe
DEFAULT_ONLINE_MODE_POLLING_INTERVAL = float(
    os.getenv("CONNECTIVITY_ONLINE_POLLING_INTERVAL", "600"),
)

# =============================================================================
# PROBE CONFIGURATION
# =============================================================================

# HTTP probe - any 2xx response counts as "online"
CONNECTIVITY_CHECK_URL = os.getenv(
    "CONNECTIVITY_CHECK_URL",
    "https://connectivitycheck.gstatic.com/generate_204",
)
CONNECTIVITY_CHECK_TIMEOUT = float(os.getenv("CONNECTIVITY_CHECK_TIMEOUT", "5"))

# Socket probe - plain TCP connect, works even if HTTP is filtered
NETWORK_CHECK_TIMEOUT = float(os.getenv("NETWORK_CHECK_TIMEOUT", "3"))
NETWORK_CHECK_HOST = os.getenv("NETWORK_CHECK_HOST", "8.8.8.8")  # Google DNS
NETWORK_CHECK_PORT = int(os.getenv("NETWORK_CHECK_PORT", "53"))  # DNS port

# =============================================================================
# NETWORK MONITOR CONFIGURATION
# =============================================================================

# How often the interface monitor samples the host's interfaces (seconds)
INTERFACE_POLL_INTERVAL = float(os.getenv("INTERFACE_POLL_INTERVAL", "2"))

# Fixed cadence of the polling monitor (seconds)
MONITOR_POLLING_INTERVAL = float(os.getenv("MONITOR_POLLING_INTERVAL", "30"))

# Implementation selection: auto, interface, polling, mock
NETWORK_MONITOR_MODE = os.getenv("NETWORK_MONITOR_MODE", "auto")

# Implementation selection: auto, http, socket, mock
CONNECTIVITY_CHECKER_MODE = os.getenv("CONNECTIVITY_CHECKER_MODE", "auto")

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

# YAML overrides for the service (optional file)
CONNECTIVITY_CONFIG_FILE = os.getenv(
    "CONNECTIVITY_CONFIG_FILE",
    "config/connectivity.yaml",
)

# Status file for external monitoring (atomic JSON writes)
# Read by scripts/check_connectivity.py --status
CONNECTIVITY_STATUS_FILE = os.getenv(
    "CONNECTIVITY_STATUS_FILE",
    "/tmp/connectivity_status.json",  # noqa: S108
)
STATUS_WRITE_INTERVAL = float(os.getenv("STATUS_WRITE_INTERVAL", "10"))

# Logging
LOG_FILE = os.getenv("CONNECTIVITY_LOG_FILE", "/var/log/connectivity/service.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
