"""
Connectivity Configuration Handler

Manages the optional YAML configuration file for the connectivity service.
Defaults come from config/settings.py (and therefore from the environment);
the YAML file only needs the keys you want to override.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from config.settings import (
    CONNECTIVITY_CHECKER_MODE,
    CONNECTIVITY_CONFIG_FILE,
    CONNECTIVITY_STATUS_FILE,
    NETWORK_MONITOR_MODE,
    STATUS_WRITE_INTERVAL,
)
from connectivity.constants import (
    CONNECTIVITY_CHECK_TIMEOUT,
    CONNECTIVITY_CHECK_URL,
    DEFAULT_OFFLINE_MODE_POLLING_INTERVAL,
    DEFAULT_ONLINE_MODE_POLLING_INTERVAL,
    INTERFACE_POLL_INTERVAL,
    MONITOR_POLLING_INTERVAL,
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)
from connectivity.factory import CHECKER_MODES, MONITOR_MODES

# Keys holding durations in seconds - must be > 0
_POSITIVE_DURATION_KEYS = (
    "offline_mode_polling_interval",
    "online_mode_polling_interval",
    "check_timeout",
    "socket_timeout",
    "interface_poll_interval",
    "monitor_polling_interval",
    "status_write_interval",
)


class ConnectivityConfig:
    """
    Connectivity configuration with YAML file support.

    Reads from config/connectivity.yaml if it exists,
    otherwise uses defaults from config/settings.py.

    Usage:
        config = ConnectivityConfig()
        manager = ConnectivityManager.from_config(config)

    Example YAML:
        offline_mode_polling_interval: 15
        online_mode_polling_interval: 300
        checker_mode: socket
    """

    DEFAULT_CONFIG_PATH = Path(CONNECTIVITY_CONFIG_FILE)

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            overrides: Values applied on top of the file (e.g. CLI flags)

        Raises:
            ValueError: If a configured value is invalid
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self._overrides = dict(overrides or {})

        # Load configuration (defaults + file overrides + explicit overrides)
        self._config = self._load_config()

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            # Polling cadence
            "offline_mode_polling_interval": DEFAULT_OFFLINE_MODE_POLLING_INTERVAL,
            "online_mode_polling_interval": DEFAULT_ONLINE_MODE_POLLING_INTERVAL,

            # Implementations
            "monitor_mode": NETWORK_MONITOR_MODE,
            "checker_mode": CONNECTIVITY_CHECKER_MODE,

            # HTTP probe
            "check_url": CONNECTIVITY_CHECK_URL,
            "check_timeout": CONNECTIVITY_CHECK_TIMEOUT,

            # Socket probe
            "check_host": NETWORK_CHECK_HOST,
            "check_port": NETWORK_CHECK_PORT,
            "socket_timeout": NETWORK_CHECK_TIMEOUT,

            # Monitors
            "interface_poll_interval": INTERFACE_POLL_INTERVAL,
            "monitor_polling_interval": MONITOR_POLLING_INTERVAL,

            # Service
            "status_file": CONNECTIVITY_STATUS_FILE,
            "status_write_interval": STATUS_WRITE_INTERVAL,
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        # Start with defaults
        config = self._get_defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults.",
                )
                file_config = {}

            if not isinstance(file_config, dict):
                raise ValueError(
                    f"{self.config_path} must contain a mapping, "
                    f"got {type(file_config).__name__}",
                )

            unknown = sorted(set(file_config) - set(config))
            if unknown:
                self.logger.warning(f"Ignoring unknown config keys: {unknown}")

            # File overrides defaults
            config.update(
                {key: value for key, value in file_config.items() if key in config},
            )
            self.logger.info(f"Loaded config from {self.config_path}")
        else:
            self.logger.debug(
                f"Config file not found at {self.config_path}. Using defaults.",
            )

        # Explicit overrides win (None means "not given")
        config.update(
            {key: value for key, value in self._overrides.items() if value is not None},
        )

        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        for key in _POSITIVE_DURATION_KEYS:
            value = config[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{key} must be a number, got {value!r}")
            if value <= 0:
                raise ValueError(f"{key} must be positive, got {value}")

        if config["monitor_mode"] not in MONITOR_MODES:
            raise ValueError(
                f"monitor_mode must be one of {MONITOR_MODES}, "
                f"got {config['monitor_mode']!r}",
            )

        if config["checker_mode"] not in CHECKER_MODES:
            raise ValueError(
                f"checker_mode must be one of {CHECKER_MODES}, "
                f"got {config['checker_mode']!r}",
            )

        if not str(config["check_url"]).startswith(("http://", "https://")):
            raise ValueError(f"check_url must be http(s): {config['check_url']}")

        port = config["check_port"]
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ValueError(f"check_port must be 1-65535, got {port!r}")

        # Polling slower while offline than online is legal, just unusual
        if config["offline_mode_polling_interval"] > config["online_mode_polling_interval"]:
            self.logger.warning(
                "offline_mode_polling_interval is longer than "
                "online_mode_polling_interval. Recovery will be detected slowly.",
            )

    def save(self) -> None:
        """Save current configuration to the YAML file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            yaml.dump(
                self._config,
                f,
                default_flow_style=False,
                sort_keys=False,
                indent=2,
            )

        self.logger.info(f"Config saved to {self.config_path}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================

    @property
    def offline_mode_polling_interval(self) -> float:
        """Delay between probes while offline"""
        return float(self._config["offline_mode_polling_interval"])

    @property
    def online_mode_polling_interval(self) -> float:
        """Delay between probes while online"""
        return float(self._config["online_mode_polling_interval"])

    @property
    def monitor_mode(self) -> str:
        return self._config["monitor_mode"]

    @property
    def checker_mode(self) -> str:
        return self._config["checker_mode"]

    @property
    def check_url(self) -> str:
        return self._config["check_url"]

    @property
    def check_timeout(self) -> float:
        return float(self._config["check_timeout"])

    @property
    def check_host(self) -> str:
        return self._config["check_host"]

    @property
    def check_port(self) -> int:
        return self._config["check_port"]

    @property
    def socket_timeout(self) -> float:
        return float(self._config["socket_timeout"])

    @property
    def interface_poll_interval(self) -> float:
        return float(self._config["interface_poll_interval"])

    @property
    def monitor_polling_interval(self) -> float:
        return float(self._config["monitor_polling_interval"])

    @property
    def status_file(self) -> Path:
        """Where the service writes its JSON status"""
        return Path(self._config["status_file"])

    @property
    def status_write_interval(self) -> float:
        return float(self._config["status_write_interval"])

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary"""
        return self._config.copy()

    def __repr__(self) -> str:
        return f"ConnectivityConfig(path={self.config_path})"
