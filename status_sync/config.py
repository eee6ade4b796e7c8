"""Configuration for status sync."""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional(name: str):
    value = os.getenv(name, "").strip()
    return value or None


class Config:
    """Configuration class for status sync."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        # Browser tab polling: timer cadence, coalescing window, and the
        # minimum gap between two completed checks
        self.poll_interval = float(os.getenv("STATUS_SYNC_POLL_INTERVAL", "1.0"))
        self.poll_tolerance = float(os.getenv("STATUS_SYNC_POLL_TOLERANCE", "0.2"))
        self.min_check_interval = float(os.getenv("STATUS_SYNC_MIN_CHECK_INTERVAL", "1.0"))

        # Frontmost application polling (stands in for the workspace notification)
        self.app_interval = float(os.getenv("STATUS_SYNC_APP_INTERVAL", "0.5"))

        # Quiet period before a status change is sent
        self.debounce_delay = float(os.getenv("STATUS_SYNC_DEBOUNCE_DELAY", "3.0"))

        # Timeouts in seconds
        self.request_timeout = float(os.getenv("STATUS_SYNC_REQUEST_TIMEOUT", "10"))
        self.script_timeout = float(os.getenv("STATUS_SYNC_SCRIPT_TIMEOUT", "5"))

        # Display width of the tab title in the status menu
        self.title_limit = int(os.getenv("STATUS_SYNC_TITLE_LIMIT", "50"))

        # Seed values for the config store; the stored file wins once it exists
        self.endpoint = _optional("STATUS_SYNC_ENDPOINT")
        self.auth_key = _optional("STATUS_SYNC_AUTH_KEY")
        self.config_path = os.getenv("STATUS_SYNC_CONFIG_PATH", os.path.expanduser("~/.status_sync.json"))
        self.sync_enabled = os.getenv("STATUS_SYNC_ENABLED", "true").lower() == "true"

        # Local API (for external UI clients)
        self.api_port = int(os.getenv("STATUS_SYNC_API_PORT", "8771"))

        # Validate configuration
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        positive = {
            "poll interval": self.poll_interval,
            "minimum check interval": self.min_check_interval,
            "app interval": self.app_interval,
            "debounce delay": self.debounce_delay,
            "request timeout": self.request_timeout,
            "script timeout": self.script_timeout,
            "title limit": self.title_limit,
        }
        for label, value in positive.items():
            if value <= 0:
                raise ValueError(f"{label.capitalize()} must be positive, got {value}")

        if self.poll_tolerance < 0:
            raise ValueError(f"Poll tolerance must not be negative, got {self.poll_tolerance}")

        if not 0 < self.api_port < 65536:
            raise ValueError(f"Invalid API port {self.api_port}")


# Create a global config instance
_config = Config()

# Expose configuration values as module-level variables
POLL_INTERVAL = _config.poll_interval
POLL_TOLERANCE = _config.poll_tolerance
MIN_CHECK_INTERVAL = _config.min_check_interval
APP_INTERVAL = _config.app_interval
DEBOUNCE_DELAY = _config.debounce_delay
REQUEST_TIMEOUT = _config.request_timeout
SCRIPT_TIMEOUT = _config.script_timeout
TITLE_LIMIT = _config.title_limit
ENDPOINT = _config.endpoint
AUTH_KEY = _config.auth_key
CONFIG_PATH = _config.config_path
SYNC_ENABLED = _config.sync_enabled
API_PORT = _config.api_port

__all__ = [
    "Config",
    "POLL_INTERVAL",
    "POLL_TOLERANCE",
    "MIN_CHECK_INTERVAL",
    "APP_INTERVAL",
    "DEBOUNCE_DELAY",
    "REQUEST_TIMEOUT",
    "SCRIPT_TIMEOUT",
    "TITLE_LIMIT",
    "ENDPOINT",
    "AUTH_KEY",
    "CONFIG_PATH",
    "SYNC_ENABLED",
    "API_PORT",
]
