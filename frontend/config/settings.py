"""
PharmaDesk Frontend Configuration.

Frozen dataclass for immutable configuration with environment overrides.
All magic numbers and configuration values should be defined here.

Environment variables can override defaults (read at module import time):
- API_BASE_URL: Backend API URL
- API_TIMEOUT_SECONDS: Override API timeout
- APP_VERSION: Override version string
- NOTIFICATION_DURATION_MS: How long toast notifications stay visible
"""

import os
from dataclasses import dataclass, field


def _get_int_env(name: str, default: int) -> int:
    """Get integer environment variable or return default."""
    val = os.getenv(name)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            pass
    return default


def _get_str_env(name: str, default: str) -> str:
    """Get string environment variable or return default."""
    return os.getenv(name, default)


@dataclass(frozen=True)
class PharmaDeskConfig:
    """Immutable PharmaDesk configuration.

    frozen=True ensures config values cannot be accidentally modified.
    Environment variables are read at module import time.
    """

    # Application
    APP_NAME: str = "PharmaDesk"
    APP_ICON: str = "💊"
    APP_VERSION: str = field(
        default_factory=lambda: _get_str_env('APP_VERSION', "1.0.0")
    )

    # Backend API
    API_BASE_URL: str = field(
        default_factory=lambda: _get_str_env('API_BASE_URL', 'http://localhost:8000')
    )
    API_TIMEOUT_SECONDS: int = field(
        default_factory=lambda: _get_int_env('API_TIMEOUT_SECONDS', 30)
    )
    VARIANT_ENDPOINT: str = "/api/v1/pharma/variant"

    # Name rules shared by variants and units
    NAME_MIN_LENGTH: int = 2
    NAME_MAX_LENGTH: int = 50

    # Notifications
    NOTIFICATION_DURATION_MS: int = field(
        default_factory=lambda: _get_int_env('NOTIFICATION_DURATION_MS', 3000)
    )

    # UI settings
    RESULTS_PER_PAGE: int = 10

    @property
    def NOTIFICATION_DURATION_SECONDS(self) -> float:
        """Get notification duration in seconds."""
        return self.NOTIFICATION_DURATION_MS / 1000.0


# Global immutable config instance
config = PharmaDeskConfig()
