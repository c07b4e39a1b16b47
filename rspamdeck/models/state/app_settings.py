"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rspamdeck.constants.defaults import (
    BASE_URL_DEFAULT,
    LOG_LEVEL_DEFAULT,
    STATUS_REFRESH_INTERVAL_DEFAULT,
    THROUGHPUT_RANGE_DEFAULT,
)
from rspamdeck.constants.timeouts import (
    ALERT_DISMISS_DELAY,
    ALERT_FADE_DURATION,
    NAV_SETTLE_DELAY,
    REQUEST_TIMEOUT,
)


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Connection
    base_url: str = BASE_URL_DEFAULT
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)

    # Navigation
    settle_delay: float = Field(default=NAV_SETTLE_DELAY, ge=0)
    status_refresh_interval: float = Field(default=STATUS_REFRESH_INTERVAL_DEFAULT, gt=0)
    throughput_range: str = THROUGHPUT_RANGE_DEFAULT

    # Alerts
    alert_dismiss_delay: float = Field(default=ALERT_DISMISS_DELAY, ge=0)
    alert_fade_duration: float = Field(default=ALERT_FADE_DURATION, ge=0)

    # Logging
    log_level: str = LOG_LEVEL_DEFAULT
    log_file: str = ""

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        # Node paths are appended verbatim to the origin
        value = value.strip()
        if value and not value.endswith("/"):
            value += "/"
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or LOG_LEVEL_DEFAULT


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
