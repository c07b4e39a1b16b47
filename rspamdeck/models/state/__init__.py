"""State models."""

from rspamdeck.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)
from rspamdeck.models.state.config_manager import ConfigManager
from rspamdeck.models.state.session import Session, SessionStore
from rspamdeck.models.state.view_state import ViewState

__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
    "Session",
    "SessionStore",
    "ViewState",
]
