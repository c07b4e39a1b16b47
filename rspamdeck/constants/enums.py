"""All enum definitions for the console.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum, auto

# =============================================================================
# Alert Enums
# =============================================================================

class Severity(Enum):
    """Severity levels for user-facing alerts."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AlertPhase(Enum):
    """Lifecycle of a single alert."""

    SHOWN = auto()
    FADING = auto()
    REMOVED = auto()


# =============================================================================
# Session Enums
# =============================================================================

class SessionState(Enum):
    """Credential lifecycle states."""

    LOGGED_OUT = "logged_out"
    AUTHENTICATING = "authenticating"
    LOGGED_IN = "logged_in"


# =============================================================================
# Navigation Enums
# =============================================================================

class ViewId(str, Enum):
    """Navigation targets. REFRESH and DISCONNECT are pseudo-views."""

    STATUS = "status"
    THROUGHPUT = "throughput"
    CONFIGURATION = "configuration"
    SYMBOLS = "symbols"
    HISTORY = "history"
    REFRESH = "refresh"
    DISCONNECT = "disconnect"


class NavPhase(Enum):
    """Navigation state machine phases."""

    IDLE = "idle"
    DISPATCHING = "dispatching"


class ThroughputRange(str, Enum):
    """Time ranges offered by the throughput view."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


__all__ = [
    "AlertPhase",
    "NavPhase",
    "SessionState",
    "Severity",
    "ThroughputRange",
    "ViewId",
]
