"""Constants module for rspamdeck.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings with Final)
- timeouts.py: Timeout and delay values (seconds)
- defaults.py: Default values for settings and polling
- patterns.py: Validation regexes
"""

from rspamdeck.constants.defaults import (
    BASE_URL_DEFAULT,
    STATUS_REFRESH_INTERVAL_DEFAULT,
    THROUGHPUT_REFRESH_FALLBACK,
    THROUGHPUT_REFRESH_INTERVALS,
)
from rspamdeck.constants.enums import (
    AlertPhase,
    NavPhase,
    SessionState,
    Severity,
    ThroughputRange,
    ViewId,
)
from rspamdeck.constants.timeouts import (
    ALERT_DISMISS_DELAY,
    ALERT_FADE_DURATION,
    NAV_SETTLE_DELAY,
    REQUEST_TIMEOUT,
)
from rspamdeck.constants.values import (
    ALL_SERVERS,
    APP_TITLE,
    LOCAL_NODE_NAME,
    PASSWORD_HEADER,
)

__all__ = [
    "ALERT_DISMISS_DELAY",
    "ALERT_FADE_DURATION",
    "ALL_SERVERS",
    # Application
    "APP_TITLE",
    # Defaults
    "BASE_URL_DEFAULT",
    "LOCAL_NODE_NAME",
    # Timeouts
    "NAV_SETTLE_DELAY",
    "PASSWORD_HEADER",
    "REQUEST_TIMEOUT",
    "STATUS_REFRESH_INTERVAL_DEFAULT",
    "THROUGHPUT_REFRESH_FALLBACK",
    "THROUGHPUT_REFRESH_INTERVALS",
    # Enums
    "AlertPhase",
    "NavPhase",
    "SessionState",
    "Severity",
    "ThroughputRange",
    "ViewId",
]
