"""Timeout constants for the console.

All timeout and delay values for HTTP requests, navigation and alerts.
"""

from typing import Final

# ============================================================================
# HTTP timeouts (float, in seconds)
# ============================================================================

REQUEST_TIMEOUT: Final = 20.0

# ============================================================================
# Navigation delays (float, in seconds)
# ============================================================================

# Controls are re-enabled after this delay whether or not the fetch finished
NAV_SETTLE_DELAY: Final = 1.0

# Loading indicator stays up this long after the last request completes
ACTIVITY_CLEAR_DELAY: Final = 1.0

# ============================================================================
# Alert delays (float, in seconds)
# ============================================================================

ALERT_DISMISS_DELAY: Final = 5.0
ALERT_FADE_DURATION: Final = 1.0  # 0.5s fade + 0.5s slide

__all__ = [
    "ACTIVITY_CLEAR_DELAY",
    "ALERT_DISMISS_DELAY",
    "ALERT_FADE_DURATION",
    "NAV_SETTLE_DELAY",
    "REQUEST_TIMEOUT",
]
