"""Default values for settings.

All default values used in AppSettings model and polling policies.
"""

from typing import Final

# ============================================================================
# Connection defaults
# ============================================================================

BASE_URL_DEFAULT: Final = "http://localhost:11334/"

# ============================================================================
# Polling defaults (seconds)
# ============================================================================

STATUS_REFRESH_INTERVAL_DEFAULT: Final = 10.0
THROUGHPUT_RANGE_DEFAULT: Final = "hourly"

THROUGHPUT_REFRESH_INTERVALS: Final = {
    "hourly": 60.0,
    "daily": 300.0,
}
THROUGHPUT_REFRESH_FALLBACK: Final = 3600.0

# ============================================================================
# Logging defaults
# ============================================================================

LOG_LEVEL_DEFAULT: Final = "INFO"

__all__ = [
    "BASE_URL_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "STATUS_REFRESH_INTERVAL_DEFAULT",
    "THROUGHPUT_RANGE_DEFAULT",
    "THROUGHPUT_REFRESH_FALLBACK",
    "THROUGHPUT_REFRESH_INTERVALS",
]
