"""Scalar constants for the console.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "rspamdeck"

# ============================================================================
# Protocol
# ============================================================================

PASSWORD_HEADER: Final = "Password"

PATH_STAT: Final = "stat"
PATH_AUTH: Final = "auth"
PATH_NEIGHBOURS: Final = "neighbours"

AUTH_FAILED_MARKER: Final = "failed"

# ============================================================================
# Cluster scope
# ============================================================================

ALL_SERVERS: Final = "All SERVERS"
LOCAL_NODE_NAME: Final = "local"

# ============================================================================
# Alert texts
# ============================================================================

MSG_REQUEST_COMPLETED: Final = "Request completed"
MSG_REQUEST_FAILED: Final = "Request failed"
MSG_NEIGHBOURS_FAILED: Final = "Cannot receive neighbours data"
MSG_INVALID_PASSWORD: Final = "Invalid characters in the password"
MSG_AUTH_FAILED: Final = "Authentication failed"

__all__ = [
    "ALL_SERVERS",
    "APP_TITLE",
    "AUTH_FAILED_MARKER",
    "LOCAL_NODE_NAME",
    "MSG_AUTH_FAILED",
    "MSG_INVALID_PASSWORD",
    "MSG_NEIGHBOURS_FAILED",
    "MSG_REQUEST_COMPLETED",
    "MSG_REQUEST_FAILED",
    "PASSWORD_HEADER",
    "PATH_AUTH",
    "PATH_NEIGHBOURS",
    "PATH_STAT",
]
