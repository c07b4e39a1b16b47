"""Regex patterns for input validation."""

import re

# Printable ASCII only (0x20-0x7e), empty allowed. Use with fullmatch().
PASSWORD_PATTERN = re.compile(r"[\x20-\x7e]*")

__all__ = [
    "PASSWORD_PATTERN",
]
