"""Keyboard bindings module.

- app: App-level bindings (APP_BINDINGS) and console bindings
"""

from rspamdeck.keyboard.app import APP_BINDINGS, CONSOLE_SCREEN_BINDINGS

__all__ = [
    "APP_BINDINGS",
    "CONSOLE_SCREEN_BINDINGS",
]
