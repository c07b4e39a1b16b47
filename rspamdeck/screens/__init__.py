"""Screens for the rspamdeck TUI."""

from rspamdeck.screens.connect_screen import ConnectScreen
from rspamdeck.screens.console_screen import ConsoleScreen
from rspamdeck.screens.presenter import ConsolePresenter

__all__ = [
    "ConnectScreen",
    "ConsolePresenter",
    "ConsoleScreen",
]
