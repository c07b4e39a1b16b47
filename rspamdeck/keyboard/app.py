"""App-level keyboard bindings.

This module contains Textual Binding objects for app-level bindings
that work from any screen.
"""

from textual.binding import Binding

# ============================================================================
# Textual Binding objects for app-level bindings
# ============================================================================

APP_BINDINGS: list[Binding] = [
    Binding("q", "quit", "Quit", priority=True),
]

# ============================================================================
# Console screen bindings
# ============================================================================

CONSOLE_SCREEN_BINDINGS: list[Binding] = [
    Binding("1", "show_view('status')", "Status"),
    Binding("2", "show_view('throughput')", "Throughput"),
    Binding("3", "show_view('configuration')", "Configuration"),
    Binding("4", "show_view('symbols')", "Symbols"),
    Binding("5", "show_view('history')", "History"),
    Binding("r", "refresh", "Refresh"),
    Binding("d", "disconnect", "Disconnect"),
]

__all__ = [
    "APP_BINDINGS",
    "CONSOLE_SCREEN_BINDINGS",
]
