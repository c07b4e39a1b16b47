"""Console context controller."""

from rspamdeck.controllers.console.controller import ConsoleController

__all__ = ["ConsoleController"]
