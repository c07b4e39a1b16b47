"""Scheduler backed by a Textual app.

Repeating timers are paused while the terminal is unfocused and resumed when
focus returns, so polling stops for consoles nobody is looking at.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from textual.app import App
from textual.timer import Timer

logger = logging.getLogger(__name__)


class TextualTimerHandle:
    """Handle around a Textual ``Timer`` that unregisters itself on stop."""

    def __init__(self, scheduler: TextualScheduler, timer: Timer) -> None:
        self._scheduler = scheduler
        self.timer = timer

    def stop(self) -> None:
        self.timer.stop()
        self._scheduler._intervals.discard(self)

    def pause(self) -> None:
        self.timer.pause()

    def resume(self) -> None:
        self.timer.resume()


class TextualScheduler:
    """Scheduler running timers and tasks on a Textual app."""

    def __init__(self, app: App[Any]) -> None:
        self._app = app
        self._intervals: set[TextualTimerHandle] = set()
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    def every(self, interval: float, callback: Callable[[], Any]) -> TextualTimerHandle:
        handle = TextualTimerHandle(self, self._app.set_interval(interval, callback))
        self._intervals.add(handle)
        if self._paused:
            handle.pause()
        return handle

    def after(self, delay: float, callback: Callable[[], Any]) -> TextualTimerHandle:
        return TextualTimerHandle(self, self._app.set_timer(delay, callback))

    def spawn(self, awaitable: Awaitable[Any], *, name: str | None = None) -> Any:
        return self._app.run_worker(awaitable, name=name or "", exit_on_error=False)

    def pause(self) -> None:
        """Pause every repeating timer (terminal lost focus)."""
        if self._paused:
            return
        self._paused = True
        for handle in list(self._intervals):
            handle.pause()
        logger.debug("Paused %d polling timer(s)", len(self._intervals))

    def resume(self) -> None:
        """Resume repeating timers (terminal regained focus)."""
        if not self._paused:
            return
        self._paused = False
        for handle in list(self._intervals):
            handle.resume()
        logger.debug("Resumed %d polling timer(s)", len(self._intervals))


__all__ = [
    "TextualScheduler",
    "TextualTimerHandle",
]
