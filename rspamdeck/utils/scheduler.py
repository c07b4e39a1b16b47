"""Timer scheduling collaborators.

The navigation state machine and the alert sink only register and cancel
timers; running them is delegated to a ``Scheduler``. ``AsyncioScheduler``
runs on the current event loop. The Textual app supplies its own scheduler
that pauses polling while the terminal is not focused.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Handle returned by a scheduler for a registered timer."""

    def stop(self) -> None: ...


class Scheduler(Protocol):
    """Scheduling operations the console core depends on."""

    def every(self, interval: float, callback: Callable[[], Any]) -> TimerHandle: ...

    def after(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...

    def spawn(self, awaitable: Awaitable[Any], *, name: str | None = None) -> Any: ...


class _AsyncioTimer:
    """One-shot or repeating timer on an asyncio loop."""

    def __init__(
        self,
        scheduler: AsyncioScheduler,
        delay: float,
        callback: Callable[[], Any],
        *,
        repeat: bool,
    ) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._repeat = repeat
        self._stopped = False
        self._handle: asyncio.TimerHandle | None = None
        self._arm()

    @property
    def active(self) -> bool:
        return not self._stopped

    def _arm(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def _fire(self) -> None:
        if self._stopped:
            return
        if self._repeat:
            self._arm()
        else:
            self._stopped = True
        self._scheduler.invoke(self._callback)

    def stop(self) -> None:
        self._stopped = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def every(self, interval: float, callback: Callable[[], Any]) -> _AsyncioTimer:
        return _AsyncioTimer(self, interval, callback, repeat=True)

    def after(self, delay: float, callback: Callable[[], Any]) -> _AsyncioTimer:
        return _AsyncioTimer(self, delay, callback, repeat=False)

    def spawn(self, awaitable: Awaitable[Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Run an awaitable as a fire-and-forget task, logging its failure."""
        task = asyncio.ensure_future(awaitable)
        if name:
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def invoke(self, callback: Callable[[], Any]) -> None:
        """Call a timer callback, spawning it when it returns an awaitable."""
        try:
            result = callback()
        except Exception:
            logger.exception("Timer callback failed")
            return
        if inspect.isawaitable(result):
            self.spawn(result)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Task %s failed: %s", task.get_name(), error, exc_info=error)

    async def drain(self) -> None:
        """Wait for every spawned task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "TimerHandle",
]
