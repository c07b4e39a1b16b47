"""Shared fixtures for rspamdeck tests."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest


class ManualTimer:
    """Timer registered on a ManualScheduler."""

    def __init__(
        self,
        scheduler: ManualScheduler,
        delay: float,
        callback: Callable[[], Any],
        *,
        repeat: bool,
    ) -> None:
        self.delay = delay
        self.callback = callback
        self.repeat = repeat
        self.due = scheduler.now + delay
        self.active = True

    def stop(self) -> None:
        self.active = False


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls ``advance()``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[ManualTimer] = []
        self.tasks: list[asyncio.Future[Any]] = []
        self.spawned: list[str | None] = []

    @property
    def repeating(self) -> list[ManualTimer]:
        """Active repeating timers."""
        return [timer for timer in self.timers if timer.active and timer.repeat]

    def every(self, interval: float, callback: Callable[[], Any]) -> ManualTimer:
        timer = ManualTimer(self, interval, callback, repeat=True)
        self.timers.append(timer)
        return timer

    def after(self, delay: float, callback: Callable[[], Any]) -> ManualTimer:
        timer = ManualTimer(self, delay, callback, repeat=False)
        self.timers.append(timer)
        return timer

    def spawn(self, awaitable: Awaitable[Any], *, name: str | None = None) -> Any:
        self.spawned.append(name)
        if inspect.iscoroutine(awaitable) or isinstance(awaitable, asyncio.Future):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                # No loop: record the call without running it
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                return None
        task = asyncio.ensure_future(awaitable)
        self.tasks.append(task)
        return task

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if t.active and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            if timer.repeat:
                timer.due += timer.delay
            else:
                timer.active = False
            result = timer.callback()
            if inspect.isawaitable(result):
                self.spawn(result)
        self.now = target

    async def drain(self) -> None:
        """Wait until every spawned task has finished."""
        while True:
            pending = [task for task in self.tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Deterministic scheduler."""
    return ManualScheduler()


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Factory for clients answering through an in-process handler."""

    def _make(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=20.0)

    return _make
