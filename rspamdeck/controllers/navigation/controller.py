"""Navigation controller - view dispatch and periodic polling.

``navigate()`` is the only entry point. A click on a disabled control is
dropped. Otherwise the clicked control and ``refresh`` are disabled, every
poll timer is cancelled, the view's action is spawned without being awaited
and its poll timer (if any) is registered. The controls come back after a
fixed settle delay whether or not the action has finished.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from rspamdeck.constants.enums import NavPhase, ViewId
from rspamdeck.constants.timeouts import NAV_SETTLE_DELAY
from rspamdeck.controllers.navigation.views import ViewBinding, ViewContext
from rspamdeck.models.state.view_state import ViewState
from rspamdeck.utils.scheduler import Scheduler

logger = logging.getLogger(__name__)


class NavigationController:
    """State machine mapping navigation events to view actions."""

    def __init__(
        self,
        scheduler: Scheduler,
        bindings: dict[ViewId, ViewBinding],
        *,
        on_disconnect: Callable[[], Any] | None = None,
        settle_delay: float = NAV_SETTLE_DELAY,
        initial_view: ViewId = ViewId.STATUS,
    ) -> None:
        self._scheduler = scheduler
        self._bindings = bindings
        self._on_disconnect = on_disconnect
        self._settle_delay = settle_delay
        self.state = ViewState(active_view=initial_view)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def active_view(self) -> ViewId:
        return self.state.active_view

    @property
    def epoch(self) -> int:
        return self.state.epoch

    @property
    def phase(self) -> NavPhase:
        return self.state.phase

    def is_current(self, epoch: int) -> bool:
        return epoch == self.state.epoch

    # =========================================================================
    # Dispatch
    # =========================================================================

    def navigate(self, control: ViewId | str) -> bool:
        """Handle a navigation event.

        Returns:
            False if the event was dropped because its control is disabled
        """
        control = ViewId(control)
        if self.state.is_disabled(control):
            logger.debug("Dropped navigation to %s: control disabled", control.value)
            return False

        target = self.state.active_view if control is ViewId.REFRESH else control
        controls = {control, target, ViewId.REFRESH}
        self.state.controls_disabled.update(controls)
        self.state.phase = NavPhase.DISPATCHING

        self.stop_timers()
        self.invalidate()

        if target is ViewId.DISCONNECT:
            logger.info("Disconnect requested")
            if self._on_disconnect is not None:
                self._on_disconnect()
        else:
            self._dispatch(target)

        self._scheduler.after(self._settle_delay, lambda: self._settle(controls))
        return True

    def _dispatch(self, view: ViewId) -> None:
        binding = self._bindings.get(view)
        if binding is None:
            logger.warning("No action bound to view %s", view.value)
            return

        self.state.active_view = view
        epoch = self.state.epoch
        ctx = ViewContext(view=view, epoch=epoch, is_current=lambda: self.is_current(epoch))
        logger.debug("Dispatching %s (epoch %d)", view.value, epoch)
        self._scheduler.spawn(binding.action(ctx), name=f"view:{view.value}")

        interval = binding.poll_interval() if binding.poll_interval else None
        if interval:
            self.state.active_timers[view] = self._scheduler.every(
                interval, lambda: self._poll(binding, ctx)
            )
            logger.debug("Polling %s every %.0fs", view.value, interval)

    def _poll(self, binding: ViewBinding, ctx: ViewContext) -> None:
        if not ctx.is_current():
            return
        self._scheduler.spawn(binding.action(ctx), name=f"poll:{binding.view.value}")

    def _settle(self, controls: set[ViewId]) -> None:
        self.state.controls_disabled.difference_update(controls)
        if not self.state.controls_disabled:
            self.state.phase = NavPhase.IDLE

    # =========================================================================
    # Timers
    # =========================================================================

    def stop_timers(self) -> None:
        """Cancel every registered poll timer."""
        for view, handle in list(self.state.active_timers.items()):
            handle.stop()
            logger.debug("Stopped polling %s", view.value)
        self.state.active_timers.clear()

    def invalidate(self) -> None:
        """Start a new epoch so in-flight continuations are discarded."""
        self.state.epoch += 1

    def release_controls(self) -> None:
        """Re-enable every control without waiting for the settle delay."""
        self.state.controls_disabled.clear()
        self.state.phase = NavPhase.IDLE


__all__ = ["NavigationController"]
