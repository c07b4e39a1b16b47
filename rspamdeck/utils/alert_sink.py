"""AlertSink - transient user-facing notifications.

Every ``notify()`` call produces its own alert: nothing is deduplicated or
coalesced, and any number of alerts may be stacked. Each alert starts to
fade after ``dismiss_delay`` seconds and is removed once the fade finishes.

Usage:
    sink = AlertSink(scheduler)
    sink.subscribe(lambda alert: print(alert.phase, alert.text))
    sink.notify(Severity.ERROR, "Request failed")
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from rspamdeck.constants.enums import AlertPhase, Severity
from rspamdeck.constants.timeouts import ALERT_DISMISS_DELAY, ALERT_FADE_DURATION
from rspamdeck.utils.scheduler import Scheduler

logger = logging.getLogger(__name__)

AlertListener = Callable[["Alert"], None]


@dataclass
class Alert:
    """One notification and its lifecycle phase."""

    id: int
    severity: Severity
    text: str
    modal: bool = False
    phase: AlertPhase = AlertPhase.SHOWN


class AlertSink:
    """Collects alerts and schedules their fade and removal."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        dismiss_delay: float = ALERT_DISMISS_DELAY,
        fade_duration: float = ALERT_FADE_DURATION,
    ) -> None:
        self._scheduler = scheduler
        self._dismiss_delay = dismiss_delay
        self._fade_duration = fade_duration
        self._ids = itertools.count(1)
        self._alerts: list[Alert] = []
        self._listeners: list[AlertListener] = []

    @property
    def alerts(self) -> list[Alert]:
        """Alerts currently on screen, fading ones included."""
        return list(self._alerts)

    def subscribe(self, listener: AlertListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: AlertListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, severity: Severity, text: str, *, modal: bool = False) -> Alert:
        """Show an alert and schedule its dismissal."""
        alert = Alert(id=next(self._ids), severity=severity, text=text, modal=modal)
        self._alerts.append(alert)
        log_level = logging.WARNING if severity is Severity.ERROR else logging.INFO
        logger.log(log_level, "Alert [%s] %s", severity.value, text)
        self._emit(alert)
        self._scheduler.after(self._dismiss_delay, lambda: self._begin_fade(alert))
        return alert

    def error(self, text: str, *, modal: bool = False) -> Alert:
        return self.notify(Severity.ERROR, text, modal=modal)

    def success(self, text: str) -> Alert:
        return self.notify(Severity.SUCCESS, text)

    def dismiss(self, alert: Alert) -> None:
        """Remove an alert right away (close button)."""
        self._remove(alert)

    def _begin_fade(self, alert: Alert) -> None:
        if alert.phase is not AlertPhase.SHOWN:
            return
        alert.phase = AlertPhase.FADING
        self._emit(alert)
        self._scheduler.after(self._fade_duration, lambda: self._remove(alert))

    def _remove(self, alert: Alert) -> None:
        if alert.phase is AlertPhase.REMOVED:
            return
        alert.phase = AlertPhase.REMOVED
        self._alerts = [a for a in self._alerts if a.id != alert.id]
        self._emit(alert)

    def _emit(self, alert: Alert) -> None:
        for listener in list(self._listeners):
            try:
                listener(alert)
            except Exception:
                logger.exception("Alert listener failed for alert %s", alert.id)


__all__ = [
    "Alert",
    "AlertListener",
    "AlertSink",
]
