"""Tests for AlertSink."""

from __future__ import annotations

from rspamdeck.constants.enums import AlertPhase, Severity
from rspamdeck.utils.alert_sink import Alert, AlertSink


class TestAlertSink:
    """Tests for alert lifecycle."""

    def test_notify_appends_alert(self, scheduler) -> None:
        """notify() shows an alert right away."""
        sink = AlertSink(scheduler)

        alert = sink.notify(Severity.ERROR, "Request failed")

        assert sink.alerts == [alert]
        assert alert.phase is AlertPhase.SHOWN
        assert alert.modal is False

    def test_identical_alerts_are_not_coalesced(self, scheduler) -> None:
        """Every call stacks its own alert."""
        sink = AlertSink(scheduler)

        sink.error("Request failed")
        sink.error("Request failed")

        assert [a.text for a in sink.alerts] == ["Request failed", "Request failed"]
        assert len({a.id for a in sink.alerts}) == 2

    def test_fade_then_remove(self, scheduler) -> None:
        """Alerts fade after five seconds and go away one second later."""
        sink = AlertSink(scheduler)
        events: list[tuple[int, AlertPhase]] = []
        sink.subscribe(lambda alert: events.append((alert.id, alert.phase)))
        alert = sink.success("Request completed")

        scheduler.advance(4.5)
        assert alert.phase is AlertPhase.SHOWN
        scheduler.advance(0.5)
        assert alert.phase is AlertPhase.FADING
        assert sink.alerts == [alert]
        scheduler.advance(1.0)

        assert alert.phase is AlertPhase.REMOVED
        assert sink.alerts == []
        assert events == [
            (alert.id, AlertPhase.SHOWN),
            (alert.id, AlertPhase.FADING),
            (alert.id, AlertPhase.REMOVED),
        ]

    def test_custom_delays(self, scheduler) -> None:
        """Dismiss and fade delays are configurable."""
        sink = AlertSink(scheduler, dismiss_delay=1.0, fade_duration=0.0)
        sink.error("x")

        scheduler.advance(1.0)

        assert sink.alerts == []

    def test_dismiss_removes_immediately(self, scheduler) -> None:
        """Closing an alert removes it; its timers then do nothing."""
        sink = AlertSink(scheduler)
        alert = sink.error("Cannot receive neighbours data")
        seen: list[Alert] = []
        sink.subscribe(seen.append)

        sink.dismiss(alert)
        scheduler.advance(10.0)

        assert sink.alerts == []
        assert [a.phase for a in seen] == [AlertPhase.REMOVED]

    def test_listener_errors_do_not_propagate(self, scheduler) -> None:
        """A broken listener cannot break notify()."""
        sink = AlertSink(scheduler)

        def broken(alert: Alert) -> None:
            raise RuntimeError("listener bug")

        sink.subscribe(broken)

        assert sink.error("x").text == "x"

    def test_unsubscribe(self, scheduler) -> None:
        """Unsubscribed listeners receive nothing."""
        sink = AlertSink(scheduler)
        seen: list[Alert] = []
        sink.subscribe(seen.append)
        sink.unsubscribe(seen.append)

        sink.error("x")

        assert seen == []
