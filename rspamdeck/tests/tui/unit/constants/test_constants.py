"""Tests for constants modules."""

from __future__ import annotations

import pytest

from rspamdeck.constants import (
    ALERT_DISMISS_DELAY,
    ALL_SERVERS,
    NAV_SETTLE_DELAY,
    REQUEST_TIMEOUT,
    THROUGHPUT_REFRESH_FALLBACK,
    THROUGHPUT_REFRESH_INTERVALS,
    ThroughputRange,
    ViewId,
)
from rspamdeck.constants.patterns import PASSWORD_PATTERN


class TestTimings:
    """Timing constants used by the core."""

    def test_request_timeout(self) -> None:
        assert REQUEST_TIMEOUT == 20.0

    def test_settle_and_alert_delays(self) -> None:
        assert NAV_SETTLE_DELAY == 1.0
        assert ALERT_DISMISS_DELAY == 5.0

    def test_throughput_intervals(self) -> None:
        assert THROUGHPUT_REFRESH_INTERVALS == {"hourly": 60.0, "daily": 300.0}
        assert THROUGHPUT_REFRESH_FALLBACK == 3600.0


class TestEnums:
    """Enum values match the wire and control ids."""

    def test_view_ids_are_strings(self) -> None:
        assert ViewId("status") is ViewId.STATUS
        assert ViewId.REFRESH == "refresh"

    def test_throughput_ranges(self) -> None:
        assert [r.value for r in ThroughputRange] == ["hourly", "daily", "weekly", "monthly"]

    def test_all_servers_label(self) -> None:
        assert ALL_SERVERS == "All SERVERS"


class TestPasswordPattern:
    """The password pattern is used with fullmatch."""

    @pytest.mark.parametrize(("value", "ok"), [("abc ~", True), ("", True), ("abc\n", False), ("é", False)])
    def test_fullmatch(self, value, ok) -> None:
        assert (PASSWORD_PATTERN.fullmatch(value) is not None) is ok
