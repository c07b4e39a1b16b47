"""Tests for ConsolePresenter."""

from __future__ import annotations

import pytest

from rspamdeck.constants.enums import ViewId
from rspamdeck.models.state.view_data import ViewSnapshot
from rspamdeck.screens.presenter import ConsolePresenter, format_uptime


@pytest.fixture
def presenter() -> ConsolePresenter:
    """Presenter instance."""
    return ConsolePresenter()


class TestFormatUptime:
    """Tests for format_uptime."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "00:00:00"), (3661, "01:01:01"), (90061, "1d 01:01:01"), ("bad", ""), (None, "")],
    )
    def test_format(self, seconds, expected) -> None:
        assert format_uptime(seconds) == expected


class TestConsolePresenter:
    """Tests for table building per view."""

    def test_empty_snapshot_gives_headers_only(self, presenter) -> None:
        """A view with no data renders its columns and no rows."""
        columns, rows = presenter.table_for(ViewId.STATUS, ViewSnapshot())

        assert columns[0] == "Node"
        assert rows == []

    def test_status_rows(self, presenter) -> None:
        """Status rows show reachability and uptime."""
        stat = {
            "nodes": [
                {"name": "mx1", "host": "mx1", "online": True, "version": "3.8", "uptime": 3661, "scanned": 9},
                {"name": "mx2", "host": "mx2", "online": False, "version": "", "uptime": 0, "scanned": 0},
            ],
            "totals": {"scanned": 9},
            "online": 1,
        }

        _, rows = presenter.table_for(ViewId.STATUS, ViewSnapshot(sections={"stat": stat}))

        assert rows[0] == ("mx1", "mx1", "online", "3.8", "01:01:01", "9")
        assert rows[1][2] == "offline"
        assert presenter.status_summary(stat) == "1/2 online  scanned: 9"

    def test_history_rows_include_errors(self, presenter) -> None:
        """History and errors share one table."""
        snapshot = ViewSnapshot(
            sections={
                "history": [{"node": "mx1", "unix_time": 5, "action": "reject", "score": 15.5, "subject": "hi"}],
                "errors": [{"node": "mx2", "ts": 4, "type": "task", "message": "timeout"}],
            }
        )

        _, rows = presenter.table_for(ViewId.HISTORY, snapshot)

        assert rows[0] == ("mx1", "5", "reject", "15.50", "", "hi")
        assert rows[1] == ("mx2", "4", "error", "", "task", "timeout")

    def test_configuration_rows(self, presenter) -> None:
        """Actions and maps are listed together."""
        snapshot = ViewSnapshot(
            sections={
                "actions": [{"action": "reject", "value": 15}],
                "maps": [{"map": 2, "description": "whitelist"}],
            }
        )

        _, rows = presenter.table_for(ViewId.CONFIGURATION, snapshot)

        assert rows == [("reject", "15"), ("map #2", "whitelist")]

    def test_throughput_rows(self, presenter) -> None:
        """One row per node series."""
        snapshot = ViewSnapshot(
            sections={"graph": {"range": "hourly", "series": {"mx1": [[1, 2], [3]], "mx2": {}}}}
        )

        _, rows = presenter.table_for(ViewId.THROUGHPUT, snapshot)

        assert rows == [("mx1", "hourly", "0", "2"), ("mx1", "hourly", "1", "1")]

    def test_symbols_rows(self, presenter) -> None:
        """Symbol rows keep their weight."""
        snapshot = ViewSnapshot(
            sections={"symbols": [{"symbol": "S", "group": "g", "weight": 1.0, "description": ""}]}
        )

        _, rows = presenter.table_for(ViewId.SYMBOLS, snapshot)

        assert rows == [("S", "g", "1.00", "")]

    def test_pseudo_views_render_nothing(self, presenter) -> None:
        """refresh and disconnect have no table."""
        assert presenter.table_for(ViewId.REFRESH, ViewSnapshot()) == ([], [])
