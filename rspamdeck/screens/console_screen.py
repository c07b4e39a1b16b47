"""Console screen - view tabs, server selector and the aggregated table."""

from __future__ import annotations

import logging

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    LoadingIndicator,
    Select,
    Static,
    Tab,
    Tabs,
)

from rspamdeck.constants.enums import ThroughputRange, ViewId
from rspamdeck.constants.timeouts import ACTIVITY_CLEAR_DELAY
from rspamdeck.controllers.console.controller import ConsoleController
from rspamdeck.keyboard import CONSOLE_SCREEN_BINDINGS
from rspamdeck.models.state.view_data import ViewSnapshot
from rspamdeck.screens.presenter import ConsolePresenter

logger = logging.getLogger(__name__)

VIEW_TABS: list[tuple[ViewId, str]] = [
    (ViewId.STATUS, "Status"),
    (ViewId.THROUGHPUT, "Throughput"),
    (ViewId.CONFIGURATION, "Configuration"),
    (ViewId.SYMBOLS, "Symbols"),
    (ViewId.HISTORY, "History"),
]


class ConsoleScreen(Screen[None]):
    """Main console for a logged-in session."""

    BINDINGS = CONSOLE_SCREEN_BINDINGS

    def __init__(self, console: ConsoleController) -> None:
        super().__init__()
        self.console = console
        self.presenter = ConsolePresenter()
        self._known_servers: list[str] = []

    # =========================================================================
    # Layout
    # =========================================================================

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Tabs(
                *(Tab(label, id=view.value) for view, label in VIEW_TABS),
                active=self.console.active_view.value,
                id="view-tabs",
            ),
            Select(
                [(name, name) for name in self.console.cluster.servers],
                value=self.console.cluster.selected_server,
                allow_blank=False,
                id="server-select",
            ),
            Select(
                [(value, value) for value in self._range_options()],
                value=self.console.throughput_range,
                allow_blank=False,
                id="range-select",
            ),
            id="console-toolbar",
        )
        yield Horizontal(
            Static("", id="read-only-marker"),
            Static("", id="status-summary"),
            LoadingIndicator(id="activity-indicator"),
            id="console-statusbar",
        )
        yield DataTable(id="view-table", zebra_stripes=True)
        yield Footer()

    def _range_options(self) -> list[str]:
        options = [item.value for item in ThroughputRange]
        if self.console.throughput_range not in options:
            options.append(self.console.throughput_range)
        return options

    def on_mount(self) -> None:
        self._known_servers = self.console.cluster.servers
        self.console.view_data.subscribe(self._on_view_data)
        self.console.cluster.add_activity_listener(self._on_activity)
        self.query_one("#activity-indicator", LoadingIndicator).display = False
        self._update_read_only_marker()
        self._render_view(self.console.active_view)

    def on_unmount(self) -> None:
        self.console.view_data.unsubscribe(self._on_view_data)
        self.console.cluster.remove_activity_listener(self._on_activity)

    # =========================================================================
    # Actions
    # =========================================================================

    def action_show_view(self, view: str) -> None:
        self.console.navigate(view)
        self._sync_active_view()

    def action_refresh(self) -> None:
        self.console.navigate(ViewId.REFRESH)

    def action_disconnect(self) -> None:
        self.console.navigate(ViewId.DISCONNECT)

    # =========================================================================
    # Events
    # =========================================================================

    @on(Tabs.TabActivated, "#view-tabs")
    def _on_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id is None or event.tab.id == self.console.active_view.value:
            return
        self.action_show_view(event.tab.id)

    @on(Select.Changed, "#server-select")
    def _on_server_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK or event.value == self.console.cluster.selected_server:
            return
        self.console.select_server(str(event.value))

    @on(Select.Changed, "#range-select")
    def _on_range_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK or event.value == self.console.throughput_range:
            return
        self.console.select_time_range(str(event.value))
        self._sync_active_view()

    def _on_view_data(self, view: ViewId, snapshot: ViewSnapshot) -> None:
        self._refresh_servers()
        if view is self.console.active_view:
            self._render_table(view, snapshot)

    def _on_activity(self, in_flight: int) -> None:
        indicator = self.query_one("#activity-indicator", LoadingIndicator)
        if in_flight > 0:
            indicator.display = True
        else:
            self.set_timer(ACTIVITY_CLEAR_DELAY, self._clear_activity)

    def _clear_activity(self) -> None:
        if self.console.cluster.in_flight == 0:
            self.query_one("#activity-indicator", LoadingIndicator).display = False

    # =========================================================================
    # Rendering
    # =========================================================================

    def reset_view(self) -> None:
        """Drop rendered data (disconnect teardown)."""
        self.query_one("#view-table", DataTable).clear(columns=True)
        self.query_one("#status-summary", Static).update("")

    def _sync_active_view(self) -> None:
        active = self.console.active_view
        tabs = self.query_one("#view-tabs", Tabs)
        if tabs.active != active.value:
            tabs.active = active.value
        self._render_view(active)

    def _render_view(self, view: ViewId) -> None:
        self._render_table(view, self.console.view_data.get(view))

    def _render_table(self, view: ViewId, snapshot: ViewSnapshot) -> None:
        columns, rows = self.presenter.table_for(view, snapshot)
        table = self.query_one("#view-table", DataTable)
        table.clear(columns=True)
        table.add_columns(*columns)
        table.add_rows(rows)

        summary = ""
        if view is ViewId.STATUS:
            summary = self.presenter.status_summary(snapshot.sections.get("stat"))
        self.query_one("#status-summary", Static).update(summary)

    def _refresh_servers(self) -> None:
        servers = self.console.cluster.servers
        if servers == self._known_servers:
            return
        self._known_servers = servers
        select = self.query_one("#server-select", Select)
        with select.prevent(Select.Changed):
            select.set_options([(name, name) for name in servers])
            select.value = self.console.cluster.selected_server
        logger.debug("Server selector updated: %s", servers)

    def _update_read_only_marker(self) -> None:
        marker = self.query_one("#read-only-marker", Static)
        marker.update("read-only" if self.console.session.read_only else "")
        marker.set_class(self.console.session.read_only, "read-only")


__all__ = ["ConsoleScreen", "VIEW_TABS"]
