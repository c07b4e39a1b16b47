"""Console controller - the context object behind the admin console.

Owns one instance of every collaborator (session, cluster engine, view
actions, navigation, alerts and view data) and wires them together:

- entering LOGGED_IN displays the console by refreshing the active view
- selection events re-target the engine and dispatch the matching view
- disconnect tears everything down and re-enters the connect flow
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from rspamdeck.constants.enums import SessionState, ViewId
from rspamdeck.controllers.base.base_controller import build_client
from rspamdeck.controllers.cluster.controller import ClusterController
from rspamdeck.controllers.navigation.controller import NavigationController
from rspamdeck.controllers.navigation.views import ViewActions
from rspamdeck.controllers.session.controller import SessionController
from rspamdeck.models.state.app_settings import AppSettings
from rspamdeck.models.state.session import Session, SessionStore
from rspamdeck.models.state.view_data import ViewData
from rspamdeck.utils.alert_sink import AlertSink
from rspamdeck.utils.scheduler import Scheduler

logger = logging.getLogger(__name__)


class ConsoleController:
    """Explicit context object for one console instance."""

    def __init__(
        self,
        settings: AppSettings,
        scheduler: Scheduler,
        *,
        client: httpx.AsyncClient | None = None,
        store: SessionStore | None = None,
        on_teardown: Callable[[], Any] | None = None,
    ) -> None:
        """Initialize the console and its collaborators.

        Args:
            settings: Application settings
            scheduler: Timer collaborator used by navigation and alerts
            client: HTTP client; one is built from the settings when omitted
            store: Session storage shared across reconnects
            on_teardown: Called on disconnect so presentation can drop its widgets
        """
        self.settings = settings
        self.scheduler = scheduler
        self._owns_client = client is None
        self.client = client or build_client(settings.request_timeout)
        self._on_teardown = on_teardown

        self.alerts = AlertSink(
            scheduler,
            dismiss_delay=settings.alert_dismiss_delay,
            fade_duration=settings.alert_fade_duration,
        )
        self.view_data = ViewData()
        self.cluster = ClusterController(
            self.client,
            base_url=settings.base_url,
            alerts=self.alerts,
            token_provider=lambda: self.session.token,
        )
        self.session = SessionController(
            self.client,
            base_url=settings.base_url,
            alerts=self.alerts,
            store=store,
            cluster_provider=lambda: self.cluster.selected_server,
        )
        self.actions = ViewActions(
            self.cluster,
            self.view_data,
            status_interval=settings.status_refresh_interval,
            read_only_provider=lambda: self.session.read_only,
            throughput_range=settings.throughput_range,
        )
        self.navigation = NavigationController(
            scheduler,
            self.actions.bindings(),
            on_disconnect=self.disconnect,
            settle_delay=settings.settle_delay,
        )
        self.session.on_logged_in(self._display)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def active_view(self) -> ViewId:
        return self.navigation.active_view

    @property
    def throughput_range(self) -> str:
        return self.actions.throughput_range

    # =========================================================================
    # Session flow
    # =========================================================================

    async def start(self) -> bool:
        """Restore a stored session or probe for a password-less server.

        Returns:
            True when the console ended up LOGGED_IN
        """
        if self.session.connect():
            return True
        return await self.session.probe()

    async def login(self, password: str) -> bool:
        return await self.session.login(password)

    def disconnect(self) -> None:
        """Tear the console down and show the connect flow again."""
        logger.info("Tearing down console")
        self.navigation.stop_timers()
        self.navigation.invalidate()
        if self._on_teardown is not None:
            self._on_teardown()
        self.view_data.clear()
        self.session.disconnect()
        self.cluster.reset()
        self.navigation.release_controls()
        self.session.connect()

    def _display(self, session: Session) -> None:
        logger.debug("Displaying console (read_only=%s)", session.read_only)
        self.navigation.navigate(ViewId.REFRESH)

    # =========================================================================
    # Navigation and selection
    # =========================================================================

    def navigate(self, control: ViewId | str) -> bool:
        return self.navigation.navigate(control)

    def select_server(self, name: str) -> bool:
        """Target one server (or all) and reload the active view."""
        self.cluster.select_server(name)
        return self.navigation.navigate(self.navigation.active_view)

    def select_cluster_node(self, name: str) -> bool:
        """Target one cluster node and show its status."""
        self.cluster.select_server(name)
        return self.navigation.navigate(ViewId.STATUS)

    def select_time_range(self, selected_range: str) -> bool:
        """Change the throughput range and show the throughput view."""
        self.actions.throughput_range = selected_range
        return self.navigation.navigate(ViewId.THROUGHPUT)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def aclose(self) -> None:
        """Stop timers and release the HTTP client if it was created here."""
        self.navigation.stop_timers()
        self.navigation.invalidate()
        if self._owns_client:
            await self.client.aclose()


__all__ = ["ConsoleController"]
