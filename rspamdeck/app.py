"""Main application class for the rspamdeck TUI."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App
from textual.binding import Binding
from textual.events import AppBlur, AppFocus
from textual.screen import Screen

from rspamdeck.constants import APP_TITLE
from rspamdeck.constants.enums import AlertPhase, Severity
from rspamdeck.controllers.console.controller import ConsoleController
from rspamdeck.keyboard.app import APP_BINDINGS
from rspamdeck.models.state.app_settings import AppSettings
from rspamdeck.models.state.config_manager import (
    ConfigLoadError,
    ConfigManager,
    ConfigSaveError,
)
from rspamdeck.models.state.session import Session
from rspamdeck.screens import ConnectScreen, ConsoleScreen
from rspamdeck.utils.alert_sink import Alert
from rspamdeck.utils.textual_scheduler import TextualScheduler

logger = logging.getLogger(__name__)

NOTIFY_SEVERITY: dict[Severity, str] = {
    Severity.SUCCESS: "information",
    Severity.INFO: "information",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}


class RspamdeckApp(App[None]):
    """Main TUI application for rspamdeck."""

    TITLE = APP_TITLE
    CSS_PATH = "css/app.tcss"
    BINDINGS: list[Binding] = APP_BINDINGS

    # Type hint for settings attribute
    settings: AppSettings

    def __init__(
        self,
        settings: AppSettings | None = None,
        config_path: Path | None = None,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.config_path = config_path
        if settings is None:
            self._load_settings()
        else:
            self.settings = settings

        self.scheduler = TextualScheduler(self)
        self.console = ConsoleController(
            self.settings,
            self.scheduler,
            on_teardown=self._teardown,
        )
        self.console.alerts.subscribe(self._forward_alert)
        self.console.session.on_logged_in(self._on_logged_in)
        self.console.session.on_logged_out(self._on_logged_out)

    def _load_settings(self) -> None:
        """Load application settings from persistent storage."""
        try:
            self.settings = ConfigManager.load(self.config_path)
        except ConfigLoadError as exc:
            # Use defaults if loading fails
            logger.warning("Falling back to default settings: %s", exc)
            self.settings = AppSettings()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.run_worker(self._start(), name="console-start", exit_on_error=False)

    async def _start(self) -> None:
        await self.console.start()

    # =========================================================================
    # Session hooks
    # =========================================================================

    def _on_logged_in(self, session: Session) -> None:
        self._show(ConsoleScreen)

    def _on_logged_out(self) -> None:
        self._show(ConnectScreen)

    def _teardown(self) -> None:
        current_screen = self.screen if self.screen_stack else None
        if isinstance(current_screen, ConsoleScreen):
            current_screen.reset_view()

    def _show(self, screen_type: type[ConnectScreen] | type[ConsoleScreen]) -> None:
        """Replace the visible screen unless it is already of this type."""
        if self.screen_stack and isinstance(self.screen, screen_type):
            return
        screen: Screen[None] = screen_type(self.console)
        if len(self.screen_stack) > 1:
            self.switch_screen(screen)
        else:
            self.push_screen(screen)

    # =========================================================================
    # Alerts and focus
    # =========================================================================

    def _forward_alert(self, alert: Alert) -> None:
        if alert.phase is not AlertPhase.SHOWN:
            return
        self.notify(
            alert.text,
            title="Connect" if alert.modal else "",
            severity=NOTIFY_SEVERITY[alert.severity],
            timeout=self.settings.alert_dismiss_delay + self.settings.alert_fade_duration,
        )

    def on_app_blur(self, _: AppBlur) -> None:
        """Pause polling while the terminal is unfocused."""
        self.scheduler.pause()

    def on_app_focus(self, _: AppFocus) -> None:
        self.scheduler.resume()

    # =========================================================================
    # Actions
    # =========================================================================

    def action_quit(self) -> None:  # type: ignore[override]
        """Quit the application."""
        self.exit()

    async def on_unmount(self) -> None:
        """Save the throughput range and release the console."""
        self.settings.throughput_range = self.console.throughput_range
        try:
            ConfigManager.save(self.settings, self.config_path)
        except ConfigSaveError as exc:
            logger.error("Failed to save settings: %s", exc)
        await self.console.aclose()


__all__ = [
    "RspamdeckApp",
]
