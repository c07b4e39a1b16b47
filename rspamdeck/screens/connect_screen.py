"""Connect screen - password form shown while the session is logged out."""

from __future__ import annotations

import logging

from textual import on
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Static

from rspamdeck.constants.values import APP_TITLE
from rspamdeck.controllers.console.controller import ConsoleController
from rspamdeck.controllers.errors import LocalValidationError

logger = logging.getLogger(__name__)


class ConnectScreen(Screen[None]):
    """Password prompt for the console."""

    def __init__(self, console: ConsoleController) -> None:
        super().__init__()
        self.console = console

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(APP_TITLE, classes="connect-title"),
            Static(self.console.settings.base_url, id="connect-url"),
            Input(placeholder="Password", password=True, id="password-input"),
            Button("Connect", id="connect-button", variant="primary"),
            id="connect-panel",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#password-input", Input).focus()

    @on(Input.Submitted, "#password-input")
    @on(Button.Pressed, "#connect-button")
    def _on_submit(self) -> None:
        password = self.query_one("#password-input", Input).value
        self.run_worker(self._login(password), exclusive=True, exit_on_error=False)

    async def _login(self, password: str) -> None:
        password_input = self.query_one("#password-input", Input)
        try:
            await self.console.login(password)
        except LocalValidationError:
            password_input.focus()
            return
        password_input.value = ""


__all__ = ["ConnectScreen"]
