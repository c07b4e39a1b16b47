"""Session controller - credential lifecycle for the console.

States run ``LOGGED_OUT -> AUTHENTICATING -> LOGGED_IN`` and back to
``LOGGED_OUT`` on disconnect. Deployments without a password are detected
by an unauthenticated probe and enter ``LOGGED_IN`` directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from rspamdeck.constants.enums import SessionState
from rspamdeck.constants.patterns import PASSWORD_PATTERN
from rspamdeck.constants.values import (
    AUTH_FAILED_MARKER,
    MSG_AUTH_FAILED,
    MSG_INVALID_PASSWORD,
    PASSWORD_HEADER,
    PATH_AUTH,
    PATH_STAT,
)
from rspamdeck.controllers.base import BaseController
from rspamdeck.controllers.errors import (
    AuthRejectedError,
    LocalValidationError,
    TransportError,
)
from rspamdeck.models.state.session import Session, SessionStore
from rspamdeck.utils.alert_sink import AlertSink

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], Any]
LoggedOutListener = Callable[[], Any]


def validate_password(password: str) -> str:
    """Return the password if it is printable ASCII.

    Raises:
        LocalValidationError: The password contains other characters.
    """
    if not PASSWORD_PATTERN.fullmatch(password):
        raise LocalValidationError(MSG_INVALID_PASSWORD)
    return password


class SessionController(BaseController):
    """Owns the session store and its state transitions."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        alerts: AlertSink,
        store: SessionStore | None = None,
        cluster_provider: Callable[[], str],
    ) -> None:
        """Initialize the session controller.

        Args:
            client: Shared HTTP client
            base_url: Console origin
            alerts: Sink for user-facing alerts
            store: Credential storage, a fresh one by default
            cluster_provider: Returns the currently selected cluster name
        """
        super().__init__(client)
        self.base_url = base_url
        self.alerts = alerts
        self.store = store or SessionStore()
        self._cluster_provider = cluster_provider
        self.state = SessionState.LOGGED_OUT
        self.session: Session | None = None
        self._on_logged_in: list[SessionListener] = []
        self._on_logged_out: list[LoggedOutListener] = []

    # =========================================================================
    # Listeners
    # =========================================================================

    def on_logged_in(self, listener: SessionListener) -> None:
        self._on_logged_in.append(listener)

    def on_logged_out(self, listener: LoggedOutListener) -> None:
        self._on_logged_out.append(listener)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def token(self) -> str | None:
        return self.session.token if self.session else None

    @property
    def read_only(self) -> bool:
        return bool(self.session and self.session.read_only)

    @property
    def is_logged_in(self) -> bool:
        return self.state is SessionState.LOGGED_IN

    # =========================================================================
    # Transitions
    # =========================================================================

    async def check_connection(self) -> bool:
        return await self.probe()

    async def probe(self) -> bool:
        """Check whether the deployment works without a password.

        On success an empty-token session is created and the state moves to
        LOGGED_IN. Failure is silent: the connect form stays in charge.
        """
        try:
            await self._send(self.base_url + PATH_STAT)
        except TransportError as exc:
            logger.debug("Status probe needs credentials: %s", exc)
            return False

        logger.info("Server accepts requests without a password")
        self._enter(Session(token=""), read_only_by_cluster={})
        return True

    def connect(self) -> bool:
        """Restore a stored session, or report that the form is needed.

        Returns:
            True if a stored session was restored
        """
        session = self.store.load_session(self._cluster_provider())
        if session is not None:
            logger.info("Restored stored session (read_only=%s)", session.read_only)
            self.session = session
            self._set_state(SessionState.LOGGED_IN)
            self._notify(self._on_logged_in, session)
            return True

        self._set_state(SessionState.LOGGED_OUT)
        self._notify(self._on_logged_out)
        return False

    async def login(self, password: str) -> bool:
        """Authenticate with a password.

        Returns:
            True when the session entered LOGGED_IN

        Raises:
            LocalValidationError: Invalid characters; no request was sent.
        """
        try:
            validate_password(password)
        except LocalValidationError:
            self.alerts.error(MSG_INVALID_PASSWORD, modal=True)
            raise

        self._set_state(SessionState.AUTHENTICATING)
        try:
            payload = await self._send(
                self.base_url + PATH_AUTH,
                headers={PASSWORD_HEADER: password},
            )
            if isinstance(payload, dict) and payload.get("auth") == AUTH_FAILED_MARKER:
                raise AuthRejectedError(MSG_AUTH_FAILED)
        except TransportError as exc:
            logger.warning("Login failed: %s", exc)
            self.alerts.error(exc.reason, modal=True)
            self._set_state(SessionState.LOGGED_OUT)
            return False
        except AuthRejectedError as exc:
            logger.warning("Login rejected by server")
            self.alerts.error(str(exc), modal=True)
            self._set_state(SessionState.LOGGED_OUT)
            return False

        read_only = bool(payload.get("read_only")) if isinstance(payload, dict) else False
        cluster = self._cluster_provider()
        self._enter(Session(token=password), read_only_by_cluster={cluster: read_only})
        return True

    def disconnect(self) -> None:
        """Drop the session and credentials. Safe to call repeatedly."""
        if self.session is not None:
            logger.info("Disconnecting session")
        self.store.clear()
        self.session = None
        self._set_state(SessionState.LOGGED_OUT)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _enter(self, session: Session, *, read_only_by_cluster: dict[str, bool]) -> None:
        cluster = self._cluster_provider()
        self.store.save_token(session.token)
        self.store.save_credentials(read_only_by_cluster)
        self.session = session.model_copy(
            update={
                "read_only_by_cluster": dict(read_only_by_cluster),
                "read_only": bool(read_only_by_cluster.get(cluster, False)),
            }
        )
        self._set_state(SessionState.LOGGED_IN)
        self._notify(self._on_logged_in, self.session)

    def _set_state(self, state: SessionState) -> None:
        if state is not self.state:
            logger.info("Session state %s -> %s", self.state.value, state.value)
        self.state = state

    @staticmethod
    def _notify(listeners: list[Callable[..., Any]], *args: Any) -> None:
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("Session listener failed")


__all__ = [
    "SessionController",
    "validate_password",
]
