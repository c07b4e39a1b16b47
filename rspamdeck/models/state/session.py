"""Session models.

``SessionStore`` is the process-lifetime credential storage that survives
screen changes but is wiped on disconnect. ``Session`` is the authenticated
view of it handed to the rest of the console.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Authenticated session.

    ``token`` is opaque and sent verbatim as the password header.
    ``read_only`` reflects the flag for the cluster that was current when
    the session was entered; the UI hides mutating actions when it is set.
    """

    model_config = ConfigDict(frozen=True)

    authenticated: bool = True
    token: str = ""
    read_only_by_cluster: dict[str, bool] = Field(default_factory=dict)
    read_only: bool = False

    def is_read_only(self, cluster: str) -> bool:
        return bool(self.read_only_by_cluster.get(cluster, False))


class SessionStore:
    """Storage for the token, authenticated flag and read-only flags."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._credentials: dict[str, bool] | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def credentials(self) -> dict[str, bool] | None:
        if self._credentials is None:
            return None
        return dict(self._credentials)

    def save_token(self, token: str) -> None:
        self._token = token

    def save_credentials(self, read_only_by_cluster: dict[str, bool]) -> None:
        self._credentials = dict(read_only_by_cluster)

    def is_logged(self) -> bool:
        return self._credentials is not None

    def load_session(self, cluster: str) -> Session | None:
        """Rebuild a session from stored values, or None when not logged in."""
        if not self.is_logged():
            return None
        credentials = self.credentials or {}
        return Session(
            token=self._token or "",
            read_only_by_cluster=credentials,
            read_only=bool(credentials.get(cluster, False)),
        )

    def clear(self) -> None:
        self._token = None
        self._credentials = None
        logger.debug("Session store cleared")
