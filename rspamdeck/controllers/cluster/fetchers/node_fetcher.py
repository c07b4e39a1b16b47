"""Node fetcher for cluster controller - one request to one cluster member."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rspamdeck.constants.values import PASSWORD_HEADER
from rspamdeck.controllers.base.base_controller import is_empty_payload
from rspamdeck.controllers.errors import EmptyResultError
from rspamdeck.models.core.node import ClusterNode


class NodeFetcher:
    """Sends a caller-supplied path to a single node."""

    def __init__(self, send_func: Any) -> None:
        self._send = send_func

    @staticmethod
    def build_headers(token: str | None, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        """Password header first, caller headers merged over it."""
        headers = {PASSWORD_HEADER: token or ""}
        if extra:
            headers.update(extra)
        return headers

    async def fetch(
        self,
        node: ClusterNode,
        path: str,
        *,
        token: str | None,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Return the node's payload for ``path``.

        Raises:
            TransportError: The request itself failed.
            EmptyResultError: The node answered with an empty payload.
        """
        payload = await self._send(
            node.url + path,
            method=method,
            headers=self.build_headers(token, headers),
            body=body,
            options=options,
        )
        if is_empty_payload(payload):
            raise EmptyResultError(f"Empty response from {node.host}")
        return payload
