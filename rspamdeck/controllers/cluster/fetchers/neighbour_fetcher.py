"""Neighbour fetcher for cluster controller - resolves cluster members."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from rspamdeck.constants.values import LOCAL_NODE_NAME, PASSWORD_HEADER, PATH_NEIGHBOURS
from rspamdeck.controllers.base.base_controller import is_empty_payload
from rspamdeck.controllers.errors import TransportError
from rspamdeck.models.core.node import NeighbourEndpoint

logger = logging.getLogger(__name__)


class NeighbourFetcher:
    """Resolves the neighbour directory through the discovery endpoint."""

    def __init__(self, send_func: Any, base_url: str) -> None:
        """Initialize with the request function and console origin.

        Args:
            send_func: Async function sending one request and returning JSON
            base_url: Origin of the console, used for the synthesized local node
        """
        self._send = send_func
        self.base_url = base_url

    def local_directory(self) -> dict[str, NeighbourEndpoint]:
        """Directory with one entry pointing at the console origin."""
        host = urlsplit(self.base_url).netloc or self.base_url
        return {LOCAL_NODE_NAME: NeighbourEndpoint(url=self.base_url, host=host)}

    async def fetch_neighbours(self, token: str | None) -> dict[str, NeighbourEndpoint]:
        """Fetch the cluster directory.

        An empty response means the deployment has no peers and yields the
        local directory.

        Raises:
            TransportError: The discovery request failed or returned an
                unexpected shape.
        """
        headers = {PASSWORD_HEADER: token or ""}
        payload = await self._send(self.base_url + PATH_NEIGHBOURS, headers=headers)

        if is_empty_payload(payload):
            logger.debug("Empty neighbours response, using local node only")
            return self.local_directory()
        if not isinstance(payload, dict):
            raise TransportError("unexpected neighbours payload", url=self.base_url + PATH_NEIGHBOURS)

        directory = {
            str(name): NeighbourEndpoint.from_dict(entry)
            for name, entry in payload.items()
            if isinstance(entry, dict)
        }
        logger.debug("Resolved %d neighbours: %s", len(directory), ", ".join(directory))
        return directory
