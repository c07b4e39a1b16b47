"""Base controller with shared HTTP plumbing for the console.

Controllers share one ``httpx.AsyncClient`` per console. Every request goes
through ``HttpControllerMixin._send`` so the timeout, error mapping and
payload decoding are uniform.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from rspamdeck.constants.timeouts import REQUEST_TIMEOUT
from rspamdeck.controllers.errors import TransportError
from rspamdeck.models.core.node import ClusterNode

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Outcome of one scatter-gather query."""

    success: bool
    nodes: list[ClusterNode] = field(default_factory=list)
    error: Exception | None = None
    duration_ms: float = 0.0
    stale: bool = False


def build_client(timeout: float = REQUEST_TIMEOUT, **kwargs: Any) -> httpx.AsyncClient:
    """Create the HTTP client shared by all controllers."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        **kwargs,
    )


def is_empty_payload(payload: Any) -> bool:
    """True for payloads with nothing in them (null, {}, [], "")."""
    if payload is None:
        return True
    if isinstance(payload, (dict, list, str)):
        return len(payload) == 0
    return False


class HttpControllerMixin:
    """Mixin providing the request/decode path shared by controllers."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def _send(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON payload.

        Raises:
            TransportError: On timeout, connection failure, non-2xx status
                or a body that is not valid JSON.
        """
        request_kwargs: dict[str, Any] = {"headers": dict(headers or {})}
        if body is not None:
            if isinstance(body, (str, bytes)):
                request_kwargs["content"] = body
            elif method.upper() == "GET":
                request_kwargs["params"] = body
            else:
                request_kwargs["data"] = body
        if options:
            request_kwargs.update(options)

        try:
            response = await self._client.request(method.upper(), url, **request_kwargs)
        except httpx.TimeoutException as exc:
            raise TransportError("timeout", url=url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, url=url) from exc

        if response.is_error:
            raise TransportError(
                response.reason_phrase or f"HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportError("parsererror", status_code=response.status_code, url=url) from exc


class BaseController(HttpControllerMixin, ABC):
    """Base controller class for HTTP-backed console operations."""

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if connection is available, False otherwise
        """
        ...
