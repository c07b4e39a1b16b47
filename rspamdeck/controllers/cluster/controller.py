"""Cluster controller - scatter-gather queries across cluster members.

A query resolves its scope (every neighbour, or the one selected server),
sends one request per node concurrently and waits on a barrier that fires
once every node has settled. The aggregate result is a success when at least
one node returned a non-empty payload.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from typing import Any

import httpx

from rspamdeck.constants.values import (
    ALL_SERVERS,
    MSG_NEIGHBOURS_FAILED,
    MSG_REQUEST_COMPLETED,
    MSG_REQUEST_FAILED,
)
from rspamdeck.controllers.base import BaseController, QueryResult
from rspamdeck.controllers.errors import (
    AggregateFailure,
    EmptyResultError,
    TransportError,
    UnknownNodeError,
)
from rspamdeck.controllers.cluster.fetchers import NeighbourFetcher, NodeFetcher
from rspamdeck.models.core.node import ClusterNode, NeighbourEndpoint
from rspamdeck.utils.alert_sink import AlertSink

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[list[ClusterNode]], Any]
NodeErrorCallback = Callable[[ClusterNode, Exception], Any]
ActivityListener = Callable[[int], None]


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


class NodeBarrier:
    """Join-on-N barrier over the nodes of one query.

    ``settle()`` is called once per node, after the node's outcome and error
    hook have been handled. Completion is recomputed over the whole node set
    on every call, so the decision does not depend on the order in which
    nodes settle.
    """

    def __init__(self, nodes: list[ClusterNode]) -> None:
        if not nodes:
            raise AggregateFailure("No nodes in scope")
        self.nodes = nodes
        self.settle_events = 0
        self._decided = False

    @property
    def complete(self) -> bool:
        return self.settle_events >= len(self.nodes) and all(
            node.checked for node in self.nodes
        )

    @property
    def succeeded(self) -> bool:
        return any(node.status for node in self.nodes)

    def settle(self) -> bool:
        """Count one settle event; True exactly once, when the last node settles."""
        self.settle_events += 1
        if self._decided or not self.complete:
            return False
        self._decided = True
        return True


class ClusterController(BaseController):
    """Scatter-gather query engine over the neighbour directory."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        alerts: AlertSink,
        token_provider: Callable[[], str | None],
    ) -> None:
        """Initialize the cluster controller.

        Args:
            client: Shared HTTP client
            base_url: Console origin, used for discovery and the local node
            alerts: Sink for user-facing alerts
            token_provider: Returns the current session token
        """
        super().__init__(client)
        self.base_url = base_url
        self.alerts = alerts
        self._token_provider = token_provider
        self.selected_server: str = ALL_SERVERS
        self.directory: dict[str, NeighbourEndpoint] = {}
        self._neighbour_fetcher = NeighbourFetcher(self._send, base_url)
        self._node_fetcher = NodeFetcher(self._send)
        self._in_flight = 0
        self._activity_listeners: list[ActivityListener] = []

    # =========================================================================
    # Scope
    # =========================================================================

    @property
    def servers(self) -> list[str]:
        """Selectable targets: every server plus each known neighbour."""
        return [ALL_SERVERS, *self.directory]

    def select_server(self, name: str) -> None:
        self.selected_server = name
        logger.debug("Selected server: %s", name)

    def reset(self) -> None:
        """Forget the directory and target selection."""
        self.directory = {}
        self.selected_server = ALL_SERVERS

    # =========================================================================
    # Activity tracking
    # =========================================================================

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def add_activity_listener(self, listener: ActivityListener) -> None:
        self._activity_listeners.append(listener)

    def remove_activity_listener(self, listener: ActivityListener) -> None:
        if listener in self._activity_listeners:
            self._activity_listeners.remove(listener)

    @asynccontextmanager
    async def _track_activity(self) -> AsyncIterator[None]:
        self._set_in_flight(self._in_flight + 1)
        try:
            yield
        finally:
            self._set_in_flight(self._in_flight - 1)

    def _set_in_flight(self, value: int) -> None:
        self._in_flight = value
        for listener in list(self._activity_listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Activity listener failed")

    # =========================================================================
    # Directory
    # =========================================================================

    async def check_connection(self) -> bool:
        try:
            await self.resolve_directory()
        except TransportError:
            return False
        return True

    async def resolve_directory(self) -> dict[str, NeighbourEndpoint]:
        """Run one discovery request and replace the known directory."""
        async with self._track_activity():
            directory = await self._neighbour_fetcher.fetch_neighbours(self._token_provider())
        self.directory = directory
        return directory

    # =========================================================================
    # Query
    # =========================================================================

    async def query(
        self,
        path: str,
        on_success: SuccessCallback | None = None,
        on_error: NodeErrorCallback | None = None,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        extra_options: Mapping[str, Any] | None = None,
        body: Any = None,
        force_cluster_scope: bool = False,
        guard: Callable[[], bool] | None = None,
    ) -> QueryResult:
        """Query every node in scope and decide one aggregate result.

        Args:
            path: Path appended to each node's url
            on_success: Called once with all nodes when at least one succeeded
            on_error: Called per node on transport failure instead of an alert
            method: HTTP method
            headers: Extra headers merged over the password header
            extra_options: Extra request options passed to httpx
            body: Request body (raw content, GET params or form data)
            force_cluster_scope: Query every neighbour regardless of selection
            guard: Returns False when the caller no longer wants the result

        Returns:
            QueryResult describing the aggregate outcome
        """
        start = time.monotonic()

        def _duration() -> float:
            return (time.monotonic() - start) * 1000

        try:
            nodes = await self._nodes_in_scope(force_cluster_scope)
        except TransportError as exc:
            logger.warning("Neighbour discovery failed: %s", exc)
            self.alerts.error(MSG_NEIGHBOURS_FAILED)
            return QueryResult(success=False, error=exc, duration_ms=_duration())
        except UnknownNodeError as exc:
            logger.warning("%s", exc)
            self.alerts.error(str(exc))
            return QueryResult(success=False, error=exc, duration_ms=_duration())

        try:
            barrier = NodeBarrier(nodes)
        except AggregateFailure as exc:
            self.alerts.error(MSG_REQUEST_FAILED)
            return QueryResult(success=False, error=exc, duration_ms=_duration())

        token = self._token_provider()
        result = QueryResult(success=False, nodes=nodes)

        async def _settle_node(node: ClusterNode) -> None:
            try:
                await self._query_node(
                    node,
                    path,
                    token=token,
                    method=method,
                    headers=headers,
                    body=body,
                    options=extra_options,
                    on_error=on_error,
                    guard=guard,
                )
            finally:
                decide = barrier.settle()
            if decide:
                await self._decide(barrier, path, result, on_success, guard)

        tasks = [
            asyncio.create_task(_settle_node(node), name=f"query:{node.name}:{path}")
            for node in nodes
        ]
        # One node's failure never cancels its siblings.
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        for node, outcome in zip(nodes, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    "Query %s on node %s ended with an error",
                    path,
                    node.name,
                    exc_info=outcome,
                )

        result.duration_ms = _duration()
        return result

    async def _nodes_in_scope(self, force_cluster_scope: bool) -> list[ClusterNode]:
        if self.selected_server == ALL_SERVERS or force_cluster_scope:
            directory = await self.resolve_directory()
            return [ClusterNode.from_endpoint(name, endpoint) for name, endpoint in directory.items()]

        endpoint = self.directory.get(self.selected_server)
        if endpoint is None:
            raise UnknownNodeError(f"Unknown server: {self.selected_server}")
        return [ClusterNode.from_endpoint(self.selected_server, endpoint)]

    async def _query_node(
        self,
        node: ClusterNode,
        path: str,
        *,
        token: str | None,
        method: str,
        headers: Mapping[str, str] | None,
        body: Any,
        options: Mapping[str, Any] | None,
        on_error: NodeErrorCallback | None,
        guard: Callable[[], bool] | None,
    ) -> ClusterNode:
        """Send the request to one node and record how it settled."""
        try:
            async with self._track_activity():
                payload = await self._node_fetcher.fetch(
                    node,
                    path,
                    token=token,
                    method=method,
                    headers=headers,
                    body=body,
                    options=options,
                )
        except EmptyResultError as exc:
            logger.debug("Node %s returned an empty payload for %s", node.name, path)
            node.settle(status=False, error=exc)
        except TransportError as exc:
            logger.warning("Node %s (%s) failed for %s: %s", node.name, node.host, path, exc)
            node.settle(status=False, error=exc)
            if guard is not None and not guard():
                return node
            if on_error is not None:
                try:
                    await _maybe_await(on_error(node, exc))
                except Exception:
                    logger.exception("Error hook failed for node %s", node.name)
            else:
                self.alerts.error(f"Cannot receive data from {node.host}: {exc.reason}")
        else:
            node.settle(status=True, data=payload)
        return node

    async def _decide(
        self,
        barrier: NodeBarrier,
        path: str,
        result: QueryResult,
        on_success: SuccessCallback | None,
        guard: Callable[[], bool] | None,
    ) -> None:
        if guard is not None and not guard():
            logger.debug("Discarding stale result for %s", path)
            result.stale = True
            result.success = barrier.succeeded
            return

        if barrier.succeeded:
            ok = sum(1 for node in barrier.nodes if node.status)
            logger.debug("Query %s succeeded on %d/%d nodes", path, ok, len(barrier.nodes))
            result.success = True
            if on_success is not None:
                try:
                    await _maybe_await(on_success(barrier.nodes))
                except Exception:
                    logger.exception("Continuation failed for %s", path)
            else:
                self.alerts.success(MSG_REQUEST_COMPLETED)
            return

        logger.debug("Query %s failed on all %d nodes", path, len(barrier.nodes))
        result.error = AggregateFailure(f"All {len(barrier.nodes)} nodes failed for {path}")
        self.alerts.error(MSG_REQUEST_FAILED)


__all__ = [
    "ClusterController",
    "NodeBarrier",
]
