"""Tests for the scatter-gather query engine."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import httpx
import pytest

from rspamdeck.constants.values import (
    ALL_SERVERS,
    MSG_NEIGHBOURS_FAILED,
    MSG_REQUEST_COMPLETED,
    MSG_REQUEST_FAILED,
)
from rspamdeck.controllers.cluster.controller import ClusterController
from rspamdeck.controllers.errors import (
    AggregateFailure,
    EmptyResultError,
    TransportError,
    UnknownNodeError,
)
from rspamdeck.models.core.node import ClusterNode
from rspamdeck.utils.alert_sink import AlertSink

BASE_URL = "http://console.example/"

DIRECTORY: dict[str, dict[str, str]] = {
    "A": {"url": "http://a.example/", "host": "a.example"},
    "B": {"url": "http://b.example/", "host": "b.example"},
    "C": {"url": "http://c.example/", "host": "c.example"},
}


async def _let_run(steps: int = 20) -> None:
    for _ in range(steps):
        await asyncio.sleep(0)


def _texts(alerts: AlertSink) -> list[str]:
    return [alert.text for alert in alerts.alerts]


class GatedCluster:
    """Neighbours plus per-host responses released on demand."""

    def __init__(self, directory: dict[str, dict[str, str]], responses: dict[str, Any]) -> None:
        self.directory = directory
        self.responses = responses
        self.gates = {entry["host"]: asyncio.Event() for entry in directory.values()}
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/neighbours":
            return httpx.Response(200, json=self.directory)
        host = request.url.host
        await self.gates[host].wait()
        response = self.responses[host]
        if isinstance(response, Exception):
            raise response
        return response

    async def release(self, host: str) -> None:
        self.gates[host].set()
        await _let_run()


@pytest.fixture
def alerts(scheduler) -> AlertSink:
    """Alert sink on the manual scheduler."""
    return AlertSink(scheduler)


def _controller(client: httpx.AsyncClient, alerts: AlertSink, token: str | None = "secret") -> ClusterController:
    return ClusterController(
        client,
        base_url=BASE_URL,
        alerts=alerts,
        token_provider=lambda: token,
    )


class TestScatterGatherScenarios:
    """End-to-end settle orderings over a gated transport."""

    @pytest.mark.asyncio
    async def test_success_fires_once_after_last_node(self, make_client, alerts) -> None:
        """B succeeds, A and C are empty: one continuation after C settles."""
        cluster = GatedCluster(
            DIRECTORY,
            {
                "a.example": httpx.Response(200, json={}),
                "b.example": httpx.Response(200, json={"scanned": 10}),
                "c.example": httpx.Response(200, json={}),
            },
        )
        controller = _controller(make_client(cluster.handler), alerts)
        calls: list[list[ClusterNode]] = []

        task = asyncio.create_task(controller.query("stat", on_success=calls.append))
        await _let_run()

        await cluster.release("b.example")
        assert calls == []
        await cluster.release("a.example")
        assert calls == []
        await cluster.release("c.example")
        result = await task

        assert len(calls) == 1
        nodes = {node.name: node for node in calls[0]}
        assert len(nodes) == 3
        assert nodes["B"].status is True
        assert nodes["A"].status is False
        assert nodes["C"].status is False
        assert all(node.checked for node in calls[0])
        assert nodes["B"].data == {"scanned": 10}
        assert isinstance(nodes["A"].error, EmptyResultError)
        assert result.success is True
        assert MSG_REQUEST_FAILED not in _texts(alerts)

    @pytest.mark.asyncio
    async def test_all_timeouts_raise_one_aggregate_alert(self, make_client, alerts) -> None:
        """Two nodes time out: no continuation and exactly one Request failed."""
        directory = {name: DIRECTORY[name] for name in ("A", "B")}
        cluster = GatedCluster(
            directory,
            {
                "a.example": httpx.ReadTimeout("timed out"),
                "b.example": httpx.ReadTimeout("timed out"),
            },
        )
        controller = _controller(make_client(cluster.handler), alerts)
        calls: list[list[ClusterNode]] = []

        task = asyncio.create_task(controller.query("stat", on_success=calls.append))
        await _let_run()
        await cluster.release("a.example")
        assert MSG_REQUEST_FAILED not in _texts(alerts)
        await cluster.release("b.example")
        result = await task

        assert calls == []
        assert _texts(alerts).count(MSG_REQUEST_FAILED) == 1
        assert "Cannot receive data from a.example: timeout" in _texts(alerts)
        assert "Cannot receive data from b.example: timeout" in _texts(alerts)
        assert result.success is False
        assert isinstance(result.error, AggregateFailure)
        assert all(isinstance(node.error, TransportError) for node in result.nodes)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("order", list(itertools.permutations(["a.example", "b.example", "c.example"])))
    async def test_decision_does_not_depend_on_arrival_order(self, make_client, alerts, order) -> None:
        """Aggregate success holds for every settle order."""
        cluster = GatedCluster(
            DIRECTORY,
            {
                "a.example": httpx.Response(500),
                "b.example": httpx.Response(200, json=[{"id": 1}]),
                "c.example": httpx.Response(200, json=[]),
            },
        )
        controller = _controller(make_client(cluster.handler), alerts)
        calls: list[list[ClusterNode]] = []

        task = asyncio.create_task(
            controller.query("history", on_success=calls.append, on_error=lambda node, exc: None)
        )
        await _let_run()
        for index, host in enumerate(order):
            assert calls == []
            await cluster.release(host)
            if index < len(order) - 1:
                assert calls == []
        result = await task

        assert len(calls) == 1
        assert result.success is True

    @pytest.mark.asyncio
    async def test_raising_error_hook_does_not_cancel_other_nodes(self, make_client, alerts) -> None:
        """A failing node's hook raises; the pending node still completes."""
        directory = {name: DIRECTORY[name] for name in ("A", "B")}
        cluster = GatedCluster(
            directory,
            {
                "a.example": httpx.Response(500),
                "b.example": httpx.Response(200, json={"scanned": 3}),
            },
        )
        controller = _controller(make_client(cluster.handler), alerts)
        calls: list[list[ClusterNode]] = []

        def on_error(node: ClusterNode, exc: Exception) -> None:
            raise ValueError("hook failed")

        task = asyncio.create_task(
            controller.query("stat", on_success=calls.append, on_error=on_error)
        )
        await _let_run()
        await cluster.release("a.example")
        assert not task.done()
        await cluster.release("b.example")
        result = await task

        assert len(calls) == 1
        nodes = {node.name: node for node in calls[0]}
        assert nodes["B"].status is True
        assert nodes["B"].data == {"scanned": 3}
        assert nodes["A"].checked is True
        assert result.success is True

    @pytest.mark.asyncio
    async def test_raising_continuation_does_not_escape_query(self, make_client, alerts) -> None:
        """An exception from the continuation is logged, not raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={"A": DIRECTORY["A"]})
            return httpx.Response(200, json={"scanned": 1})

        def on_success(nodes: list[ClusterNode]) -> None:
            raise RuntimeError("continuation failed")

        controller = _controller(make_client(handler), alerts)
        result = await controller.query("stat", on_success=on_success)

        assert result.success is True
        assert MSG_REQUEST_FAILED not in _texts(alerts)


class TestQueryScope:
    """Tests for scope resolution and discovery."""

    @pytest.mark.asyncio
    async def test_empty_discovery_queries_local_node(self, make_client, alerts) -> None:
        """An empty neighbours map synthesizes one local node at the origin."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"version": "3.8"})

        controller = _controller(make_client(handler), alerts)
        result = await controller.query("stat")

        assert [node.name for node in result.nodes] == ["local"]
        assert result.nodes[0].url == BASE_URL
        assert seen == [BASE_URL + "neighbours", BASE_URL + "stat"]
        assert controller.servers == [ALL_SERVERS, "local"]

    @pytest.mark.asyncio
    async def test_discovery_failure_alerts_and_skips_fanout(self, make_client, alerts) -> None:
        """A failed neighbours request raises its alert and sends nothing else."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(503)

        controller = _controller(make_client(handler), alerts)
        result = await controller.query("stat", on_success=lambda nodes: pytest.fail("called"))

        assert seen == ["/neighbours"]
        assert result.success is False
        assert isinstance(result.error, TransportError)
        assert _texts(alerts) == [MSG_NEIGHBOURS_FAILED]

    @pytest.mark.asyncio
    async def test_selected_server_skips_discovery(self, make_client, alerts) -> None:
        """A selected server is queried alone from the known directory."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            if request.url.path == "/neighbours":
                return httpx.Response(200, json=DIRECTORY)
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        await controller.resolve_directory()
        seen.clear()
        controller.select_server("B")

        result = await controller.query("stat")

        assert seen == ["http://b.example/stat"]
        assert [node.name for node in result.nodes] == ["B"]

    @pytest.mark.asyncio
    async def test_force_cluster_scope_ignores_selection(self, make_client, alerts) -> None:
        """force_cluster_scope queries every neighbour even with a selection."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json=DIRECTORY)
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        await controller.resolve_directory()
        controller.select_server("A")

        result = await controller.query("stat", force_cluster_scope=True)

        assert sorted(node.name for node in result.nodes) == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_unknown_server_alerts_without_request(self, make_client, alerts) -> None:
        """A selection missing from the directory is reported, not queried."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        controller.select_server("ghost")

        result = await controller.query("stat")

        assert seen == []
        assert isinstance(result.error, UnknownNodeError)
        assert _texts(alerts) == ["Unknown server: ghost"]

    def test_reset_forgets_directory_and_selection(self, make_client, alerts) -> None:
        """reset() restores the all-servers scope."""
        controller = _controller(make_client(lambda request: httpx.Response(200)), alerts)
        controller.select_server("A")
        controller.directory = {"A": object()}  # type: ignore[dict-item]

        controller.reset()

        assert controller.selected_server == ALL_SERVERS
        assert controller.directory == {}


class TestQueryRequests:
    """Tests for what each node request carries."""

    @pytest.mark.asyncio
    async def test_password_header_merged_with_caller_headers(self, make_client, alerts) -> None:
        """Every node request carries the token plus caller headers."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts, token="s3cret")
        await controller.query("learnspam", method="POST", headers={"Flag": "1"}, body="raw message")

        node_request = captured[-1]
        assert node_request.method == "POST"
        assert node_request.headers["Password"] == "s3cret"
        assert node_request.headers["Flag"] == "1"
        assert node_request.content == b"raw message"
        assert captured[0].headers["Password"] == "s3cret"

    @pytest.mark.asyncio
    async def test_get_body_becomes_query_params(self, make_client, alerts) -> None:
        """A mapping body on GET is sent as query parameters."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        await controller.query("graph", body={"type": "daily"})

        assert captured[-1].url.params["type"] == "daily"

    @pytest.mark.asyncio
    async def test_no_continuation_raises_completed_alert(self, make_client, alerts) -> None:
        """Without on_success a successful query shows Request completed."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"success": True})

        controller = _controller(make_client(handler), alerts)
        result = await controller.query("saveactions", method="POST")

        assert result.success is True
        assert _texts(alerts) == [MSG_REQUEST_COMPLETED]

    @pytest.mark.asyncio
    async def test_error_hook_replaces_node_alert(self, make_client, alerts) -> None:
        """on_error receives failing nodes and suppresses their alerts."""
        failures: list[tuple[str, Exception]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={name: DIRECTORY[name] for name in ("A", "B")})
            if request.url.host == "a.example":
                return httpx.Response(403)
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        result = await controller.query(
            "stat", on_error=lambda node, exc: failures.append((node.name, exc))
        )

        assert result.success is True
        assert [name for name, _ in failures] == ["A"]
        assert isinstance(failures[0][1], TransportError)
        assert failures[0][1].status_code == 403
        assert _texts(alerts) == [MSG_REQUEST_COMPLETED]

    @pytest.mark.asyncio
    async def test_async_continuation_is_awaited(self, make_client, alerts) -> None:
        """Coroutine continuations run before query() returns."""
        seen: list[int] = []

        async def on_success(nodes: list[ClusterNode]) -> None:
            await asyncio.sleep(0)
            seen.append(len(nodes))

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json=DIRECTORY)
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        await controller.query("stat", on_success=on_success)

        assert seen == [3]


class TestStaleGuard:
    """Tests for discarding results of superseded dispatches."""

    @pytest.mark.asyncio
    async def test_stale_guard_drops_continuation_and_alerts(self, make_client, alerts) -> None:
        """When the guard turns False mid-flight nothing is delivered."""
        current = {"value": True}
        cluster = GatedCluster(
            {"A": DIRECTORY["A"]},
            {"a.example": httpx.Response(500)},
        )
        controller = _controller(make_client(cluster.handler), alerts)
        calls: list[Any] = []

        task = asyncio.create_task(
            controller.query("stat", on_success=calls.append, guard=lambda: current["value"])
        )
        await _let_run()
        current["value"] = False
        await cluster.release("a.example")
        result = await task

        assert calls == []
        assert result.stale is True
        assert alerts.alerts == []


class TestActivityTracking:
    """Tests for the in-flight request counter."""

    @pytest.mark.asyncio
    async def test_listener_sees_rise_and_fall(self, make_client, alerts) -> None:
        """Listeners see the count return to zero after the query."""
        counts: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/neighbours":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"ok": True})

        controller = _controller(make_client(handler), alerts)
        controller.add_activity_listener(counts.append)
        await controller.query("stat")

        assert max(counts) >= 1
        assert counts[-1] == 0
        assert controller.in_flight == 0

        controller.remove_activity_listener(counts.append)
        counts.clear()
        await controller.query("stat")
        assert counts == []
