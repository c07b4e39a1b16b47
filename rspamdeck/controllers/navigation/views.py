"""View actions - the fetch bound to each navigation view.

Each action runs the scatter-gather engine and stores the aggregated result
in ``ViewData``. Actions receive a ``ViewContext`` whose ``is_current()``
turns False once the user navigated elsewhere, so late results are dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from rspamdeck.constants.defaults import (
    THROUGHPUT_RANGE_DEFAULT,
    THROUGHPUT_REFRESH_FALLBACK,
    THROUGHPUT_REFRESH_INTERVALS,
)
from rspamdeck.constants.enums import ViewId
from rspamdeck.constants.values import PATH_STAT
from rspamdeck.controllers.cluster.controller import ClusterController
from rspamdeck.models.core.node import ClusterNode
from rspamdeck.models.state.view_data import ViewData

logger = logging.getLogger(__name__)

STATUS_COUNTERS = ("scanned", "learned", "spam_count", "ham_count", "connections")


@dataclass(frozen=True)
class ViewContext:
    """Dispatch identity handed to a view action."""

    view: ViewId
    epoch: int
    is_current: Callable[[], bool]


@dataclass(frozen=True)
class ViewBinding:
    """Fetch action and polling policy of one view."""

    view: ViewId
    action: Callable[[ViewContext], Awaitable[Any]]
    poll_interval: Callable[[], float | None] | None = None


def throughput_refresh_interval(selected_range: str | None) -> float:
    """Poll interval for the throughput view's selected range."""
    return THROUGHPUT_REFRESH_INTERVALS.get(selected_range or "", THROUGHPUT_REFRESH_FALLBACK)


def summarize_status(nodes: list[ClusterNode]) -> dict[str, Any]:
    """Per-node rows and cluster totals from ``stat`` payloads."""
    rows: list[dict[str, Any]] = []
    totals = dict.fromkeys(STATUS_COUNTERS, 0)
    actions: dict[str, int] = {}

    for node in nodes:
        data = node.data if node.status and isinstance(node.data, dict) else {}
        rows.append(
            {
                "name": node.name,
                "host": node.host,
                "online": node.status,
                "version": data.get("version", ""),
                "uptime": data.get("uptime", 0),
                "scanned": data.get("scanned", 0),
            }
        )
        if not data:
            continue
        for counter in STATUS_COUNTERS:
            value = data.get(counter)
            if isinstance(value, (int, float)):
                totals[counter] += value
        for action, count in (data.get("actions") or {}).items():
            if isinstance(count, (int, float)):
                actions[action] = actions.get(action, 0) + count

    return {
        "nodes": rows,
        "totals": totals,
        "actions": actions,
        "online": sum(1 for row in rows if row["online"]),
    }


def first_payload(nodes: list[ClusterNode]) -> Any:
    """Payload of the first node that answered."""
    for node in nodes:
        if node.status:
            return node.data
    return None


def merge_rows(nodes: list[ClusterNode], *, sort_key: str | None = None) -> list[dict[str, Any]]:
    """Concatenate list payloads of all live nodes, tagging each row."""
    merged: list[dict[str, Any]] = []
    for node in nodes:
        if not node.status:
            continue
        payload = node.data
        if isinstance(payload, dict):
            payload = payload.get("rows", [])
        if not isinstance(payload, list):
            continue
        for row in payload:
            if isinstance(row, dict):
                merged.append({**row, "node": node.name})
    if sort_key:
        merged.sort(key=lambda row: row.get(sort_key) or 0, reverse=True)
    return merged


def flatten_symbols(payload: Any) -> list[dict[str, Any]]:
    """Symbol rows from the grouped ``symbols`` payload."""
    rows: list[dict[str, Any]] = []
    for group in payload or []:
        if not isinstance(group, dict):
            continue
        for rule in group.get("rules", []):
            if isinstance(rule, dict):
                rows.append(
                    {
                        "symbol": rule.get("symbol", ""),
                        "group": group.get("group", ""),
                        "weight": rule.get("weight", 0),
                        "description": rule.get("description", ""),
                    }
                )
    return rows


class ViewActions:
    """Builds the view bindings used by the navigation controller."""

    def __init__(
        self,
        cluster: ClusterController,
        view_data: ViewData,
        *,
        status_interval: float,
        read_only_provider: Callable[[], bool] = lambda: False,
        throughput_range: str = THROUGHPUT_RANGE_DEFAULT,
    ) -> None:
        self.cluster = cluster
        self.view_data = view_data
        self.status_interval = status_interval
        self.throughput_range = throughput_range
        self._read_only = read_only_provider

    def bindings(self) -> dict[ViewId, ViewBinding]:
        return {
            ViewId.STATUS: ViewBinding(
                ViewId.STATUS, self.status, lambda: self.status_interval
            ),
            ViewId.THROUGHPUT: ViewBinding(
                ViewId.THROUGHPUT,
                self.throughput,
                lambda: throughput_refresh_interval(self.throughput_range),
            ),
            ViewId.CONFIGURATION: ViewBinding(ViewId.CONFIGURATION, self.configuration),
            ViewId.SYMBOLS: ViewBinding(ViewId.SYMBOLS, self.symbols),
            ViewId.HISTORY: ViewBinding(ViewId.HISTORY, self.history),
        }

    # =========================================================================
    # Actions
    # =========================================================================

    async def status(self, ctx: ViewContext) -> None:
        await self.cluster.query(
            PATH_STAT,
            on_success=lambda nodes: self.view_data.update(
                ViewId.STATUS, "stat", summarize_status(nodes)
            ),
            guard=ctx.is_current,
        )

    async def throughput(self, ctx: ViewContext) -> None:
        selected = self.throughput_range

        def _store(nodes: list[ClusterNode]) -> None:
            series = {node.name: node.data for node in nodes if node.status}
            self.view_data.update(
                ViewId.THROUGHPUT, "graph", {"range": selected, "series": series}
            )

        await self.cluster.query(
            "graph",
            on_success=_store,
            body={"type": selected},
            guard=ctx.is_current,
        )

    async def configuration(self, ctx: ViewContext) -> None:
        await asyncio.gather(
            self.cluster.query(
                "actions",
                on_success=lambda nodes: self.view_data.update(
                    ViewId.CONFIGURATION, "actions", first_payload(nodes) or []
                ),
                guard=ctx.is_current,
            ),
            self.cluster.query(
                "maps",
                on_success=lambda nodes: self.view_data.update(
                    ViewId.CONFIGURATION, "maps", first_payload(nodes) or []
                ),
                guard=ctx.is_current,
            ),
        )

    async def symbols(self, ctx: ViewContext) -> None:
        await self.cluster.query(
            "symbols",
            on_success=lambda nodes: self.view_data.update(
                ViewId.SYMBOLS, "symbols", flatten_symbols(first_payload(nodes))
            ),
            guard=ctx.is_current,
        )

    async def history(self, ctx: ViewContext) -> None:
        queries = [
            self.cluster.query(
                "history",
                on_success=lambda nodes: self.view_data.update(
                    ViewId.HISTORY, "history", merge_rows(nodes, sort_key="unix_time")
                ),
                guard=ctx.is_current,
            )
        ]
        if self._read_only():
            logger.debug("Skipping errors log in read-only mode")
        else:
            queries.append(
                self.cluster.query(
                    "errors",
                    on_success=lambda nodes: self.view_data.update(
                        ViewId.HISTORY, "errors", merge_rows(nodes, sort_key="ts")
                    ),
                    guard=ctx.is_current,
                )
            )
        await asyncio.gather(*queries)


__all__ = [
    "ViewActions",
    "ViewBinding",
    "ViewContext",
    "first_payload",
    "flatten_symbols",
    "merge_rows",
    "summarize_status",
    "throughput_refresh_interval",
]
