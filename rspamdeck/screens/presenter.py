"""Console presenter - turns view snapshots into table columns and rows."""

from __future__ import annotations

import logging
from typing import Any

from rspamdeck.constants.enums import ViewId
from rspamdeck.models.state.view_data import ViewSnapshot

logger = logging.getLogger(__name__)

Table = tuple[list[str], list[tuple[str, ...]]]

STATUS_COLUMNS: list[str] = ["Node", "Host", "State", "Version", "Uptime", "Scanned"]
SYMBOL_COLUMNS: list[str] = ["Symbol", "Group", "Weight", "Description"]
HISTORY_COLUMNS: list[str] = ["Node", "Time", "Action", "Score", "Sender", "Subject"]
ACTION_COLUMNS: list[str] = ["Action", "Value"]
THROUGHPUT_COLUMNS: list[str] = ["Node", "Range", "Series", "Points"]


def format_uptime(seconds: Any) -> str:
    """Render an uptime in seconds as ``1d 02:03:04``."""
    try:
        total = int(seconds)
    except (TypeError, ValueError):
        return ""
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    clock = f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{days}d {clock}" if days else clock


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


class ConsolePresenter:
    """Builds DataTable content for each console view."""

    def table_for(self, view: ViewId, snapshot: ViewSnapshot) -> Table:
        sections = snapshot.sections
        if view is ViewId.STATUS:
            return self.status_table(sections.get("stat"))
        if view is ViewId.THROUGHPUT:
            return self.throughput_table(sections.get("graph"))
        if view is ViewId.CONFIGURATION:
            return self.configuration_table(sections.get("actions"), sections.get("maps"))
        if view is ViewId.SYMBOLS:
            return SYMBOL_COLUMNS, [
                (
                    _cell(row.get("symbol")),
                    _cell(row.get("group")),
                    _cell(row.get("weight")),
                    _cell(row.get("description")),
                )
                for row in sections.get("symbols") or []
            ]
        if view is ViewId.HISTORY:
            return self.history_table(sections.get("history"), sections.get("errors"))
        return [], []

    def status_table(self, stat: dict[str, Any] | None) -> Table:
        if not stat:
            return STATUS_COLUMNS, []
        rows = [
            (
                _cell(row.get("name")),
                _cell(row.get("host")),
                "online" if row.get("online") else "offline",
                _cell(row.get("version")),
                format_uptime(row.get("uptime")),
                _cell(row.get("scanned")),
            )
            for row in stat.get("nodes", [])
        ]
        return STATUS_COLUMNS, rows

    def status_summary(self, stat: dict[str, Any] | None) -> str:
        """One-line cluster summary shown above the status table."""
        if not stat:
            return ""
        totals = stat.get("totals", {})
        nodes = stat.get("nodes", [])
        parts = [f"{stat.get('online', 0)}/{len(nodes)} online"]
        parts.extend(f"{name}: {value}" for name, value in totals.items())
        return "  ".join(parts)

    def throughput_table(self, graph: dict[str, Any] | None) -> Table:
        if not graph:
            return THROUGHPUT_COLUMNS, []
        rows: list[tuple[str, ...]] = []
        for node, series in (graph.get("series") or {}).items():
            if not isinstance(series, list):
                continue
            for index, line in enumerate(series):
                points = len(line) if isinstance(line, list) else 0
                rows.append((node, _cell(graph.get("range")), str(index), str(points)))
        return THROUGHPUT_COLUMNS, rows

    def configuration_table(self, actions: Any, maps: Any) -> Table:
        rows: list[tuple[str, ...]] = []
        for action in actions or []:
            if isinstance(action, dict):
                rows.append((_cell(action.get("action")), _cell(action.get("value"))))
        for item in maps or []:
            if isinstance(item, dict):
                rows.append(
                    (
                        f"map #{_cell(item.get('map'))}",
                        _cell(item.get("description") or item.get("uri")),
                    )
                )
        return ACTION_COLUMNS, rows

    def history_table(self, history: Any, errors: Any) -> Table:
        rows: list[tuple[str, ...]] = []
        for row in history or []:
            rows.append(
                (
                    _cell(row.get("node")),
                    _cell(row.get("unix_time")),
                    _cell(row.get("action")),
                    _cell(row.get("score")),
                    _cell(row.get("sender_mime") or row.get("sender_smtp")),
                    _cell(row.get("subject")),
                )
            )
        for row in errors or []:
            rows.append(
                (
                    _cell(row.get("node")),
                    _cell(row.get("ts")),
                    "error",
                    "",
                    _cell(row.get("type")),
                    _cell(row.get("message")),
                )
            )
        return HISTORY_COLUMNS, rows


__all__ = [
    "ConsolePresenter",
    "format_uptime",
]
