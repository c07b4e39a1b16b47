"""Presentation state filled in by view continuations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from rspamdeck.constants.enums import ViewId

logger = logging.getLogger(__name__)

ViewDataListener = Callable[[ViewId, "ViewSnapshot"], None]


@dataclass
class ViewSnapshot:
    """Latest aggregated data for one view."""

    sections: dict[str, Any] = field(default_factory=dict)
    updated_at: float | None = None


class ViewData:
    """Latest snapshot per view, with change listeners."""

    def __init__(self) -> None:
        self._snapshots: dict[ViewId, ViewSnapshot] = {}
        self._listeners: list[ViewDataListener] = []

    def subscribe(self, listener: ViewDataListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ViewDataListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get(self, view: ViewId) -> ViewSnapshot:
        return self._snapshots.setdefault(view, ViewSnapshot())

    def update(self, view: ViewId, section: str, value: Any) -> None:
        snapshot = self.get(view)
        snapshot.sections[section] = value
        snapshot.updated_at = time.time()
        for listener in list(self._listeners):
            try:
                listener(view, snapshot)
            except Exception:
                logger.exception("View data listener failed for %s", view.value)

    def clear(self) -> None:
        self._snapshots.clear()
